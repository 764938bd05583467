# copywatch/core/interfaces/types.py
from enum import Enum, auto
from dataclasses import dataclass
from pathlib import Path, PureWindowsPath
from typing import Optional

BYTES_PER_GIGABYTE = 1073741824


def bytes_to_gigabytes(size_bytes: int) -> float:
    """Convert a byte count to gigabytes rounded to 3 decimals."""
    return round(size_bytes / BYTES_PER_GIGABYTE, 3)


class MonitorState(Enum):
    """Lifecycle of the progress monitor"""
    IDLE = auto()
    POLLING = auto()
    COMPLETED = auto()
    CANCELLED = auto()

class SummaryOutcome(Enum):
    """How a finished run is classified for the final summary"""
    COPIED = auto()
    ALREADY_PRESENT = auto()
    PARSE_FAILED = auto()
    FAILED = auto()
    CANCELLED = auto()

@dataclass(frozen=True)
class CopyJob:
    source: str
    destination_root: str
    inter_packet_delay_ms: int = 0
    report_interval_ms: int = 1000

    @property
    def effective_destination(self) -> Path:
        """Directory the source tree lands in: the destination root plus the source's basename."""
        # Windows path rules accept both separators and ignore a trailing one
        source_name = PureWindowsPath(self.source).name
        return Path(self.destination_root) / source_name

    def is_complete(self) -> bool:
        return bool(self.source) and bool(self.destination_root)

@dataclass(frozen=True)
class ParseResult:
    record_count: int = 0
    byte_sum: int = 0
    token_count: int = 0

@dataclass(frozen=True)
class AnalysisResult:
    total_files: int
    total_bytes: int
    log_path: Optional[Path] = None
    # False when the log had records but no freestanding numbers at all
    measurable: bool = True

    @property
    def total_gigabytes(self) -> float:
        return bytes_to_gigabytes(self.total_bytes)

@dataclass(frozen=True)
class TransferState:
    files_copied: int = 0
    bytes_copied: int = 0
    percent: float = 0.0

    @property
    def gigabytes_copied(self) -> float:
        return bytes_to_gigabytes(self.bytes_copied)

    @classmethod
    def from_parse(cls, parsed: ParseResult, total_bytes: int) -> "TransferState":
        """Build the snapshot for one tick from a parse of the live log."""
        return cls(
            files_copied=parsed.record_count,
            bytes_copied=parsed.byte_sum,
            percent=compute_percent(parsed.byte_sum, total_bytes)
        )

@dataclass(frozen=True)
class MonitorResult:
    state: TransferState
    status: MonitorState
    ticks: int = 0
    exit_code: Optional[int] = None

    @property
    def cancelled(self) -> bool:
        return self.status == MonitorState.CANCELLED


def compute_percent(bytes_copied: int, total_bytes: int) -> float:
    """
    Percent of total bytes copied so far.
    
    A zero byte total never divides; it reads as 0%.
    """
    if bytes_copied > 0 and total_bytes > 0:
        return (bytes_copied / total_bytes) * 100
    return 0.0
