# copywatch/core/progress_monitor.py

import logging
import subprocess
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from .interfaces.display import DisplayInterface
from .interfaces.types import (
    AnalysisResult, MonitorResult, MonitorState, TransferState, bytes_to_gigabytes
)
from .log_parser import LogParser

logger = logging.getLogger(__name__)

class ProgressMonitor:
    """
    Polls the live robocopy log and turns it into progress updates.
    
    Every tick sleeps for the report interval, re-reads the whole log,
    parses it into a fresh TransferState and renders it. The loop ends on
    the tick that observes the process has exited, so the last snapshot
    is always taken from the finished log.
    """
    
    def __init__(self, display: Optional[DisplayInterface] = None, parser: Optional[LogParser] = None,
                 sleep: Callable[[float], None] = time.sleep, label: str = "Copying"):
        self.display = display
        self.parser = parser or LogParser()
        self._sleep = sleep
        self.label = label
        self.status = MonitorState.IDLE
    
    @staticmethod
    def format_status(state: TransferState, analysis: AnalysisResult) -> str:
        """Status line: files, gigabytes and percent."""
        return (
            f"{state.files_copied}/{analysis.total_files} files | "
            f"{bytes_to_gigabytes(state.bytes_copied):.3f}/{analysis.total_gigabytes:.3f} GB | "
            f"{state.percent:.2f}%"
        )
    
    def poll_once(self, log_path: Path, analysis: AnalysisResult) -> TransferState:
        """Read and parse the live log once."""
        parsed = self.parser.parse_file(log_path)
        return TransferState.from_parse(parsed, analysis.total_bytes)
    
    def _render(self, state: TransferState, analysis: AnalysisResult) -> None:
        if self.display:
            self.display.show_progress(self.label, self.format_status(state, analysis), state.percent)
    
    def monitor(self, process, log_path: Path, analysis: AnalysisResult, interval_ms: int,
                cancel_event: Optional[threading.Event] = None) -> MonitorResult:
        """
        Poll until the process exits or the run is cancelled.
        
        Args:
            process: Handle exposing poll() and terminate(), e.g. subprocess.Popen
            log_path: Live log written by the process
            analysis: Totals from the analysis phase
            interval_ms: Delay between ticks
            cancel_event: Optional event; when set the process is terminated
            
        Returns:
            MonitorResult: Final snapshot and how the loop ended
        """
        state = TransferState()
        ticks = 0
        self.status = MonitorState.POLLING
        logger.debug(f"Monitoring {log_path} every {interval_ms} ms")
        
        try:
            while True:
                self._sleep(interval_ms / 1000)
                
                if cancel_event is not None and cancel_event.is_set():
                    return self._cancel(process, state, ticks)
                
                exit_code = process.poll()
                state = self.poll_once(log_path, analysis)
                ticks += 1
                self._render(state, analysis)
                logger.debug(f"Tick {ticks}: {state.files_copied} files, {state.bytes_copied} bytes")
                
                if exit_code is not None:
                    break
        except KeyboardInterrupt:
            self._terminate(process)
            self.status = MonitorState.CANCELLED
            if self.display:
                self.display.show_complete("Cancelled")
            raise
        except Exception as e:
            # Never leave robocopy running unwatched
            logger.error(f"Monitoring failed, stopping robocopy: {e}")
            self._terminate(process)
            self.status = MonitorState.CANCELLED
            raise
        
        self.status = MonitorState.COMPLETED
        if self.display:
            self.display.show_complete("Completed")
        logger.debug(f"Process exited with code {exit_code} after {ticks} ticks")
        return MonitorResult(state=state, status=self.status, ticks=ticks, exit_code=exit_code)
    
    def _cancel(self, process, state: TransferState, ticks: int) -> MonitorResult:
        logger.info("Cancellation requested, stopping robocopy")
        self._terminate(process)
        self.status = MonitorState.CANCELLED
        if self.display:
            self.display.show_complete("Cancelled")
        return MonitorResult(state=state, status=self.status, ticks=ticks, exit_code=process.poll())
    
    @staticmethod
    def _terminate(process) -> None:
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=10)
            except subprocess.TimeoutExpired as e:
                logger.warning(f"Process did not exit after terminate: {e}")
