# tests/conftest.py
"""
Pytest configuration for CopyWatch tests.
Defines fixtures used across multiple test modules.
"""
from pathlib import Path
from typing import Any, Iterator
import tempfile
import logging
import pytest

from copywatch.core.interfaces.types import AnalysisResult, CopyJob


@pytest.fixture
def isolated_tempdir(tmp_path: Path, monkeypatch) -> Iterator[Path]:
    """
    Point tempfile at a per-test directory so analysis logs land there.
    
    Yields:
        Path: The directory tempfile now uses.
    """
    temp_dir = tmp_path / "temp"
    temp_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(temp_dir))
    yield temp_dir


@pytest.fixture
def copy_job(tmp_path: Path) -> CopyJob:
    """A job copying <tmp>/source/Project into <tmp>/backup."""
    source = tmp_path / "source" / "Project"
    source.mkdir(parents=True)
    return CopyJob(
        source=str(source),
        destination_root=str(tmp_path / "backup"),
        inter_packet_delay_ms=5,
        report_interval_ms=10
    )


@pytest.fixture
def analysis_result() -> AnalysisResult:
    """Totals for a 4 file, 4000 byte copy."""
    return AnalysisResult(total_files=4, total_bytes=4000, log_path=Path("analysis.log"))


@pytest.fixture
def fake_process(mocker) -> Any:
    """
    A stand-in for subprocess.Popen that exits on the third poll.
    
    Set `fake_process.exit_after` to change when it exits.
    """
    process = mocker.Mock()
    process.pid = 4242
    process.exit_after = 3
    process.polls = 0

    def poll():
        process.polls += 1
        return 0 if process.polls >= process.exit_after else None

    process.poll.side_effect = poll
    return process


@pytest.fixture
def mock_display(mocker) -> Any:
    """
    Provide a mock DisplayInterface.
    Returns:
        Mocked DisplayInterface instance.
    """
    display = mocker.Mock()
    display.show_status = mocker.Mock()
    display.show_progress = mocker.Mock()
    display.show_complete = mocker.Mock()
    display.show_error = mocker.Mock()
    return display


@pytest.fixture
def mocked_logging() -> Iterator[None]:
    """Fixture to silence logging for a test."""
    original_level = logging.getLogger().level
    logging.getLogger().setLevel(logging.CRITICAL)
    yield
    logging.getLogger().setLevel(original_level)
