import threading
import pytest
from pathlib import Path
from copywatch.core.progress_monitor import ProgressMonitor
from copywatch.core.interfaces.types import AnalysisResult, MonitorState, TransferState
from copywatch.core.exceptions import DisplayError

def growing_log(log_path: Path, chunks):
    """sleep() replacement that appends the next chunk to the log on each tick."""
    pending = list(chunks)
    delays = []

    def sleep(seconds):
        delays.append(seconds)
        if pending:
            with open(log_path, "a", encoding="utf-8") as f:
                f.write(pending.pop(0))
    sleep.delays = delays
    return sleep

def test_initial_state_is_idle():
    assert ProgressMonitor().status == MonitorState.IDLE

def test_monitor_polls_until_exit(tmp_path, mock_display, fake_process):
    log_path = tmp_path / "live.log"
    analysis = AnalysisResult(total_files=2, total_bytes=300)
    sleep = growing_log(log_path, ["HEADER\n", "  100\ta.bin\n", "  200\tb.bin\n"])
    monitor = ProgressMonitor(mock_display, sleep=sleep)
    
    result = monitor.monitor(fake_process, log_path, analysis, interval_ms=250)
    
    assert result.status == MonitorState.COMPLETED
    assert monitor.status == MonitorState.COMPLETED
    assert result.ticks == 3
    assert result.exit_code == 0
    assert result.state == TransferState(files_copied=2, bytes_copied=300, percent=100.0)
    assert sleep.delays == [0.25, 0.25, 0.25]
    assert mock_display.show_progress.call_count == 3
    mock_display.show_complete.assert_called_once_with("Completed")

def test_rendered_percent_is_non_decreasing(tmp_path, mock_display, fake_process):
    log_path = tmp_path / "live.log"
    fake_process.exit_after = 5
    analysis = AnalysisResult(total_files=4, total_bytes=1000)
    sleep = growing_log(log_path, ["HEADER\n", "  100\ta\n  2", "00\tb\n", "  300\tc\n", "  400\td\n"])
    ProgressMonitor(mock_display, sleep=sleep).monitor(fake_process, log_path, analysis, 10)
    
    percents = [c.args[2] for c in mock_display.show_progress.call_args_list]
    assert percents == sorted(percents)
    assert percents[-1] == 100.0

def test_final_tick_reads_log_after_exit(tmp_path, mock_display, fake_process):
    log_path = tmp_path / "live.log"
    fake_process.exit_after = 1
    analysis = AnalysisResult(total_files=1, total_bytes=50)
    sleep = growing_log(log_path, ["HEADER\n  50\tonly.bin\n"])
    result = ProgressMonitor(mock_display, sleep=sleep).monitor(fake_process, log_path, analysis, 10)
    assert result.ticks == 1
    assert result.state.bytes_copied == 50

def test_missing_log_reads_as_zero(tmp_path, mock_display, fake_process):
    fake_process.exit_after = 1
    analysis = AnalysisResult(total_files=10, total_bytes=1000)
    monitor = ProgressMonitor(mock_display, sleep=lambda s: None)
    result = monitor.monitor(fake_process, tmp_path / "never_created.log", analysis, 10)
    assert result.state == TransferState(0, 0, 0.0)
    label, status_text, percent = mock_display.show_progress.call_args.args
    assert percent == 0.0
    assert status_text == "0/10 files | 0.000/0.000 GB | 0.00%"

def test_zero_total_bytes_never_divides(tmp_path, mock_display, fake_process):
    log_path = tmp_path / "live.log"
    log_path.write_text("HEADER\n  999\tx\n", encoding="utf-8")
    fake_process.exit_after = 1
    analysis = AnalysisResult(total_files=0, total_bytes=0)
    result = ProgressMonitor(mock_display, sleep=lambda s: None).monitor(fake_process, log_path, analysis, 10)
    assert result.state.bytes_copied == 999
    assert result.state.percent == 0.0

def test_format_status():
    analysis = AnalysisResult(total_files=10, total_bytes=5_000_000_000)
    state = TransferState(files_copied=3, bytes_copied=1_250_000_000, percent=25.0)
    assert ProgressMonitor.format_status(state, analysis) == "3/10 files | 1.164/4.657 GB | 25.00%"

def test_monitor_without_display(tmp_path, fake_process):
    fake_process.exit_after = 1
    result = ProgressMonitor(sleep=lambda s: None).monitor(
        fake_process, tmp_path / "x.log", AnalysisResult(0, 0), 10)
    assert result.status == MonitorState.COMPLETED

def test_cancel_terminates_process(tmp_path, mock_display, mocker):
    process = mocker.Mock()
    process.poll.return_value = None
    cancel = threading.Event()
    cancel.set()
    monitor = ProgressMonitor(mock_display, sleep=lambda s: None)
    
    result = monitor.monitor(process, tmp_path / "x.log", AnalysisResult(1, 1), 10, cancel_event=cancel)
    
    assert result.status == MonitorState.CANCELLED
    assert result.cancelled
    assert result.ticks == 0
    process.terminate.assert_called_once()
    process.wait.assert_called_once()
    mock_display.show_complete.assert_called_once_with("Cancelled")
    mock_display.show_progress.assert_not_called()

def test_cancel_mid_transfer_keeps_last_snapshot(tmp_path, mock_display, mocker):
    log_path = tmp_path / "live.log"
    log_path.write_text("HEADER\n  10\ta\n", encoding="utf-8")
    process = mocker.Mock()
    process.poll.return_value = None
    cancel = threading.Event()
    ticks = []

    def sleep(seconds):
        ticks.append(seconds)
        if len(ticks) == 2:
            cancel.set()

    result = ProgressMonitor(mock_display, sleep=sleep).monitor(
        process, log_path, AnalysisResult(2, 20), 10, cancel_event=cancel)
    assert result.cancelled
    assert result.ticks == 1
    assert result.state.bytes_copied == 10
    assert result.state.percent == 50.0

def test_keyboard_interrupt_stops_process(tmp_path, mock_display, mocker):
    process = mocker.Mock()
    process.poll.return_value = None

    def sleep(seconds):
        raise KeyboardInterrupt()

    monitor = ProgressMonitor(mock_display, sleep=sleep)
    with pytest.raises(KeyboardInterrupt):
        monitor.monitor(process, tmp_path / "x.log", AnalysisResult(1, 1), 10)
    process.terminate.assert_called_once()
    assert monitor.status == MonitorState.CANCELLED

def test_already_exited_process_is_not_terminated(mocker):
    process = mocker.Mock()
    process.poll.return_value = 0
    ProgressMonitor._terminate(process)
    process.terminate.assert_not_called()

def test_keyboard_interrupt_closes_progress_display(tmp_path, mock_display, mocker):
    process = mocker.Mock()
    process.poll.return_value = None

    def sleep(seconds):
        raise KeyboardInterrupt()

    with pytest.raises(KeyboardInterrupt):
        ProgressMonitor(mock_display, sleep=sleep).monitor(process, tmp_path / "x.log", AnalysisResult(1, 1), 10)
    mock_display.show_complete.assert_called_once_with("Cancelled")

def test_display_failure_stops_process(tmp_path, mock_display, mocker, mocked_logging):
    process = mocker.Mock()
    process.poll.return_value = None
    mock_display.show_progress.side_effect = DisplayError("render failed")
    monitor = ProgressMonitor(mock_display, sleep=lambda s: None)

    with pytest.raises(DisplayError):
        monitor.monitor(process, tmp_path / "x.log", AnalysisResult(1, 1), 10)
    process.terminate.assert_called_once()
    assert monitor.status == MonitorState.CANCELLED

def test_unreadable_log_stops_process(tmp_path, mock_display, mocker, mocked_logging):
    process = mocker.Mock()
    process.poll.return_value = None
    mocker.patch("copywatch.core.log_parser.open", side_effect=PermissionError("locked"), create=True)

    with pytest.raises(PermissionError):
        ProgressMonitor(mock_display, sleep=lambda s: None).monitor(process, tmp_path / "x.log", AnalysisResult(1, 1), 10)
    process.terminate.assert_called_once()
