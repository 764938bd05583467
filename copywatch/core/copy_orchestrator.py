# copywatch/core/copy_orchestrator.py

import logging
import threading
from typing import Optional

from .analysis_phase import AnalysisPhase
from .config_manager import CopyWatchConfig
from .context_managers import operation_context
from .interfaces.display import DisplayInterface
from .interfaces.types import CopyJob, SummaryOutcome
from .progress_monitor import ProgressMonitor
from .robocopy import RobocopyCommand
from .summary_reporter import SummaryReporter
from .transfer_phase import TransferPhase

logger = logging.getLogger(__name__)

NOTHING_SELECTED_MESSAGE = "No source or destination selected, nothing to do."

class CopyOrchestrator:
    """Runs analysis, transfer, monitoring and summary in order."""
    
    def __init__(self, display: DisplayInterface, config: Optional[CopyWatchConfig] = None,
                 analysis_phase: Optional[AnalysisPhase] = None,
                 transfer_phase: Optional[TransferPhase] = None,
                 monitor: Optional[ProgressMonitor] = None,
                 reporter: Optional[SummaryReporter] = None):
        self.display = display
        self.config = config or CopyWatchConfig()
        command = RobocopyCommand(self.config)
        self.analysis_phase = analysis_phase or AnalysisPhase(command)
        self.transfer_phase = transfer_phase or TransferPhase(command)
        self.monitor = monitor or ProgressMonitor(display)
        self.reporter = reporter or SummaryReporter(
            display,
            self.config.completion_threshold_percent,
            self.config.fatal_exit_code
        )
    
    def create_job(self, source: str, destination_root: str, inter_packet_delay_ms: Optional[int] = None,
                   report_interval_ms: Optional[int] = None) -> CopyJob:
        """Build a CopyJob, filling unset timings from the configuration."""
        return CopyJob(
            source=source or "",
            destination_root=destination_root or "",
            inter_packet_delay_ms=self.config.inter_packet_delay_ms if inter_packet_delay_ms is None else inter_packet_delay_ms,
            report_interval_ms=self.config.report_interval_ms if report_interval_ms is None else report_interval_ms
        )
    
    def run(self, job: CopyJob, cancel_event: Optional[threading.Event] = None) -> Optional[SummaryOutcome]:
        """
        Copy job.source into job.destination_root with live progress.
        
        Args:
            job: What to copy and how
            cancel_event: Optional event that stops the transfer when set
            
        Returns:
            SummaryOutcome, or None when nothing was selected
            
        Raises:
            ExternalToolError: If robocopy cannot be launched or fails during analysis
        """
        if not job.is_complete():
            self.display.show_status(NOTHING_SELECTED_MESSAGE)
            return None
        
        with operation_context(self.display, "Analysis"):
            self.display.show_status(f"Analysing {job.source} ...")
            analysis = self.analysis_phase.analyze(job)
        self.display.show_status(
            f"To copy: {analysis.total_files} files, {analysis.total_gigabytes:.3f} GB"
        )
        logger.debug(f"Analysis totals: {analysis.total_files} files, {analysis.total_bytes} bytes, log {analysis.log_path}")
        
        with operation_context(self.display, "Transfer"):
            self.display.show_status(f"Copying to {job.effective_destination} ...")
            log_path, process = self.transfer_phase.start_transfer(job)
            result = self.monitor.monitor(
                process,
                log_path,
                analysis,
                job.report_interval_ms,
                cancel_event=cancel_event
            )
        
        return self.reporter.summarize(
            result.state,
            analysis,
            log_path,
            job=job,
            cancelled=result.cancelled,
            exit_code=result.exit_code
        )
