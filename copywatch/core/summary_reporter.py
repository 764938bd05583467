# copywatch/core/summary_reporter.py

import logging
from pathlib import Path
from typing import Optional

from .interfaces.display import DisplayInterface
from .interfaces.types import AnalysisResult, CopyJob, SummaryOutcome, TransferState

logger = logging.getLogger(__name__)

class SummaryReporter:
    """Prints the end-of-run summary."""
    
    def __init__(self, display: DisplayInterface, completion_threshold_percent: float = 0.1,
                 fatal_exit_code: int = 8):
        self.display = display
        self.completion_threshold_percent = completion_threshold_percent
        self.fatal_exit_code = fatal_exit_code
    
    def classify(self, final: TransferState, analysis: AnalysisResult, cancelled: bool = False,
                 exit_code: Optional[int] = None) -> SummaryOutcome:
        """
        Decide what kind of run this was.
        
        A fatal robocopy exit code wins over any progress reading. Anything
        above the threshold counts as a real copy. Below it, an analysis log
        that could not be measured is reported as a parse failure instead of
        being mistaken for "nothing to copy".
        """
        if cancelled:
            return SummaryOutcome.CANCELLED
        if exit_code is not None and exit_code >= self.fatal_exit_code:
            return SummaryOutcome.FAILED
        if final.percent > self.completion_threshold_percent:
            return SummaryOutcome.COPIED
        if not analysis.measurable:
            return SummaryOutcome.PARSE_FAILED
        return SummaryOutcome.ALREADY_PRESENT
    
    def summarize(self, final: TransferState, analysis: AnalysisResult, log_path: Path,
                  job: Optional[CopyJob] = None, cancelled: bool = False,
                  exit_code: Optional[int] = None) -> SummaryOutcome:
        """
        Report the outcome of a transfer.
        
        Args:
            final: Last snapshot from the progress monitor
            analysis: Totals from the analysis phase
            log_path: Live transfer log
            job: The job, for source/destination lines
            cancelled: Whether the run was stopped early
            exit_code: robocopy's exit code, if it exited on its own
            
        Returns:
            SummaryOutcome: The branch that was reported
        """
        outcome = self.classify(final, analysis, cancelled, exit_code)
        
        if outcome == SummaryOutcome.COPIED:
            self.display.show_status("[bold green]Copy finished[/bold green]")
            if job is not None:
                self.display.show_status(f"Source: {job.source}")
                self.display.show_status(f"Destination: {job.effective_destination}")
            self.display.show_status(f"Files copied: {final.files_copied} of {analysis.total_files}")
            self.display.show_status(
                f"Data copied: {final.gigabytes_copied:.3f} GB of {analysis.total_gigabytes:.3f} GB"
            )
        elif outcome == SummaryOutcome.FAILED:
            self.display.show_status(
                f"[bold red]robocopy reported failures (exit code {exit_code})[/bold red]"
            )
            self.display.show_status(
                f"Copied before failing: {final.files_copied} of {analysis.total_files} files, "
                f"{final.gigabytes_copied:.3f} GB of {analysis.total_gigabytes:.3f} GB"
            )
            self.display.show_status("Check the log for the entries that failed.")
        elif outcome == SummaryOutcome.CANCELLED:
            self.display.show_status("[bold yellow]Copy cancelled[/bold yellow]")
            self.display.show_status(
                f"Copied before stopping: {final.files_copied} of {analysis.total_files} files, "
                f"{final.gigabytes_copied:.3f} GB of {analysis.total_gigabytes:.3f} GB"
            )
        elif outcome == SummaryOutcome.PARSE_FAILED:
            self.display.show_status(
                "[bold yellow]Progress could not be measured: the robocopy log format was not recognised.[/bold yellow]"
            )
            self.display.show_status(f"Check the analysis log: {analysis.log_path}")
        else:
            self.display.show_status("All items are most likely already present at the destination.")
            self.display.show_status("Check the log for details.")
        
        logger.debug(f"Summary outcome: {outcome.name}")
        self.display.show_status(f"Log: {log_path}")
        return outcome
