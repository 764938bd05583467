# copywatch/core/rich_display.py

from rich.console import Console
from rich.progress import (
    Progress,
    TextColumn,
    BarColumn,
    TimeElapsedColumn,
    SpinnerColumn
)
from rich.live import Live
from rich.panel import Panel
from rich.text import Text
from threading import Lock
import logging
from typing import Optional

from copywatch.core.interfaces.display import DisplayInterface
from copywatch.core.exceptions import DisplayError
from copywatch import __version__, __project_name__

logger = logging.getLogger(__name__)

class RichDisplay(DisplayInterface):
    """Console display with a single live progress bar, built on Rich"""
    
    def __init__(self, console: Optional[Console] = None, show_header: bool = True):
        self.display_lock = Lock()
        self.console = console or Console()
        self.progress: Optional[Progress] = None
        self.live: Optional[Live] = None
        self.task_id = None
        
        if show_header:
            self.show_header()

    def show_header(self):
        """Display the application header."""
        header = Panel(
            Text(f"{__project_name__} | v{__version__}", style="bold blue", justify="center"),
            border_style="blue",
            padding=(0, 0)
        )
        self.console.print(header)
        logger.debug("Header displayed")

    def _create_progress_instance(self):
        """
        Create a new Progress instance.
        
        The bar is driven by percent (0-100); file and size counts are
        rendered by the caller in the status text.
        """
        return Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description}"),
            BarColumn(bar_width=None, complete_style="blue", finished_style="green"),
            TextColumn("{task.fields[status_text]}"),
            TextColumn("Elapsed:"),
            TimeElapsedColumn(),
            expand=True,
            console=self.console
        )

    def _start_progress(self, label: str):
        """Create a fresh progress bar and start the live display."""
        self.progress = self._create_progress_instance()
        self.task_id = self.progress.add_task(label, total=100, status_text="")
        self.live = Live(
            self.progress,
            console=self.console,
            refresh_per_second=4,
            transient=False  # Keep the final bar on screen
        )
        self.live.start()
        logger.debug("Progress display started")

    def show_progress(self, label: str, status_text: str, percent: float) -> None:
        """Update the progress bar."""
        with self.display_lock:
            try:
                if self.progress is None:
                    self._start_progress(label)
                self.progress.update(
                    self.task_id,
                    description=label,
                    completed=min(max(percent, 0.0), 100.0),
                    status_text=status_text
                )
            except Exception as e:
                self._handle_exception("Error updating progress display", e, "progress_update")

    def show_complete(self, message: str = "Completed") -> None:
        """Mark the progress bar finished and stop the live display."""
        with self.display_lock:
            try:
                if self.progress is None:
                    self.console.print(message)
                    return
                self.progress.update(self.task_id, description=message)
                self._cleanup_progress()
            except Exception as e:
                self._handle_exception("Error completing progress display", e, "complete")

    def show_status(self, message: str) -> None:
        """Print an informational line."""
        try:
            self.console.print(message, markup=True)
            logger.debug(f"Status: {message}")
        except Exception as e:
            self._handle_exception("Error displaying status message", e, "status_update")

    def show_error(self, message: str) -> None:
        """Display an error message."""
        try:
            with self.display_lock:
                self._cleanup_progress()
            self.console.print(f"[bold red]ERROR: {message}[/bold red]", markup=True)
            logger.debug(f"Display error: {message}")
        except Exception as e:
            self._handle_exception("Error displaying error message", e, "error_display")

    def _cleanup_progress(self) -> None:
        """Stop the live display and forget the current task."""
        if self.live is not None and self.live.is_started:
            self.live.refresh()
            self.live.stop()
        self.live = None
        self.progress = None
        self.task_id = None

    def _handle_exception(self, message, exception, error_type):
        """Centralized error handling for display operations."""
        error_msg = f"{message}: {str(exception)}"
        logger.error(error_msg)
        raise DisplayError(
            error_msg,
            display_type="rich",
            error_type=error_type
        ) from exception
