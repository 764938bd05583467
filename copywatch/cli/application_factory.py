# copywatch/cli/application_factory.py

import logging

from copywatch.core.config_manager import CopyWatchConfig
from copywatch.core.exceptions import CopyWatchError

logger = logging.getLogger(__name__)


def run_application(args, config: CopyWatchConfig, display=None):
    """
    Run a copy with the given arguments.
    
    Args:
        args: Parsed command line arguments
        config: Loaded configuration
        display: Optional display, a RichDisplay is created if omitted
        
    Returns:
        Exit code (0 for success, 1 for failure, 130 when interrupted)
    """
    from copywatch.core.copy_orchestrator import CopyOrchestrator
    
    if args.robocopy:
        config = config.model_copy(update={"robocopy_executable": args.robocopy})
    
    if display is None:
        from copywatch.core.rich_display import RichDisplay
        display = RichDisplay()
    
    try:
        orchestrator = CopyOrchestrator(display, config)
        job = orchestrator.create_job(
            args.source,
            args.destination,
            inter_packet_delay_ms=args.ipg,
            report_interval_ms=args.interval
        )
        orchestrator.run(job)
        return 0
        
    except KeyboardInterrupt:
        print("\nCopy interrupted, robocopy stopped")
        return 130
    except CopyWatchError as e:
        logger.error(f"Copy failed: {e}")
        report_error(e)
        return 1


def validate_arguments(args):
    """
    Validate command line arguments.
    
    Empty source or destination is not an error here; the orchestrator
    reports it and does nothing.
    
    Args:
        args: Parsed command line arguments
        
    Returns:
        tuple: (is_valid: bool, error_message: str)
    """
    if args.ipg is not None and args.ipg < 0:
        return False, "Inter-packet delay must not be negative"
    
    if args.interval is not None and args.interval <= 0:
        return False, "Refresh interval must be a positive number of milliseconds"
    
    return True, ""


def has_selection(args) -> bool:
    """True when both a source and a destination were given."""
    return bool(args.source) and bool(args.destination)


def report_nothing_selected(display=None):
    """
    Print the single notice for an empty selection.
    
    Nothing is configured, logged or launched on this path.
    
    Returns:
        Exit code 0
    """
    from copywatch.core.copy_orchestrator import NOTHING_SELECTED_MESSAGE
    
    if display is None:
        from copywatch.core.rich_display import RichDisplay
        display = RichDisplay(show_header=False)
    display.show_status(NOTHING_SELECTED_MESSAGE)
    return 0


def report_error(error: CopyWatchError):
    """Print an error and its recovery steps to the console."""
    print(f"Error: {error}")
    for step in error.recovery_steps:
        print(f"  - {step}")
