# copywatch/core/context_managers.py

import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)

@contextmanager
def operation_context(display=None, operation_name="Operation"):
    """
    Log the start and end of an operation and report failures.
    
    Args:
        display: Optional display interface for showing errors
        operation_name: Name of the operation for logging and display
        
    Yields:
        None
    """
    logger.debug(f"Starting {operation_name}")
    try:
        yield
    except KeyboardInterrupt:
        logger.warning(f"{operation_name} interrupted")
        raise
    except Exception as e:
        logger.error(f"Error in {operation_name}: {e}", exc_info=True)
        if display:
            display.show_error(f"{operation_name} failed: {e}")
        raise
    logger.debug(f"Completed {operation_name}")
