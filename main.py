# main.py

import sys
import logging

from copywatch.core.config_manager import ConfigManager
from copywatch.core.exceptions import ConfigError
from copywatch.core.logger_setup import setup_logging
from copywatch.cli.argument_parser import parse_arguments
from copywatch.cli.application_factory import (
    has_selection, report_error, report_nothing_selected, run_application, validate_arguments
)


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)
    
    # Validate arguments
    is_valid, error_message = validate_arguments(args)
    if not is_valid:
        print(f"Error: {error_message}")
        return 1
    
    # An empty selection touches neither config nor log files
    if not has_selection(args):
        return report_nothing_selected()
    
    try:
        config = ConfigManager(args.config).load_config()
    except ConfigError as e:
        report_error(e)
        return 1
    
    file_level = logging.DEBUG if args.verbose else getattr(logging, config.log_level)
    setup_logging(
        log_level=file_level,
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
        log_file_rotation=config.log_file_rotation,
        log_file_max_size=config.log_file_max_size
    )
    
    return run_application(args, config)

if __name__ == "__main__":
    sys.exit(main())
