# copywatch/cli/argument_parser.py

import argparse
from pathlib import Path
from copywatch import __version__, __project_name__


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description=f"{__project_name__} v{__version__} - robocopy with live progress"
    )
    
    parser.add_argument(
        "source",
        nargs="?",
        default="",
        help="Directory to copy"
    )
    
    parser.add_argument(
        "destination",
        nargs="?",
        default="",
        help="Directory the source folder is copied into"
    )
    
    parser.add_argument(
        "--ipg",
        type=int,
        default=None,
        help="Inter-packet delay in milliseconds (throttles the copy)"
    )
    
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Progress refresh interval in milliseconds"
    )
    
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a configuration file"
    )
    
    parser.add_argument(
        "--robocopy",
        type=str,
        default=None,
        help="Path to the robocopy executable"
    )
    
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show diagnostic detail (arguments, raw counts)"
    )
    
    parser.add_argument(
        "--version",
        action="version",
        version=f"{__project_name__} {__version__}"
    )
    
    return parser.parse_args(argv)
