"""
CopyWatch - Live progress estimation for robocopy directory transfers
"""

__version__ = "1.0.0"
__author__ = "CopyWatch contributors"
__license__ = "MIT"
__description__ = "Live progress estimation for robocopy directory transfers"
__project_name__ = "CopyWatch"
__copyright__ = f"Copyright 2025 {__author__}"
