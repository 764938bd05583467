# copywatch/core/robocopy.py

import logging
import subprocess
from contextlib import contextmanager
from typing import List, Optional, Sequence

from .exceptions import ExternalToolError
from .config_manager import CopyWatchConfig

logger = logging.getLogger(__name__)

class RobocopyCommand:
    """Builds robocopy argument lists and starts the process."""
    
    def __init__(self, config: Optional[CopyWatchConfig] = None):
        self.config = config or CopyWatchConfig()
    
    @property
    def executable(self) -> str:
        return self.config.robocopy_executable
    
    def structural_flags(self) -> List[str]:
        """
        Flags shared by the analysis and transfer runs.
        
        Recursive copy including empty directories, junctions skipped, no
        percentage output, exact byte sizes, and one quick retry per file.
        """
        return [
            "/E",
            "/XJ",
            "/NP",
            "/BYTES",
            f"/R:{self.config.retry_count}",
            f"/W:{self.config.retry_wait_seconds}",
            *self.config.log_shaping_flags,
        ]
    
    def build(self, source, destination, log_path, extra_flags: Sequence[str] = ()) -> List[str]:
        """
        Assemble a full command line.
        
        Args:
            source: Directory to copy from
            destination: Directory to copy into
            log_path: File robocopy writes its log to (overwritten)
            extra_flags: Phase specific flags
            
        Returns:
            List[str]: argv suitable for subprocess
        """
        return [
            self.executable,
            str(source),
            str(destination),
            *self.structural_flags(),
            *extra_flags,
            f"/LOG:{log_path}",
        ]
    @contextmanager
    def launch_errors(self):
        """Translate OS launch failures into ExternalToolError."""
        try:
            yield
        except FileNotFoundError as e:
            raise ExternalToolError(
                f"Copy utility not found: {self.executable}",
                executable=self.executable,
                error_type="not_found"
            ) from e
        except OSError as e:
            raise ExternalToolError(
                f"Failed to launch {self.executable}: {e}",
                executable=self.executable,
                error_type="launch"
            ) from e
    
    def run(self, args: List[str]) -> int:
        """
        Run robocopy to completion.
        
        Returns:
            int: Exit code, always below the fatal threshold
            
        Raises:
            ExternalToolError: If robocopy cannot be launched or exits with a fatal code
        """
        logger.debug(f"Running: {subprocess.list2cmdline(args)}")
        with self.launch_errors():
            completed = subprocess.run(
                args,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL
            )
        
        logger.debug(f"{self.executable} exited with code {completed.returncode}")
        self.check_exit_code(completed.returncode)
        return completed.returncode
    
    def start(self, args: List[str]) -> subprocess.Popen:
        """
        Start robocopy without waiting for it.
        
        Returns:
            subprocess.Popen: Handle used to poll for exit
            
        Raises:
            ExternalToolError: If robocopy cannot be launched
        """
        logger.debug(f"Starting: {subprocess.list2cmdline(args)}")
        with self.launch_errors():
            return subprocess.Popen(
                args,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL
            )
    
    def check_exit_code(self, exit_code: int) -> None:
        """Raise if robocopy reported a failure rather than an informational status."""
        if exit_code >= self.config.fatal_exit_code:
            raise ExternalToolError(
                f"{self.executable} failed with exit code {exit_code}",
                executable=self.executable,
                exit_code=exit_code
            )
