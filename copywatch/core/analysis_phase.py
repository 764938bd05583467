# copywatch/core/analysis_phase.py

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from .config_manager import CopyWatchConfig
from .interfaces.types import AnalysisResult, CopyJob
from .log_parser import LogParser
from .robocopy import RobocopyCommand

logger = logging.getLogger(__name__)

class AnalysisPhase:
    """Dry run that sizes the transfer before any data moves."""
    
    def __init__(self, command: Optional[RobocopyCommand] = None, parser: Optional[LogParser] = None,
                 config: Optional[CopyWatchConfig] = None):
        self.config = config or (command.config if command else CopyWatchConfig())
        self.command = command or RobocopyCommand(self.config)
        self.parser = parser or LogParser()
    
    def create_log_file(self) -> Path:
        """Create an empty, uniquely named log in the temp directory."""
        fd, name = tempfile.mkstemp(prefix="copywatch_analysis_", suffix=".log")
        os.close(fd)
        return Path(name)
    
    def analyze(self, job: CopyJob) -> AnalysisResult:
        """
        List what robocopy would copy and total it up.
        
        Blocks until robocopy exits; the totals are the denominator for
        every later percentage.
        
        Args:
            job: The copy to size
            
        Returns:
            AnalysisResult: Total files and bytes to copy
            
        Raises:
            ExternalToolError: If robocopy cannot run or fails
        """
        log_path = self.create_log_file()
        args = self.command.build(job.source, job.effective_destination, log_path, ["/L"])
        self.command.run(args)
        
        parsed = self.parser.parse_file(log_path)
        measurable = parsed.record_count == 0 or parsed.token_count > 0
        if not measurable:
            logger.warning(f"Analysis log has {parsed.record_count} lines but no byte sizes: {log_path}")
        logger.debug(f"Analysis: {parsed.record_count} files, {parsed.byte_sum} bytes ({parsed.token_count} tokens)")
        
        return AnalysisResult(
            total_files=parsed.record_count,
            total_bytes=parsed.byte_sum,
            log_path=log_path,
            measurable=measurable
        )
