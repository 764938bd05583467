# copywatch/core/transfer_phase.py

import logging
import subprocess
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from .config_manager import CopyWatchConfig
from .interfaces.types import CopyJob
from .robocopy import RobocopyCommand

logger = logging.getLogger(__name__)

class TransferPhase:
    """Starts the live robocopy run in the background."""
    
    def __init__(self, command: Optional[RobocopyCommand] = None, config: Optional[CopyWatchConfig] = None,
                 sleep=time.sleep):
        self.config = config or (command.config if command else CopyWatchConfig())
        self.command = command or RobocopyCommand(self.config)
        self._sleep = sleep
    
    def log_path_for(self, job: CopyJob, now: Optional[datetime] = None) -> Path:
        """Timestamped log path under the destination root, kept next to the copied tree."""
        timestamp = (now or datetime.now()).strftime(self.config.timestamp_format)
        return Path(job.destination_root) / self.config.transfer_log_template.format(timestamp=timestamp)
    
    def start_transfer(self, job: CopyJob) -> Tuple[Path, subprocess.Popen]:
        """
        Launch robocopy for real and return straight away.
        
        Args:
            job: The copy to perform
            
        Returns:
            Tuple[Path, subprocess.Popen]: live log path and process handle
            
        Raises:
            ExternalToolError: If robocopy cannot be launched
        """
        log_path = self.log_path_for(job)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        
        args = self.command.build(
            job.source,
            job.effective_destination,
            log_path,
            [f"/IPG:{job.inter_packet_delay_ms}"]
        )
        process = self.command.start(args)
        logger.debug(f"Transfer started (pid {process.pid}), logging to {log_path}")
        
        # Give robocopy a moment to create the log
        if self.config.settle_delay_ms > 0:
            self._sleep(self.config.settle_delay_ms / 1000)
        return log_path, process
