# copywatch/core/config_manager.py

import logging
import shutil
import yaml
from pathlib import Path
from typing import List, Optional, Dict, ClassVar
from pydantic import BaseModel, Field, ValidationError, field_validator
import sys
import os

from copywatch import __version__
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

class CopyWatchConfig(BaseModel):
    """Configuration settings for CopyWatch using Pydantic for validation"""
    
    # Configuration sections for organized YAML output
    CONFIG_SECTIONS: ClassVar[Dict[str, List[str]]] = {
        "# Robocopy invocation": [
            "version", "robocopy_executable", "retry_count", "retry_wait_seconds",
            "log_shaping_flags", "fatal_exit_code"
        ],
        "# Transfer settings": [
            "inter_packet_delay_ms", "transfer_log_template", "timestamp_format"
        ],
        "# Progress monitoring": [
            "report_interval_ms", "settle_delay_ms", "completion_threshold_percent"
        ],
        "# Logging settings": [
            "log_level", "log_file_rotation", "log_file_max_size"
        ]
    }
    
    version: str = __version__
    
    # Robocopy invocation
    robocopy_executable: str = "robocopy"
    retry_count: int = 1
    retry_wait_seconds: int = 0
    # Keep the log to a single line per file: no job header/summary, no
    # directory lines, no file class column
    log_shaping_flags: List[str] = Field(default_factory=lambda: ["/NJH", "/NJS", "/NDL", "/NC"])
    fatal_exit_code: int = 8
    
    # Transfer settings
    inter_packet_delay_ms: int = 0
    transfer_log_template: str = "copywatch_{timestamp}.log"
    timestamp_format: str = "%Y%m%d_%H%M%S"
    
    # Progress monitoring
    report_interval_ms: int = 1000
    settle_delay_ms: int = 100
    completion_threshold_percent: float = 0.1
    
    # Logging settings
    log_level: str = "INFO"
    log_file_rotation: int = 5  # Number of log files to keep
    log_file_max_size: int = 10  # MB
    
    @field_validator('log_shaping_flags')
    def validate_log_shaping_flags(cls, v):
        """Ensure every flag has a leading slash"""
        return [flag if flag.startswith('/') else f'/{flag}' for flag in v]
    
    @field_validator('retry_count', 'retry_wait_seconds', 'inter_packet_delay_ms', 'settle_delay_ms')
    def validate_non_negative(cls, v):
        """Negative counts and delays mean zero"""
        return max(0, v)
    
    @field_validator('report_interval_ms')
    def validate_report_interval(cls, v):
        """Keep the polling interval reasonable"""
        if v < 100:
            return 100
        return v
    
    @field_validator('transfer_log_template')
    def validate_transfer_log_template(cls, v):
        """Template must leave room for the timestamp"""
        if '{timestamp}' not in v:
            return "copywatch_{timestamp}.log"
        return v
    
    @field_validator('log_level')
    def validate_log_level(cls, v):
        """Validate log level"""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v = str(v).upper()
        if v not in valid_levels:
            return 'INFO'
        return v
    
    def to_dict(self) -> dict:
        """
        Convert config to dictionary for YAML saving.
        
        Returns:
            Dictionary representation of config
        """
        return self.model_dump()
    
    def save_to_yaml_with_sections(self, file_handle):
        """
        Save configuration to YAML file with organized sections.
        
        Args:
            file_handle: Open file handle to write to
        """
        config_dict = self.to_dict()
        
        for section_comment, field_names in self.CONFIG_SECTIONS.items():
            file_handle.write(f"\n{section_comment}\n")
            section_dict = {k: config_dict[k] for k in field_names if k in config_dict}
            yaml.dump(section_dict, file_handle, default_flow_style=False, sort_keys=False)


class ConfigManager:
    """Loads and saves CopyWatchConfig as YAML"""
    
    @staticmethod
    def get_appdata_dir() -> Path:
        """
        Get the platform-appropriate appdata/config directory for CopyWatch.
        Returns:
            Path: The directory path for storing user data (config, logs, etc.)
        """
        if sys.platform == "win32":
            base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
            return base / "CopyWatch"
        elif sys.platform == "darwin":
            return Path.home() / "Library" / "Application Support" / "CopyWatch"
        else:
            return Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config")) / "copywatch"

    DEFAULT_CONFIG_PATHS = [
        get_appdata_dir.__func__() / "config.yml",
    ]
    
    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.
        
        Args:
            config_path: Optional path to configuration file
        """
        self.config_path = config_path
        self.config = None
    
    def load_config(self) -> CopyWatchConfig:
        """
        Load configuration from file or create default.
        
        A broken default file falls back to defaults; a broken file passed
        in explicitly raises.
        
        Returns:
            CopyWatchConfig: Validated configuration object
            
        Raises:
            ConfigError: If an explicitly given config file cannot be loaded
        """
        config_file = self._find_config_file()
        try:
            if config_file.exists():
                with open(config_file, 'r') as f:
                    config_data = yaml.safe_load(f) or {}
                if not isinstance(config_data, dict):
                    raise ValueError(f"Expected a mapping in {config_file}")
                file_version = config_data.get("version")
                if file_version != __version__:
                    self._backup_config(config_file)
                    logger.warning(f"Config version mismatch: file has {file_version}, program is {__version__}. Migrating config.")
                    config_data = self._migrate_config(config_data)
                    self.config = CopyWatchConfig.model_validate(config_data)
                    self.save_config()
                else:
                    self.config = CopyWatchConfig.model_validate(config_data)
                logger.info(f"Loaded configuration from {config_file}")
            else:
                self.config = CopyWatchConfig()
                self._save_default_config(config_file)
        except Exception as e:
            if self.config_path is not None:
                # An explicitly named file is never replaced by defaults
                raise ConfigError(
                    f"Could not load configuration from {config_file}: {e}",
                    config_key=self._failing_key(e)
                ) from e
            logger.error(f"Error loading config: {e}")
            self.config = CopyWatchConfig()
        return self.config
    
    @staticmethod
    def _failing_key(error: Exception) -> Optional[str]:
        """First field a pydantic validation error points at, if any."""
        if isinstance(error, ValidationError) and error.errors():
            location = error.errors()[0].get("loc") or ()
            return str(location[0]) if location else None
        return None
    
    def _backup_config(self, config_file: Path):
        """
        Backup the existing config file before migration.
        """
        try:
            backup_path = config_file.with_suffix(config_file.suffix + ".bak")
            shutil.copy2(config_file, backup_path)
            logger.info(f"Backed up config to {backup_path}")
        except OSError as e:
            logger.error(f"Failed to backup config: {e}")
    
    def _migrate_config(self, config_data: dict) -> dict:
        """
        Migrate an old config dict to the current model.
        Drops unknown fields, keeps user values that still validate and
        fills everything else with defaults.
        """
        defaults = CopyWatchConfig()
        migrated = {}
        for key in CopyWatchConfig.model_fields:
            if key in config_data:
                try:
                    migrated[key] = getattr(CopyWatchConfig(**{key: config_data[key]}), key)
                except Exception:
                    migrated[key] = getattr(defaults, key)
            else:
                migrated[key] = getattr(defaults, key)
        migrated["version"] = __version__
        return migrated
    
    def _find_config_file(self) -> Path:
        """
        Find existing config file from possible locations.
        
        Returns:
            Path to configuration file
        """
        if self.config_path:
            return Path(self.config_path)
        for path in self.DEFAULT_CONFIG_PATHS:
            if path.exists():
                return path
        return self.DEFAULT_CONFIG_PATHS[0]
    
    def _save_default_config(self, config_file: Path):
        """
        Save default configuration.
        
        Args:
            config_file: Path to save configuration to
        """
        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(config_file, 'w') as f:
                self.config.save_to_yaml_with_sections(f)
            logger.info(f"Created default configuration at {config_file}")
        except OSError as e:
            logger.error(f"Failed to save default config: {e}", exc_info=True)
            
    def save_config(self, config: Optional[CopyWatchConfig] = None):
        """
        Save configuration to file.
        
        Args:
            config: Configuration to save, uses self.config if None
        """
        if config is not None:
            self.config = config
            
        if self.config is None:
            logger.error("No configuration to save")
            return
            
        config_file = self._find_config_file()
        
        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(config_file, 'w') as f:
                self.config.save_to_yaml_with_sections(f)
            logger.info(f"Saved configuration to {config_file}")
        except OSError as e:
            logger.error(f"Failed to save config: {e}", exc_info=True)
