# copywatch/core/exceptions.py

class CopyWatchError(Exception):
    """Base exception for all CopyWatch errors"""
    
    def __init__(self, message, recovery_steps=None, *args):
        self.recovery_steps = recovery_steps or []
        super().__init__(message, *args)

class ConfigError(CopyWatchError):
    """Configuration related errors"""
    
    def __init__(self, message, config_key=None, invalid_value=None, expected_type=None, *args, recovery_steps=None):
        self.config_key = config_key
        self.invalid_value = invalid_value
        self.expected_type = expected_type
        if recovery_steps is None:
            recovery_steps = ["Check configuration file format", "Verify configuration values"]
            if config_key:
                recovery_steps.append(f"Validate the '{config_key}' setting")
        super().__init__(message, recovery_steps, *args)

class ExternalToolError(CopyWatchError):
    """The external copy utility could not be launched or reported a fatal status"""
    
    def __init__(self, message, executable=None, exit_code=None, *args, error_type=None):
        self.executable = executable
        self.exit_code = exit_code
        
        # Infer error type if not provided
        if error_type is None:
            if exit_code is not None:
                error_type = "exit_code"
            elif any(word in message.lower() for word in ["not found", "no such file"]):
                error_type = "not_found"
            else:
                error_type = "launch"
        self.error_type = error_type
        
        if error_type == "not_found":
            recovery_steps = [
                "Verify robocopy is installed and on the PATH",
                "Set 'robocopy_executable' in the configuration file"
            ]
        elif error_type == "exit_code":
            recovery_steps = [
                "Check the robocopy log for the failing entries",
                "Verify source and destination paths are reachable",
                "Verify read/write permissions"
            ]
        else:
            recovery_steps = [
                "Check that the executable can be started by this user",
                "Check system resources"
            ]
        
        super().__init__(message, recovery_steps, *args)

class DisplayError(CopyWatchError):
    """Display related errors"""
    
    def __init__(self, message, display_type=None, error_type=None, *args):
        self.display_type = display_type
        self.error_type = error_type
        recovery_steps = [
            "Check that the terminal supports rich output",
            "Retry with output redirected to a file"
        ]
        super().__init__(message, recovery_steps, *args)
