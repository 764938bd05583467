# copywatch/core/interfaces/display.py
from abc import ABC, abstractmethod

class DisplayInterface(ABC):
    """Abstract base class for display implementations"""
    
    @abstractmethod
    def show_status(self, message: str) -> None:
        """Display an informational line"""
        pass
    
    @abstractmethod
    def show_progress(self, label: str, status_text: str, percent: float) -> None:
        """Display transfer progress"""
        pass
    
    @abstractmethod
    def show_complete(self, message: str = "Completed") -> None:
        """Show the terminal state of the progress indicator"""
        pass
    
    @abstractmethod
    def show_error(self, message: str) -> None:
        """Display an error message"""
        pass
