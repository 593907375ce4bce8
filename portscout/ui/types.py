"""
Shared typing information for the UI layer.
"""
from __future__ import annotations
from enum import Enum, auto

class ViewState(Enum):
    """Defines the possible states of the scan view."""
    SCANNING = auto()
    FINISHED = auto()

class DisplayError(RuntimeError):
    """Raised when the terminal display cannot be set up or crashes."""
