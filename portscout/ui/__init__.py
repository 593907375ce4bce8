"""
Terminal user interface for portscout.
"""

from .app_ui import TerminalUI
from .scan_view import ScanView
from .types import DisplayError, ViewState

__all__ = ["TerminalUI", "ScanView", "DisplayError", "ViewState"]
