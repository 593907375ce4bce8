"""
Network-related utilities for portscout.
"""

from .probe import PortProbe, DEFAULT_TIMEOUT
from .utils import resolve_host, try_connect

__all__ = [
    "PortProbe",
    "DEFAULT_TIMEOUT",
    "resolve_host",
    "try_connect",
]
