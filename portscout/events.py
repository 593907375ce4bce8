"""
Defines the events that flow from the scan engine and the keyboard into the view.

Everything the view reacts to arrives through one queue as one of these types,
which keeps the scan state owned by a single consumer.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from .models import ProbeResult


@dataclass(frozen=True)
class ScanComplete:
    """Posted once, after every probe has terminated."""


@dataclass(frozen=True)
class ScanFailed:
    """Posted instead of ScanComplete when the scan itself could not run."""
    message: str


@dataclass(frozen=True)
class UserInput:
    """A key pressed by the user, e.g. 'q' or 'ctrl+c'."""
    key: str


ScanEvent = Union[ProbeResult, ScanComplete, ScanFailed, UserInput]
