"""
The scan view state machine.

The view owns the ScanState. It is only ever mutated from handle_event,
which the terminal loop calls from a single thread.
"""
from __future__ import annotations
from typing import Iterable, List, Optional

from rich.console import Group, RenderableType
from rich.spinner import Spinner
from rich.text import Text

from ..events import ScanComplete, ScanEvent, ScanFailed, UserInput
from ..models import ProbeResult, ScanState, Target
from ..parsing import TargetParser
from .types import ViewState

INTERRUPT_KEY = "ctrl+c"

def format_report_line(port: int, service_name: Optional[str]) -> str:
    """Formats one line of the final report."""
    if service_name:
        return f"{port} is open (service: {service_name})"
    return f"{port} is open"

class ScanView:
    """Accumulates scan events and renders either progress or the final report."""

    def __init__(self, target: Target, quit_keys: Iterable[str] = ("q",)):
        self.target = target
        # A single key may be configured as a bare string.
        keys = [quit_keys] if isinstance(quit_keys, str) else list(quit_keys)
        self.quit_keys = set(keys) | {INTERRUPT_KEY}
        self._quit_hint = keys[0] if keys else INTERRUPT_KEY
        self.scan_state = ScanState()
        self.view_state = ViewState.SCANNING
        self.aborted = False
        self.quit_key: Optional[str] = None
        self.error: Optional[str] = None
        self._spinner = Spinner("dots")

    @property
    def is_finished(self) -> bool:
        return self.view_state is ViewState.FINISHED

    def handle_event(self, event: ScanEvent) -> None:
        """Applies one event. Events arriving after the view has finished are ignored."""
        if self.is_finished:
            return

        if isinstance(event, ProbeResult):
            self.scan_state.open_ports[event.port] = event.service_name
        elif isinstance(event, ScanComplete):
            self.scan_state.finished = True
            self.view_state = ViewState.FINISHED
        elif isinstance(event, ScanFailed):
            self.error = event.message
            self.view_state = ViewState.FINISHED
        elif isinstance(event, UserInput) and event.key in self.quit_keys:
            self.aborted = True
            self.quit_key = event.key
            self.view_state = ViewState.FINISHED

    def report_lines(self) -> List[str]:
        """Returns the report for every port found so far, lowest port first."""
        return [
            format_report_line(port, self.scan_state.open_ports[port])
            for port in sorted(self.scan_state.open_ports)
        ]

    def render(self, probed: Optional[int] = None) -> RenderableType:
        """Builds the renderable for the current state."""
        if self.is_finished:
            return Text("\n".join(self.report_lines()))

        host = TargetParser.format_host_for_display(self.target.address)
        self._spinner.update(text=Text(f"Scanning {host}... Press {self._quit_hint} to quit"))
        found = len(self.scan_state.open_ports)
        status = f"{found} open port{'s' if found != 1 else ''} found"
        if probed is not None:
            status += f", {probed}/{self.target.port_count} ports probed"
        return Group(self._spinner, Text(status, style="dim"))
