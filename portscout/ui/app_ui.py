"""
The terminal front end: drives the scan view from the event queue.
"""
from __future__ import annotations
import logging
from queue import Empty
from typing import Optional

from rich.console import Console
from rich.errors import LiveError
from rich.live import Live
from rich.text import Text

from ..controller import ScanController
from ..events import UserInput
from .keyboard import KeyReader
from .scan_view import INTERRUPT_KEY, ScanView
from .types import DisplayError

class TerminalUI:
    """
    Runs the view loop on the calling thread.

    The loop waits on the controller's event queue, feeds each event to the
    view and refreshes the live display until the view finishes. The report
    is printed once the live display has been torn down.
    """

    def __init__(
        self,
        view: ScanView,
        controller: ScanController,
        console: Optional[Console] = None,
        key_reader: Optional[KeyReader] = None,
        poll_interval: float = 0.1,
    ):
        self.view = view
        self.controller = controller
        self.console = console or Console()
        self.key_reader = key_reader or KeyReader(controller.event_queue)
        self.poll_interval = poll_interval

    def run(self) -> ScanView:
        """Scans until completion or quit, prints the report and returns the view."""
        try:
            with self.key_reader, Live(
                self.view.render(),
                console=self.console,
                transient=True,
                refresh_per_second=10,
                redirect_stderr=True,
            ) as live:
                self.controller.start()
                self._event_loop(live)
        except KeyboardInterrupt:
            self.view.handle_event(UserInput(key=INTERRUPT_KEY))
        except (LiveError, OSError) as e:
            self.controller.stop()
            raise DisplayError(str(e)) from e

        if not self.view.scan_state.finished:
            self.controller.stop()
        if self.view.aborted:
            logging.info(f"Scan aborted by user ({self.view.quit_key}).")
        self.print_report()
        return self.view

    def _event_loop(self, live: Live):
        while not self.view.is_finished:
            try:
                event = self.controller.event_queue.get(timeout=self.poll_interval)
            except Empty:
                pass
            else:
                self.view.handle_event(event)
            live.update(self.view.render(self.controller.probed_count))

    def print_report(self):
        """Prints one plain line per open port."""
        for line in self.view.report_lines():
            self.console.print(Text(line))
