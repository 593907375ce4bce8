"""
Core scan controller for portscout.

Connects the coordinator's event stream to the queue the terminal view reads.
"""
from __future__ import annotations
import logging
import threading
from queue import Queue
from typing import Optional

from .coordinator import ScanCoordinator
from .events import ScanEvent, ScanFailed
from .models import Target
from .network import resolve_host

class ScanController:
    """Runs a scan in the background and forwards its events to the view."""

    def __init__(
        self,
        target: Target,
        coordinator: ScanCoordinator,
        event_queue: Optional[Queue] = None,
    ):
        self.target = target
        self.coordinator = coordinator
        self.event_queue: Queue[ScanEvent] = event_queue if event_queue is not None else Queue()
        self._forwarder: Optional[threading.Thread] = None

    def start(self):
        """Starts the scan on a daemon thread so the view loop never blocks on it."""
        if self._forwarder is not None:
            return
        self._forwarder = threading.Thread(target=self._forward_events, name="scan-forwarder", daemon=True)
        self._forwarder.start()

    def _forward_events(self):
        """Relays every coordinator event, ScanComplete included, into the event queue."""
        if not resolve_host(self.target.address):
            # Every probe will fail; the scan still completes with no open ports.
            logging.warning(f"Could not resolve '{self.target.address}'.")
        try:
            for event in self.coordinator.run(self.target):
                self.event_queue.put(event)
        except Exception as e:
            logging.exception("Scan aborted.")
            self.event_queue.put(ScanFailed(message=str(e)))

    def stop(self):
        """Abandons the scan. Events still in flight are never consumed."""
        self.coordinator.stop()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Waits for the forwarding thread; returns True once it has exited."""
        if self._forwarder is None:
            return True
        self._forwarder.join(timeout)
        return not self._forwarder.is_alive()

    @property
    def probed_count(self) -> int:
        return self.coordinator.probed_count
