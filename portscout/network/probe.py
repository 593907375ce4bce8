"""
A single bounded-timeout TCP connection attempt against one port.
"""
from __future__ import annotations
import threading
from typing import Optional

from ..models import ProbeResult
from ..services import ServiceDirectory
from .utils import try_connect

DEFAULT_TIMEOUT = 3.0

class PortProbe:
    """
    Checks whether a port accepts connections and names its service.

    Closed, filtered and unreachable ports all look the same from here: the
    probe returns None and raises nothing.
    """

    def __init__(
        self,
        directory: ServiceDirectory,
        timeout: float = DEFAULT_TIMEOUT,
        stop_event: Optional[threading.Event] = None,
    ):
        self.directory = directory
        self.timeout = timeout
        self.stop_event = stop_event or threading.Event()

    def probe(self, address: str, port: int, timeout: Optional[float] = None) -> Optional[ProbeResult]:
        """Connects to address:port once; returns a ProbeResult only if it is open."""
        if self.stop_event.is_set():
            return None
        if not try_connect(address, port, self.timeout if timeout is None else timeout):
            return None
        return ProbeResult(port=port, service_name=self.directory.lookup(port))
