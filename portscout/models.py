from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional

MIN_PORT = 1
MAX_PORT = 65535

@dataclass(frozen=True)
class Target:
    """A host and the inclusive port range to scan on it."""
    address: str
    start_port: int = MIN_PORT
    end_port: int = MAX_PORT

    def __post_init__(self):
        if not self.address:
            raise ValueError("A target address is required.")
        if not MIN_PORT <= self.start_port <= MAX_PORT:
            raise ValueError(f"Start port must be between {MIN_PORT} and {MAX_PORT}, got {self.start_port}.")
        if not MIN_PORT <= self.end_port <= MAX_PORT:
            raise ValueError(f"End port must be between {MIN_PORT} and {MAX_PORT}, got {self.end_port}.")
        if self.start_port > self.end_port:
            raise ValueError(f"Start port ({self.start_port}) cannot be greater than end port ({self.end_port}).")

    @property
    def ports(self) -> range:
        return range(self.start_port, self.end_port + 1)

    @property
    def port_count(self) -> int:
        return self.end_port - self.start_port + 1

@dataclass(frozen=True)
class ProbeResult:
    """An open port found by a probe. Closed ports never produce one."""
    port: int
    service_name: Optional[str] = None

@dataclass
class ScanState:
    """Ports discovered so far, keyed by port number."""
    open_ports: Dict[int, Optional[str]] = field(default_factory=dict)
    finished: bool = False
