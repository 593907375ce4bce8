"""
Fans a scan out into one probe per port and streams the results back.
"""
from __future__ import annotations
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from enum import Enum, auto
from typing import Iterator, List, Optional

from .events import ScanComplete, ScanEvent
from .models import Target
from .network import PortProbe

DEFAULT_MAX_CONCURRENCY = 1000

class RunState(Enum):
    """Represents the lifecycle of a coordinator."""
    IDLE = auto()
    SCANNING = auto()
    STOPPED = auto()

class ScanCoordinator:
    """
    Runs a PortProbe for every port of a target on a bounded thread pool.

    run() yields a ProbeResult for each open port, in the order the probes
    finish, and then exactly one ScanComplete once every probe has
    terminated. A stopped scan never yields ScanComplete.
    """

    def __init__(self, probe: PortProbe, max_concurrency: int = DEFAULT_MAX_CONCURRENCY):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}.")
        self.probe = probe
        self.max_concurrency = max_concurrency
        self.state = RunState.IDLE
        self.probed_count = 0
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    def run(self, target: Target) -> Iterator[ScanEvent]:
        """Scans target and yields its events, ending with ScanComplete."""
        with self._lock:
            if self.state is RunState.STOPPED:
                return
            if self.state is not RunState.IDLE:
                raise RuntimeError("This coordinator is already running a scan.")
            self.state = RunState.SCANNING
            self.probed_count = 0
            self._executor = ThreadPoolExecutor(
                max_workers=min(self.max_concurrency, target.port_count),
                thread_name_prefix="probe",
            )
        logging.info(f"Scanning {target.address} ports {target.start_port}-{target.end_port} "
                     f"with up to {self.max_concurrency} concurrent probes.")
        try:
            futures: List[Future] = []
            for port in target.ports:
                with self._lock:
                    if self.state is RunState.STOPPED:
                        return
                    futures.append(self._executor.submit(self.probe.probe, target.address, port))

            for future in as_completed(futures):
                if self.state is RunState.STOPPED:
                    return
                self.probed_count += 1
                try:
                    result = future.result()
                except Exception as e:
                    # Counts as a closed port; a probe never fails the scan.
                    logging.error(f"Probe failed unexpectedly: {e}")
                    continue
                if result is not None:
                    yield result

            logging.info(f"Scan of {target.address} finished after {self.probed_count} probes.")
            yield ScanComplete()
        finally:
            self._executor.shutdown(wait=False, cancel_futures=True)
            with self._lock:
                if self.state is RunState.SCANNING:
                    self.state = RunState.IDLE

    def stop(self):
        """Abandons the running scan. Queued probes are dropped, in-flight ones are not awaited."""
        with self._lock:
            was_scanning = self.state is RunState.SCANNING
            self.state = RunState.STOPPED
            self.probe.stop_event.set()
            if self._executor:
                self._executor.shutdown(wait=False, cancel_futures=True)
        if was_scanning:
            logging.info(f"Scan stopped after {self.probed_count} probes.")
