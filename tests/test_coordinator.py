import threading
import time

import pytest

from conftest import FakeProbe
from portscout.coordinator import RunState, ScanCoordinator
from portscout.events import ScanComplete
from portscout.models import ProbeResult, Target
from portscout.network import PortProbe


def test_completion_is_last_and_unique():
    probe = FakeProbe({22: "ssh", 80: "http", 100: None})
    coordinator = ScanCoordinator(probe, max_concurrency=16)

    events = list(coordinator.run(Target("127.0.0.1", 1, 100)))

    assert isinstance(events[-1], ScanComplete)
    assert sum(isinstance(e, ScanComplete) for e in events) == 1
    assert sorted(e.port for e in events[:-1]) == [22, 80, 100]


def test_every_port_is_probed_once():
    probe = FakeProbe({5: None})
    coordinator = ScanCoordinator(probe, max_concurrency=8)

    events = list(coordinator.run(Target("127.0.0.1", 1, 250)))

    assert sorted(probe.calls) == list(range(1, 251))
    assert coordinator.probed_count == 250
    assert events == [ProbeResult(5, None), ScanComplete()]
    assert coordinator.state is RunState.IDLE


def test_failing_probe_counts_as_closed(caplog):
    class ExplodingProbe(FakeProbe):
        def probe(self, address, port, timeout=None):
            if port == 3:
                raise RuntimeError("boom")
            return super().probe(address, port, timeout)

    coordinator = ScanCoordinator(ExplodingProbe({2: "x"}), max_concurrency=4)
    events = list(coordinator.run(Target("127.0.0.1", 1, 5)))

    assert events == [ProbeResult(2, "x"), ScanComplete()]
    assert coordinator.probed_count == 5
    assert "boom" in caplog.text


def test_real_probe_finds_listener(directory, listener):
    coordinator = ScanCoordinator(PortProbe(directory, timeout=1.0))
    events = list(coordinator.run(Target("127.0.0.1", listener, listener)))
    assert events == [ProbeResult(port=listener, service_name=None), ScanComplete()]


def test_stop_abandons_scan_without_completion():
    release = threading.Event()

    class BlockingProbe(FakeProbe):
        def probe(self, address, port, timeout=None):
            self.calls.append(port)
            release.wait(5)
            return ProbeResult(port=port)

    probe = BlockingProbe()
    coordinator = ScanCoordinator(probe, max_concurrency=2)
    events = []
    runner = threading.Thread(target=lambda: events.extend(coordinator.run(Target("127.0.0.1", 1, 100))))
    runner.start()

    deadline = time.monotonic() + 5
    while len(probe.calls) < 2 and time.monotonic() < deadline:
        time.sleep(0.01)

    coordinator.stop()
    release.set()
    runner.join(5)

    assert not runner.is_alive()
    assert coordinator.state is RunState.STOPPED
    assert probe.stop_event.is_set()
    assert not any(isinstance(e, ScanComplete) for e in events)
    assert len(probe.calls) == 2


def test_stop_before_run_yields_nothing():
    coordinator = ScanCoordinator(FakeProbe({1: None}))
    coordinator.stop()
    assert list(coordinator.run(Target("127.0.0.1", 1, 10))) == []


def test_concurrency_must_be_positive():
    with pytest.raises(ValueError):
        ScanCoordinator(FakeProbe(), max_concurrency=0)
