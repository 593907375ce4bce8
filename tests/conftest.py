import logging
import socket
import threading

import pytest
from rich.logging import RichHandler

from portscout.models import ProbeResult
from portscout.services import ServiceDirectory, import_services

SERVICES_CSV = """\
Service Name,Port Number,Transport Protocol,Description
ssh,22,tcp,The Secure Shell (SSH) Protocol
ssh,22,udp,The Secure Shell (SSH) Protocol
,23,tcp,Reserved
http,80,udp,World Wide Web HTTP
www-http,80,tcp,World Wide Web HTTP
domain,53,udp,Domain Name Server
https,,tcp,Missing port
short,443
"""


class FakeProbe:
    """Answers probes from a fixed port->service map without touching the network."""

    def __init__(self, open_ports=None):
        self.open_ports = dict(open_ports or {})
        self.stop_event = threading.Event()
        self.calls = []

    def probe(self, address, port, timeout=None):
        self.calls.append(port)
        if port in self.open_ports:
            return ProbeResult(port=port, service_name=self.open_ports[port])
        return None


@pytest.fixture
def services_csv(tmp_path):
    path = tmp_path / "service-names-port-numbers.csv"
    path.write_text(SERVICES_CSV)
    return path


@pytest.fixture
def services_db(tmp_path, services_csv):
    db_path = tmp_path / "services.db"
    import_services(str(services_csv), str(db_path))
    return db_path


@pytest.fixture
def directory(services_db):
    return ServiceDirectory(str(services_db))


@pytest.fixture
def listener():
    """A listening TCP socket on localhost; yields its port."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(16)
    try:
        yield sock.getsockname()[1]
    finally:
        sock.close()


@pytest.fixture
def closed_port():
    """A localhost port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Removes handlers that app.setup_logging adds to the root logger."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers and isinstance(handler, (RichHandler, logging.FileHandler)):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
