import logging

import pytest
from rich.logging import RichHandler

from portscout import app
from portscout.events import ScanComplete, ScanFailed, UserInput
from portscout.models import ProbeResult, Target
from portscout.ui import DisplayError, ScanView


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "config.yaml")


@pytest.fixture
def no_scan(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("no scan should be started")
    monkeypatch.setattr(app.ScanApp, "run", fail)


def _finished_view(*events):
    view = ScanView(Target("127.0.0.1"))
    for event in events:
        view.handle_event(event)
    return view


def test_missing_target_prints_usage_and_exits_1(tmp_path, monkeypatch, capsys, no_scan):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as excinfo:
        app.main([])
    assert excinfo.value.code == 1
    assert "usage: portscout" in capsys.readouterr().err
    assert not (tmp_path / "config.yaml").exists()


@pytest.mark.parametrize("argv", [
    ["127.0.0.1", "--ports", "100-1"],
    ["127.0.0.1", "--start", "0"],
    ["127.0.0.1", "--workers", "0"],
    ["127.0.0.1", "--timeout", "0"],
    ["bad..host"],
])
def test_invalid_options_exit_1(argv, config_path, capsys, no_scan):
    assert app.main(argv + ["--config", config_path]) == 1
    assert "usage: portscout" in capsys.readouterr().err


def test_build_target_prefers_flags_over_config():
    parser = app.build_arg_parser()
    config = {'start_port': 1, 'end_port': 65535}
    assert app.build_target(parser.parse_args(["h", "-s", "20", "-e", "30"]), config) == Target("h", 20, 30)
    assert app.build_target(parser.parse_args(["h", "-p", "1-100", "-s", "50"]), config) == Target("h", 1, 100)
    assert app.build_target(parser.parse_args(["[::1]"]), config) == Target("::1", 1, 65535)


def test_flags_reach_the_pipeline(monkeypatch, config_path, tmp_path):
    seen = {}

    def run(self):
        seen['target'] = self.target
        seen['timeout'] = self.coordinator.probe.timeout
        seen['workers'] = self.coordinator.max_concurrency
        seen['db'] = self.coordinator.probe.directory.db_path
        return _finished_view(ScanComplete())

    monkeypatch.setattr(app.ScanApp, "run", run)
    db = str(tmp_path / "svc.db")
    argv = ["localhost", "-p", "20-25", "-t", "0.5", "-w", "7", "--db", db, "-c", config_path]

    assert app.main(argv) == app.EXIT_OK
    assert seen == {'target': Target("localhost", 20, 25), 'timeout': 0.5, 'workers': 7, 'db': db}


@pytest.mark.parametrize("events, code", [
    ((ProbeResult(22, "ssh"), ScanComplete()), app.EXIT_OK),
    ((UserInput("q"),), app.EXIT_OK),
    ((UserInput("ctrl+c"),), app.EXIT_INTERRUPTED),
    ((ScanFailed("boom"),), app.EXIT_ERROR),
])
def test_exit_codes(monkeypatch, config_path, events, code):
    monkeypatch.setattr(app.ScanApp, "run", lambda self: _finished_view(*events))
    assert app.main(["127.0.0.1", "-c", config_path]) == code


def test_display_error_exits_1(monkeypatch, config_path, capsys):
    def run(self):
        raise DisplayError("terminal went away")

    monkeypatch.setattr(app.ScanApp, "run", run)
    assert app.main(["127.0.0.1", "-c", config_path]) == app.EXIT_ERROR
    assert "terminal went away" in capsys.readouterr().err


def test_log_file_keeps_records_off_the_console(tmp_path):
    log_file = tmp_path / "scan.log"
    handler = app.setup_logging({'log_level': 'INFO', 'log_file': str(log_file)})
    assert not isinstance(handler, RichHandler)

    logging.info("Scanning 127.0.0.1")
    handler.flush()

    assert " - INFO - Scanning 127.0.0.1" in log_file.read_text()


def test_console_logging_uses_rich():
    handler = app.setup_logging({'log_level': 'debug', 'log_file': None})
    assert isinstance(handler, RichHandler)
    assert logging.getLogger().level == logging.DEBUG
