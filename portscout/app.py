"""
Main application module for portscout.

This module parses the command line, builds the scan pipeline (directory,
probe, coordinator, controller and view) and runs the terminal front end.
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler

from . import configuration
from .controller import ScanController
from .coordinator import ScanCoordinator
from .models import Target
from .network import PortProbe
from .parsing import TargetParser
from .services import ServiceDirectory
from .ui import DisplayError, ScanView, TerminalUI
from .ui.scan_view import INTERRUPT_KEY

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

class ArgumentParser(argparse.ArgumentParser):
    """An argparse parser that reports usage errors with exit status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_ERROR, f"{self.prog}: error: {message}\n")

def build_arg_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="portscout",
        description="Scan a host for open TCP ports and name the services behind them.",
    )
    parser.add_argument("target", help="IPv4/IPv6 address or hostname to scan")
    parser.add_argument("-s", "--start", type=int, help="first port to scan (default: 1)")
    parser.add_argument("-e", "--end", type=int, help="last port to scan (default: 65535)")
    parser.add_argument("-p", "--ports", help="port range as START-END; overrides --start/--end")
    parser.add_argument("-t", "--timeout", type=float, help="connection timeout per port in seconds")
    parser.add_argument("-w", "--workers", type=int, help="maximum number of concurrent probes")
    parser.add_argument("--db", help="service name database (default: services.db)")
    parser.add_argument("-c", "--config", help="YAML configuration file (default: config.yaml)")
    return parser

def setup_logging(config: Dict[str, Any], console: Optional[Console] = None) -> logging.Handler:
    """
    Configures the root logger from the log_level and log_file settings.

    Without a log file, records go through a RichHandler on the console the
    live display draws on, so they print above it instead of through it.
    """
    level = getattr(logging, str(config.get('log_level', 'WARNING')).upper(), logging.WARNING)
    root = logging.getLogger()
    root.setLevel(level)
    if config.get('log_file'):
        handler: logging.Handler = logging.FileHandler(config['log_file'])
        handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
    else:
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter('%(message)s'))
    root.addHandler(handler)
    return handler

def build_target(args: argparse.Namespace, config: Dict[str, Any]) -> Target:
    """Combines the command line and the config into a Target. Raises ValueError."""
    parser = TargetParser()
    address = parser.parse_target(args.target)
    if args.ports:
        start, end = parser.parse_port_range(args.ports)
    else:
        start = args.start if args.start is not None else int(config['start_port'])
        end = args.end if args.end is not None else int(config['end_port'])
    return Target(address=address, start_port=start, end_port=end)

class ScanApp:
    """Wires the scan pipeline together for one target."""

    def __init__(self, target: Target, config: Dict[str, Any], ui_kwargs: Optional[Dict[str, Any]] = None):
        self.target = target
        self.config = config

        directory = ServiceDirectory(config['services_db_path'])
        probe = PortProbe(directory, timeout=float(config['probe_timeout_seconds']))
        self.coordinator = ScanCoordinator(probe, max_concurrency=int(config['max_concurrency']))
        self.controller = ScanController(target, self.coordinator)
        self.view = ScanView(target, quit_keys=config.get('quit_keys') or ())
        self.ui = TerminalUI(self.view, self.controller, **(ui_kwargs or {}))

    def run(self) -> ScanView:
        return self.ui.run()

def main(argv: Optional[List[str]] = None) -> int:
    """The main entry point for the application."""
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)

    config = configuration.load_or_create_config(args.config)
    if args.timeout is not None:
        config['probe_timeout_seconds'] = args.timeout
    if args.workers is not None:
        config['max_concurrency'] = args.workers
    if args.db:
        config['services_db_path'] = args.db
    console = Console()
    setup_logging(config, console)

    try:
        target = build_target(args, config)
        if float(config['probe_timeout_seconds']) <= 0:
            raise ValueError("The timeout must be greater than 0.")
        app = ScanApp(target, config, ui_kwargs={"console": console})
    except (ValueError, TypeError) as e:
        arg_parser.print_usage(sys.stderr)
        print(f"{arg_parser.prog}: error: {e}", file=sys.stderr)
        return EXIT_ERROR

    logging.info("Application starting up.")
    try:
        view = app.run()
    except DisplayError as e:
        print(f"Could not start the display: {e}", file=sys.stderr)
        return EXIT_ERROR

    if view.error:
        print(f"Scan failed: {view.error}", file=sys.stderr)
        return EXIT_ERROR
    if view.quit_key == INTERRUPT_KEY:
        return EXIT_INTERRUPTED
    return EXIT_OK
