"""
Handles parsing and validation of scan targets and port ranges.
"""
from __future__ import annotations
import ipaddress
from typing import Tuple

from .models import MIN_PORT, MAX_PORT

class TargetParser:
    """Parses and validates target strings."""

    def parse_target(self, value: str) -> str:
        """
        Returns the bare host for an address, hostname or bracketed IPv6 literal.

        Raises ValueError if the value is not a usable host.
        """
        s = value.strip()
        if s.startswith('['):
            end = s.find(']')
            if end == -1:
                raise ValueError(f"Missing closing ']' in '{s}'.")
            if s[end+1:].strip():
                raise ValueError(f"Unexpected text after ']': '{s[end+1:].strip()}'.")
            s = s[1:end]
        self._validate_host(s)
        return s

    def parse_port_range(self, value: str) -> Tuple[int, int]:
        """Parses 'start-end' (or a single port) into an inclusive range."""
        spec = value.strip()
        try:
            if '-' in spec:
                start, end = (int(p.strip()) for p in spec.split('-', 1))
            else:
                start = end = int(spec)
        except ValueError:
            raise ValueError(f"Invalid port range '{value}'. Use 'start-end', e.g. '1-1024'.")

        if not (MIN_PORT <= start <= MAX_PORT and MIN_PORT <= end <= MAX_PORT):
            raise ValueError(f"Ports must be between {MIN_PORT} and {MAX_PORT}.")
        if start > end:
            raise ValueError(f"Start port ({start}) cannot be greater than end port ({end}).")
        return start, end

    def _validate_host(self, host: str) -> None:
        """Validates a hostname or IP address."""
        try:
            # Allow a zone index on link-local IPv6 literals, e.g. fe80::1%eth0
            ipaddress.ip_address(host.split('%', 1)[0])
            return
        except ValueError:
            pass
        if not host or len(host) > 253:
            raise ValueError(f"The hostname '{host}' is not valid.")
        labels = host.rstrip('.').split('.')
        if not all(labels):
            raise ValueError(f"The hostname '{host}' contains empty labels.")
        for lbl in labels:
            if not (1 <= len(lbl) <= 63):
                raise ValueError(f"The hostname '{host}' has an invalid label length.")
            if lbl.startswith('-') or lbl.endswith('-'):
                raise ValueError(f"The hostname '{host}' has a label starting/ending with '-'.")
            if not all(c.isalnum() or c in '-_' for c in lbl):
                raise ValueError(f"The hostname '{host}' contains invalid characters.")

    @staticmethod
    def format_host_for_display(host: str) -> str:
        """Wrap IPv6 literal hosts in brackets."""
        try:
            ip_obj = ipaddress.ip_address(host.split('%', 1)[0])
            if ip_obj.version == 6:
                return f"[{host}]"
        except ValueError:
            pass
        return host
