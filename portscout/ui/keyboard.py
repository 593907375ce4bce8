"""
Reads single key presses from the terminal on a background thread.
"""
from __future__ import annotations
import logging
import os
import select
import sys
import threading
from queue import Queue
from typing import Optional, TextIO

from ..events import UserInput
from .types import DisplayError

if os.name == 'nt':
    import msvcrt
else:
    import termios
    import tty

_KEY_NAMES = {
    '\x03': 'ctrl+c',
    '\x1b': 'esc',
    '\r': 'enter',
    '\n': 'enter',
}

def normalize_key(char: str) -> str:
    """Maps a raw character to the key name used by UserInput."""
    return _KEY_NAMES.get(char, char)

class KeyReader:
    """
    Posts a UserInput event for every key pressed while active.

    On POSIX the terminal is switched to cbreak mode for the lifetime of the
    reader and restored afterwards. Ctrl+C still raises KeyboardInterrupt in
    the main thread. When stdin is not a terminal the reader does nothing.
    """

    def __init__(self, event_queue: Queue, stream: Optional[TextIO] = None, poll_interval: float = 0.1):
        self.event_queue = event_queue
        self.stream = stream if stream is not None else sys.stdin
        self.poll_interval = poll_interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._saved_attrs = None

    @property
    def enabled(self) -> bool:
        try:
            return self.stream.isatty()
        except (AttributeError, ValueError):
            return False

    def __enter__(self) -> KeyReader:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    def start(self):
        """Puts the terminal in cbreak mode and starts reading keys."""
        if not self.enabled:
            logging.info("stdin is not a terminal; key handling is disabled.")
            return
        if os.name != 'nt':
            try:
                fd = self.stream.fileno()
                self._saved_attrs = termios.tcgetattr(fd)
                tty.setcbreak(fd)
            except (termios.error, OSError) as e:
                raise DisplayError(f"Could not configure the terminal: {e}") from e
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._read_loop, name="key-reader", daemon=True)
        self._thread.start()

    def stop(self):
        """Stops reading and restores the terminal settings."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=self.poll_interval * 5)
            self._thread = None
        if self._saved_attrs is not None:
            try:
                termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved_attrs)
            except (termios.error, OSError) as e:
                logging.warning(f"Could not restore terminal settings: {e}")
            self._saved_attrs = None

    def _read_loop(self):
        while not self._stop_event.is_set():
            key = self._read_key()
            if key:
                self.event_queue.put(UserInput(key=key))

    def _read_key(self) -> Optional[str]:
        """Waits up to poll_interval for one key press."""
        if os.name == 'nt':
            if msvcrt.kbhit():
                return normalize_key(msvcrt.getwch())
            self._stop_event.wait(self.poll_interval)
            return None

        fd = self.stream.fileno()
        ready, _, _ = select.select([fd], [], [], self.poll_interval)
        if not ready:
            return None
        data = os.read(fd, 1)
        if not data:
            # EOF on stdin; nothing more will be typed.
            self._stop_event.set()
            return None
        return normalize_key(data.decode(errors='ignore'))
