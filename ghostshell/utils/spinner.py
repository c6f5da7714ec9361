"""Animated status line shown while a network call is in flight."""
from __future__ import annotations

import threading

from yaspin import yaspin
from yaspin.spinners import Spinners

from .ansi import console

# Only one indicator may draw on the terminal at a time.
_ACTIVE = threading.Lock()


class Spinner:
    """Render *message* with a braille spinner on a background thread.

    ``stop`` signals the spinner thread, joins it and blanks the line, so
    anything printed afterwards never interleaves with a spinner frame.
    """

    def __init__(self, message: str, color: str = "cyan"):
        self._message = message
        self._spinner = yaspin(Spinners.dots, text=message, color=color)
        self._started = False

    @property
    def running(self) -> bool:
        return self._started

    def start(self) -> None:
        if self._started:
            return
        if not _ACTIVE.acquire(blocking=False):
            raise RuntimeError("another progress indicator is already running")
        console.file.flush()
        self._spinner.start()
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        try:
            self._spinner.stop()
        finally:
            self._started = False
            _ACTIVE.release()

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
