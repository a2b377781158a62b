# takeplan/core/cancel.py
from __future__ import annotations
import signal
import threading
from contextlib import contextmanager
from typing import Iterator

from loguru import logger


class CancellationToken:
    """Cooperative stop flag; the runner polls it between steps only."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@contextmanager
def cancel_on_sigint(token: CancellationToken) -> Iterator[CancellationToken]:
    """Route Ctrl-C into `token` for the duration of the block."""
    def _handler(signum, frame):
        logger.warning("Interrupt received; stopping after the current step")
        token.cancel()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)
