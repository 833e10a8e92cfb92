"""Debugger process status."""

from __future__ import annotations

import threading
from collections.abc import Callable
from enum import IntEnum

from loguru import logger

from cmdflow.errors import StatusDecodeError

_NAMES = ("NotInit", "Error", "Building", "Ready", "Running", "Stopped", "Finished", "StatusN")


class DebugStatus(IntEnum):
    """Lifecycle state of the debugged process.

    ``STATUS_N`` is the number of real states and carries no meaning of its own.
    """

    NOT_INIT = 0
    ERROR = 1
    BUILDING = 2
    READY = 3
    RUNNING = 4
    STOPPED = 5
    FINISHED = 6
    STATUS_N = 7

    def __str__(self) -> str:
        return _NAMES[self.value]

    @classmethod
    def from_string(cls, text: str) -> DebugStatus:
        """Decode an exact, case-sensitive status name."""

        try:
            return cls(_NAMES.index(text))
        except ValueError:
            raise StatusDecodeError(f"String: {text} is not a valid option for type: Status") from None


def status_string(value: int) -> str:
    """Encode any integer, out of range values become ``Status(<n>)``."""

    if 0 <= value < len(_NAMES):
        return _NAMES[value]
    return f"Status({value})"


class StatusMonitor:
    """Holds the status reported by a debugger backend and notifies listeners."""

    def __init__(self) -> None:
        self._status = DebugStatus.NOT_INIT
        self._lock = threading.Lock()
        self._listeners: list[Callable[[DebugStatus], None]] = []

    @property
    def status(self) -> DebugStatus:
        with self._lock:
            return self._status

    def subscribe(self, listener: Callable[[DebugStatus], None]) -> None:
        self._listeners.append(listener)

    def update(self, status: DebugStatus) -> None:
        with self._lock:
            previous, self._status = self._status, status
        logger.debug("debug.status {} -> {}", previous, status)
        for listener in list(self._listeners):
            listener(status)
