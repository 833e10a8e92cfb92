"""Output sinks that receive command output lines."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol, TypeAlias

from rich.console import Console

StatusSetter: TypeAlias = Callable[[str], None]


class OutputSink(Protocol):
    """Line-oriented display collaborator for one command."""

    def append_line(self, line: str) -> None: ...

    def clear(self) -> None: ...

    def refresh(self) -> None: ...


class BufferSink:
    """In-memory sink, safe to append to from a background task."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.refreshes = 0
        self._lock = threading.Lock()
        self._lines: list[str] = []

    def append_line(self, line: str) -> None:
        with self._lock:
            self._lines.append(line)

    def clear(self) -> None:
        with self._lock:
            self._lines = []

    def refresh(self) -> None:
        with self._lock:
            self.refreshes += 1

    @property
    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def text(self) -> str:
        return "\n".join(self.lines)


class ConsoleSink:
    """Sink printing each line to a rich console as it arrives."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._print_lock = threading.Lock()

    def append_line(self, line: str) -> None:
        with self._print_lock:
            self.console.out(line, highlight=False)

    def clear(self) -> None:
        return None

    def refresh(self) -> None:
        return None
