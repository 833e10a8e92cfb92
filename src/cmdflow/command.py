"""Command definitions and their process steps."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from cmdflow.binder import bind, bind_all
from cmdflow.prompts import collect_prompts
from cmdflow.sink import OutputSink


@dataclass(frozen=True)
class BoundStep:
    """A process step with every resolvable placeholder substituted."""

    executable: str
    args: tuple[str, ...]

    def command_line(self) -> str:
        if not self.args:
            return self.executable
        return f"{self.executable} {' '.join(self.args)}"


class ProcessStep(BaseModel):
    """One external program invocation.

    ``executable`` must be on the path or be a full path; ``{RunExec}`` refers
    to the project's run executable.  Each argument is one string and may use
    placeholders such as ``{FilePath}``.
    """

    model_config = ConfigDict(frozen=True)

    executable: str
    args: tuple[str, ...] = ()

    def prompts(self) -> set[str]:
        return collect_prompts(self.args)

    def bind(self, variables: Mapping[str, str], *, sep: str = os.sep) -> BoundStep:
        return BoundStep(
            executable=bind(self.executable, variables, sep=sep),
            args=tuple(bind_all(self.args, variables, sep=sep)),
        )


class CommandDefinition(BaseModel):
    """A named sequence of process steps run in a working directory.

    ``langs`` limits where the command is offered, empty means every language.
    ``wait`` runs the step synchronously; sequences of more than one step always
    wait for each prior step.
    """

    name: str
    description: str = ""
    langs: list[str] = Field(default_factory=list)
    steps: list[ProcessStep] = Field(default_factory=list)
    working_dir: str = ""
    wait: bool = False

    _sink: OutputSink | None = PrivateAttr(default=None)

    @property
    def sink(self) -> OutputSink | None:
        return self._sink

    @property
    def waits(self) -> bool:
        return self.wait or len(self.steps) > 1

    @property
    def runnable(self) -> bool:
        return bool(self.steps)

    def make_sink(self, factory: Callable[[str], OutputSink], *, clear: bool = False) -> bool:
        """Attach an output sink, returning True when a new one was created.

        An existing sink is kept and, if ``clear`` is set, emptied.
        """

        if self._sink is not None:
            if clear:
                self._sink.clear()
            return False
        self._sink = factory(f"{self.name}-buf")
        return True

    def attach_sink(self, sink: OutputSink | None) -> None:
        self._sink = sink

    def reset_sink(self) -> None:
        self._sink = None

    def clone(self) -> CommandDefinition:
        """Return an independent copy without an attached sink."""

        return type(self).model_validate(self.model_dump())

    def prompts(self) -> set[str]:
        found: set[str] = set()
        for step in self.steps:
            found |= step.prompts()
        return found

    def lang_match(self, langs: list[str] | set[str]) -> bool:
        """Return True if the command applies to any of ``langs``."""

        if not self.langs:
            return True
        return any(lang in langs for lang in self.langs)


def step(executable: str, *args: str) -> ProcessStep:
    return ProcessStep(executable=executable, args=args)
