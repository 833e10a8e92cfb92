"""Run command definitions as external processes."""

from __future__ import annotations

import asyncio
import contextlib
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path

from loguru import logger

from cmdflow.binder import ProjectContext, bind
from cmdflow.command import BoundStep, CommandDefinition, ProcessStep
from cmdflow.errors import PromptCancelledError
from cmdflow.markup import OutputAnnotator
from cmdflow.prompts import PromptCoordinator
from cmdflow.sink import OutputSink, StatusSetter

DEFAULT_STATUS_OUTPUT_LEN = 80
READ_CHUNK_SIZE = 64 * 1024
TIME_FORMAT = "%a %b %d %H:%M:%S %Z %Y"


class RunState(StrEnum):
    IDLE = "idle"
    PROMPTING = "prompting"
    CHANGING_DIR = "changing_dir"
    RUNNING_STEPS = "running_steps"
    RESTORING_DIR = "restoring_dir"
    DONE = "done"
    ABORTED = "aborted"


class StepOutcome(StrEnum):
    SUCCESSFUL = "successful"
    FAILED = "failed"
    EXEC_ERROR = "exec error"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one process step."""

    command: str
    outcome: StepOutcome
    output: str = ""
    returncode: int | None = None
    error: str = ""
    finished_at: datetime = field(default_factory=lambda: datetime.now().astimezone())

    @property
    def ok(self) -> bool:
        return self.outcome is StepOutcome.SUCCESSFUL

    def status_line(self) -> str:
        line = f"{self.command} {self.outcome.value} at: {self.finished_at.strftime(TIME_FORMAT)}"
        if self.error:
            line += f" with error: {self.error}"
        return line


@dataclass
class CommandRun:
    """State and results of one run of a command."""

    name: str
    state: RunState = RunState.IDLE
    cwd: str = ""
    results: list[StepResult] = field(default_factory=list)
    cancelled: bool = False
    background: asyncio.Task[StepResult] | None = None

    @property
    def finished(self) -> bool:
        if self.state is RunState.ABORTED:
            return True
        if self.background is not None:
            return self.background.done()
        return self.state is RunState.DONE

    @property
    def success(self) -> bool | None:
        """Conjunction of step results, ``None`` while a background step runs."""

        if not self.finished:
            return None
        return bool(self.results) and all(result.ok for result in self.results)

    async def wait(self) -> bool:
        """Wait for a background step; a step that raised counts as unsuccessful."""

        if self.background is not None:
            await asyncio.wait({self.background})
        return bool(self.success)


class CommandExecutor:
    """Resolves, runs, and reports command definitions.

    Every run gets its own working directory, passed to the spawned process,
    so concurrent runs never share mutable directory state.
    """

    def __init__(
        self,
        context: ProjectContext | Callable[[], ProjectContext],
        prompts: PromptCoordinator | None = None,
        *,
        status: StatusSetter | None = None,
        status_output_len: int = DEFAULT_STATUS_OUTPUT_LEN,
    ) -> None:
        self._context = context
        self.prompts = prompts or PromptCoordinator()
        self._status = status
        self._status_output_len = status_output_len
        self._background: set[asyncio.Task[StepResult]] = set()

    def context(self) -> ProjectContext:
        if isinstance(self._context, ProjectContext):
            return self._context
        return self._context()

    async def run(self, command: CommandDefinition) -> CommandRun:
        """Run ``command`` and return its run record.

        A waiting command returns once all steps have finished or one failed.
        A single non-waiting step returns right after launch with the step in
        ``CommandRun.background``.
        """

        run = CommandRun(name=command.name)
        with logger.contextualize(command=command.name):
            tokens = command.prompts()
            suppressed = self.prompts.consume_suppression()
            if tokens and not suppressed:
                run.state = RunState.PROMPTING
                try:
                    await self.prompts.request_values(tokens, command)
                except PromptCancelledError as exc:
                    logger.info("command.run.aborted name={} token={}", command.name, exc.token)
                    run.state = RunState.ABORTED
                    run.cancelled = True
                    return run

            variables = self.context().variables() | self.prompts.values
            sink = command.sink
            run.state = RunState.CHANGING_DIR
            run.cwd = self._resolve_dir(command, variables, sink)

            run.state = RunState.RUNNING_STEPS
            annotate = OutputAnnotator(variables.get("FileDirPath") or variables.get("ProjPath", ""))
            logger.info("command.run.start name={} steps={} wait={}", command.name, len(command.steps), command.waits)
            if command.waits:
                for process_step in command.steps:
                    result = await self._run_step(process_step, variables, run.cwd, sink, annotate, stream=False)
                    run.results.append(result)
                    if not result.ok:
                        break
            elif command.steps:
                run.background = self._launch(run, command.steps[0], variables, sink, annotate)

            # Nothing to undo: the directory only reached the spawned process.
            run.state = RunState.RESTORING_DIR
            logger.debug("command.dir.restore name={} root={}", command.name, variables.get("ProjPath", ""))
            run.state = RunState.DONE
            if run.background is None:
                logger.info("command.run.end name={} success={}", command.name, run.success)
        return run

    def _launch(
        self,
        run: CommandRun,
        process_step: ProcessStep,
        variables: dict[str, str],
        sink: OutputSink | None,
        annotate: OutputAnnotator,
    ) -> asyncio.Task[StepResult]:
        task = asyncio.create_task(
            self._run_step(process_step, variables, run.cwd, sink, annotate, stream=sink is not None),
            name=f"cmdflow:{run.name}",
        )
        self._background.add(task)

        def _done(finished: asyncio.Task[StepResult]) -> None:
            self._background.discard(finished)
            if finished.cancelled():
                return
            exc = finished.exception()
            if exc is not None:
                logger.opt(exception=exc).error("command.run.error name={}", run.name)
                return
            run.results.append(finished.result())
            logger.info("command.run.end name={} success={}", run.name, run.success)

        task.add_done_callback(_done)
        return task

    def _resolve_dir(self, command: CommandDefinition, variables: dict[str, str], sink: OutputSink | None) -> str:
        root = variables.get("ProjPath") or os.getcwd()
        if not command.working_dir:
            return root
        resolved = bind(command.working_dir, variables)
        if sink is not None:
            sink.append_line(f"cd {resolved} (from: {command.working_dir})")
        if Path(resolved).is_dir():
            return resolved
        message = f"Could not change to directory {resolved} -- error: not a directory"
        logger.warning("command.dir.error name={} dir={}", command.name, resolved)
        if sink is not None:
            sink.append_line(message)
        return root

    async def _run_step(
        self,
        process_step: ProcessStep,
        variables: dict[str, str],
        cwd: str,
        sink: OutputSink | None,
        annotate: OutputAnnotator,
        *,
        stream: bool,
    ) -> StepResult:
        bound = process_step.bind(variables)
        cmdstr = bound.command_line()
        logger.debug("command.step.start cmd={} cwd={}", cmdstr, cwd)
        try:
            process = await self._spawn(bound, cwd)
        except OSError as exc:
            logger.warning("command.step.spawn_error cmd={} error={}", cmdstr, exc)
            result = StepResult(command=cmdstr, outcome=StepOutcome.EXEC_ERROR, error=str(exc))
            self._report(result, sink, annotate)
            return result

        try:
            if stream and sink is not None:
                output = await self._stream(process, sink, annotate)
            else:
                raw, _ = await process.communicate()
                output = raw.decode("utf-8", errors="replace")
                if sink is not None:
                    for line in output.splitlines():
                        sink.append_line(annotate(line))
        except Exception:
            if process.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
            await process.wait()
            raise
        returncode = await process.wait()

        if returncode == 0:
            result = StepResult(command=cmdstr, outcome=StepOutcome.SUCCESSFUL, output=output, returncode=0)
        else:
            result = StepResult(
                command=cmdstr,
                outcome=StepOutcome.FAILED,
                output=output,
                returncode=returncode,
                error=f"exit status {returncode}",
            )
        logger.debug("command.step.end cmd={} outcome={}", cmdstr, result.outcome.value)
        self._report(result, sink, annotate)
        return result

    @staticmethod
    async def _spawn(bound: BoundStep, cwd: str) -> asyncio.subprocess.Process:
        return await asyncio.create_subprocess_exec(
            bound.executable,
            *bound.args,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )

    @staticmethod
    async def _stream(process: asyncio.subprocess.Process, sink: OutputSink, annotate: OutputAnnotator) -> str:
        assert process.stdout is not None
        lines: list[str] = []

        def emit(raw: bytes) -> None:
            line = raw.decode("utf-8", errors="replace").rstrip("\r")
            lines.append(line)
            sink.append_line(annotate(line))

        # Chunked reads: StreamReader line iteration rejects lines over its buffer limit.
        pending = b""
        while chunk := await process.stdout.read(READ_CHUNK_SIZE):
            *complete, pending = (pending + chunk).split(b"\n")
            for raw in complete:
                emit(raw)
        if pending:
            emit(pending)
        return "\n".join(lines)

    def _report(self, result: StepResult, sink: OutputSink | None, annotate: OutputAnnotator) -> None:
        if sink is not None:
            sink.append_line("")
            sink.append_line(annotate(result.status_line()))
            sink.refresh()
        if self._status is not None:
            head = " ".join(result.output[: self._status_output_len].split())
            self._status(f"{result.command} {head}".rstrip())
