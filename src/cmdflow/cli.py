"""Command-line front end for cmdflow."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from prompt_toolkit import PromptSession
from rich.console import Console
from rich.markup import escape

from cmdflow.binder import ProjectContext
from cmdflow.command import CommandDefinition
from cmdflow.config import Settings, load_settings
from cmdflow.errors import CommandNotFoundError, PersistenceError
from cmdflow.executor import CommandExecutor
from cmdflow.logging_utils import configure_logging
from cmdflow.prompts import PromptCoordinator
from cmdflow.registry import CommandRegistry
from cmdflow.sink import ConsoleSink

app = typer.Typer(
    name="cmdflow",
    help="Run named build, format, test and version control commands.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


class TerminalPrompter:
    """Asks for prompt values on the terminal."""

    def __init__(self) -> None:
        self._session: PromptSession[str] | None = None
        self._lock = asyncio.Lock()

    async def request(self, token: str, command: CommandDefinition) -> str | None:
        async with self._lock:
            console.print(f"[bold]{token}[/bold] Enter string value for executing command: {escape(command.name)}")
            if self._session is None:
                self._session = PromptSession()
            try:
                return await self._session.prompt_async("> ")
            except (KeyboardInterrupt, EOFError):
                return None


def _build_registry(settings: Settings) -> CommandRegistry:
    registry = CommandRegistry(vcs_systems=settings.vcs_systems)
    if settings.commands_path.exists():
        try:
            registry.load_prefs(settings)
        except PersistenceError as exc:
            console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return registry


def _parse_prompts(values: list[str]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep:
            raise typer.BadParameter(f"expected TOKEN=VALUE, got {item!r}", param_hint="--prompt")
        key = key.strip()
        if not key.startswith("{"):
            key = "{" + key + "}"
        parsed[key] = value
    return parsed


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Log level, defaults to CMDFLOW_LOG_LEVEL"),
) -> None:
    configure_logging(profile="cli", level=log_level)


@app.command("list")
def list_commands(
    lang: list[str] = typer.Option([], "--lang", "-l", help="Active language, repeatable"),  # noqa: B008
    vcs: str = typer.Option("", "--vcs", help="Active version control system"),
    all_langs: bool = typer.Option(False, "--all", help="Ignore language filtering"),
) -> None:
    """Show the commands available for the given languages and VCS."""

    registry = _build_registry(load_settings())
    if all_langs:
        names = registry.names()
    else:
        names = registry.filter_names(lang, vcs)
    for name in names:
        typer.echo(name)


@app.command("show")
def show(name: str = typer.Argument(..., help="Command name")) -> None:
    """Print one command definition as JSON."""

    registry = _build_registry(load_settings())
    try:
        command = registry.get(name)
    except CommandNotFoundError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(2) from None
    typer.echo(json.dumps(command.model_dump(mode="json"), indent=2))


@app.command("std")
def std() -> None:
    """Show the standard commands compiled into the program."""

    registry = CommandRegistry()
    for command in registry.standard():
        console.print(f"[cyan]{command.name}[/cyan]: {command.description}", highlight=False)


@app.command("run")
def run(
    name: str = typer.Argument(..., help="Command name"),
    project: Path | None = typer.Option(None, "--project", "-p", help="Project root"),  # noqa: B008
    file: Path | None = typer.Option(None, "--file", "-f", help="Current file"),  # noqa: B008
    build_dir: Path | None = typer.Option(None, "--build-dir", help="Project build directory"),  # noqa: B008
    run_exec: Path | None = typer.Option(None, "--run-exec", help="Project run executable"),  # noqa: B008
    prompt: list[str] = typer.Option([], "--prompt", help="Prompt value as TOKEN=VALUE"),  # noqa: B008
) -> None:
    """Run a command with output streamed to the terminal."""

    project_path = (project or Path.cwd()).resolve()
    settings = load_settings(project_path)
    registry = _build_registry(settings)
    try:
        command = registry.get(name)
    except CommandNotFoundError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(2) from None

    context = ProjectContext(
        project_path=project_path,
        file_path=file.resolve() if file else None,
        build_dir=build_dir.resolve() if build_dir else None,
        run_exec=run_exec.resolve() if run_exec else None,
    )
    coordinator = PromptCoordinator(TerminalPrompter())
    preset = _parse_prompts(prompt)
    for token, value in preset.items():
        coordinator.set_value(token, value)
    if preset and command.prompts() <= set(preset):
        coordinator.suppress_next()

    command.make_sink(lambda _name: ConsoleSink(console), clear=True)
    executor = CommandExecutor(
        context,
        coordinator,
        status=lambda text: console.print(f"[dim]{escape(text)}[/dim]", highlight=False, soft_wrap=True),
        status_output_len=settings.status_output_len,
    )

    async def _run() -> bool:
        record = await executor.run(command)
        if record.cancelled:
            console.print("[yellow]cancelled[/yellow]")
            return False
        return await record.wait()

    if not asyncio.run(_run()):
        raise typer.Exit(1)
