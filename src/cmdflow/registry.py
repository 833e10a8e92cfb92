"""Standard and custom command registry."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from cmdflow.command import CommandDefinition
from cmdflow.config import Settings
from cmdflow.errors import CommandNotFoundError, PersistenceError
from cmdflow.standard import STANDARD_COMMANDS

VCS_SYSTEMS: tuple[str, ...] = ("Git", "SVN")

_COMMANDS_ADAPTER = TypeAdapter(list[CommandDefinition])


def merge_commands(
    standard: Iterable[CommandDefinition], custom: Iterable[CommandDefinition]
) -> list[CommandDefinition]:
    """Return the effective command list.

    Custom entries replace a standard entry of the same name in its position
    and are appended otherwise.  Inputs are not modified.
    """

    merged = [command.clone() for command in standard]
    index = {command.name: idx for idx, command in enumerate(merged)}
    for command in custom:
        copy = command.clone()
        idx = index.get(command.name)
        if idx is None:
            index[command.name] = len(merged)
            merged.append(copy)
        else:
            merged[idx] = copy
    return merged


def lang_command_names(commands: Iterable[CommandDefinition], langs: Iterable[str]) -> list[str]:
    active = set(langs)
    return [command.name for command in commands if command.lang_match(active)]


def vcs_command_names(names: Iterable[str], vcs: str, systems: Sequence[str] = VCS_SYSTEMS) -> list[str]:
    """Drop names that mention a version control system other than ``vcs``.

    Systems are matched as whole words, so ``Gitlab Deploy`` mentions none.
    """

    if not vcs:
        return list(names)
    others = [system for system in systems if system != vcs]
    kept: list[str] = []
    for name in names:
        words = set(name.split())
        if vcs in words or not any(other in words for other in others):
            kept.append(name)
    return kept


def filter_command_names(
    commands: Iterable[CommandDefinition],
    langs: Iterable[str],
    vcs: str,
    systems: Sequence[str] = VCS_SYSTEMS,
) -> list[str]:
    return vcs_command_names(lang_command_names(commands, langs), vcs, systems)


def load_commands(path: Path) -> list[CommandDefinition]:
    try:
        return _COMMANDS_ADAPTER.validate_json(path.read_bytes())
    except (OSError, ValidationError) as exc:
        logger.error("registry.load.error path={} error={}", path, exc)
        raise PersistenceError(f"could not load commands from {path}: {exc}") from exc


def save_commands(path: Path, commands: Sequence[CommandDefinition]) -> None:
    try:
        payload = json.dumps(_COMMANDS_ADAPTER.dump_python(list(commands), mode="json"), indent=2)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.error("registry.save.error path={} error={}", path, exc)
        raise PersistenceError(f"could not save commands to {path}: {exc}") from exc


class CommandRegistry:
    """Effective command set built from the standard and custom layers."""

    def __init__(
        self,
        standard: Iterable[CommandDefinition] = STANDARD_COMMANDS,
        custom: Iterable[CommandDefinition] = (),
        *,
        vcs_systems: Sequence[str] = VCS_SYSTEMS,
    ) -> None:
        self._standard = tuple(standard)
        self._custom = list(custom)
        self._vcs_systems = tuple(vcs_systems)
        self.custom_changed = False
        self._effective = merge_commands(self._standard, self._custom)

    @property
    def commands(self) -> list[CommandDefinition]:
        return list(self._effective)

    @property
    def custom(self) -> list[CommandDefinition]:
        return list(self._custom)

    def standard(self) -> tuple[CommandDefinition, ...]:
        return self._standard

    def names(self) -> list[str]:
        return [command.name for command in self._effective]

    def set_custom(self, custom: Iterable[CommandDefinition]) -> None:
        self._custom = list(custom)
        self.custom_changed = True
        self._remerge()

    def add_custom(self, command: CommandDefinition) -> None:
        self._custom = [item for item in self._custom if item.name != command.name]
        self._custom.append(command)
        self.custom_changed = True
        self._remerge()

    def _remerge(self) -> None:
        # Keep sinks attached to effective commands that survive the merge.
        sinks = {command.name: command.sink for command in self._effective if command.sink is not None}
        self._effective = merge_commands(self._standard, self._custom)
        for command in self._effective:
            command.attach_sink(sinks.get(command.name))

    def lookup(self, name: str) -> tuple[CommandDefinition, int]:
        for idx, command in enumerate(self._effective):
            if command.name == name:
                return command, idx
        logger.warning("registry.lookup.miss name={}", name)
        raise CommandNotFoundError(name)

    def get(self, name: str) -> CommandDefinition:
        return self.lookup(name)[0]

    def is_valid(self, name: str) -> bool:
        return any(command.name == name for command in self._effective)

    def filter_names(self, langs: Iterable[str], vcs: str = "") -> list[str]:
        return filter_command_names(self._effective, langs, vcs, self._vcs_systems)

    def load_json(self, path: Path) -> None:
        """Replace the custom layer with the commands stored at ``path``."""

        self._custom = load_commands(path)
        self.custom_changed = False
        self._remerge()
        logger.info("registry.load path={} custom={}", path, len(self._custom))

    def save_json(self, path: Path) -> None:
        save_commands(path, self._custom)
        self.custom_changed = False
        logger.info("registry.save path={} custom={}", path, len(self._custom))

    def load_prefs(self, settings: Settings) -> None:
        self.load_json(settings.commands_path)

    def save_prefs(self, settings: Settings) -> None:
        self.save_json(settings.commands_path)
