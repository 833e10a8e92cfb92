from pathlib import Path

import pytest

from cmdflow.command import CommandDefinition, step
from cmdflow.config import Settings
from cmdflow.errors import CommandNotFoundError, PersistenceError
from cmdflow.registry import (
    CommandRegistry,
    filter_command_names,
    load_commands,
    merge_commands,
    vcs_command_names,
)
from cmdflow.sink import BufferSink
from cmdflow.standard import STANDARD_COMMANDS


def _cmd(name: str, description: str = "", langs: list[str] | None = None) -> CommandDefinition:
    return CommandDefinition(name=name, description=description, langs=langs or [], steps=[step("true")])


def test_merge_replaces_in_place_and_appends() -> None:
    standard = [_cmd("X"), _cmd("Y", "builtin")]
    custom = [_cmd("Y", "override"), _cmd("Z")]

    merged = merge_commands(standard, custom)

    assert [command.name for command in merged] == ["X", "Y", "Z"]
    assert merged[1].description == "override"
    assert standard[1].description == "builtin"
    assert merged[0] is not standard[0]


def test_vcs_filter_keeps_active_and_neutral_commands() -> None:
    names = ["Commit Git", "Commit SVN", "List Dir"]
    assert vcs_command_names(names, "Git") == ["Commit Git", "List Dir"]
    assert vcs_command_names(names, "SVN") == ["Commit SVN", "List Dir"]
    assert vcs_command_names(names, "") == names


def test_vcs_names_match_whole_words() -> None:
    assert vcs_command_names(["Gitlab Deploy", "SVNSync"], "Git") == ["Gitlab Deploy", "SVNSync"]


def test_language_filter_then_vcs_filter() -> None:
    commands = [_cmd("Build Go", langs=["Go"]), _cmd("Commit Git"), _cmd("Commit SVN"), _cmd("LaTeX", langs=["LaTeX"])]
    assert filter_command_names(commands, ["Go"], "Git") == ["Build Go", "Commit Git"]
    assert filter_command_names(commands, [], "") == ["Commit Git", "Commit SVN"]


def test_standard_set_filtering() -> None:
    registry = CommandRegistry()
    names = registry.filter_names(["Go"], "Git")
    assert "Fmt Go File" in names
    assert "Commit Git" in names
    assert "Commit SVN" not in names
    assert "LaTeX PDF File" not in names
    assert names[0] == "Run Proj"


def test_lookup_miss_raises() -> None:
    registry = CommandRegistry([_cmd("A")])
    assert registry.lookup("A")[1] == 0
    assert registry.is_valid("A") is True
    assert registry.is_valid("B") is False
    with pytest.raises(CommandNotFoundError) as exc_info:
        registry.get("B")
    assert isinstance(exc_info.value, KeyError)
    assert str(exc_info.value) == "command named: B not found"


def test_custom_layer_overrides_and_tracks_changes() -> None:
    registry = CommandRegistry([_cmd("A", "std"), _cmd("B")])
    registry.add_custom(_cmd("A", "mine"))
    assert registry.custom_changed is True
    assert registry.get("A").description == "mine"
    assert registry.names() == ["A", "B"]
    assert registry.standard()[0].description == "std"


def test_sinks_survive_a_remerge() -> None:
    registry = CommandRegistry([_cmd("A"), _cmd("B")])
    registry.get("A").make_sink(BufferSink)
    sink = registry.get("A").sink

    registry.add_custom(_cmd("C"))

    assert registry.get("A").sink is sink
    assert registry.get("C").sink is None


def test_save_then_load_custom_layer(tmp_path: Path) -> None:
    path = tmp_path / "prefs" / "commands.json"
    registry = CommandRegistry([_cmd("A")])
    registry.set_custom([CommandDefinition(name="Z", langs=["Go"], steps=[step("go", "vet")], working_dir="{FileDirPath}", wait=True)])
    registry.save_json(path)
    assert registry.custom_changed is False

    other = CommandRegistry([_cmd("A")])
    other.load_json(path)

    loaded = other.get("Z")
    assert loaded.steps[0].args == ("vet",)
    assert loaded.working_dir == "{FileDirPath}"
    assert loaded.wait is True
    assert other.names() == ["A", "Z"]


def test_malformed_document_leaves_state_untouched(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('[{"name": "broken", "steps": "nope"}]', encoding="utf-8")
    registry = CommandRegistry([_cmd("A")], [_cmd("Mine")])

    with pytest.raises(PersistenceError):
        registry.load_json(path)
    with pytest.raises(PersistenceError):
        load_commands(tmp_path / "missing.json")

    assert registry.names() == ["A", "Mine"]


def test_prefs_use_settings_path(tmp_path: Path) -> None:
    settings = Settings(prefs_dir=tmp_path)
    registry = CommandRegistry(STANDARD_COMMANDS, [_cmd("Deploy")])
    registry.save_prefs(settings)
    assert (tmp_path / "command_prefs.json").exists()

    fresh = CommandRegistry()
    fresh.load_prefs(settings)
    assert fresh.names()[-1] == "Deploy"
