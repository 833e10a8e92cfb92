import pytest

from cmdflow.logging_utils import resolve_level


def test_explicit_level_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CMDFLOW_LOG_LEVEL", "debug")
    assert resolve_level("error") == "ERROR"


def test_level_falls_back_to_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CMDFLOW_LOG_LEVEL", "debug")
    assert resolve_level() == "DEBUG"


def test_default_level_is_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CMDFLOW_LOG_LEVEL", raising=False)
    assert resolve_level(None) == "INFO"
