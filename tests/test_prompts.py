from dataclasses import dataclass, field

import pytest

from cmdflow.command import CommandDefinition, step
from cmdflow.errors import PromptCancelledError
from cmdflow.prompts import PROMPT_STRING1, PROMPT_STRING2, PromptCoordinator, collect_prompts


@dataclass
class FakeRequester:
    answers: dict[str, str | None]
    asked: list[str] = field(default_factory=list)

    async def request(self, token: str, command: CommandDefinition) -> str | None:
        self.asked.append(token)
        return self.answers.get(token)


def test_collect_prompts_returns_distinct_tokens() -> None:
    args = ["-m", "{PromptString1}", "{PromptString1} {PromptString2}", "{FilePath}"]
    assert collect_prompts(args) == {PROMPT_STRING1, PROMPT_STRING2}
    assert collect_prompts(["{FilePath}", r"\{PromptString1}"]) == set()


def test_command_prompts_span_all_steps() -> None:
    command = CommandDefinition(
        name="two",
        steps=[step("echo", "{PromptString1}"), step("echo", "{PromptString2}")],
    )
    assert command.prompts() == {PROMPT_STRING1, PROMPT_STRING2}


@pytest.mark.asyncio
async def test_request_values_asks_once_per_token_and_keeps_values() -> None:
    requester = FakeRequester({PROMPT_STRING1: "one", PROMPT_STRING2: "two"})
    coordinator = PromptCoordinator(requester)
    command = CommandDefinition(name="c", steps=[step("echo")])

    resolved = await coordinator.request_values({PROMPT_STRING1, PROMPT_STRING2}, command)

    assert resolved == {PROMPT_STRING1: "one", PROMPT_STRING2: "two"}
    assert sorted(requester.asked) == [PROMPT_STRING1, PROMPT_STRING2]
    assert coordinator.values == {"PromptString1": "one", "PromptString2": "two"}


@pytest.mark.asyncio
async def test_cancelled_prompt_raises_and_stores_nothing() -> None:
    coordinator = PromptCoordinator(FakeRequester({PROMPT_STRING1: "one", PROMPT_STRING2: None}))
    command = CommandDefinition(name="c", steps=[step("echo")])

    with pytest.raises(PromptCancelledError) as exc_info:
        await coordinator.request_values({PROMPT_STRING1, PROMPT_STRING2}, command)

    assert exc_info.value.token == PROMPT_STRING2
    assert coordinator.values == {}


def test_suppression_is_consumed_once() -> None:
    coordinator = PromptCoordinator()
    coordinator.suppress_next()
    assert coordinator.consume_suppression() is True
    assert coordinator.consume_suppression() is False
