"""Interactive prompt collection for command arguments."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

from loguru import logger

from cmdflow.binder import find_tokens
from cmdflow.errors import PromptCancelledError

if TYPE_CHECKING:
    from cmdflow.command import CommandDefinition

PROMPT_PREFIX = "PromptString"
PROMPT_STRING1 = "{PromptString1}"
PROMPT_STRING2 = "{PromptString2}"


def is_prompt_token(value: str) -> bool:
    return value.startswith("{" + PROMPT_PREFIX) and value.endswith("}")


def collect_prompts(args: Iterable[str]) -> set[str]:
    """Return the distinct prompt tokens referenced by ``args``."""

    found: set[str] = set()
    for arg in args:
        found.update(item for item in find_tokens(arg) if is_prompt_token(item))
    return found


class PromptRequester(Protocol):
    """Host collaborator that asks the user for one string value.

    Returning ``None`` means the user dismissed the prompt.
    """

    async def request(self, token: str, command: CommandDefinition) -> str | None: ...


class PromptCoordinator:
    """Collects prompt values before a run and keeps them for later runs."""

    def __init__(self, requester: PromptRequester | None = None) -> None:
        self._requester = requester
        self._values: dict[str, str] = {}
        self._suppress = False

    @property
    def values(self) -> dict[str, str]:
        """Prompt values keyed by bare variable name."""

        return {key[1:-1]: value for key, value in self._values.items()}

    def set_value(self, token: str, value: str) -> None:
        self._values[token] = value

    def suppress_next(self) -> None:
        """Skip prompting for the next run only, values were set out-of-band."""

        self._suppress = True

    def consume_suppression(self) -> bool:
        suppressed = self._suppress
        self._suppress = False
        return suppressed

    async def request_values(self, tokens: set[str], command: CommandDefinition) -> dict[str, str]:
        """Ask for every token; raise ``PromptCancelledError`` if any is dismissed."""

        if not tokens:
            return {}
        if self._requester is None:
            raise PromptCancelledError(sorted(tokens)[0])

        ordered = sorted(tokens)
        answers = await asyncio.gather(*(self._requester.request(item, command) for item in ordered))
        for item, answer in zip(ordered, answers, strict=True):
            if answer is None:
                logger.info("prompt.cancelled token={} command={}", item, command.name)
                raise PromptCancelledError(item)
        resolved = dict(zip(ordered, answers, strict=True))
        self._values.update(resolved)
        return resolved
