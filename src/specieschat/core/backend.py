"""Completion backends consumed by the chat orchestrator."""

import logging
from collections.abc import Sequence
from typing import Protocol

import openai

from specieschat.configs.system import LLMConfig

logger = logging.getLogger(__name__)


class CompletionBackend(Protocol):
    """Anything that can turn an ordered message list into text.

    Implementations raise their native errors unchanged; the orchestrator
    classifies them with ``classify_error``.
    """

    async def complete(
        self,
        model: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None: ...


class OpenAIChatBackend:
    """OpenAI chat-completions backend.

    SDK-level retries are disabled: the orchestrator owns the retry
    policy and needs to see every rate-limit response.
    """

    def __init__(self, config: LLMConfig) -> None:
        if config.api_key is None:
            raise ValueError("OpenAIChatBackend requires an API key")
        self._openai = openai.AsyncOpenAI(
            base_url=config.endpoint,
            api_key=config.api_key.get_secret_value(),
            timeout=config.timeout.total_seconds(),
            max_retries=0,
        )

    async def complete(
        self,
        model: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        logger.debug(
            "Requesting completion from %s for %d message(s)", model, len(messages)
        )
        completion = await self._openai.chat.completions.create(
            model=model,
            messages=list(messages),
            max_tokens=max_tokens,
            temperature=temperature,
        )
        if not completion.choices:
            return None
        return completion.choices[0].message.content

    async def aclose(self) -> None:
        await self._openai.close()
