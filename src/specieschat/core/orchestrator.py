"""Chat orchestrator: guardrail, history budget, retried completion.

``ChatOrchestrator.respond`` always resolves to a string. Refusals,
credential problems, exhausted quota and every other backend failure are
turned into fixed user-facing text here, so the HTTP layer can return
the result as-is. Only ``asyncio.CancelledError`` escapes.

Flow::

    guardrail ──off-topic──▶ REFUSAL_MESSAGE
        │
    clamp history
        │
    attempt n ──ok──▶ reply
        ├─ auth / quota ──▶ fixed diagnostic
        ├─ rate limited ──▶ sleep(backoff × (n + 1)) ──▶ attempt n + 1
        ├─ empty reply ──▶ attempt n + 1
        └─ other / attempts exhausted ──▶ GENERIC_FAILURE_MESSAGE
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence

from specieschat.configs.system import ChatConfig

from .backend import CompletionBackend
from .errors import EmptyResponseError, ErrorKind, classify_error
from .guardrail import REFUSAL_MESSAGE, is_off_topic
from .history import clamp_history
from .metrics import (
    CHAT_RESPONSE_DURATION_SECONDS,
    CHAT_RESPONSES_TOTAL,
    LLM_ATTEMPTS_TOTAL,
    LLM_BACKOFF_SECONDS_TOTAL,
    LLM_HISTORY_TURNS_DROPPED,
)
from .models import ChatTurn, CompletionRequest
from .prompt import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

AUTH_FAILURE_MESSAGE = (
    "API key looks invalid. Double-check the configured API key "
    "(no quotes, no trailing characters) and restart the server."
)
QUOTA_FAILURE_MESSAGE = (
    "Your OpenAI account is out of credit. "
    "Add billing or prepaid credits and try again."
)
GENERIC_FAILURE_MESSAGE = (
    "I'm having trouble right now. Please try again in a moment."
)

OUTCOME_REFUSED = "refused"
OUTCOME_SUCCESS = "success"

_FATAL_MESSAGES = {
    ErrorKind.AUTH: AUTH_FAILURE_MESSAGE,
    ErrorKind.QUOTA: QUOTA_FAILURE_MESSAGE,
}

SleepFn = Callable[[float], Awaitable[None]]


class ChatOrchestrator:
    """Stateless request transformer around a completion backend.

    Holds only read-only configuration, so one instance serves any
    number of concurrent requests.
    """

    def __init__(
        self,
        backend: CompletionBackend,
        *,
        model_name: str,
        config: ChatConfig | None = None,
        system_prompt: str = SYSTEM_PROMPT,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._backend = backend
        self._model_name = model_name
        self._config = config or ChatConfig()
        self._system_prompt = system_prompt
        self._sleep = sleep

    @property
    def backend(self) -> CompletionBackend:
        return self._backend

    @property
    def model_name(self) -> str:
        return self._model_name

    def build_request(
        self, message: str, history: Sequence[ChatTurn | dict] = ()
    ) -> CompletionRequest:
        """Assemble the prompt for *message* with budget-clamped *history*.

        Turns may be given as ``{"role", "content"}`` mappings; they are
        validated into ``ChatTurn`` first, so a malformed turn raises
        ``pydantic.ValidationError``.
        """
        turns = [
            t if isinstance(t, ChatTurn) else ChatTurn.model_validate(t)
            for t in history
        ]
        clipped = clamp_history(turns, self._config.history_char_budget)
        LLM_HISTORY_TURNS_DROPPED.observe(len(turns) - len(clipped))
        return CompletionRequest.build(
            system_prompt=self._system_prompt,
            history=clipped,
            message=message,
            model=self._model_name,
            max_tokens=self._config.max_tokens,
            temperature=self._config.temperature,
        )

    async def respond(
        self, message: str, history: Sequence[ChatTurn | dict] = ()
    ) -> str:
        """Answer *message* given prior *history*.

        Never raises except on cancellation. A history that cannot be
        turned into a prompt gets the generic failure text.
        """
        start = time.monotonic()
        try:
            reply, outcome = await self._respond(message, history)
        finally:
            CHAT_RESPONSE_DURATION_SECONDS.observe(time.monotonic() - start)
        CHAT_RESPONSES_TOTAL.labels(outcome=outcome).inc()
        return reply

    async def _respond(
        self, message: str, history: Sequence[ChatTurn | dict]
    ) -> tuple[str, str]:
        if is_off_topic(message):
            logger.info("Refused off-topic message")
            return REFUSAL_MESSAGE, OUTCOME_REFUSED

        try:
            request = self.build_request(message, history)
        except Exception:
            logger.exception("Could not build completion request")
            return GENERIC_FAILURE_MESSAGE, ErrorKind.GENERIC.value

        max_attempts = self._config.max_attempts

        for attempt in range(max_attempts):
            try:
                return await self._attempt(request), OUTCOME_SUCCESS
            except Exception as exc:
                kind = classify_error(exc)
                LLM_ATTEMPTS_TOTAL.labels(
                    model_name=self._model_name, result=kind.value
                ).inc()

                if kind in _FATAL_MESSAGES:
                    logger.error(
                        "Completion backend rejected the request (%s): %s",
                        kind.value,
                        exc,
                    )
                    return _FATAL_MESSAGES[kind], kind.value

                is_last = attempt >= max_attempts - 1
                if kind.retryable and not is_last:
                    logger.warning(
                        "Completion attempt %d/%d failed (%s), retrying",
                        attempt + 1,
                        max_attempts,
                        kind.value,
                    )
                    if kind is ErrorKind.RATE_LIMIT:
                        await self._backoff(attempt)
                    continue

                logger.error(
                    "Completion failed after %d attempt(s) (%s)",
                    attempt + 1,
                    kind.value,
                    exc_info=exc,
                )
                return GENERIC_FAILURE_MESSAGE, ErrorKind.GENERIC.value

        # Only reachable with max_attempts == 0, which config forbids.
        return GENERIC_FAILURE_MESSAGE, ErrorKind.GENERIC.value

    async def _attempt(self, request: CompletionRequest) -> str:
        raw = await self._backend.complete(
            request.model,
            request.messages,
            request.max_tokens,
            request.temperature,
        )
        response = (raw or "").strip()
        if not response:
            raise EmptyResponseError("No response generated")
        LLM_ATTEMPTS_TOTAL.labels(model_name=self._model_name, result="ok").inc()
        return response

    async def _backoff(self, attempt: int) -> None:
        delay = self._config.backoff_base * (attempt + 1)
        seconds = delay.total_seconds()
        LLM_BACKOFF_SECONDS_TOTAL.inc(seconds)
        await self._sleep(seconds)

