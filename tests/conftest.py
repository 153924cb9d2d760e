"""Shared fixtures: a scripted completion backend, a recording sleep and
logger-state restoration for tests that install the app's logging."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

import pytest

_TOUCHED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx", "httpcore", "openai")


class BackendError(Exception):
    """Stand-in for an SDK error carrying ``code`` / ``status`` fields."""

    def __init__(
        self, message: str = "backend error", *, code: str | None = None, status: int | None = None
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status = status


class ScriptedBackend:
    """Completion backend that replays a fixed script of outcomes.

    Each call consumes the next outcome; the last one repeats forever.
    Exceptions are raised, anything else is returned as the completion.
    """

    def __init__(self, *outcomes: Any) -> None:
        assert outcomes, "script needs at least one outcome"
        self._outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        model: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        self.calls.append(
            {
                "model": model,
                "messages": list(messages),
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        index = min(len(self.calls) - 1, len(self._outcomes) - 1)
        outcome = self._outcomes[index]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def make_backend() -> Callable[..., ScriptedBackend]:
    return ScriptedBackend


@pytest.fixture
def backend_error() -> type[BackendError]:
    return BackendError


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def fake_sleep(sleeps: list[float]):
    """Instant replacement for ``asyncio.sleep`` that records delays."""

    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return _sleep


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo ``setup_logging`` calls made by a test or an app lifespan."""
    root = logging.getLogger()
    root_handlers, root_level = list(root.handlers), root.level
    saved = {}
    for name in _TOUCHED_LOGGERS:
        log = logging.getLogger(name)
        saved[name] = (list(log.handlers), log.level, log.propagate)
    yield
    root.handlers = root_handlers
    root.setLevel(root_level)
    for name, (handlers, level, propagate) in saved.items():
        log = logging.getLogger(name)
        log.handlers = handlers
        log.setLevel(level)
        log.propagate = propagate
