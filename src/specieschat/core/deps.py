"""Startup construction and FastAPI access for the chat orchestrator.

``build_chat_orchestrator`` runs once in the app lifespan and fails the
startup when no API key is configured. ``get_chat_orchestrator`` is the
per-request ``Depends`` factory that reads the result from ``app.state``.
"""

import logging

from fastapi import Request

from specieschat.configs.config import AppConfig

from .backend import CompletionBackend, OpenAIChatBackend
from .errors import MissingCredentialError
from .orchestrator import ChatOrchestrator

logger = logging.getLogger(__name__)


def build_chat_orchestrator(
    config: AppConfig, backend: CompletionBackend | None = None
) -> ChatOrchestrator:
    """Create the process-wide orchestrator.

    Raises:
        MissingCredentialError: no API key configured and no *backend*
            supplied.
    """
    if backend is None:
        if config.llm.api_key is None:
            raise MissingCredentialError(
                "Missing API key: set SPECIESCHAT_LLM__API_KEY "
                "(without quotes or trailing characters)"
            )
        backend = OpenAIChatBackend(config.llm)

    logger.info(
        "Chat orchestrator ready (model=%s, history budget=%d chars, "
        "max attempts=%d)",
        config.llm.model_name,
        config.chat.history_char_budget,
        config.chat.max_attempts,
    )
    return ChatOrchestrator(
        backend,
        model_name=config.llm.model_name,
        config=config.chat,
    )


def get_chat_orchestrator(request: Request) -> ChatOrchestrator:
    """FastAPI dependency — reads from ``app.state``."""
    return request.app.state.chat_orchestrator
