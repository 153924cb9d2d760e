"""Chat API endpoint implementation."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from specieschat.core.deps import get_chat_orchestrator
from specieschat.core.orchestrator import ChatOrchestrator

from .models import (
    EMPTY_MESSAGE_ERROR,
    INTERNAL_ERROR,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def chat(
    chat_request: ChatRequest,
    orchestrator: Annotated[ChatOrchestrator, Depends(get_chat_orchestrator)],
):
    """
    Answer a species question.

    Every recoverable problem (off-topic question, invalid credential,
    exhausted quota, throttling, backend outage) comes back as a 200 with
    explanatory text in ``response``. Only malformed bodies (400) and
    unexpected failures (502) use error statuses.
    """
    message = chat_request.message.strip()
    if not message:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error=EMPTY_MESSAGE_ERROR).model_dump(),
        )

    try:
        reply = await orchestrator.respond(message, chat_request.history or [])
    except Exception:
        logger.exception("Chat request failed")
        return JSONResponse(
            status_code=502,
            content=ErrorResponse(error=INTERNAL_ERROR).model_dump(),
        )

    return ChatResponse(response=reply)
