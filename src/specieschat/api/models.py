"""Pydantic models for the chat API."""

from pydantic import BaseModel, Field

from specieschat.core.models import ChatTurn

INVALID_MESSAGE_ERROR = "Invalid or missing message"
EMPTY_MESSAGE_ERROR = "Message cannot be empty"
INTERNAL_ERROR = "Internal server error. Please try again later."


class ChatRequest(BaseModel):
    """Request model for the chat endpoint."""

    message: str = Field(description="Newest user message")
    history: list[ChatTurn] | None = Field(
        default=None,
        description="Previous conversation turns, oldest first",
    )


class ChatResponse(BaseModel):
    """Reply produced by the chat orchestrator."""

    response: str = Field(description="Complete response text")


class ErrorResponse(BaseModel):
    """Body returned with 4xx/5xx statuses."""

    error: str = Field(description="Human-readable error message")
