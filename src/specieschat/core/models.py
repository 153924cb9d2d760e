"""Value types passed through a single chat orchestration call."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ROLE_SYSTEM = "system"
ROLE_USER = "user"

TurnRole = Literal["user", "assistant"]


class ChatTurn(BaseModel):
    """One message of a conversation, tagged with its speaker."""

    model_config = ConfigDict(frozen=True)

    role: TurnRole = Field(description="Message sender role")
    content: str = Field(description="Message content")


class CompletionRequest(BaseModel):
    """Outbound payload for one completion attempt.

    ``messages`` is the full ordered prompt: system instruction, the
    clamped history, then the current user message.
    """

    model_config = ConfigDict(frozen=True)

    model: str
    messages: tuple[dict[str, str], ...]
    max_tokens: int
    temperature: float

    @classmethod
    def build(
        cls,
        *,
        system_prompt: str,
        history: list[ChatTurn],
        message: str,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> "CompletionRequest":
        messages = [{"role": ROLE_SYSTEM, "content": system_prompt}]
        messages.extend({"role": t.role, "content": t.content} for t in history)
        messages.append({"role": ROLE_USER, "content": message})
        return cls(
            model=model,
            messages=tuple(messages),
            max_tokens=max_tokens,
            temperature=temperature,
        )
