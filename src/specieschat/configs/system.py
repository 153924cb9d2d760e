from datetime import timedelta

from pydantic import BaseModel, Field, SecretStr, field_validator


class LLMConfig(BaseModel):
    """Chat-completions backend connection settings."""

    endpoint: str | None = Field(
        default=None,
        description="Base URL of an OpenAI-compatible server; "
        "None uses the official OpenAI API",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="API credential, required at startup",
    )
    model_name: str = Field(
        default="gpt-4o-mini", description="Model identifier for completions"
    )
    timeout: timedelta = Field(
        default=timedelta(seconds=30),
        description="Per-request timeout for completion calls",
    )

    @field_validator("api_key", mode="before")
    @classmethod
    def _strip_api_key(cls, value: object) -> object:
        # Keys pasted into .env files often carry quotes or trailing spaces.
        if isinstance(value, str):
            value = value.strip().strip("\"'").strip()
            return value or None
        return value


class ChatConfig(BaseModel):
    """Policy knobs for the chat orchestrator."""

    history_char_budget: int = Field(
        default=6000,
        ge=0,
        description="Maximum total characters of history sent per request",
    )
    max_attempts: int = Field(
        default=3, ge=1, description="Completion attempts per chat request"
    )
    backoff_base: timedelta = Field(
        default=timedelta(milliseconds=400),
        description="Rate-limit backoff unit, multiplied by attempt number",
    )
    max_tokens: int = Field(
        default=300, gt=0, description="Maximum tokens in a single response"
    )
    temperature: float = Field(
        default=0.7, ge=0.0, le=2.0, description="Sampling temperature"
    )


class APIConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8000, description="API server port")
    metrics_enabled: bool = Field(
        default=True, description="Expose Prometheus metrics at /metrics"
    )


class LoggingConfig(BaseModel):
    """Root logger settings."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=True, description="Emit JSON lines instead of dev format"
    )
    quiet_loggers: list[str] = Field(
        default_factory=lambda: ["httpx", "httpcore", "openai"],
        description="Third-party loggers capped at WARNING",
    )
