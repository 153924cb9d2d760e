"""Configuration management using pydantic-settings.

Priority order (highest first):

1. Init kwargs (tests, scripts)
2. Environment variables (``SPECIESCHAT_`` prefix, ``__`` for nesting)
3. ``.env`` dotenv file
4. Static YAML (``configs/config.yaml`` next to the project root)
5. Field defaults

Each call to ``get_app_config()`` builds a fresh ``AppConfig``; the app
reads it once in its lifespan and keeps the result on ``app.state``.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .system import APIConfig, ChatConfig, LLMConfig, LoggingConfig

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

CONFIG_PY_PATH = Path(__file__).resolve()
PROJECT_ROOT = CONFIG_PY_PATH.parent.parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"
DOTENV_FILE_PATH = PROJECT_ROOT / ".env"

ENV_DELIMITER = "__"  # Nested environment variable delimiter
ENV_PREFIX = "SPECIESCHAT_"

DEFAULT_ENCODING = "utf-8"


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="Completion backend settings",
    )

    chat: ChatConfig = Field(
        default_factory=ChatConfig,
        description="Chat orchestration policy",
    )

    api: APIConfig = Field(
        default_factory=APIConfig,
        description="API configuration settings",
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # A missing YAML file yields no values.
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def get_app_config() -> AppConfig:
    """Build the application configuration from all sources."""
    return AppConfig()
