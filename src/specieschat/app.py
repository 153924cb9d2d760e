"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI

from specieschat import __version__
from specieschat.api.chat import router as chat_router
from specieschat.api.exceptions import register_exception_handlers
from specieschat.configs.config import AppConfig, get_app_config
from specieschat.core.deps import build_chat_orchestrator
from specieschat.core.metrics import setup_metrics
from specieschat.infra.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the orchestrator before serving; refuse to start without a key."""
    config: AppConfig = app.state.config
    setup_logging(config.logging)
    orchestrator = build_chat_orchestrator(config)
    app.state.chat_orchestrator = orchestrator
    logger.info("Species chat service started")

    yield

    aclose = getattr(orchestrator.backend, "aclose", None)
    if aclose is not None:
        await aclose()
    logger.info("Species chat service stopped")


def get_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if config is None:
        config = get_app_config()

    app = FastAPI(
        title="Species Chat",
        description="A chat assistant that answers questions about animals and species",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config

    register_exception_handlers(app)
    app.include_router(chat_router)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    if config.api.metrics_enabled:
        setup_metrics(app)

    return app


def main() -> None:
    """Run the API server with settings from the environment."""
    config = get_app_config()
    setup_logging(config.logging)
    logger.info("Starting species chat on %s:%d", config.api.host, config.api.port)
    uvicorn.run(get_app(config), host=config.api.host, port=config.api.port)


app = get_app()
