"""Exception handlers mapping request errors onto the API's error body."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .models import INVALID_MESSAGE_ERROR, ErrorResponse

logger = logging.getLogger(__name__)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=INVALID_MESSAGE_ERROR).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on ``app``."""
    app.add_exception_handler(RequestValidationError, handle_validation_error)
