"""Root logger setup for the species chat service.

``setup_logging`` is called from the app lifespan, so the same handler
is installed whether the server starts through ``specieschat`` or
``uvicorn specieschat.app:app``. Records go to stdout as JSON lines by
default, or as coloured uvicorn-style lines with ``json_output=False``.
Each record carries ``trace_id``/``span_id`` (empty outside a span).
"""

from __future__ import annotations

import logging
import sys

from opentelemetry import trace

from specieschat.configs.system import LoggingConfig


class _TraceContextFilter(logging.Filter):
    """Injects OTEL trace/span IDs into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        span = trace.get_current_span()
        ctx = span.get_span_context()
        if ctx and ctx.is_valid:
            record.trace_id = format(ctx.trace_id, "032x")  # type: ignore[attr-defined]
            record.span_id = format(ctx.span_id, "016x")  # type: ignore[attr-defined]
        else:
            record.trace_id = ""  # type: ignore[attr-defined]
            record.span_id = ""  # type: ignore[attr-defined]
        return True


_DEV_FORMAT = "%(levelprefix)s %(asctime)s %(name)s  %(message)s"
_DEV_DATEFMT = "%H:%M:%S"


def _build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.json_output:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s "
            "%(trace_id)s %(span_id)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "logger",
            },
            defaults={"trace_id": "", "span_id": ""},
        )

    from uvicorn.logging import DefaultFormatter

    return DefaultFormatter(
        fmt=_DEV_FORMAT,
        datefmt=_DEV_DATEFMT,
        use_colors=True,
    )


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the root logger (call once at startup)."""
    if config is None:
        config = LoggingConfig()

    root = logging.getLogger()
    root.setLevel(config.level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_TraceContextFilter())
    handler.setFormatter(_build_formatter(config))

    root.handlers = [handler]

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvi = logging.getLogger(name)
        uvi.handlers = [handler]
        uvi.propagate = False

    # The openai SDK logs every request at INFO through httpx.
    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)
