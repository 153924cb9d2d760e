"""Closed taxonomy of completion failures.

Backends raise heterogeneous exceptions; ``classify_error`` is the one
place that maps them onto ``ErrorKind``. It reads the ``code`` and
``status_code`` (or ``status``) attributes carried by
``openai.APIStatusError`` and anything shaped like it.
"""

from enum import Enum

HTTP_UNAUTHORIZED = 401
HTTP_TOO_MANY_REQUESTS = 429

CODE_INVALID_API_KEY = "invalid_api_key"
CODE_INSUFFICIENT_QUOTA = "insufficient_quota"
CODE_RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"


class ErrorKind(str, Enum):
    AUTH = "auth_error"
    QUOTA = "quota_error"
    RATE_LIMIT = "rate_limited"
    EMPTY_RESPONSE = "empty_response"
    GENERIC = "generic_error"

    @property
    def retryable(self) -> bool:
        return self in (ErrorKind.RATE_LIMIT, ErrorKind.EMPTY_RESPONSE)


class MissingCredentialError(RuntimeError):
    """Raised at startup when no API key is configured."""


class EmptyResponseError(Exception):
    """Backend call succeeded but produced no usable text."""


def _status_of(exc: BaseException) -> int | None:
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(exc, "status", None)
    return status if isinstance(status, int) else None


def classify_error(exc: BaseException) -> ErrorKind:
    """Map a backend exception onto an ``ErrorKind``."""
    if isinstance(exc, EmptyResponseError):
        return ErrorKind.EMPTY_RESPONSE

    code = getattr(exc, "code", None)
    status = _status_of(exc)

    if code == CODE_INVALID_API_KEY or status == HTTP_UNAUTHORIZED:
        return ErrorKind.AUTH
    # OpenAI reports exhausted quota as a 429, so check it first.
    if code == CODE_INSUFFICIENT_QUOTA:
        return ErrorKind.QUOTA
    if status == HTTP_TOO_MANY_REQUESTS or code == CODE_RATE_LIMIT_EXCEEDED:
        return ErrorKind.RATE_LIMIT
    return ErrorKind.GENERIC
