"""Chat orchestration: guardrail, history budget and retried completions."""

from .backend import CompletionBackend, OpenAIChatBackend  # noqa: F401
from .errors import ErrorKind, MissingCredentialError, classify_error  # noqa: F401
from .models import ChatTurn, CompletionRequest  # noqa: F401
from .orchestrator import ChatOrchestrator  # noqa: F401
