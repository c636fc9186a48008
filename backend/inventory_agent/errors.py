"""Typed failures raised by the inventory agent.

Every failure that can leave the agent loop carries an ``ErrorKind`` tag so the
HTTP layer can map it without inspecting messages. Failures coming from an
external client are converted by ``classify_external_error`` at the point the
call is made; nothing downstream looks at raw driver exceptions.
"""

from enum import Enum
from typing import Optional

import httpx
from ollama import ResponseError

RATE_LIMIT_STATUS = 429
AUTH_FAILURE_STATUSES = frozenset({401, 403})


class ErrorKind(str, Enum):
    """Failure taxonomy for a single turn."""

    TOOL_FAILURE = "tool_failure"
    RATE_LIMITED = "rate_limited"
    EXHAUSTED_RETRIES = "exhausted_retries"
    AUTH_FAILURE = "auth_failure"
    UPSTREAM_FAILURE = "upstream_failure"
    LOOP_LIMIT_EXCEEDED = "loop_limit_exceeded"
    INVALID_INPUT = "invalid_input"
    PERSISTENCE_FAILURE = "persistence_failure"


class AgentError(Exception):
    """Base class for all agent failures."""

    kind: ErrorKind = ErrorKind.UPSTREAM_FAILURE

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ToolFailureError(AgentError):
    """Retrieval or embedding failure inside the lookup tool."""

    kind = ErrorKind.TOOL_FAILURE


class RateLimitedError(AgentError):
    """External endpoint rejected the call because of rate limiting."""

    kind = ErrorKind.RATE_LIMITED


class ExhaustedRetriesError(AgentError):
    """Rate limiting persisted through every backoff attempt."""

    kind = ErrorKind.EXHAUSTED_RETRIES

    def __init__(self, message: str, *, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(message, status_code=RATE_LIMIT_STATUS)


class AuthFailureError(AgentError):
    """External endpoint rejected our credentials."""

    kind = ErrorKind.AUTH_FAILURE


class UpstreamServiceError(AgentError):
    """Any other failure of an external collaborator."""

    kind = ErrorKind.UPSTREAM_FAILURE


class LoopLimitExceededError(AgentError):
    """The agent/tools alternation ran past its step budget."""

    kind = ErrorKind.LOOP_LIMIT_EXCEEDED

    def __init__(self, message: str, *, limit: int) -> None:
        self.limit = limit
        super().__init__(message)


class InvalidInputError(AgentError):
    """Caller supplied an unusable thread id or message."""

    kind = ErrorKind.INVALID_INPUT


class PersistenceFailureError(AgentError):
    """Checkpoint read or write failed."""

    kind = ErrorKind.PERSISTENCE_FAILURE


def _status_code_of(exc: BaseException) -> Optional[int]:
    if isinstance(exc, ResponseError):
        return exc.status_code
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None


def classify_external_error(exc: Exception, *, service: str) -> AgentError:
    """Convert a raw client exception into a typed agent failure.

    Args:
        exc: Exception raised by the external client.
        service: Human-readable name of the endpoint, used in the message.

    Returns:
        ``exc`` unchanged if it is already an ``AgentError``, otherwise the
        matching typed failure. The caller raises it ``from exc``.
    """
    if isinstance(exc, AgentError):
        return exc

    status_code = _status_code_of(exc)
    if status_code == RATE_LIMIT_STATUS:
        return RateLimitedError(f"{service} rate limited the request", status_code=status_code)
    if status_code in AUTH_FAILURE_STATUSES:
        return AuthFailureError(f"{service} rejected the credentials", status_code=status_code)
    return UpstreamServiceError(f"{service} call failed: {exc}", status_code=status_code)
