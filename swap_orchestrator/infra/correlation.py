"""
Correlation IDs for swap tracing

A correlation ID ties together every log line emitted while one swap
executes. It lives in a context variable, so concurrent asyncio tasks each
see their own value.
"""

import contextvars
import logging
import uuid
from typing import Optional

_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'correlation_id', default=None
)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for transaction tracing."""
    return uuid.uuid4().hex[:12]


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return _correlation_id.get()


class CorrelationContext:
    """
    Context manager for correlation ID scoping.

    Usage:
        with CorrelationContext("swap") as cid:
            log_with_correlation(logger, logging.INFO, "Starting swap")
    """

    def __init__(self, prefix: Optional[str] = None):
        self.correlation_id = generate_correlation_id()
        if prefix:
            self.correlation_id = f"{prefix}_{self.correlation_id}"
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = _correlation_id.set(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _correlation_id.reset(self._token)
            self._token = None


def log_with_correlation(logger: logging.Logger, level: int, message: str, **extra) -> None:
    """Log message prefixed with the current correlation ID"""
    cid = get_correlation_id()
    log_message = f"[{cid}] {message}" if cid else message
    logger.log(level, log_message, extra={"correlation_id": cid, **extra})
