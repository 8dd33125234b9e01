"""Scoped logging context for watch executions.

Fields pushed here (watch_id, action_id, execution_id, ...) are attached to
every log record emitted inside the scope. Storage is a ContextVar, so
executions running in different threads or tasks never see each other's
fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("watch_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return dict(LogContextVar.get())


def push_log_context(**fields: Any) -> Token:
    """Merge ``fields`` over the active context.

    Returns:
        Token to hand back to :func:`pop_log_context`

    Example:
        >>> token = push_log_context(watch_id="watch1", action_id="notify")
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context that was active before the matching push."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every field. Mostly useful for tests."""
    LogContextVar.set({})


class log_context:
    """Context manager pushing fields for the duration of a block.

    Example:
        >>> with log_context(watch_id="watch1", execution_id="watch1_1-2025"):
        ...     logger.info("Rendering email")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False
