"""Context propagation for structured logging.

Fields pushed here (run_id, brand_id, ...) are injected into every log record
emitted inside the scope. Context lives in a ContextVar, so it is isolated per
thread and per task; use bind_log_context() to carry it into worker threads.
"""

import contextvars
from contextvars import ContextVar, Token
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields currently in scope."""
    return LogContextVar.get().copy()


def push_log_context(**fields: Any) -> Token:
    """Merge fields into the logging context.

    Args:
        **fields: Key-value pairs to add to the logging context

    Returns:
        Token for pop_log_context() to restore the previous state

    Example:
        >>> token = push_log_context(run_id="abc123", brand_id="brand-7")
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the logging context captured by push_log_context()."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Mostly useful in tests."""
    LogContextVar.set({})


def bind_log_context(func: Callable[..., T]) -> Callable[..., T]:
    """Wrap func so that it runs with a snapshot of the current context.

    Worker threads start with an empty context; submitting the wrapped
    callable to an executor keeps run_id and friends on their log lines.

    Args:
        func: Callable to wrap

    Returns:
        Callable with the same signature
    """
    snapshot = contextvars.copy_context()

    def _run(*args: Any, **kwargs: Any) -> T:
        # A Context can only be entered by one thread at a time
        return snapshot.copy().run(func, *args, **kwargs)

    return _run


class log_context:
    """Context manager that scopes logging context fields.

    Example:
        >>> with log_context(run_id="abc123", brand_id="brand-7"):
        ...     logger.info("Scoring catalog")  # carries run_id and brand_id
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
