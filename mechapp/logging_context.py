"""Page-session logging context.

Each browsing session (one availability controller, one form) runs under
a session id, so log lines from the controller, the API client and the form
validator can be traced back to the same user flow.

Usage:
    from mechapp.logging_context import get_session_logger, session_scope

    logger = get_session_logger(__name__)
    with session_scope():
        logger.info("Loading mechanics")  # [SES-1a2b3c4d] Loading mechanics
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Optional

NO_SESSION = "NO_SESSION"
LOG_FORMAT = "%(asctime)s [%(session_id)s] [%(name)s] %(levelname)s: %(message)s"

_session_id: ContextVar[str] = ContextVar("session_id", default=NO_SESSION)


def new_session_id() -> str:
    return f"SES-{uuid.uuid4().hex[:8]}"


def set_session_id(session_id: str) -> None:
    """Set the session id for the current async context."""
    _session_id.set(session_id)


def get_session_id() -> str:
    return _session_id.get()


@contextmanager
def session_scope(session_id: Optional[str] = None) -> Iterator[str]:
    """Run a block under ``session_id`` (a fresh one when omitted).

    The previous id is restored on exit, so nested scopes and concurrent
    tasks each keep their own value.
    """
    token = _session_id.set(session_id or new_session_id())
    try:
        yield _session_id.get()
    finally:
        _session_id.reset(token)


class SessionIdFilter(logging.Filter):
    """Stamps the current session id on every record it sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def install_session_filter(logger: Optional[logging.Logger] = None) -> None:
    """Attach ``SessionIdFilter`` to every handler of ``logger`` (root by default).

    Handler-level filters also see records from third-party loggers such as
    httpx, which keeps ``%(session_id)s`` safe to use in ``LOG_FORMAT``.
    """
    target = logger or logging.getLogger()
    for handler in target.handlers:
        if not any(isinstance(f, SessionIdFilter) for f in handler.filters):
            handler.addFilter(SessionIdFilter())


def get_session_logger(name: str) -> logging.Logger:
    """Return a logger whose records always carry ``session_id``."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, SessionIdFilter) for f in logger.filters):
        logger.addFilter(SessionIdFilter())
    return logger
