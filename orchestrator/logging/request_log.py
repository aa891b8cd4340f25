"""Per-request structured logging for the Concept Map skill."""
from __future__ import annotations

import logging
from typing import Any, MutableMapping, Optional, Tuple, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [request_id=%(request_id)s session_id=%(session_id)s] %(message)s"

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


class _ContextDefaultsFilter(logging.Filter):
    """Fill in context fields for records logged outside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        for field in ("request_id", "session_id"):
            if not hasattr(record, field):
                setattr(record, field, "-")
        return True


class RequestLogger(logging.LoggerAdapter):
    """Logger adapter that stamps every record with the request and session ids.

    One adapter is created per incoming request and handed to the components
    that serve it; nothing about the request is kept on module-level state.
    """

    def __init__(
        self,
        logger: logging.Logger,
        *,
        request_id: Optional[str],
        session_id: Optional[str],
    ) -> None:
        super().__init__(logger, {"request_id": request_id or "-", "session_id": session_id or "-"})

    @property
    def request_id(self) -> str:
        return self.extra["request_id"]

    @property
    def session_id(self) -> str:
        return self.extra["session_id"]

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Install a root handler whose format carries the request context fields."""

    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)
    if any(getattr(handler, "_conceptmap", False) for handler in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(_ContextDefaultsFilter())
    handler._conceptmap = True  # type: ignore[attr-defined]
    root.addHandler(handler)


__all__ = ["RequestLogger", "LoggerLike", "configure_logging", "LOG_FORMAT"]
