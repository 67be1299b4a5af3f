"""Logging setup.

Every component logs through a ``ContextualLogger`` so that the dimensions
it was bound with (component name, monitored service, ...) are rendered
next to each message without repeating them at every call site.
"""

import logging
import sys
from typing import Any, MutableMapping, Optional

_ROOT_LOGGER_NAME = "awschecker"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s%(dimensions_text)s"


class _DimensionsFormatter(logging.Formatter):
    """Append bound context as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        dims = getattr(record, "dimensions", None) or {}
        record.dimensions_text = (
            " [" + " ".join(f"{k}={v}" for k, v in dims.items()) + "]" if dims else ""
        )
        return super().format(record)


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter carrying a set of dimensions."""

    def __init__(self, logger: logging.Logger, dimensions: Optional[dict[str, Any]] = None):
        super().__init__(logger, {})
        self.dimensions: dict[str, Any] = dict(dimensions or {})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping]:
        extra = dict(kwargs.get("extra") or {})
        extra["dimensions"] = {**self.dimensions, **extra.get("dimensions", {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a child logger with additional dimensions bound."""
        return ContextualLogger(self.logger, {**self.dimensions, **dimensions})


class LoggerConfigurator:
    """Builds loggers that share the application's stream handler."""

    _configured: bool = False

    @classmethod
    def _configure_root(cls) -> None:
        if cls._configured:
            return
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_DimensionsFormatter(_FORMAT))
        root = logging.getLogger(_ROOT_LOGGER_NAME)
        root.addHandler(handler)
        root.setLevel(logging.INFO)
        cls._configured = True

    @classmethod
    def configure_logger(
        cls, name: str, dimensions: Optional[dict[str, Any]] = None
    ) -> ContextualLogger:
        """Wrap a named logger in a ``ContextualLogger``.

        The handler lives on the ``awschecker`` logger only; named children
        propagate to it.

        Args:
            name: Logger name, usually ``__name__``.
            dimensions: Dimensions bound to every message.

        Returns:
            The contextual logger.
        """
        cls._configure_root()
        return ContextualLogger(logging.getLogger(name), dimensions)

    @classmethod
    def set_level(cls, level: str) -> None:
        """Set the level of the application logger."""
        cls._configure_root()
        logging.getLogger(_ROOT_LOGGER_NAME).setLevel(level.upper())


logger = LoggerConfigurator.configure_logger(_ROOT_LOGGER_NAME)
