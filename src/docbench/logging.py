"""Structured logging with structlog."""

import logging
import sys
import threading

import structlog

from docbench.config import Settings

# Handler installed on the root logger; None until configured.
_handler: logging.Handler | None = None
_lock = threading.Lock()


def configure_logging(settings: Settings, force: bool = False) -> None:
    """
    Configure structlog for the process; ``debug`` lowers the level to DEBUG.

    Every binding instance calls this from ``init()``, so only the first call
    takes effect unless ``force`` is set.
    """
    global _handler

    with _lock:
        if _handler is not None and not force:
            return

        level = logging.DEBUG if settings.debug else logging.INFO

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        # Set formatter based on config
        if settings.log_format == "json":
            renderer = structlog.processors.JSONRenderer()
        else:
            renderer = structlog.dev.ConsoleRenderer(colors=False)

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer))

        root = logging.getLogger()
        if _handler is not None:
            root.removeHandler(_handler)
        root.addHandler(handler)
        root.setLevel(level)
        _handler = handler


def reset_logging() -> None:
    """Remove the installed handler so the next call configures again (for testing)."""
    global _handler

    with _lock:
        if _handler is not None:
            logging.getLogger().removeHandler(_handler)
            _handler = None
