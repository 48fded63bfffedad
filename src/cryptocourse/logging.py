"""Structured logging for the site and the refresh job, built on structlog.

Every refresh, whether triggered over HTTP or by the scheduled script, runs
inside refresh_context(), so the provider, store and refresher events of one
run share a refresh_id and a trigger.
"""

import logging
import os
import uuid
from contextlib import AbstractContextManager

import structlog

# uvicorn installs its own handlers; these are re-routed through ours
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(log_level: str = "INFO") -> None:
    """Configure structlog over stdlib logging.

    LOG_FORMAT=json renders one JSON object per line (deployments and
    cron output); anything else uses the console renderer.
    """
    log_format = os.environ.get("LOG_FORMAT", "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # foreign_pre_chain gives uvicorn's plain records the same fields as ours
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in _UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
    # access lines duplicate the refresh events
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def refresh_context(trigger: str, **extra: str) -> AbstractContextManager:
    """Bind a fresh refresh_id and the trigger ("http" or "schedule") to every event in the block."""
    return structlog.contextvars.bound_contextvars(
        refresh_id=uuid.uuid4().hex[:12], trigger=trigger, **extra
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)
