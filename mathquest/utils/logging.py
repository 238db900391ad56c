# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Progression modules log through ``logging.getLogger(__name__)`` with
``%s`` arguments. ``setup_logging`` installs a structlog
``ProcessorFormatter`` on the root logger so those records get the same
timestamp, level, logger name and bound context (such as ``session_id``)
as structlog loggers, rendered for the console in development and as JSON
lines otherwise.

Example:
    >>> from mathquest.utils.logging import setup_logging, bind_context
    >>> setup_logging(get_settings())
    >>> bind_context(session_id="session_1718000000000_k3j9x0a2b")
    >>> logging.getLogger("mathquest.core.progression").info("XP awarded: %s", 50)
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from mathquest.core.config.settings import Settings

_HANDLER_NAME = "mathquest"

_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _renderer(settings: "Settings") -> Processor:
    if settings.is_development:
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def setup_logging(settings: "Settings") -> None:
    """Route stdlib and structlog records through one structlog pipeline.

    Safe to call more than once; the previously installed handler is
    replaced.

    Args:
        settings: Application settings providing log_level and environment.
    """
    level = logging.getLevelName(settings.log_level.upper())

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if not settings.is_development:
        pre_chain.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings),
            ],
        )
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger that accepts key-value context."""
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Attach key-value pairs to every log line in the current context.

    The API binds ``session_id`` per request.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop everything bound with ``bind_context``."""
    structlog.contextvars.clear_contextvars()
