from __future__ import annotations

import logging
import os
import sys

import structlog

from healthlog.utils.config import get_settings

APP_LOGGER = "healthlog"


def setup_logging(stream=None) -> None:
    """
    JSON event logs for every ``healthlog.*`` module.

    Records go to ``stream`` (stderr by default, so command output on
    stdout stays parseable) and to ``settings.log_file`` unless that is
    empty. matplotlib is held at WARNING or above.
    """
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(stream or sys.stderr)]
    if settings.log_file:
        os.makedirs(os.path.dirname(settings.log_file) or ".", exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file, mode="a", encoding="utf-8"))

    logging.basicConfig(format="%(message)s", level=level, handlers=handlers)
    logging.getLogger(APP_LOGGER).setLevel(level)
    logging.getLogger("matplotlib").setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
