"""structlog setup for the verifier.

Verification runs are long, mostly idle polls, so each event is a single
structured line: ``dispatch.*``, ``poll.*``, ``compiler.*`` and ``api.*``
events carry the network, class hash and job id as fields. Lines go to
stderr, keeping stdout free for whatever the caller prints as the result.

Level and renderer come from APP_LOG_LEVEL / APP_LOG_JSON unless passed in.

Usage:
    from voyager_verifier.logging_config import setup_logging, get_logger
    setup_logging(log_level="DEBUG")
    logger = get_logger(__name__)
    logger.info("poll.status", job_id="abc123", status="Compiled")
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

from voyager_verifier.config import get_settings
from voyager_verifier.domain.exceptions import ConfigurationError

if TYPE_CHECKING:
    from voyager_verifier.config import Settings

# Per-request chatter; api.response already records every call at DEBUG
_NOISY_LOGGERS = ("httpx", "httpcore")


def _resolve_level(log_level: str) -> int:
    level = logging.getLevelNamesMapping().get(log_level.upper())
    if level is None:
        raise ConfigurationError(f"Unknown log level: {log_level!r}")
    return level


def _renderer(json_logs: bool) -> structlog.types.Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(
    settings: Settings | None = None,
    *,
    log_level: str | None = None,
    json_logs: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Args:
        settings: Source of the defaults; the cached settings when omitted.
        log_level: Overrides APP_LOG_LEVEL.
        json_logs: Overrides APP_LOG_JSON.
        stream: Destination, sys.stderr when omitted.

    Raises:
        ConfigurationError: If the level name is not a logging level.
    """
    settings = settings or get_settings()
    level = _resolve_level(log_level or settings.app_log_level)
    use_json = settings.app_log_json if json_logs is None else json_logs

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(use_json),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger; bound contextvars are merged into every event."""
    return structlog.get_logger(name)
