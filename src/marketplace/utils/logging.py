"""Logging for the marketplace.

structlog renders every record: JSON lines in production and staging, a rich
console everywhere else. Records pass through a redaction step so passwords,
tokens and client secrets never reach a handler. Request handlers bind
``request_id`` and settlement code binds the order being worked on, so every
line logged underneath carries them.
"""

import logging
import logging.handlers
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog

LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

SENSITIVE_KEYS = frozenset(
    {
        "authorization",
        "client_secret",
        "new_password",
        "password",
        "password_hash",
        "reset_token",
        "stripe_signature",
        "token",
    }
)

# Libraries that are chatty at DEBUG
QUIET_LOGGERS = ("urllib3", "asyncio", "stripe", "multipart", "httpx")

_ROTATE_BYTES = 10 * 1024 * 1024


def current_env() -> str:
    return os.getenv("PROTEAN_ENV", "development").lower()


def get_log_level() -> str:
    """``LOG_LEVEL`` if set, otherwise the default for the current environment."""
    return os.getenv("LOG_LEVEL", LEVELS.get(current_env(), "INFO")).upper()


def redact_secrets(_logger, _method_name, event_dict: dict) -> dict:
    """structlog processor masking credential values by key."""
    for key in event_dict.keys() & SENSITIVE_KEYS:
        if event_dict[key]:
            event_dict[key] = "***"
    return event_dict


def _handlers(level: str, log_dir: Path, prefix: str) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    if current_env() == "test":
        return [console]

    log_dir.mkdir(exist_ok=True)
    everything = logging.handlers.RotatingFileHandler(
        log_dir / f"{prefix}.log", maxBytes=_ROTATE_BYTES, backupCount=5, encoding="utf-8"
    )
    everything.setLevel(level)
    errors = logging.handlers.RotatingFileHandler(
        log_dir / f"{prefix}_error.log", maxBytes=_ROTATE_BYTES, backupCount=5, encoding="utf-8"
    )
    errors.setLevel(logging.ERROR)
    return [console, everything, errors]


def _renderer():
    if current_env() in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=4),
    )


def configure_logging(log_dir: str | None = None, prefix: str = "marketplace") -> None:
    """Route stdlib logging to the console (and rotating files outside tests)
    and configure structlog on top of it.

    ``log_dir`` defaults to ``LOG_DIR`` or ``logs``.
    """
    level = get_log_level()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = _handlers(level, Path(log_dir or os.getenv("LOG_DIR", "logs")), prefix)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values to every record logged from the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def order_context(order_id=None, buyer_id=None, payment_intent_id=None):
    """Bind the order being processed for the duration of the block.

    ``None`` values are skipped; anything already bound (the request id) stays.
    """
    values = {
        key: str(value)
        for key, value in (("order_id", order_id), ("buyer_id", buyer_id), ("payment_intent_id", payment_intent_id))
        if value is not None
    }
    with structlog.contextvars.bound_contextvars(**values):
        yield
