"""Structured ``event key=value`` logging for navforge components."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

ROOT_LOGGER = "navforge"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Rationales and notes can echo model output, which may quote credentials.
_SECRET_PATTERNS = [
    (re.compile(r"Bearer\s+[A-Za-z0-9\-_.]+"), "Bearer [REDACTED]"),
    (re.compile(r"sk-[A-Za-z0-9\-_]{8,}"), "[REDACTED]"),
]


def redact(text: str, extra_secrets: Iterable[str] | None = None) -> str:
    """Scrub bearer tokens, API keys and explicit secrets from an event note."""
    redacted = text
    for pattern, replacement in _SECRET_PATTERNS:
        redacted = pattern.sub(replacement, redacted)
    for secret in extra_secrets or ():
        if secret:
            redacted = redacted.replace(secret, "[REDACTED]")
    return redacted


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.3f}"
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    text = str(value)
    if not text or any(char.isspace() for char in text):
        return repr(text)
    return text


def format_event(event: str, **fields: Any) -> str:
    """Render ``event`` followed by ``key=value`` pairs in argument order."""
    parts = [event]
    parts.extend(f"{key}={_format_value(value)}" for key, value in fields.items())
    return " ".join(parts)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    if logger.isEnabledFor(level):
        logger.log(level, format_event(event, **fields))


def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """Return a navforge logger.

    The handler lives on the ``navforge`` root logger so every component shares one
    stream; ``level`` adjusts the named logger only.
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
