"""Structured Logging — JSON and text formatters carrying post index context.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Domain context (post_id, category, search_term, load_status, ...) surfaced when
      present, in both formats: JSON keys in production, key=value suffix in text
    - setup_logging is idempotent: a second call replaces its own handler, never stacks
    - httpx/httpcore request chatter stays at WARNING unless running at DEBUG

Design Decisions:
    - Formatters on stdlib logging: no extra dependency, full control over keys
    - One context extractor shared by both formatters so the key set cannot drift
    - setup_logging called once on startup via lifespan
"""

import logging
import json
from datetime import datetime, timezone

HANDLER_NAME = "postindex"

_CONTEXT_KEYS = (
    "post_id", "category", "search_term", "result_count", "post_count",
    "source", "load_status", "error_code", "path",
)

_NOISY_LOGGERS = ("httpx", "httpcore")


def log_context(record: logging.LogRecord) -> dict:
    """Domain fields attached via `extra=`, in a fixed order, None values dropped."""
    return {
        key: record.__dict__[key]
        for key in _CONTEXT_KEYS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def __init__(self, service: str = "postindex-api"):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service,
            "message": record.getMessage(),
            **log_context(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines for development, with domain context appended."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = log_context(record)
        if not context:
            return line
        pairs = " ".join(f"{k}={v!r}" for k, v in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install (or replace) the application handler on the root logger."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == HANDLER_NAME:
            logging.root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    logging.root.addHandler(handler)

    root_level = getattr(logging, level.upper(), logging.INFO)
    logging.root.setLevel(root_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            root_level if root_level <= logging.DEBUG else logging.WARNING,
        )
    return handler
