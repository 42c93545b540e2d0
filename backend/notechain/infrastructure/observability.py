"""Structured Logging — one JSON object per record, carrying note and chain context.

Invariants:
    - Every line has timestamp, level, logger and message
    - note_id, block_id, nonce, error_code and path are copied from `extra` when set
    - log_format "json" selects JSONFormatter; anything else is a plain text line
    - Plaintext note content and key material are never passed to a logger

Design Decisions:
    - setup_logging runs once from the app lifespan and returns its handler so
      callers (and tests) can detach it
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_KEYS = ("note_id", "block_id", "nonce", "error_code", "path")


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Attach a stream handler to the root logger at the given level."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
