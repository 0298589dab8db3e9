"""Structured Logging — JSON log lines carrying pull request, user and team identifiers.

Invariants:
    - Every line has timestamp (record time, UTC), level, logger and message
    - Identifier fields passed via `extra=` are copied to the top level when not None
    - setup_logging replaces root handlers, so repeated startups never duplicate output
    - SQLAlchemy engine logging stays at WARNING unless the root level is DEBUG
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "pull_request_id", "user_id", "team_name", "replaced_by",
    "error_code", "path", "attempt",
)

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key))
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install a single stderr handler on the root logger."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT),
    )
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)

    root_level = logging.getLevelName(level.upper())
    if not isinstance(root_level, int):
        root_level = logging.INFO
    root.setLevel(root_level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if root_level <= logging.DEBUG else logging.WARNING,
    )
