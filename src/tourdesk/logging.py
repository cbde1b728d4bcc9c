"""Logging configuration for Tourdesk.

Delivery code logs through stdlib loggers with dotted event names and
``extra`` fields; auth code logs through structlog. Both end up on the same
root handler.
"""

from __future__ import annotations

import json
import logging

import structlog

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class ExtraFieldsFormatter(logging.Formatter):
    """Append structlog context vars and ``extra`` fields as one JSON object.

    Explicit ``extra`` keys win over context vars of the same name.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = structlog.contextvars.get_contextvars()
        extra |= {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if not extra:
            return line
        return f"{line} {json.dumps(extra, default=str, ensure_ascii=False, sort_keys=True)}"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure stdlib logging and structlog JSON output."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        ExtraFieldsFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    )
    logging.basicConfig(level=level, handlers=[handler], force=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
