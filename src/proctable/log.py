"""Structured logging for proctable.

The terminal belongs to the table view, so events never go to stdout or
stderr. With a log file they are written there as JSON lines; without one
they are dropped.
"""

import logging
from pathlib import Path

import structlog

_HANDLER_NAME = "proctable"


def configure(log_file: Path | None = None, level: int = logging.INFO) -> None:
    """Configure structlog over the stdlib logging module.

    Args:
        log_file: Where to append JSON log lines. None discards all events.
        level: Minimum stdlib level written to the file.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)
            handler.close()

    if log_file is None:
        handler = logging.NullHandler()
        root.setLevel(logging.CRITICAL + 1)
    else:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=[
                    structlog.processors.TimeStamper(fmt="iso", utc=False, key="ts"),
                    structlog.processors.add_log_level,
                ],
            )
        )
        root.setLevel(level)

    handler.set_name(_HANDLER_NAME)
    root.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=False, key="ts"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
