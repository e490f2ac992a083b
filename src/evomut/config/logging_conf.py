"""Logging setup for applications driving the mutation operators.

The library only emits records through module loggers; nothing here runs on
import. Call :func:`configure_logging` once from the entry point of an
evolutionary run.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import IO, Any, Mapping

from .settings import Settings, get_settings

__all__ = ["JSONFormatter", "configure_logging"]

LOG_FILE_NAME = "evomut.log"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with ``extra`` fields as top-level keys.

    The operators attach ``draw`` and ``strategy`` to every dispatch record,
    so a structured DEBUG log can be replayed into selection frequencies.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                payload.setdefault(key, value)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(
    *,
    settings: Settings | None = None,
    level: int | str = logging.INFO,
    structured: bool | None = None,
    module_levels: Mapping[str, int | str] | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Install a stream handler and a ``logs_dir`` file handler on the root logger.

    Parameters
    ----------
    settings:
        Defaults to :func:`get_settings`.
    level:
        Level of both handlers.
    structured:
        Use :class:`JSONFormatter`; ``None`` defers to
        ``settings.structured_logging``.
    module_levels:
        ``logger -> level`` overrides, e.g.
        ``{"evomut.mutation.composite": "DEBUG"}`` to trace every dispatch.
    stream:
        Target of the stream handler; ``sys.stderr`` by default.
    """

    settings = settings or get_settings()
    structured = settings.structured_logging if structured is None else structured

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    formatter: logging.Formatter
    if structured:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handlers: list[logging.Handler] = [logging.StreamHandler(stream)]
    log_path = settings.logs_dir / LOG_FILE_NAME
    file_error: OSError | None = None
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    except OSError as e:  # pragma: no cover - read-only filesystems
        file_error = e

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    if file_error is not None:  # pragma: no cover
        root_logger.warning("Cannot open log file %s (%s); logging to stream only", log_path, file_error)

    for logger_name, logger_level in (module_levels or {}).items():
        logging.getLogger(logger_name).setLevel(logger_level)
