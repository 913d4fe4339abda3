"""Logging setup for estate-crm scripts and services.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed once by the entry point through ``setup_logging`` or
``setup_logging_from_config``. Structured context goes in ``extra``
(``logger.info("...", extra={"collection": key})``) and shows up as
top-level fields with the JSON format.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Callable, TextIO

from estate_crm.config import CrmConfig
from estate_crm.exceptions import ConfigurationError
from estate_crm.storage.serialization import serialize_value

# Third-party loggers that are chatty at INFO/DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "psycopg", "faker")

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with ``extra`` context as top-level fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.levelno >= logging.WARNING:
            log_data["location"] = f"{record.module}:{record.lineno}"
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for name, value in vars(record).items():
            if name not in _RECORD_ATTRS and name not in log_data:
                log_data[name] = serialize_value(value)

        return json.dumps(log_data, default=str, ensure_ascii=False)


def _standard_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


LOG_FORMATS: dict[str, Callable[[], logging.Formatter]] = {
    "standard": _standard_formatter,
    "json": JsonFormatter,
}


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: TextIO | None = None,
) -> None:
    """Install a single console handler on the root logger.

    Parameters
    ----------
    level : str
        Log level name; unknown names fall back to INFO.
    format_type : str
        Key of ``LOG_FORMATS``.
    stream : TextIO | None
        Destination, stdout by default.

    Raises
    ------
    ConfigurationError
        If ``format_type`` is not a known format.
    """
    make_formatter = LOG_FORMATS.get(format_type.lower())
    if make_formatter is None:
        raise ConfigurationError(f"Unknown log format {format_type!r}; expected one of {sorted(LOG_FORMATS)}")
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(make_formatter())
    root_logger.addHandler(console_handler)

    logging.getLogger("estate_crm").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging_from_config(config: CrmConfig, level: str | None = None) -> None:
    """``setup_logging`` with ``LOG_LEVEL``/``LOG_FORMAT`` from ``config``; ``level`` overrides."""
    setup_logging(level or config.log_level, config.log_format)
