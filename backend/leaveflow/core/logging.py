"""Logging configuration.

Modules log through ``logging.getLogger(__name__)``; this module only wires
handlers and formatters once at startup.
"""

import logging
import logging.config
from typing import Any

from pythonjsonlogger import jsonlogger

from leaveflow.core.config import settings


class LeaveFlowJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that always carries level and logger name."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def build_logging_config(level: str, fmt: str) -> dict[str, Any]:
    formatter = "json" if fmt == "json" else "standard"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
            "json": {
                "()": LeaveFlowJsonFormatter,
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
            },
        },
        "loggers": {
            "leaveflow": {"level": level.upper(), "propagate": True},
            "sqlalchemy.engine": {
                "level": "INFO" if settings.DEBUG else "WARNING",
                "propagate": True,
            },
        },
        "root": {"handlers": ["console"], "level": level.upper()},
    }


def configure_logging() -> None:
    logging.config.dictConfig(
        build_logging_config(settings.LOG_LEVEL, settings.LOG_FORMAT)
    )
