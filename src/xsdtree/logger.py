"""Structured logging for the schema tree builder."""

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "extra"}


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    optional_fields = ("schema", "operationId", "sourceURI", "path", "tag", "errorCode")

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "component": getattr(record, "component", "xsdtree"),
            "message": record.getMessage(),
        }

        for name in self.optional_fields:
            if getattr(record, name, None) is not None:
                log_entry[name] = getattr(record, name)

        # Remaining keyword arguments of the XSDLogger calls
        for name, value in vars(record).items():
            if name not in _RECORD_ATTRIBUTES and name not in log_entry \
                    and name not in self.optional_fields:
                log_entry[name] = value

        if hasattr(record, "extra") and isinstance(record.extra, dict):
            log_entry.update(record.extra)

        return json.dumps(log_entry, default=str)


def _create_handler(destination: str) -> logging.Handler:
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    elif destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    return logging.FileHandler(destination, encoding="utf-8")


class XSDLogger:
    """Logger emitting one JSON object per record, tagged with an operation id."""

    def __init__(self, level: LogLevel = LogLevel.WARN, component: str = "xsdtree",
                 destination: str = "stderr"):
        self.component = component
        self.operation_id = str(uuid4())

        self.logger = logging.getLogger(f"xsdtree.{component}")
        self.logger.setLevel(getattr(logging, LogLevel(level).name))

        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
            handler.close()

        handler = _create_handler(destination)
        handler.setFormatter(StructuredFormatter())
        self.logger.addHandler(handler)
        self.logger.propagate = False

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return

        extra = {
            "component": self.component,
            "operationId": self.operation_id,
            **kwargs
        }
        record = self.logger.makeRecord(
            name=self.logger.name,
            level=level,
            fn="",
            lno=0,
            msg=message,
            args=(),
            exc_info=None,
            extra=extra
        )
        self.logger.handle(record)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warn(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def schema_event(self, event: str, schema_uri: Optional[str], **kwargs: Any) -> None:
        """Log the loading and building steps of a schema document."""
        self.info(f"Schema {event}", schema=schema_uri or "<string>", **kwargs)

    def construction_progress(self, message: str, nodes_built: int = 0, **kwargs: Any) -> None:
        self.debug(message, nodesBuilt=nodes_built, **kwargs)

    def grammar_violation(self, message: str, path: Optional[str] = None,
                          tag: Optional[str] = None, **kwargs: Any) -> None:
        """Log an XSD element rejected by the construction pass."""
        self.error(message, path=path, tag=tag, errorCode="GRAMMAR_VIOLATION", **kwargs)

    def ambiguity(self, message: str, path: str, **kwargs: Any) -> None:
        """Log a body with more than one child of an exclusive group."""
        self.warn(message, path=path, errorCode="AMBIGUOUS_CONTENT", **kwargs)

    def performance_metric(self, metric_name: str, value: Any, unit: str = "", **kwargs: Any) -> None:
        self.info(
            f"Performance: {metric_name}",
            metricName=metric_name,
            value=value,
            unit=unit,
            **kwargs
        )


def create_logger(level: LogLevel = LogLevel.WARN, component: str = "xsdtree",
                  destination: str = "stderr") -> XSDLogger:
    """Create a configured logger instance."""
    return XSDLogger(level=level, component=component, destination=destination)
