"""
Structured Logging Configuration

Provides JSON-formatted logging with:
- Request ID tracking
- User context
- Structured output for log aggregation
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Optional, Any, Dict
from contextvars import ContextVar

# Context variables for request tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.
    Outputs logs in JSON format for easy parsing by log aggregators.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        user_id = user_id_var.get()
        if user_id:
            log_data["user_id"] = user_id

        log_data["module"] = record.module
        log_data["function"] = record.funcName
        log_data["line"] = record.lineno

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_data'):
            log_data["data"] = record.extra_data

        if hasattr(record, 'duration_ms'):
            log_data["duration_ms"] = record.duration_ms

        if hasattr(record, 'entity_type'):
            log_data["entity_type"] = record.entity_type
        if hasattr(record, 'entity_id'):
            log_data["entity_id"] = record.entity_id

        return json.dumps(log_data, ensure_ascii=False, default=str)


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger adapter that adds structured context to log messages.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.get('extra', {})
        extra.update(self.extra)
        kwargs['extra'] = extra
        return msg, kwargs

    def log_with_context(
        self,
        level: int,
        msg: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[Any] = None,
        duration_ms: Optional[float] = None,
        **extra_data
    ):
        """Log with additional structured context."""
        extra = {}
        if entity_type:
            extra['entity_type'] = entity_type
        if entity_id is not None:
            extra['entity_id'] = entity_id
        if duration_ms is not None:
            extra['duration_ms'] = duration_ms
        if extra_data:
            extra['extra_data'] = extra_data

        self.log(level, msg, extra=extra)

    def records_archived(self, archived_count: int):
        self.log_with_context(
            logging.INFO,
            f"Archived {archived_count} active passenger records",
            entity_type="passenger_record",
            archived_count=archived_count
        )

    def records_imported(self, total_rows: int, imported_rows: int, error_count: int, duration_ms: float = None):
        """Log the outcome of a spreadsheet import."""
        self.log_with_context(
            logging.WARNING if error_count else logging.INFO,
            f"Import finished: {imported_rows}/{total_rows} rows imported, {error_count} errors",
            entity_type="passenger_record",
            duration_ms=duration_ms,
            total_rows=total_rows,
            imported_rows=imported_rows,
            error_count=error_count
        )

    def passenger_checked_in(self, record_id: int, attributor: str, via: str = "id"):
        self.log_with_context(
            logging.INFO,
            f"Passenger checked in by {attributor}",
            entity_type="passenger_record",
            entity_id=record_id,
            attributor=attributor,
            via=via
        )

    def check_in_removed(self, record_id: int):
        self.log_with_context(
            logging.INFO,
            "Check-in removed",
            entity_type="passenger_record",
            entity_id=record_id
        )

    def check_in_refused(self, record_id: int, expected_tour_type: str, actual_tour_type: str):
        """Log a ticket scanned at the wrong tour's station."""
        self.log_with_context(
            logging.WARNING,
            f"Check-in refused: expected tour '{expected_tour_type}', record belongs to '{actual_tour_type}'",
            entity_type="passenger_record",
            entity_id=record_id,
            expected_tour_type=expected_tour_type,
            actual_tour_type=actual_tour_type
        )

    def guide_assigned(self, tour_id: int, tour_type: str, guide_name: Optional[str], created: bool):
        self.log_with_context(
            logging.INFO,
            f"Guide {guide_name!r} assigned to tour type {tour_type!r}",
            entity_type="tour",
            entity_id=tour_id,
            tour_type=tour_type,
            guide_name=guide_name,
            created=created
        )


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    include_uvicorn: bool = True
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON format (True for production)
        include_uvicorn: Also configure uvicorn loggers
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    app_logger = logging.getLogger("tickmypax")
    app_logger.setLevel(log_level)

    if include_uvicorn:
        for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
            uvicorn_logger = logging.getLogger(logger_name)
            uvicorn_logger.handlers = [handler]

    # Reduce noise from third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for the given module."""
    base_logger = logging.getLogger(name)
    return StructuredLogger(base_logger, {})


def set_request_context(request_id: str, user_id: Optional[str] = None):
    """Set context for the current request."""
    request_id_var.set(request_id)
    if user_id:
        user_id_var.set(user_id)


def clear_request_context():
    """Clear request context."""
    request_id_var.set('')
    user_id_var.set('')
