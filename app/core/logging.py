import json
import logging
import sys
from contextvars import ContextVar

ANONYMOUS = "anonymous"
SYSTEM = "system"

request_id_var: ContextVar[str] = ContextVar("request_id", default=SYSTEM)
user_id_var: ContextVar[str] = ContextVar("user_id", default=ANONYMOUS)


class RequestContextFilter(logging.Filter):
    """Stamp every record with the request id and the authenticated user."""

    def filter(self, record):
        record.request_id = request_id_var.get()
        record.user_id = user_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    """Render every record as a single JSON line."""

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "file": f"{record.module}.py:{record.lineno}",
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", SYSTEM),
            "user_id": getattr(record, "user_id", ANONYMOUS),
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)


def bind_user(user_id: int) -> None:
    """Attach ``user_id`` to the log lines of the current request."""
    user_id_var.set(str(user_id))


def setup_logging(level: int = logging.INFO):
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    root_logger.addHandler(handler)

    # Request lines come from the tracing middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
