import json
import logging
import sys
from contextvars import ContextVar

# "METHOD /path" of the request being served, if any
request_context: ContextVar[str | None] = ContextVar("request_context", default=None)

NOISY_LOGGERS = ("botocore", "boto3", "urllib3")


class RequestContextFilter(logging.Filter):
    """Stamps each record with the request it was logged under."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request", None) is None:
            record.request = request_context.get()
        return True


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line, so CloudWatch can index the fields.

    Records logged while a request is in flight carry a ``request`` key.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        request = getattr(record, "request", None)
        if request:
            entry["request"] = request
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(level: str = "INFO") -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    root_logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
