# tech_news/logging_setup.py
"""
Logging for the service: every `tech_news.*` record goes to the console and
to a file that rotates at midnight. Records carry the id of the HTTP request
that produced them (`-` outside a request); RequestContextMiddleware sets it.
"""
import contextvars
import logging
import os
from logging.config import dictConfig
from pathlib import Path
from typing import Any, Dict

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")

LOG_DIR = Path(os.getenv("LOG_DIR", Path(__file__).resolve().parents[1] / "logs"))
LOG_FILE = LOG_DIR / "tech_news.log"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
KEEP_DAYS = 14

APP_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | req=%(request_id)s | %(message)s (%(filename)s:%(lineno)d)"
SERVER_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def _logging_config(log_file: Path, level: str) -> Dict[str, Any]:
    app_handlers = ["console", "file"]
    server_logger = {"handlers": ["server_console", "file"], "level": "INFO", "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"request_id": {"()": RequestIdFilter}},
        "formatters": {
            "app": {"format": APP_FORMAT},
            "server": {"format": SERVER_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "app",
                "filters": ["request_id"],
            },
            "file": {
                "class": "logging.handlers.TimedRotatingFileHandler",
                "formatter": "app",
                "filters": ["request_id"],
                "filename": str(log_file),
                "when": "midnight",
                "backupCount": KEEP_DAYS,
                "encoding": "utf-8",
            },
            "server_console": {"class": "logging.StreamHandler", "formatter": "server"},
        },
        "loggers": {
            "tech_news": {"handlers": app_handlers, "level": level, "propagate": False},
            "uvicorn.error": dict(server_logger),
            "uvicorn.access": dict(server_logger),
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    }


def setup_logging(log_file: Path = LOG_FILE, level: str = LOG_LEVEL) -> Path:
    """Install the handlers above and return the file being written to."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    dictConfig(_logging_config(log_file, level))
    get_logger().info("LOGGING_READY", extra={"log_file": str(log_file), "level": level})
    return log_file


def get_logger(name: str = "tech_news") -> logging.Logger:
    return logging.getLogger(name)
