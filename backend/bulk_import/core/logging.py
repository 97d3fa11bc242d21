"""Structured JSON logging configuration."""
import logging
import sys
from pythonjsonlogger import jsonlogger
from bulk_import.core.config import settings


def setup_logging() -> None:
    """Configure JSON structured logging for production, human-readable for dev.

    Shared by the API process and the Celery worker processes.
    """
    if getattr(settings, 'APP_ENV', 'development') == "production":
        handler = logging.StreamHandler(sys.stdout)
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(processName)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
        handler.setFormatter(formatter)
        logging.root.handlers = [handler]
        logging.root.setLevel(logging.INFO)
    else:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
