import logging
import logging.config
from typing import Dict, Any

from app.config import LOG_LEVEL

# Every record carries the request's correlation id ("-" outside a request).
JSON_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"

logger = logging.getLogger("catalog")
access_logger = logging.getLogger("catalog.access")


def build_logging_config(level: str = LOG_LEVEL) -> Dict[str, Any]:
    """
    dictConfig for JSON output on stderr. The app's own `catalog` tree and
    uvicorn share one handler; `catalog.access` propagates into `catalog`.
    """
    level = level.upper()
    shared = {"handlers": ["json_stream"], "level": level, "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "correlation_id": {
                "()": "asgi_correlation_id.CorrelationIdFilter",
                "uuid_length": 32,
                "default_value": "-",
            },
        },
        "formatters": {
            "json": {"()": "pythonjsonlogger.json.JsonFormatter", "format": JSON_FORMAT},
        },
        "handlers": {
            "json_stream": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "filters": ["correlation_id"],
            },
        },
        "loggers": {
            "catalog": dict(shared),
            "uvicorn": dict(shared),
            # Replaced by catalog.access, which knows the correlation id and timing.
            "uvicorn.access": {"handlers": [], "level": "WARNING", "propagate": False},
        },
    }


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.config.dictConfig(build_logging_config(level))
