import json
import logging
import logging.config
import sys

from photo_clusters.core.config import configs


class JsonFormatter(logging.Formatter):
    """
    Formatter for logging in JSON format.
    """
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


class EndpointFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return "GET /metrics" not in record.getMessage()


def setup_logging():
    """
    Set up logging configuration based on the environment.
    """
    log_level = configs.LOG_LEVEL.upper()
    handler = "json" if configs.ENVIRONMENT == "production" else "default"

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JsonFormatter,
                "datefmt": "%Y-%m-%dT%H:%M:%S%z",
            },
        },
        "filters": {
            "hide_metrics": {
                "()": EndpointFilter,
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "default",
            },
            "json": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "json",
            },
        },
        "loggers": {
            "photo_clusters": {
                "level": log_level,
                "handlers": [handler],
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": [handler],
                "filters": ["hide_metrics"],
                "propagate": False,
            },
            "uvicorn.error": {
                "level": "ERROR",
                "handlers": [handler],
                "propagate": False,
            },
            "httpx": {
                "level": "WARNING",
                "handlers": [handler],
                "propagate": False,
            },
        },
        "root": {
            "level": log_level,
            "handlers": [handler],
        },
    }

    logging.config.dictConfig(logging_config)
    logger = logging.getLogger(__name__)
    logger.info(f"Logging setup complete for {configs.ENVIRONMENT} environment with level {log_level}")
