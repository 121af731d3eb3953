import logging.config
import sys
from typing import Any, Dict

APP_LOGGER = "journeyapi"
ACCESS_LOGGER = "journeyapi.access"


def build_logging_config(log_level: str = "INFO", sql_echo: bool = False) -> Dict[str, Any]:
    """dictConfig for the API process and the maintenance scripts.

    Application loggers write to stdout, warnings and above are repeated on
    stderr with their source location. Request lines from the access
    middleware get their own compact format.
    """
    log_level = log_level.upper()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "app": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s",
            },
            "access": {
                "format": "%(asctime)s | access   | %(message)s",
            },
            "located": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)s (%(filename)s:%(lineno)d)\n%(message)s",
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "app",
                "stream": sys.stdout,
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": sys.stdout,
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "located",
                "stream": sys.stderr,
                "level": "WARNING",
            },
        },
        "loggers": {
            "": {"handlers": ["stdout"], "level": log_level},
            APP_LOGGER: {
                "handlers": ["stdout", "stderr"],
                "level": log_level,
                "propagate": False,
            },
            ACCESS_LOGGER: {
                "handlers": ["access"],
                "level": log_level,
                "propagate": False,
            },
            "uvicorn.error": {
                "handlers": ["stdout", "stderr"],
                "level": log_level,
                "propagate": False,
            },
            # request lines already come from journeyapi.access
            "uvicorn.access": {
                "handlers": ["access"],
                "level": "WARNING",
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "handlers": ["stdout"],
                "level": "INFO" if sql_echo else "WARNING",
                "propagate": False,
            },
        },
    }


def setup_logging(log_level: str = "INFO", sql_echo: bool = False) -> None:
    logging.config.dictConfig(build_logging_config(log_level, sql_echo))
