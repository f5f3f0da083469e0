"""
Logging configuration for the jwtgate service

Two streams besides the usual application log:
- uvicorn access lines, minus polling of the public GET endpoints
- the audit stream, one line per rejected request, tagged with its error code
"""

import logging
import logging.config
from typing import Any, Dict, Iterable, Optional

AUDIT_LOGGER_NAME = "jwtgate.audit"

DEFAULT_QUIET_PATHS = ("/health",)


class QuietPathFilter(logging.Filter):
    """Drop uvicorn access lines for GET requests to the given paths."""

    def __init__(self, paths: Optional[Iterable[str]] = None):
        super().__init__()
        self.paths = frozenset(paths if paths is not None else DEFAULT_QUIET_PATHS)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True

        # uvicorn logs (client_addr, method, full_path, http_version, status_code)
        args = record.args
        if not isinstance(args, tuple) or len(args) < 3:
            return True

        method, full_path = args[1], str(args[2])
        return not (method == "GET" and full_path.split("?", 1)[0] in self.paths)


def get_logging_config(
    level: str = "INFO",
    quiet_paths: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """
    Build the dictConfig for the service and the uvicorn server.

    Args:
        level: Level for the application and audit loggers
        quiet_paths: Paths whose GET access lines are suppressed

    Returns:
        Dictionary accepted by logging.config.dictConfig
    """
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "quiet_paths": {
                "()": QuietPathFilter,
                "paths": list(quiet_paths if quiet_paths is not None else DEFAULT_QUIET_PATHS),
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "access": {
                "format": "%(message)s"
            },
            "audit": {
                "format": "%(asctime)s - AUDIT - %(levelname)s - %(message)s"
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout"
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["quiet_paths"]
            },
            "audit": {
                "class": "logging.StreamHandler",
                "formatter": "audit",
                "stream": "ext://sys.stderr"
            },
        },
        "loggers": {
            "uvicorn": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False
            },
            "uvicorn.access": {
                "handlers": ["access"],
                "level": "INFO",
                "propagate": False
            },
            AUDIT_LOGGER_NAME: {
                "handlers": ["audit"],
                "level": level,
                "propagate": False
            },
            "jwtgate": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "INFO", quiet_paths: Optional[Iterable[str]] = None) -> None:
    """Apply the logging configuration process-wide."""
    logging.config.dictConfig(get_logging_config(level, quiet_paths))
