"""Logging configuration"""

import sys
from logging.config import dictConfig

from dockerflow import logging as dockerflow_logging
from rich.console import Console

from faviconkit.configs import settings


def configure_logging() -> None:
    """Configure logging with MozLog.

    Every handler writes to stderr, stdout is reserved for the favicon bytes
    or URL printed by the CLI.
    """
    match settings.logging.format:
        case "mozlog":
            handler = ["console-mozlog"]
        case "pretty":
            handler = ["console-pretty"]
        case _:
            raise ValueError(
                f"Invalid log format: {settings.logging.format}."
                f" Should either be 'mozlog' or 'pretty'."
            )

    if settings.current_env.lower() == "production" and handler != ["console-mozlog"]:
        raise ValueError("Log format must be 'mozlog' in production")

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {
                    "format": "%(message)s",
                },
                "json": {
                    "()": dockerflow_logging.MozlogFormatter,
                    "logger_name": "faviconkit",
                },
            },
            "handlers": {
                "console-mozlog": {
                    "level": settings.logging.level,
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": sys.stderr,
                },
                "console-pretty": {
                    "level": settings.logging.level,
                    "class": "rich.logging.RichHandler",
                    "formatter": "text",
                    "console": Console(stderr=True),
                },
            },
            "loggers": {
                "faviconkit": {
                    "handlers": handler,
                    "level": settings.logging.level,
                    "propagate": settings.logging.can_propagate,
                },
            },
        }
    )
