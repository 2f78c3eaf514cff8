"""
Logging configuration for structured JSON logging.

Every record goes through LicenseKeyMaskingFilter, so a full license key
never reaches the log output even when a message includes one.
"""

import logging
import re
import sys

from opentelemetry import trace
from pythonjsonlogger import jsonlogger

LICENSE_KEY_IN_TEXT = re.compile(r"\b([A-Z0-9]{4})-[A-Z0-9]{4}-[A-Z0-9]{4}\b")


def mask_license_keys(text: str) -> str:
    return LICENSE_KEY_IN_TEXT.sub(r"\1-****-****", text)


class LicenseKeyMaskingFilter(logging.Filter):
    """Mask license keys in the rendered message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_license_keys(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter that adds trace context."""

    def add_fields(self, log_record, record, message_dict):
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            log_record["trace_id"] = format(span_context.trace_id, "032x")
            log_record["span_id"] = format(span_context.span_id, "016x")


def get_logging_config(environment: str = "development") -> dict:
    """
    Get logging configuration for the application.

    Args:
        environment: Environment name (development, production, test)

    Returns:
        Django logging configuration dictionary
    """
    log_level = "DEBUG" if environment == "development" else "INFO"

    app_logger = {
        "handlers": ["console"],
        "level": log_level,
        "propagate": False,
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d",
            },
            "simple": {
                "format": "{levelname} {name} {message}",
                "style": "{",
            },
        },
        "filters": {
            "mask_license_keys": {
                "()": LicenseKeyMaskingFilter,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "filters": ["mask_license_keys"],
                "stream": sys.stdout,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": log_level,
        },
        "loggers": {
            "django": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
            "django.request": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
            "django.db.backends": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
            "core": app_logger,
            "api": app_logger,
            "allowlist": app_logger,
            "licenses": app_logger,
            "scanning": app_logger,
        },
    }
