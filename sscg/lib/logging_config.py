"""JSON logging configuration for the sscg command line."""

import logging
from enum import Enum

from pythonjsonlogger.json import JsonFormatter

LOGGER_NAME = "sscg"

# Progress messages sit between DEBUG and INFO
VERBOSE_LEVEL = 15
logging.addLevelName(VERBOSE_LEVEL, "VERBOSE")


class Verbosity(Enum):
    """Output levels selectable with --quiet, --verbose and --debug."""

    QUIET = logging.ERROR
    NORMAL = logging.INFO
    VERBOSE = VERBOSE_LEVEL
    DEBUG = logging.DEBUG

    @classmethod
    def from_flags(cls, quiet: bool, verbose: bool, debug: bool) -> "Verbosity":
        """Pick the verbosity for a flag combination; debug wins, then verbose, then quiet."""
        if debug:
            return cls.DEBUG
        if verbose:
            return cls.VERBOSE
        if quiet:
            return cls.QUIET
        return cls.NORMAL


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with focused field set.

    Includes only timestamp, level, message, exc_info, funcName and lineno,
    plus a structured "certificate" field when passed through extra.
    """

    def add_fields(self, log_record, record, message_dict):
        """Override to include only specified fields.

        Args:
            log_record: Dict to be logged as JSON
            record: LogRecord object from logging framework
            message_dict: Dict containing message and args
        """
        super().add_fields(log_record, record, message_dict)

        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")

        allowed_fields = {
            "timestamp",
            "level",
            "message",
            "exc_info",
            "funcName",
            "lineno",
            "certificate",
        }

        keys_to_remove = [key for key in log_record if key not in allowed_fields]
        for key in keys_to_remove:
            log_record.pop(key)


def configure_logging(verbosity: Verbosity = Verbosity.NORMAL) -> logging.Logger:
    """Configure the sscg logger for the requested verbosity.

    Safe to call more than once; the handler is only attached the first time.

    Args:
        verbosity: Minimum level of messages to emit

    Returns:
        Configured logger with CustomJsonFormatter
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(verbosity.value)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            CustomJsonFormatter(
                fmt="%(timestamp)s %(levelname)s %(funcName)s %(lineno)d %(message)s",
                timestamp=True,
            )
        )
        logger.addHandler(handler)
        logger.propagate = False

    return logger
