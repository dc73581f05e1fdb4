"""
Logging configuration for the OpenAPI IR pipeline.

Usage in library modules:
    from openapi_ir.ir_logging import get_logger
    logger = get_logger(__name__)

The root logger name is "openapi_ir". Log levels are controlled by the CLI.
"""

import logging
import sys

_LOGGER_NAME = "openapi_ir"


def get_logger(name: str = None) -> logging.Logger:
    """
    Return a child logger under the openapi_ir hierarchy.

    Args:
        name: Module __name__, or None for the root openapi_ir logger.

    Returns:
        logging.Logger instance
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    # "openapi_ir.builder.operations" -> "openapi_ir.operations"
    short = name.rsplit(".", 1)[-1]
    return logging.getLogger(f"{_LOGGER_NAME}.{short}")


def configure_logging(verbose: bool = False, quiet: bool = False, default_level: str = "INFO") -> None:
    """
    Configure the openapi_ir logger hierarchy.

    Levels:
        --verbose / -v  -> DEBUG   (per-component detail)
        (default)       -> default_level, INFO unless configured
        --quiet / -q    -> WARNING (warnings and errors only)
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.getLevelName(default_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {default_level}")

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)

    root_logger.handlers.clear()  # rebind to the current stderr on every call

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_IRFormatter())
    root_logger.addHandler(handler)

    root_logger.propagate = False


class _IRFormatter(logging.Formatter):
    """Minimal formatter: messages already carry their [TAG] prefix."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()
