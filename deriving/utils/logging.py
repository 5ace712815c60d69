"""
Logging configuration and utilities.

This module provides centralized logging configuration for the
deriving package with appropriate formatting and levels.
"""

import logging
import os
from typing import Optional, Sequence


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure logging for the deriving package.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
    """
    if level is None:
        level = os.environ.get("DERIVING_LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("deriving")
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if name == "deriving" or name.startswith("deriving."):
        return logging.getLogger(name)
    return logging.getLogger(f"deriving.{name}")


class DerivingLogger:
    """
    Pass-level logging for the deriving pipeline.

    Wraps a module logger with messages for the events a user debugging
    a rewrite usually wants to see: which derivers ran on which types,
    which optional derivers were skipped and which registrations shadowed
    an earlier one.
    """

    def __init__(self, name: str):
        """
        Initialize logger for specific component.

        Args:
            name: Component name for logging context
        """
        self.logger = get_logger(name)

    def log_derive_start(self, deriver: str, type_names: Sequence[str], path: Sequence[str]) -> None:
        """
        Log a deriver invocation.

        Args:
            deriver: Name of the deriver being invoked
            type_names: Names of the types in the declaration group
            path: Current module-nesting path
        """
        where = ".".join(path) or "<toplevel>"
        self.logger.debug(f"Deriving '{deriver}' for {list(type_names)} in {where}")

    def log_optional_skip(self, deriver: str) -> None:
        """Log that an unknown deriver marked optional was skipped."""
        self.logger.info(f"Skipping optional deriver '{deriver}': not registered")

    def log_inline_expansion(self, deriver: str, type_text: str) -> None:
        """Log expansion of an inline [%derive.*] placeholder."""
        self.logger.debug(f"Expanding inline '{deriver}' for type {type_text}")

    def log_registration(self, deriver: str, shadowed: bool) -> None:
        """
        Log a deriver registration.

        Args:
            deriver: Registered deriver name
            shadowed: Whether an earlier registration under the same name was replaced
        """
        if shadowed:
            self.logger.warning(f"Deriver '{deriver}' re-registered; previous registration shadowed")
        else:
            self.logger.debug(f"Registered deriver '{deriver}'")


# Initialize logging on module import
setup_logging()
