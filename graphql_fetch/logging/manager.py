"""
Logging manager for graphql_fetch.

This module provides centralized logging configuration and management.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional

from ..config.models import LoggingConfig, LogLevel
from .filters import SensitiveDataFilter
from .formatters import StructuredFormatter


class LoggingManager:
    """Centralized logging manager."""

    def __init__(self) -> None:
        """Initialize logging manager."""
        self._configured = False
        self._logger_name: Optional[str] = None
        self._handlers: Dict[str, logging.Handler] = {}

    @property
    def logger(self) -> logging.Logger:
        """The logger this manager configures."""
        return logging.getLogger(self._logger_name)

    def setup_logging(self, config: LoggingConfig) -> None:
        """
        Setup logging based on configuration.

        Args:
            config: Logging configuration
        """
        if self._configured:
            self.cleanup()

        self._logger_name = config.logger_name
        self.logger.setLevel(getattr(logging, config.level.value))

        if config.enable_console:
            self._add_handler("console", logging.StreamHandler(sys.stdout), config)

        if config.enable_file and config.file_path:
            log_path = Path(str(config.file_path))
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.handlers.RotatingFileHandler(
                filename=str(log_path),
                maxBytes=config.max_file_size,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
            self._add_handler("file", handler, config)

        self._configured = True
        logging.getLogger(__name__).debug("Logging system configured")

    def _add_handler(self, name: str, handler: logging.Handler, config: LoggingConfig) -> None:
        formatter: logging.Formatter
        if config.enable_structured:
            formatter = StructuredFormatter()
        else:
            formatter = logging.Formatter(config.format)

        handler.setFormatter(formatter)
        handler.setLevel(getattr(logging, config.level.value))
        if config.mask_sensitive_data:
            handler.addFilter(SensitiveDataFilter())

        self.logger.addHandler(handler)
        self._handlers[name] = handler

    def set_level(self, level: LogLevel) -> None:
        """
        Set logging level of the managed logger and its handlers.

        Args:
            level: New logging level
        """
        log_level = getattr(logging, level.value)
        self.logger.setLevel(log_level)
        for handler in self._handlers.values():
            handler.setLevel(log_level)

    def get_handler(self, name: str) -> Optional[logging.Handler]:
        """Get a handler installed by this manager."""
        return self._handlers.get(name)

    def cleanup(self) -> None:
        """Remove and close the handlers installed by this manager."""
        logger = self.logger
        for handler in list(self._handlers.values()):
            logger.removeHandler(handler)
            handler.close()

        self._handlers.clear()
        self._configured = False

    def is_configured(self) -> bool:
        """Check if logging is configured."""
        return self._configured


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config: Optional[LoggingConfig] = None) -> LoggingManager:
    """
    Setup logging with configuration.

    Args:
        config: Logging configuration; defaults are used if omitted

    Returns:
        The global LoggingManager
    """
    _logging_manager.setup_logging(config or LoggingConfig())
    return _logging_manager


def cleanup_logging() -> None:
    """Cleanup logging system."""
    _logging_manager.cleanup()
