"""
Logging setup for graphql_fetch.

This module provides handler configuration, structured JSON output and
masking of credentials in log messages.
"""

from .filters import SensitiveDataFilter
from .formatters import StructuredFormatter
from .manager import LoggingManager, cleanup_logging, setup_logging

__all__ = [
    "LoggingManager",
    "setup_logging",
    "cleanup_logging",
    "StructuredFormatter",
    "SensitiveDataFilter",
]
