"""
Configuration management for graphql_fetch.

This module provides configuration models and loading from files and
environment variables.
"""

from .loader import ConfigLoader, load_config
from .models import ClientSettings, GlobalConfig, LoggingConfig, LogLevel

__all__ = [
    "ConfigLoader",
    "load_config",
    "ClientSettings",
    "GlobalConfig",
    "LoggingConfig",
    "LogLevel",
]
