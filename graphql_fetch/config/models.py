"""
Configuration models for graphql_fetch.

These models hold the serializable part of the configuration, the part that
can come from files and environment variables. Callables such as transports
and middleware are given to the client directly.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models import ErrorPolicy, HTTPMethod


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    logger_name: Optional[str] = Field(
        default="graphql_fetch",
        description="Logger to configure; None configures the root logger",
    )
    file_path: Optional[Path] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10 * 1024 * 1024, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, description="Number of backup log files")
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_file: bool = Field(default=False, description="Enable file logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )
    mask_sensitive_data: bool = Field(
        default=True, description="Mask credentials in log messages"
    )

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value


class ClientSettings(BaseModel):
    """Serializable client settings."""

    endpoint: Optional[str] = Field(default=None, description="GraphQL endpoint URL")
    method: HTTPMethod = Field(default=HTTPMethod.POST, description="HTTP method")
    error_policy: ErrorPolicy = Field(
        default=ErrorPolicy.NONE, description="Handling of errors returned alongside data"
    )
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Default headers for requests"
    )
    fetch_options: Dict[str, Any] = Field(
        default_factory=dict, description="Keyword arguments forwarded to the transport"
    )

    @field_validator("method", mode="before")
    @classmethod
    def _normalize_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("error_policy", mode="before")
    @classmethod
    def _normalize_error_policy(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value


class GlobalConfig(BaseModel):
    """Top-level configuration."""

    client: ClientSettings = Field(default_factory=ClientSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(validate_assignment=True, extra="forbid")
