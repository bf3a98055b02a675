"""
Minimal async GraphQL-over-HTTP client.

This package sends GraphQL operations to an HTTP endpoint and interprets the
responses. It is built on aiohttp, pydantic and graphql-core.

Features:
- Single and batched operations over POST (JSON body) or GET (query string)
- Query text or parsed DocumentNode input, with operation name detection
- Static or per-call headers, including header producer functions
- Request and response middleware hooks
- Pluggable transport and JSON serializer
- Error policies for responses carrying both data and errors
"""

from .client import GraphQLClient
from .config import ClientSettings, ConfigLoader, GlobalConfig, LoggingConfig, load_config
from .convenience import batch_requests, raw_request, request
from .document import extract_operation_name, resolve_request_document
from .exceptions import (
    ClientError,
    GraphQLFetchError,
    InvalidArgumentError,
    RequestAbortedError,
    is_retryable_error,
)
from .logging import setup_logging
from .models import (
    BatchRequestDocument,
    BatchRequestOptions,
    BatchRequestsExtendedOptions,
    ClientConfig,
    ErrorPolicy,
    GraphQLRequestContext,
    GraphQLResponse,
    HTTPMethod,
    RawRequestExtendedOptions,
    RawRequestOptions,
    RequestExtendedOptions,
    RequestInit,
    RequestOptions,
    ResolvedDocument,
)
from .serializers import JsonSerializer, Serializer
from .transport import AiohttpTransport, FetchResponse

__all__ = [
    # Client
    "GraphQLClient",
    "request",
    "raw_request",
    "batch_requests",
    # Models
    "ClientConfig",
    "ErrorPolicy",
    "HTTPMethod",
    "RequestOptions",
    "RawRequestOptions",
    "BatchRequestDocument",
    "BatchRequestOptions",
    "RequestExtendedOptions",
    "RawRequestExtendedOptions",
    "BatchRequestsExtendedOptions",
    "RequestInit",
    "GraphQLResponse",
    "GraphQLRequestContext",
    "ResolvedDocument",
    # Documents
    "resolve_request_document",
    "extract_operation_name",
    # Exceptions
    "GraphQLFetchError",
    "InvalidArgumentError",
    "ClientError",
    "RequestAbortedError",
    "is_retryable_error",
    # Transport and serialization
    "AiohttpTransport",
    "FetchResponse",
    "Serializer",
    "JsonSerializer",
    # Configuration
    "ClientSettings",
    "GlobalConfig",
    "LoggingConfig",
    "ConfigLoader",
    "load_config",
    "setup_logging",
]

__version__ = "0.1.0"
