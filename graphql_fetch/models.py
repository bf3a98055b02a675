"""
GraphQL request and response models.

This module defines the data structures that flow through the request
pipeline: the canonical request options produced by argument normalization,
the outbound request descriptor handed to middleware and transport, the
response envelope returned to callers, and the client configuration.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from graphql import DocumentNode
from multidict import CIMultiDict
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .serializers import JsonSerializer, Serializer

Document = Union[str, DocumentNode]
Variables = Dict[str, Any]

HeadersInit = Union[
    Mapping[str, str],
    Sequence[Tuple[str, str]],
    CIMultiDict,
]
HeadersConfig = Union[HeadersInit, Callable[[], HeadersInit]]


class HTTPMethod(str, Enum):
    """HTTP methods a GraphQL operation can be sent with."""

    GET = "GET"
    POST = "POST"


class ErrorPolicy(str, Enum):
    """
    How server-reported errors alongside data affect the outcome.

    NONE fails the call whenever ``errors`` is non-empty, ALL returns data and
    errors together, IGNORE returns data with ``errors`` removed.
    """

    NONE = "none"
    ALL = "all"
    IGNORE = "ignore"


@dataclass(frozen=True)
class ResolvedDocument:
    """Query text and operation name derived from a document."""

    query: str
    operation_name: Optional[str] = None


@dataclass
class RequestOptions:
    """Canonical options for a single request."""

    document: Document
    variables: Optional[Variables] = None
    request_headers: Optional[HeadersConfig] = None
    signal: Optional[asyncio.Event] = None


@dataclass
class RawRequestOptions:
    """Canonical options for a raw request."""

    query: Document
    variables: Optional[Variables] = None
    request_headers: Optional[HeadersConfig] = None
    signal: Optional[asyncio.Event] = None


@dataclass
class BatchRequestDocument:
    """One operation within a batch."""

    document: Document
    variables: Optional[Variables] = None


@dataclass
class BatchRequestOptions:
    """Canonical options for a batch request."""

    documents: List[BatchRequestDocument]
    request_headers: Optional[HeadersConfig] = None
    signal: Optional[asyncio.Event] = None


@dataclass
class RequestExtendedOptions(RequestOptions):
    """Single request options that also carry the endpoint URL."""

    url: str = ""


@dataclass
class RawRequestExtendedOptions(RawRequestOptions):
    """Raw request options that also carry the endpoint URL."""

    url: str = ""


@dataclass
class BatchRequestsExtendedOptions(BatchRequestOptions):
    """Batch request options that also carry the endpoint URL."""

    url: str = ""


@dataclass
class RequestInit:
    """
    Fully built outbound request.

    This is what request middleware receives and must return. ``url`` is the
    bare endpoint; for GET requests the query string is appended after
    middleware has run. ``operation_name`` and ``variables`` are context for
    middleware and are not sent to the transport.

    Attributes:
        url: Endpoint URL
        method: HTTP method name
        headers: Outbound header collection
        body: Serialized body for POST, None for GET
        signal: Optional cancellation event forwarded to the transport
        options: Pass-through transport keyword arguments
        operation_name: Operation name of a single request, if known
        variables: Variables of the request (a list for batches)
    """

    url: str
    method: str
    headers: CIMultiDict
    body: Optional[str] = None
    signal: Optional[asyncio.Event] = None
    options: Dict[str, Any] = field(default_factory=dict)
    operation_name: Optional[str] = None
    variables: Any = None


@dataclass(frozen=True)
class GraphQLResponse:
    """
    Response envelope.

    For batch requests ``data`` holds the list of per-operation envelopes.
    ``error`` carries the raw body when the server did not answer with JSON.
    """

    status: int
    headers: Mapping[str, str]
    data: Any = None
    errors: Optional[List[Dict[str, Any]]] = None
    extensions: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def has_errors(self) -> bool:
        """Check if the envelope carries server errors."""
        return bool(self.errors)

    @property
    def error_messages(self) -> List[str]:
        """Get list of error messages."""
        return [error.get("message", "Unknown error") for error in self.errors or []]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, leaving out absent fields."""
        result: Dict[str, Any] = {}
        for key in ("data", "errors", "extensions", "error"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        result["status"] = self.status
        result["headers"] = dict(self.headers)
        return result


@dataclass(frozen=True)
class GraphQLRequestContext:
    """The query text(s) and variables a failed call was made with."""

    query: Union[str, List[str]]
    variables: Any = None


RequestMiddleware = Callable[[RequestInit], Union[RequestInit, Awaitable[RequestInit]]]
ResponseMiddleware = Callable[[Union[GraphQLResponse, BaseException]], Any]


class ClientConfig(BaseModel):
    """Configuration for GraphQL client."""

    headers: Optional[Any] = Field(
        default=None,
        description="Default headers: mapping, pairs, CIMultiDict or a zero-argument producer",
    )
    method: HTTPMethod = Field(default=HTTPMethod.POST, description="HTTP method")
    error_policy: ErrorPolicy = Field(
        default=ErrorPolicy.NONE, description="Handling of errors returned alongside data"
    )
    json_serializer: Any = Field(
        default_factory=JsonSerializer, description="Serializer for bodies and responses"
    )
    fetch: Optional[Callable[..., Awaitable[Any]]] = Field(
        default=None, description="Transport; defaults to the aiohttp transport"
    )
    request_middleware: Optional[RequestMiddleware] = Field(
        default=None, description="Hook that may rewrite the outbound request"
    )
    response_middleware: Optional[ResponseMiddleware] = Field(
        default=None, description="Hook that observes the response or error"
    )
    fetch_options: Dict[str, Any] = Field(
        default_factory=dict, description="Keyword arguments forwarded to the transport"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

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

    @field_validator("json_serializer")
    @classmethod
    def _check_serializer(cls, value: Any) -> Serializer:
        if not (callable(getattr(value, "stringify", None)) and callable(getattr(value, "parse", None))):
            raise ValueError("json_serializer must provide stringify() and parse()")
        return value
