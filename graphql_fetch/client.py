"""
GraphQL client implementation.

This module provides the GraphQL client: it normalizes call arguments,
builds the outbound request, runs it through the optional middleware and the
transport, and interprets the response.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Dict, List, Optional

from .args import (
    check_signal,
    parse_batch_request_args,
    parse_raw_request_args,
    parse_request_args,
)
from .builder import Query, append_query_string, build_request_init
from .document import resolve_request_document
from .exceptions import InvalidArgumentError
from .headers import merge_headers, resolve_headers
from .models import (
    ClientConfig,
    GraphQLRequestContext,
    GraphQLResponse,
    HeadersConfig,
    RequestInit,
    Variables,
)
from .response import interpret_response
from .transport import Fetch, default_fetch

logger = logging.getLogger(__name__)


class GraphQLClient:
    """
    GraphQL client for a single endpoint.

    Each call sends exactly one HTTP request through the configured
    transport. Configuration is read at call time, so header and endpoint
    changes apply to subsequent calls only. Calls share no state and may run
    concurrently.

    Examples:
        Basic query:
        ```python
        client = GraphQLClient("https://api.example.com/graphql")
        data = await client.request(
            '''
            query GetUser($id: ID!) {
                user(id: $id) { name email }
            }
            ''',
            {"id": "123"},
        )
        ```

        Keep errors returned alongside data:
        ```python
        client = GraphQLClient(url, error_policy=ErrorPolicy.ALL)
        response = await client.raw_request("{ me { id } }")
        if response.has_errors:
            print(response.error_messages)
        ```

        Batched operations:
        ```python
        results = await client.batch_requests([
            {"document": "{ me { id } }"},
            {"document": "query User($id: ID!) { user(id: $id) { name } }",
             "variables": {"id": "1"}},
        ])
        ```
    """

    def __init__(self, url: str, config: Optional[ClientConfig] = None, **options: Any) -> None:
        """
        Initialize GraphQL client.

        Args:
            url: GraphQL endpoint URL
            config: Client configuration
            **options: ClientConfig fields, used when config is not given
        """
        if config is not None and options:
            raise InvalidArgumentError("Pass either a ClientConfig or keyword options, not both")
        self.url = url
        self.config = config if config is not None else ClientConfig(**options)

    @classmethod
    def from_settings(cls, settings: Any, **overrides: Any) -> "GraphQLClient":
        """
        Create a client from loaded ClientSettings.

        Args:
            settings: ClientSettings, usually from ConfigLoader
            **overrides: ClientConfig fields that are not serializable
                (fetch, middleware, serializer)
        """
        if not settings.endpoint:
            raise InvalidArgumentError("ClientSettings.endpoint is not set")
        options: Dict[str, Any] = {
            "headers": dict(settings.headers) or None,
            "method": settings.method,
            "error_policy": settings.error_policy,
            "fetch_options": dict(settings.fetch_options),
        }
        options.update(overrides)
        return cls(settings.endpoint, **options)

    async def request(
        self,
        document_or_options: Any,
        variables: Optional[Variables] = None,
        request_headers: Optional[HeadersConfig] = None,
        *,
        signal: Any = None,
    ) -> Any:
        """
        Execute a GraphQL operation and return its data.

        Args:
            document_or_options: Query text, DocumentNode, RequestOptions or
                a mapping of RequestOptions fields
            variables: Operation variables
            request_headers: Headers for this call, overriding client headers
            signal: asyncio.Event that aborts the request when set

        Returns:
            The ``data`` of the response

        Raises:
            InvalidArgumentError: If the arguments have an unsupported shape
            ClientError: If the response is not a success
        """
        options = parse_request_args(document_or_options, variables, request_headers)
        resolved = resolve_request_document(options.document)
        response = await self._execute(
            query=resolved.query,
            variables=options.variables,
            operation_name=resolved.operation_name,
            request_headers=options.request_headers,
            signal=_select_signal(signal, options.signal),
        )
        return response.data

    async def raw_request(
        self,
        query_or_options: Any,
        variables: Optional[Variables] = None,
        request_headers: Optional[HeadersConfig] = None,
        *,
        signal: Any = None,
    ) -> GraphQLResponse:
        """
        Execute a GraphQL operation and return the whole envelope.

        Unlike ``request`` the result carries errors (under the ``all``
        policy), extensions, status and headers.

        Raises:
            InvalidArgumentError: If the arguments have an unsupported shape
            ClientError: If the response is not a success
        """
        options = parse_raw_request_args(query_or_options, variables, request_headers)
        resolved = resolve_request_document(options.query)
        return await self._execute(
            query=resolved.query,
            variables=options.variables,
            operation_name=resolved.operation_name,
            request_headers=options.request_headers,
            signal=_select_signal(signal, options.signal),
        )

    async def batch_requests(
        self,
        documents_or_options: Any,
        request_headers: Optional[HeadersConfig] = None,
        *,
        signal: Any = None,
    ) -> List[Dict[str, Any]]:
        """
        Execute several operations in one HTTP request.

        Args:
            documents_or_options: Sequence of BatchRequestDocument (or
                mappings with ``document`` and ``variables``),
                BatchRequestOptions, or a mapping of its fields
            request_headers: Headers for this call, overriding client headers
            signal: asyncio.Event that aborts the request when set

        Returns:
            One envelope per operation, in input order

        Raises:
            InvalidArgumentError: If the arguments have an unsupported shape
            ClientError: If the response is not a success
        """
        options = parse_batch_request_args(documents_or_options, request_headers)
        queries = [resolve_request_document(entry.document).query for entry in options.documents]
        variables = [entry.variables for entry in options.documents]
        response = await self._execute(
            query=queries,
            variables=variables,
            operation_name=None,
            request_headers=options.request_headers,
            signal=_select_signal(signal, options.signal),
        )
        return response.data

    def set_headers(self, headers: Optional[HeadersConfig]) -> "GraphQLClient":
        """Replace the client headers. All subsequent requests use them."""
        self.config.headers = headers
        return self

    def set_header(self, key: str, value: str) -> "GraphQLClient":
        """
        Attach a header to the client. All subsequent requests will have it.

        When the client headers come from a producer function, the producer
        keeps being called per request and the header is applied on top.
        """
        headers = self.config.headers
        if callable(headers):
            producer = headers

            def with_header() -> Any:
                resolved = resolve_headers(producer)
                resolved[key] = value
                return resolved

            self.config.headers = with_header
        else:
            resolved = resolve_headers(headers)
            resolved[key] = value
            self.config.headers = resolved
        return self

    def set_endpoint(self, value: str) -> "GraphQLClient":
        """Change the endpoint. All subsequent requests are sent to it."""
        self.url = value
        return self

    async def _execute(
        self,
        query: Query,
        variables: Any,
        operation_name: Optional[str],
        request_headers: Optional[HeadersConfig],
        signal: Any,
    ) -> GraphQLResponse:
        config = self.config
        response_middleware = config.response_middleware
        try:
            response = await self._make_request(
                query, variables, operation_name, request_headers, signal
            )
        except Exception as e:
            if response_middleware is not None:
                await _maybe_await(response_middleware(e))
            raise
        if response_middleware is not None:
            await _maybe_await(response_middleware(response))
        return response

    async def _make_request(
        self,
        query: Query,
        variables: Any,
        operation_name: Optional[str],
        request_headers: Optional[HeadersConfig],
        signal: Any,
    ) -> GraphQLResponse:
        config = self.config
        fetch: Fetch = config.fetch or default_fetch
        headers = merge_headers(config.headers, request_headers)

        init, query_string = build_request_init(
            method=config.method,
            url=self.url,
            query=query,
            variables=variables,
            operation_name=operation_name,
            headers=headers,
            serializer=config.json_serializer,
            options=config.fetch_options,
            signal=signal,
        )
        check_signal(init.signal)
        init = await self._apply_request_middleware(init)
        url = append_query_string(init.url, query_string)

        logger.debug(
            "Sending GraphQL %s request to %s (operation=%s, batch=%s)",
            init.method,
            init.url,
            operation_name,
            isinstance(query, list),
        )
        # Fields of the request take precedence over pass-through options
        fetch_kwargs = dict(init.options)
        fetch_kwargs.update(
            method=init.method, headers=init.headers, body=init.body, signal=init.signal
        )
        response = await fetch(url, **fetch_kwargs)
        logger.debug("Received HTTP %s from %s", response.status, init.url)
        return await interpret_response(
            response,
            config.json_serializer,
            config.error_policy,
            GraphQLRequestContext(query=query, variables=variables),
        )

    async def _apply_request_middleware(self, init: RequestInit) -> RequestInit:
        middleware = self.config.request_middleware
        if middleware is None:
            return init
        result = await _maybe_await(middleware(init))
        if not isinstance(result, RequestInit):
            raise InvalidArgumentError(
                f"Request middleware must return a RequestInit, got {type(result).__name__}"
            )
        return result

    def __repr__(self) -> str:
        return f"GraphQLClient(url={self.url!r}, method={self.config.method.value})"


def _select_signal(signal: Any, configured: Any) -> Any:
    """Prefer the keyword signal over the one in the call options."""
    selected = signal if signal is not None else configured
    check_signal(selected)
    return selected


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value

