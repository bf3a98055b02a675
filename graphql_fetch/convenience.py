"""
Convenience functions for one-off GraphQL requests.

These functions create a throwaway GraphQLClient for the given endpoint and
run a single call on it, without requiring explicit client instantiation.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .args import (
    parse_batch_requests_extended_args,
    parse_raw_request_extended_args,
    parse_request_extended_args,
)
from .client import GraphQLClient
from .models import GraphQLResponse, HeadersConfig, Variables


async def request(
    url_or_options: Any,
    document: Any = None,
    variables: Optional[Variables] = None,
    request_headers: Optional[HeadersConfig] = None,
    **config: Any,
) -> Any:
    """
    Send a GraphQL document to an endpoint and return its data.

    Args:
        url_or_options: Endpoint URL, RequestExtendedOptions, or a mapping of
            its fields including ``url``
        document: Query text or DocumentNode (URL form only)
        variables: Operation variables (URL form only)
        request_headers: Headers for this call (URL form only)
        **config: ClientConfig fields for the throwaway client

    Returns:
        The ``data`` of the response

    Raises:
        InvalidArgumentError: If the arguments have an unsupported shape
        ClientError: If the response is not a success

    Example:
        ```python
        data = await request(
            "https://api.example.com/graphql",
            "query User($id: ID!) { user(id: $id) { name } }",
            {"id": "1"},
        )
        ```
    """
    options = parse_request_extended_args(url_or_options, document, variables, request_headers)
    client = GraphQLClient(options.url, **config)
    return await client.request(options)


async def raw_request(
    url_or_options: Any,
    query: Any = None,
    variables: Optional[Variables] = None,
    request_headers: Optional[HeadersConfig] = None,
    **config: Any,
) -> GraphQLResponse:
    """
    Send a GraphQL query to an endpoint and return the whole envelope.

    Takes the same arguments as ``request``, with ``query`` in place of
    ``document``.
    """
    options = parse_raw_request_extended_args(url_or_options, query, variables, request_headers)
    client = GraphQLClient(options.url, **config)
    return await client.raw_request(options)


async def batch_requests(
    url_or_options: Any,
    documents: Any = None,
    request_headers: Optional[HeadersConfig] = None,
    **config: Any,
) -> List[Dict[str, Any]]:
    """
    Send several GraphQL documents to an endpoint in one HTTP request.

    Example:
        ```python
        results = await batch_requests(
            "https://api.example.com/graphql",
            [{"document": "{ users { id } }"}, {"document": "{ posts { id } }"}],
        )
        ```
    """
    options = parse_batch_requests_extended_args(url_or_options, documents, request_headers)
    client = GraphQLClient(options.url, **config)
    return await client.batch_requests(options)
