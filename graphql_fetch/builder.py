"""
Request building.

Builds the wire representation of a GraphQL request: a JSON body for POST,
a query string for GET. A request is a batch when ``query`` is a list; the
variables of a batch are then a list aligned index by index with it.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote

from multidict import CIMultiDict

from .constants import (
    ACCEPT_HEADER,
    CONTENT_TYPE_HEADER,
    CONTENT_TYPE_JSON,
    DEFAULT_ACCEPT,
)
from .exceptions import InvalidArgumentError
from .models import HTTPMethod, RequestInit
from .serializers import Serializer

Query = Union[str, List[str]]

# Transport keywords that the request itself determines
RESERVED_FETCH_OPTIONS = frozenset(["method", "headers", "body"])

# Whitespace, commas and comments are insignificant in GraphQL
_INSIGNIFICANT = re.compile(r"([\s,]|#[^\n\r]+)+")


def clean_query(query: str) -> str:
    """Collapse whitespace, commas and comments to single spaces and trim."""
    return _INSIGNIFICANT.sub(" ", query).strip()


def encode_uri_component(value: str) -> str:
    """Percent-encode everything except unreserved URI characters."""
    return quote(value, safe="-_.!~*'()")


def validate_variables_shape(query: Query, variables: Any) -> None:
    """
    Check that variables match the request mode.

    A single query takes a mapping (or nothing). A batch takes a list of the
    same length as the query list (or nothing).

    Raises:
        InvalidArgumentError: If the shapes do not match
    """
    if variables is None:
        return

    if isinstance(query, list):
        if not isinstance(variables, list):
            raise InvalidArgumentError(
                "Cannot create batch request with given variable type, array expected"
            )
        if len(variables) != len(query):
            raise InvalidArgumentError(
                f"Batch request has {len(query)} queries but {len(variables)} variable sets"
            )
    elif isinstance(variables, list):
        raise InvalidArgumentError(
            "Cannot create request with given variable type, mapping expected"
        )


def _without_none(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def build_query_string(
    query: Query,
    variables: Any,
    operation_name: Optional[str],
    serializer: Serializer,
) -> str:
    """
    Create the query string of a GET request.

    Args:
        query: Query text, or list of query texts for a batch
        variables: Variables mapping, or list of mappings for a batch
        operation_name: Operation name of a single request
        serializer: Serializer for variables and batch payloads

    Returns:
        Query string without the leading ``?``

    Raises:
        InvalidArgumentError: If variables do not match the request mode
    """
    validate_variables_shape(query, variables)

    if not isinstance(query, list):
        search = [f"query={encode_uri_component(clean_query(query))}"]
        if variables is not None:
            search.append(f"variables={encode_uri_component(serializer.stringify(variables))}")
        if operation_name:
            search.append(f"operationName={encode_uri_component(operation_name)}")
        return "&".join(search)

    payload = [
        _without_none(
            {
                "query": clean_query(current),
                "variables": (
                    serializer.stringify(variables[index])
                    if variables is not None and variables[index] is not None
                    else None
                ),
            }
        )
        for index, current in enumerate(query)
    ]
    return f"query={encode_uri_component(serializer.stringify(payload))}"


def create_request_body(
    query: Query,
    variables: Any,
    operation_name: Optional[str],
    serializer: Serializer,
) -> str:
    """
    Create the body of a POST request.

    Args:
        query: Query text, or list of query texts for a batch
        variables: Variables mapping, or list of mappings for a batch
        operation_name: Operation name of a single request
        serializer: Serializer for the body

    Returns:
        Serialized body

    Raises:
        InvalidArgumentError: If variables do not match the request mode
    """
    validate_variables_shape(query, variables)

    if not isinstance(query, list):
        return serializer.stringify(
            _without_none(
                {"query": query, "variables": variables, "operationName": operation_name}
            )
        )

    payload = [
        _without_none(
            {
                "query": current,
                "variables": variables[index] if variables is not None else None,
            }
        )
        for index, current in enumerate(query)
    ]
    return serializer.stringify(payload)


def build_request_init(
    method: HTTPMethod,
    url: str,
    query: Query,
    variables: Any,
    operation_name: Optional[str],
    headers: CIMultiDict,
    serializer: Serializer,
    options: Optional[Dict[str, Any]] = None,
    signal: Any = None,
) -> Tuple[RequestInit, str]:
    """
    Build the outbound request for ``method``.

    Args:
        method: HTTP method
        url: Endpoint URL
        query: Query text, or list of query texts for a batch
        variables: Variables matching the request mode
        operation_name: Operation name of a single request
        headers: Resolved request headers; copied, never modified
        serializer: Serializer for body or query string
        options: Pass-through transport options
        signal: Optional cancellation event

    Returns:
        Tuple of the RequestInit and the GET query string ("" for POST)

    Raises:
        InvalidArgumentError: If ``options`` sets method, headers or body
    """
    options = dict(options or {})
    reserved = sorted(RESERVED_FETCH_OPTIONS.intersection(options))
    if reserved:
        raise InvalidArgumentError(
            f"fetch_options cannot set {', '.join(reserved)}; use the client configuration"
        )
    # A signal in fetch_options is the client default; a per-call signal wins
    configured_signal = options.pop("signal", None)
    if signal is None:
        signal = configured_signal

    headers = CIMultiDict(headers)
    if ACCEPT_HEADER not in headers:
        headers[ACCEPT_HEADER] = DEFAULT_ACCEPT

    body = None
    query_string = ""
    if method == HTTPMethod.POST:
        body = create_request_body(query, variables, operation_name, serializer)
        if CONTENT_TYPE_HEADER not in headers:
            headers[CONTENT_TYPE_HEADER] = CONTENT_TYPE_JSON
    else:
        query_string = build_query_string(query, variables, operation_name, serializer)

    init = RequestInit(
        url=url,
        method=method.value,
        headers=headers,
        body=body,
        signal=signal,
        options=options,
        operation_name=operation_name,
        variables=variables,
    )
    return init, query_string


def append_query_string(url: str, query_string: str) -> str:
    """Append a query string to a URL that may already carry one."""
    if not query_string:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query_string}"
