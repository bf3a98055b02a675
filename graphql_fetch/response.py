"""
Response interpretation.

Reads a transport response, decides whether the call succeeded and either
builds the envelope returned to the caller or the ClientError raised to it.

A call succeeds when all of these hold:

- the transport reports success (2xx)
- data is present (in every entry, for a batch)
- the error policy accepts the response: non-empty ``errors`` in a single
  response fail unless the policy is ``all`` or ``ignore``; batches always
  pass this check
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Union

from .constants import CONTENT_TYPE_GQL, CONTENT_TYPE_HEADER, CONTENT_TYPE_JSON
from .exceptions import ClientError
from .models import ErrorPolicy, GraphQLRequestContext, GraphQLResponse
from .serializers import Serializer
from .transport import ResponseLike

logger = logging.getLogger(__name__)

Result = Union[Dict[str, Any], List[Any], str]


def is_json_content_type(content_type: str) -> bool:
    """Check if a Content-Type names the GraphQL response or JSON media type."""
    content_type = content_type.lower()
    return CONTENT_TYPE_GQL in content_type or CONTENT_TYPE_JSON in content_type


async def get_result(response: ResponseLike, serializer: Serializer) -> Result:
    """
    Read the response body.

    JSON bodies are parsed with ``serializer``; anything else is returned as
    text.
    """
    content_type = response.headers.get(CONTENT_TYPE_HEADER)
    text = await response.text()
    if content_type and is_json_content_type(content_type):
        return serializer.parse(text)
    return text


def _has_data(entry: Any) -> bool:
    return isinstance(entry, dict) and entry.get("data") is not None


def received_data(result: Result) -> bool:
    """Check that data is present, in every entry for a batch."""
    if isinstance(result, list):
        return all(_has_data(entry) for entry in result)
    return _has_data(result)


def passes_error_policy(result: Result, error_policy: ErrorPolicy) -> bool:
    """Check a response against the error policy; batches always pass."""
    if isinstance(result, list) or not isinstance(result, dict):
        return True
    errors = result.get("errors")
    if errors is None or (isinstance(errors, list) and not errors):
        return True
    return error_policy in (ErrorPolicy.ALL, ErrorPolicy.IGNORE)


def _strip_errors(entry: Any) -> Any:
    if isinstance(entry, dict):
        return {key: value for key, value in entry.items() if key != "errors"}
    return entry


def to_response(result: Result, response: ResponseLike) -> GraphQLResponse:
    """Wrap a parsed body in an envelope with the response status and headers."""
    if isinstance(result, list):
        return GraphQLResponse(status=response.status, headers=response.headers, data=result)
    if not isinstance(result, dict):
        # Plain text, or a JSON scalar where an object was expected
        return GraphQLResponse(
            status=response.status, headers=response.headers, error=str(result)
        )
    return GraphQLResponse(
        status=response.status,
        headers=response.headers,
        data=result.get("data"),
        errors=result.get("errors"),
        extensions=result.get("extensions"),
    )


async def interpret_response(
    response: ResponseLike,
    serializer: Serializer,
    error_policy: ErrorPolicy,
    request: GraphQLRequestContext,
) -> GraphQLResponse:
    """
    Turn a transport response into the call outcome.

    Args:
        response: Transport response
        serializer: Serializer for JSON bodies
        error_policy: Error policy of the client
        request: Query text(s) and variables, attached to a ClientError

    Returns:
        GraphQLResponse; for a batch ``data`` is the list of entries

    Raises:
        ClientError: If the response is not a success
    """
    result = await get_result(response, serializer)

    if response.ok and received_data(result) and passes_error_policy(result, error_policy):
        if error_policy == ErrorPolicy.IGNORE:
            if isinstance(result, list):
                result = [_strip_errors(entry) for entry in result]
            else:
                result = _strip_errors(result)
        return to_response(result, response)

    error_response = to_response(result, response)
    logger.debug(
        "GraphQL request failed with status %s: %s",
        response.status,
        ClientError.extract_message(error_response),
    )
    raise ClientError(error_response, request)
