"""
Exceptions raised by the GraphQL request pipeline.

Argument errors are raised before anything is sent. ClientError is raised
when a response fails the success conditions and carries both the response
and the request it answered. Transport failures are not wrapped: they reach
the caller as raised by the transport.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import aiohttp

from .models import GraphQLRequestContext, GraphQLResponse


class GraphQLFetchError(Exception):
    """
    Base exception for all graphql_fetch errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = kwargs


class InvalidArgumentError(GraphQLFetchError, ValueError):
    """Raised when a call is made with an unsupported argument shape."""

    pass


class RequestAbortedError(GraphQLFetchError):
    """Raised by the default transport when the cancellation signal is set."""

    def __init__(self, message: str = "The request was aborted", url: Optional[str] = None) -> None:
        super().__init__(message, url=url)
        self.url = url


class ClientError(GraphQLFetchError):
    """
    Raised when a GraphQL response is not a success.

    Attributes:
        response: The envelope as received, with status and headers
        request: Query text(s) and variables of the failed call
    """

    def __init__(self, response: GraphQLResponse, request: GraphQLRequestContext) -> None:
        message = self.extract_message(response)
        payload = json.dumps(
            {"response": response.to_dict(), "request": _request_to_dict(request)},
            default=str,
        )
        super().__init__(f"{message}: {payload}", status=response.status)
        self.response = response
        self.request = request

    @property
    def status(self) -> int:
        return self.response.status

    @staticmethod
    def extract_message(response: GraphQLResponse) -> str:
        """First server error message, or a generic one naming the status."""
        errors = response.errors
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            message = errors[0].get("message")
            if message is not None:
                return str(message)
        return f"GraphQL Error (Code: {response.status})"


def _request_to_dict(request: GraphQLRequestContext) -> dict:
    return {"query": request.query, "variables": request.variables}


def is_retryable_error(error: BaseException) -> bool:
    """
    Determine if an error is worth retrying.

    The pipeline never retries on its own; this classification is for
    callers building their own retry policy.

    Args:
        error: The exception raised by a call

    Returns:
        True if the error should be retried, False otherwise
    """
    if isinstance(error, ClientError):
        status = error.status
        return status in (408, 429) or 500 <= status < 600

    if isinstance(error, (aiohttp.ClientConnectionError, asyncio.TimeoutError)):
        return True

    return False
