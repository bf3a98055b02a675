"""
Shared test fixtures and helpers for the graphql_fetch test suite.
"""

import json
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest

from graphql_fetch import GraphQLClient
from graphql_fetch.transport import FetchResponse

ENDPOINT = "https://api.example/graphql"


def make_response(
    body: Any,
    status: int = 200,
    content_type: Optional[str] = "application/json",
    headers: Optional[Dict[str, str]] = None,
) -> FetchResponse:
    """Build a transport response; non-string bodies are JSON encoded."""
    response_headers = dict(headers or {})
    if content_type is not None:
        response_headers["Content-Type"] = content_type
    text = body if isinstance(body, str) else json.dumps(body)
    return FetchResponse(status, response_headers, text)


@pytest.fixture
def endpoint() -> str:
    """GraphQL endpoint used across tests."""
    return ENDPOINT


@pytest.fixture
def fake_fetch() -> AsyncMock:
    """Transport double answering every call with an empty success."""
    return AsyncMock(return_value=make_response({"data": {}}))


@pytest.fixture
def client(fake_fetch: AsyncMock) -> GraphQLClient:
    """Client wired to the fake transport."""
    return GraphQLClient(ENDPOINT, fetch=fake_fetch)


@pytest.fixture
def response_factory():
    """Factory for transport responses."""
    return make_response
