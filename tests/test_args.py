"""
Tests for call argument normalization.
"""

import asyncio

import pytest
from graphql import parse

from graphql_fetch import (
    BatchRequestDocument,
    BatchRequestOptions,
    BatchRequestsExtendedOptions,
    InvalidArgumentError,
    RawRequestOptions,
    RequestExtendedOptions,
    RequestOptions,
)
from graphql_fetch.args import (
    check_signal,
    parse_batch_request_args,
    parse_batch_requests_extended_args,
    parse_raw_request_args,
    parse_raw_request_extended_args,
    parse_request_args,
    parse_request_extended_args,
)

QUERY = "query User($id: ID!) { user(id: $id) { name } }"


class TestParseRequestArgs:
    """Test parse_request_args."""

    def test_positional_form(self):
        """Test document, variables and headers given positionally."""
        options = parse_request_args(QUERY, {"id": "1"}, {"X-Trace": "abc"})

        assert options == RequestOptions(
            document=QUERY, variables={"id": "1"}, request_headers={"X-Trace": "abc"}
        )

    def test_document_node(self):
        """Test that a parsed document is accepted."""
        document = parse(QUERY)
        options = parse_request_args(document)
        assert options.document is document

    def test_options_object_passes_through(self):
        """Test that an options object is returned as is."""
        options = RequestOptions(document=QUERY, variables={"id": "1"})
        assert parse_request_args(options) is options

    def test_mapping_form(self):
        """Test the mapping form with RequestOptions keys."""
        options = parse_request_args({"document": QUERY, "variables": {"id": "2"}})

        assert options.document == QUERY
        assert options.variables == {"id": "2"}
        assert options.request_headers is None

    def test_mapping_unknown_key(self):
        """Test that unknown mapping keys are rejected."""
        with pytest.raises(InvalidArgumentError, match="Unknown"):
            parse_request_args({"document": QUERY, "operationName": "User"})

    def test_mapping_missing_document(self):
        """Test that the document key is required."""
        with pytest.raises(InvalidArgumentError, match="Missing"):
            parse_request_args({"variables": {}})

    def test_unsupported_first_argument(self):
        """Test that non-document, non-options values are rejected."""
        with pytest.raises(InvalidArgumentError):
            parse_request_args(42)

    def test_list_variables_rejected(self):
        """Test that a single request cannot take a list of variables."""
        with pytest.raises(InvalidArgumentError):
            parse_request_args(QUERY, [{"id": "1"}])

    def test_signal_must_be_event(self):
        """Test that the signal must be an asyncio.Event."""
        with pytest.raises(InvalidArgumentError, match="signal"):
            parse_request_args({"document": QUERY, "signal": object()})

    def test_check_signal(self):
        """Test the signal check shared by every call form."""
        check_signal(None)
        with pytest.raises(InvalidArgumentError, match="signal"):
            check_signal("nope")

    @pytest.mark.asyncio
    async def test_signal_event_accepted(self):
        """Test that an asyncio.Event is accepted as signal."""
        signal = asyncio.Event()
        options = parse_request_args({"document": QUERY, "signal": signal})
        assert options.signal is signal


class TestParseRawRequestArgs:
    """Test parse_raw_request_args."""

    def test_positional_form(self):
        """Test query and variables given positionally."""
        options = parse_raw_request_args(QUERY, {"id": "1"})
        assert options == RawRequestOptions(query=QUERY, variables={"id": "1"})

    def test_mapping_uses_query_key(self):
        """Test that the raw mapping form takes ``query``, not ``document``."""
        assert parse_raw_request_args({"query": QUERY}).query == QUERY

        with pytest.raises(InvalidArgumentError):
            parse_raw_request_args({"document": QUERY})


class TestParseBatchRequestArgs:
    """Test parse_batch_request_args."""

    def test_list_of_mappings(self):
        """Test entries given as mappings."""
        options = parse_batch_request_args(
            [
                {"document": "{ a }"},
                {"document": QUERY, "variables": {"id": "1"}},
            ],
            {"X-Trace": "abc"},
        )

        assert options.documents == [
            BatchRequestDocument(document="{ a }"),
            BatchRequestDocument(document=QUERY, variables={"id": "1"}),
        ]
        assert options.request_headers == {"X-Trace": "abc"}

    def test_mixed_entries(self):
        """Test entries given as text, objects and mappings together."""
        options = parse_batch_request_args(
            ["{ a }", BatchRequestDocument(document="{ b }"), {"document": "{ c }"}]
        )
        assert [entry.document for entry in options.documents] == ["{ a }", "{ b }", "{ c }"]

    def test_options_object_is_not_mutated(self):
        """Test that converting entries leaves the caller's options untouched."""
        options = BatchRequestOptions(documents=[{"document": "{ a }"}])
        parsed = parse_batch_request_args(options)

        assert parsed.documents == [BatchRequestDocument(document="{ a }")]
        assert options.documents == [{"document": "{ a }"}]

    def test_mapping_form(self):
        """Test the mapping form with BatchRequestOptions keys."""
        options = parse_batch_request_args({"documents": ["{ a }"], "request_headers": {"A": "1"}})

        assert len(options.documents) == 1
        assert options.request_headers == {"A": "1"}

    def test_unsupported_shapes(self):
        """Test rejected batch arguments."""
        with pytest.raises(InvalidArgumentError):
            parse_batch_request_args("{ a }")

        with pytest.raises(InvalidArgumentError):
            parse_batch_request_args([42])

        with pytest.raises(InvalidArgumentError):
            parse_batch_request_args([{"document": "{ a }", "extra": 1}])


class TestExtendedArgs:
    """Test the argument forms of the free functions."""

    def test_request_url_form(self):
        """Test url followed by positional request arguments."""
        options = parse_request_extended_args("https://api.example/graphql", QUERY, {"id": "1"})

        assert isinstance(options, RequestExtendedOptions)
        assert options.url == "https://api.example/graphql"
        assert options.variables == {"id": "1"}

    def test_request_mapping_form(self):
        """Test a mapping carrying url with the request keys."""
        options = parse_request_extended_args(
            {"url": "https://api.example/graphql", "document": QUERY}
        )
        assert options.url == "https://api.example/graphql"
        assert options.document == QUERY

    def test_mapping_without_url(self):
        """Test that the mapping form requires a url."""
        with pytest.raises(InvalidArgumentError, match="url"):
            parse_request_extended_args({"document": QUERY})

    def test_raw_request_options_object(self):
        """Test that extended options objects pass through."""
        options = parse_raw_request_extended_args(
            {"url": "https://api.example/graphql", "query": QUERY}
        )
        assert options.query == QUERY
        assert options.url == "https://api.example/graphql"

    def test_batch_requests_forms(self):
        """Test url and options object forms for batches."""
        from_url = parse_batch_requests_extended_args("https://api.example/graphql", ["{ a }"])
        assert from_url.url == "https://api.example/graphql"
        assert from_url.documents == [BatchRequestDocument(document="{ a }")]

        from_options = parse_batch_requests_extended_args(
            BatchRequestsExtendedOptions(
                documents=[{"document": "{ b }"}], url="https://other.example/graphql"
            )
        )
        assert from_options.url == "https://other.example/graphql"
        assert from_options.documents == [BatchRequestDocument(document="{ b }")]
