"""
Tests for request building.
"""

import asyncio
import json
from urllib.parse import parse_qs

import pytest
from multidict import CIMultiDict

from graphql_fetch import HTTPMethod, InvalidArgumentError, JsonSerializer
from graphql_fetch.builder import (
    append_query_string,
    build_query_string,
    build_request_init,
    clean_query,
    create_request_body,
    encode_uri_component,
    validate_variables_shape,
)

ENDPOINT = "https://api.example/graphql"


@pytest.fixture
def serializer() -> JsonSerializer:
    return JsonSerializer()


class TestCleanQuery:
    """Test clean_query."""

    def test_collapses_whitespace_commas_and_comments(self):
        """Test that insignificant characters collapse to single spaces."""
        query = "query {\n  me, # the viewer\n  { id }\n}"
        assert clean_query(query) == "query { me { id } }"

    def test_trims(self):
        """Test leading and trailing whitespace removal."""
        assert clean_query("   { me }\n\n") == "{ me }"

    def test_idempotent(self):
        """Test that cleaning twice changes nothing."""
        query = "query A($id: ID!,\n $n: Int) {\n\tuser(id: $id) { name } # x\n}"
        once = clean_query(query)
        assert clean_query(once) == once


class TestEncodeUriComponent:
    """Test encode_uri_component."""

    def test_reserved_characters(self):
        """Test that reserved characters are percent encoded."""
        assert encode_uri_component("{ a: 1 }/&=") == "%7B%20a%3A%201%20%7D%2F%26%3D"

    def test_unreserved_characters(self):
        """Test that unreserved characters are kept."""
        assert encode_uri_component("a-b_c.d!e~f*g'h(i)") == "a-b_c.d!e~f*g'h(i)"


class TestValidateVariablesShape:
    """Test validate_variables_shape."""

    def test_valid_shapes(self):
        """Test accepted combinations."""
        validate_variables_shape("{ a }", None)
        validate_variables_shape("{ a }", {"x": 1})
        validate_variables_shape(["{ a }", "{ b }"], None)
        validate_variables_shape(["{ a }", "{ b }"], [{"x": 1}, None])

    def test_batch_requires_list(self):
        """Test that batch variables must be a list."""
        with pytest.raises(InvalidArgumentError, match="array expected"):
            validate_variables_shape(["{ a }"], {"x": 1})

    def test_batch_length_mismatch(self):
        """Test that batch variables must align with the queries."""
        with pytest.raises(InvalidArgumentError):
            validate_variables_shape(["{ a }", "{ b }"], [{"x": 1}])

    def test_single_rejects_list(self):
        """Test that a single query cannot take a list of variables."""
        with pytest.raises(InvalidArgumentError):
            validate_variables_shape("{ a }", [{"x": 1}])


class TestBuildQueryString:
    """Test GET query strings."""

    def test_single_query(self, serializer):
        """Test query, variables and operation name parameters."""
        query_string = build_query_string(
            "query User($id: ID!) {\n  user(id: $id) { name }\n}",
            {"id": "1"},
            "User",
            serializer,
        )
        params = parse_qs(query_string)

        assert params["query"] == ["query User($id: ID!) { user(id: $id) { name } }"]
        assert json.loads(params["variables"][0]) == {"id": "1"}
        assert params["operationName"] == ["User"]

    def test_absent_parameters_are_omitted(self, serializer):
        """Test that missing variables and operation name add nothing."""
        assert build_query_string("{ me { id } }", None, None, serializer) == (
            "query=%7B%20me%20%7B%20id%20%7D%20%7D"
        )

    def test_batch_double_serializes_variables(self, serializer):
        """Test that each batch entry carries its variables as JSON text."""
        query_string = build_query_string(
            ["{\n a }", "query B($x: Int) { b(x: $x) }"],
            [None, {"x": 1}],
            None,
            serializer,
        )
        payload = json.loads(parse_qs(query_string)["query"][0])

        assert payload == [
            {"query": "{ a }"},
            {"query": "query B($x: Int) { b(x: $x) }", "variables": '{"x":1}'},
        ]

    def test_batch_with_bad_variables(self, serializer):
        """Test shape validation on GET batches."""
        with pytest.raises(InvalidArgumentError):
            build_query_string(["{ a }"], {"x": 1}, None, serializer)


class TestCreateRequestBody:
    """Test POST bodies."""

    def test_single_query(self, serializer):
        """Test the body of a single operation."""
        body = create_request_body("query A { a }", {"x": 1}, "A", serializer)
        assert json.loads(body) == {"query": "query A { a }", "variables": {"x": 1}, "operationName": "A"}

    def test_absent_fields_are_omitted(self, serializer):
        """Test that None fields are left out of the body."""
        assert create_request_body("{ me { id } }", None, None, serializer) == '{"query":"{ me { id } }"}'

    def test_query_text_is_not_cleaned(self, serializer):
        """Test that POST bodies carry the query exactly as given."""
        body = create_request_body("{\n  me # who\n}", None, None, serializer)
        assert json.loads(body)["query"] == "{\n  me # who\n}"

    def test_batch(self, serializer):
        """Test the body of a batch."""
        body = create_request_body(["{ a }", "{ b }"], [{"x": 1}, None], None, serializer)
        assert json.loads(body) == [{"query": "{ a }", "variables": {"x": 1}}, {"query": "{ b }"}]

    def test_batch_with_bad_variables(self, serializer):
        """Test shape validation on POST batches."""
        with pytest.raises(InvalidArgumentError):
            create_request_body(["{ a }", "{ b }"], [{"x": 1}], None, serializer)


class TestBuildRequestInit:
    """Test build_request_init."""

    def test_post_defaults(self, serializer):
        """Test Accept and Content-Type defaults for POST."""
        init, query_string = build_request_init(
            HTTPMethod.POST, ENDPOINT, "{ me { id } }", None, None, CIMultiDict(), serializer
        )

        assert query_string == ""
        assert init.method == "POST"
        assert init.url == ENDPOINT
        assert init.body == '{"query":"{ me { id } }"}'
        assert init.headers["Accept"] == "application/graphql-response+json, application/json"
        assert init.headers["Content-Type"] == "application/json"

    def test_get_has_no_body_or_content_type(self, serializer):
        """Test that GET requests carry everything in the query string."""
        init, query_string = build_request_init(
            HTTPMethod.GET, ENDPOINT, "{ me { id } }", None, None, CIMultiDict(), serializer
        )

        assert init.method == "GET"
        assert init.body is None
        assert "Content-Type" not in init.headers
        assert init.url == ENDPOINT
        assert query_string.startswith("query=")

    def test_caller_headers_win(self, serializer):
        """Test that explicit Accept and Content-Type are kept."""
        headers = CIMultiDict({"accept": "application/json", "content-type": "application/graphql+json"})
        init, _ = build_request_init(
            HTTPMethod.POST, ENDPOINT, "{ a }", None, None, headers, serializer
        )

        assert init.headers.getall("Accept") == ["application/json"]
        assert init.headers.getall("Content-Type") == ["application/graphql+json"]

    def test_input_headers_not_modified(self, serializer):
        """Test that the given header collection is copied."""
        headers = CIMultiDict({"X-A": "1"})
        build_request_init(HTTPMethod.POST, ENDPOINT, "{ a }", None, None, headers, serializer)
        assert dict(headers) == {"X-A": "1"}

    def test_context_and_options(self, serializer):
        """Test that operation name, variables and options are attached."""
        options = {"ssl": False}
        init, _ = build_request_init(
            HTTPMethod.POST,
            ENDPOINT,
            "query A { a }",
            {"x": 1},
            "A",
            CIMultiDict(),
            serializer,
            options=options,
        )

        assert init.operation_name == "A"
        assert init.variables == {"x": 1}
        assert init.options == {"ssl": False}
        assert init.options is not options

    @pytest.mark.asyncio
    async def test_signal_in_options(self, serializer):
        """Test that a signal in options is a default the call can override."""
        configured, per_call = asyncio.Event(), asyncio.Event()
        options = {"signal": configured, "ssl": False}

        init, _ = build_request_init(
            HTTPMethod.POST, ENDPOINT, "{ a }", None, None, CIMultiDict(), serializer, options=options
        )
        assert init.signal is configured
        assert init.options == {"ssl": False}
        assert options["signal"] is configured

        init, _ = build_request_init(
            HTTPMethod.POST,
            ENDPOINT,
            "{ a }",
            None,
            None,
            CIMultiDict(),
            serializer,
            options=options,
            signal=per_call,
        )
        assert init.signal is per_call

    def test_reserved_options(self, serializer):
        """Test that options cannot replace method, headers or body."""
        with pytest.raises(InvalidArgumentError, match="body, method"):
            build_request_init(
                HTTPMethod.POST,
                ENDPOINT,
                "{ a }",
                None,
                None,
                CIMultiDict(),
                serializer,
                options={"method": "PUT", "body": "{}"},
            )


class TestAppendQueryString:
    """Test append_query_string."""

    def test_plain_url(self):
        assert append_query_string(ENDPOINT, "query=x") == f"{ENDPOINT}?query=x"

    def test_url_with_query(self):
        assert append_query_string(f"{ENDPOINT}?key=1", "query=x") == f"{ENDPOINT}?key=1&query=x"

    def test_empty_query_string(self):
        assert append_query_string(ENDPOINT, "") == ENDPOINT
