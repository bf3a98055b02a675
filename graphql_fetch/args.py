"""
Argument normalization.

Client methods and free functions accept several call shapes: positional
document/variables/headers, an options object, or a mapping with the same
keys. The helpers here collapse each shape into one canonical options
dataclass, telling the shapes apart by the type of the first argument.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any, Dict, Mapping, Optional, Sequence, Type, TypeVar, Union

from graphql import DocumentNode

from .exceptions import InvalidArgumentError
from .models import (
    BatchRequestDocument,
    BatchRequestOptions,
    BatchRequestsExtendedOptions,
    HeadersConfig,
    RawRequestExtendedOptions,
    RawRequestOptions,
    RequestExtendedOptions,
    RequestOptions,
    Variables,
)

T = TypeVar("T")


def _is_document(value: Any) -> bool:
    return isinstance(value, (str, DocumentNode))


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _from_mapping(
    cls: Type[T],
    options: Mapping[str, Any],
    required: Sequence[str],
    optional: Sequence[str],
) -> Dict[str, Any]:
    """Pick constructor arguments for ``cls`` out of a mapping."""
    unknown = set(options) - set(required) - set(optional)
    if unknown:
        raise InvalidArgumentError(
            f"Unknown {cls.__name__} keys: {', '.join(sorted(unknown))}"
        )
    missing = [key for key in required if key not in options]
    if missing:
        raise InvalidArgumentError(
            f"Missing {cls.__name__} keys: {', '.join(missing)}"
        )
    return {key: options[key] for key in (*required, *optional) if key in options}


def _check_single_variables(variables: Any) -> None:
    if variables is None:
        return
    if not isinstance(variables, Mapping):
        raise InvalidArgumentError(
            f"Variables must be a mapping, got {type(variables).__name__}"
        )


def check_signal(signal: Any) -> None:
    """Reject cancellation signals that are not an asyncio.Event."""
    if signal is not None and not isinstance(signal, asyncio.Event):
        raise InvalidArgumentError("signal must be an asyncio.Event")


def parse_request_args(
    document_or_options: Any,
    variables: Optional[Variables] = None,
    request_headers: Optional[HeadersConfig] = None,
) -> RequestOptions:
    """
    Normalize the arguments of a single request.

    Args:
        document_or_options: Document, RequestOptions or mapping of its fields
        variables: Operation variables (positional form only)
        request_headers: Per-call headers (positional form only)

    Returns:
        RequestOptions

    Raises:
        InvalidArgumentError: If the call shape is not supported
    """
    if isinstance(document_or_options, RequestOptions):
        options = document_or_options
    elif isinstance(document_or_options, Mapping):
        options = RequestOptions(
            **_from_mapping(
                RequestOptions,
                document_or_options,
                required=("document",),
                optional=("variables", "request_headers", "signal"),
            )
        )
    elif _is_document(document_or_options):
        options = RequestOptions(
            document=document_or_options,
            variables=variables,
            request_headers=request_headers,
        )
    else:
        raise InvalidArgumentError(
            f"Expected a document or request options, got {type(document_or_options).__name__}"
        )

    if not _is_document(options.document):
        raise InvalidArgumentError(
            f"Expected a query string or DocumentNode, got {type(options.document).__name__}"
        )
    _check_single_variables(options.variables)
    check_signal(options.signal)
    return options


def parse_raw_request_args(
    query_or_options: Any,
    variables: Optional[Variables] = None,
    request_headers: Optional[HeadersConfig] = None,
) -> RawRequestOptions:
    """Normalize the arguments of a raw request."""
    if isinstance(query_or_options, RawRequestOptions):
        options = query_or_options
    elif isinstance(query_or_options, Mapping):
        options = RawRequestOptions(
            **_from_mapping(
                RawRequestOptions,
                query_or_options,
                required=("query",),
                optional=("variables", "request_headers", "signal"),
            )
        )
    elif _is_document(query_or_options):
        options = RawRequestOptions(
            query=query_or_options,
            variables=variables,
            request_headers=request_headers,
        )
    else:
        raise InvalidArgumentError(
            f"Expected a query or raw request options, got {type(query_or_options).__name__}"
        )

    if not _is_document(options.query):
        raise InvalidArgumentError(
            f"Expected a query string or DocumentNode, got {type(options.query).__name__}"
        )
    _check_single_variables(options.variables)
    check_signal(options.signal)
    return options


def _to_batch_document(entry: Any) -> BatchRequestDocument:
    if isinstance(entry, BatchRequestDocument):
        document = entry
    elif isinstance(entry, Mapping):
        document = BatchRequestDocument(
            **_from_mapping(
                BatchRequestDocument,
                entry,
                required=("document",),
                optional=("variables",),
            )
        )
    elif _is_document(entry):
        document = BatchRequestDocument(document=entry)
    else:
        raise InvalidArgumentError(
            f"Expected a batch document, got {type(entry).__name__}"
        )

    if not _is_document(document.document):
        raise InvalidArgumentError(
            f"Expected a query string or DocumentNode, got {type(document.document).__name__}"
        )
    _check_single_variables(document.variables)
    return document


def parse_batch_request_args(
    documents_or_options: Any,
    request_headers: Optional[HeadersConfig] = None,
) -> BatchRequestOptions:
    """
    Normalize the arguments of a batch request.

    Args:
        documents_or_options: Sequence of batch documents, BatchRequestOptions
            or mapping of its fields
        request_headers: Per-call headers (positional form only)

    Returns:
        BatchRequestOptions with every entry converted to BatchRequestDocument

    Raises:
        InvalidArgumentError: If the call shape is not supported
    """
    if isinstance(documents_or_options, BatchRequestOptions):
        options = documents_or_options
    elif isinstance(documents_or_options, Mapping):
        options = BatchRequestOptions(
            **_from_mapping(
                BatchRequestOptions,
                documents_or_options,
                required=("documents",),
                optional=("request_headers", "signal"),
            )
        )
    elif _is_sequence(documents_or_options):
        options = BatchRequestOptions(
            documents=list(documents_or_options),
            request_headers=request_headers,
        )
    else:
        raise InvalidArgumentError(
            f"Expected a list of documents or batch options, got {type(documents_or_options).__name__}"
        )

    if not _is_sequence(options.documents):
        raise InvalidArgumentError("Batch documents must be a list")
    check_signal(options.signal)
    return replace(
        options, documents=[_to_batch_document(entry) for entry in options.documents]
    )


def _pop_url(options: Mapping[str, Any]) -> tuple:
    if "url" not in options:
        raise InvalidArgumentError("Missing url")
    rest = {key: value for key, value in options.items() if key != "url"}
    return options["url"], rest


def parse_request_extended_args(
    url_or_options: Union[str, RequestExtendedOptions, Mapping[str, Any]],
    document: Any = None,
    variables: Optional[Variables] = None,
    request_headers: Optional[HeadersConfig] = None,
) -> RequestExtendedOptions:
    """Normalize the arguments of the ``request`` free function."""
    if isinstance(url_or_options, RequestExtendedOptions):
        parse_request_args(url_or_options)
        return url_or_options
    if isinstance(url_or_options, Mapping):
        url, rest = _pop_url(url_or_options)
        options = parse_request_args(rest)
    else:
        url = url_or_options
        options = parse_request_args(document, variables, request_headers)
    return RequestExtendedOptions(
        document=options.document,
        variables=options.variables,
        request_headers=options.request_headers,
        signal=options.signal,
        url=url,
    )


def parse_raw_request_extended_args(
    url_or_options: Union[str, RawRequestExtendedOptions, Mapping[str, Any]],
    query: Any = None,
    variables: Optional[Variables] = None,
    request_headers: Optional[HeadersConfig] = None,
) -> RawRequestExtendedOptions:
    """Normalize the arguments of the ``raw_request`` free function."""
    if isinstance(url_or_options, RawRequestExtendedOptions):
        parse_raw_request_args(url_or_options)
        return url_or_options
    if isinstance(url_or_options, Mapping):
        url, rest = _pop_url(url_or_options)
        options = parse_raw_request_args(rest)
    else:
        url = url_or_options
        options = parse_raw_request_args(query, variables, request_headers)
    return RawRequestExtendedOptions(
        query=options.query,
        variables=options.variables,
        request_headers=options.request_headers,
        signal=options.signal,
        url=url,
    )


def parse_batch_requests_extended_args(
    url_or_options: Union[str, BatchRequestsExtendedOptions, Mapping[str, Any]],
    documents: Any = None,
    request_headers: Optional[HeadersConfig] = None,
) -> BatchRequestsExtendedOptions:
    """Normalize the arguments of the ``batch_requests`` free function."""
    if isinstance(url_or_options, BatchRequestsExtendedOptions):
        return parse_batch_request_args(url_or_options)
    if isinstance(url_or_options, Mapping):
        url, rest = _pop_url(url_or_options)
        options = parse_batch_request_args(rest)
    else:
        url = url_or_options
        options = parse_batch_request_args(documents, request_headers)
    return BatchRequestsExtendedOptions(
        documents=options.documents,
        request_headers=options.request_headers,
        signal=options.signal,
        url=url,
    )
