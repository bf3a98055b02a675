"""
Document resolution.

Turns a query given as text or as a parsed DocumentNode into the text that
is sent over the wire plus, when it can be determined unambiguously, the
operation name.
"""

from __future__ import annotations

import logging
from typing import Optional

from graphql import DocumentNode, GraphQLError, OperationDefinitionNode, parse, print_ast

from .exceptions import InvalidArgumentError
from .models import Document, ResolvedDocument

logger = logging.getLogger(__name__)


def extract_operation_name(document: DocumentNode) -> Optional[str]:
    """
    Get the name of the only operation in a document.

    Fragment definitions are ignored. Documents with no operation or with
    several operations have no operation name.

    Args:
        document: Parsed GraphQL document

    Returns:
        The operation name, or None
    """
    operations = [
        definition
        for definition in document.definitions
        if isinstance(definition, OperationDefinitionNode)
    ]
    if len(operations) == 1 and operations[0].name is not None:
        return operations[0].name.value
    return None


def resolve_request_document(document: Document) -> ResolvedDocument:
    """
    Resolve a document into query text and operation name.

    Text documents are sent exactly as given; they are parsed only to find the
    operation name, and a document the parser rejects simply has no operation
    name. Parsed documents are printed back to canonical text.

    Args:
        document: Query text or DocumentNode

    Returns:
        ResolvedDocument with query text and optional operation name

    Raises:
        InvalidArgumentError: If document is neither text nor a DocumentNode
    """
    if isinstance(document, str):
        operation_name = None
        try:
            operation_name = extract_operation_name(parse(document))
        except GraphQLError as e:
            logger.debug("Could not parse document for operation name: %s", e.message)
        return ResolvedDocument(query=document, operation_name=operation_name)

    if isinstance(document, DocumentNode):
        return ResolvedDocument(
            query=print_ast(document),
            operation_name=extract_operation_name(document),
        )

    raise InvalidArgumentError(
        f"Expected a query string or DocumentNode, got {type(document).__name__}"
    )
