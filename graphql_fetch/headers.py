"""
Header resolution.

Client and per-call headers can be given as a mapping, a multidict, a list of
``(name, value)`` pairs, or a zero-argument function returning one of those.
Everything is resolved into a case-insensitive CIMultiDict.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from multidict import CIMultiDict

from .exceptions import InvalidArgumentError
from .models import HeadersConfig


def call_or_identity(value: Any) -> Any:
    """Call ``value`` if it is a producer function, otherwise return it."""
    return value() if callable(value) else value


def resolve_headers(headers: Optional[HeadersConfig]) -> CIMultiDict:
    """
    Convert a headers configuration into a CIMultiDict.

    Producer functions are called once per resolution, so a client configured
    with one sees fresh headers on every call. Pairs with an empty name or a
    None value are skipped.

    Args:
        headers: Headers configuration

    Returns:
        New CIMultiDict with the resolved headers

    Raises:
        InvalidArgumentError: If headers has an unsupported shape
    """
    headers = call_or_identity(headers)
    resolved: CIMultiDict = CIMultiDict()
    if headers is None:
        return resolved

    if isinstance(headers, Mapping):
        for name, value in headers.items():
            resolved.add(name, str(value))
        return resolved

    if isinstance(headers, (list, tuple)):
        for pair in headers:
            try:
                name, value = pair
            except (TypeError, ValueError):
                raise InvalidArgumentError(f"Invalid header pair: {pair!r}")
            if name and value is not None:
                resolved[name] = str(value)
        return resolved

    raise InvalidArgumentError(f"Unsupported headers type: {type(headers).__name__}")


def merge_headers(*configs: Optional[HeadersConfig]) -> CIMultiDict:
    """
    Resolve several header configurations, later ones taking precedence.

    A header name present in a later configuration replaces every value of
    that name from earlier ones, regardless of case.
    """
    merged: CIMultiDict = CIMultiDict()
    for config in configs:
        resolved = resolve_headers(config)
        for name in {key.lower(): key for key in resolved.keys()}.values():
            merged.popall(name, None)
        merged.extend(resolved)
    return merged
