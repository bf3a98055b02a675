"""
Serializers used for request bodies and response payloads.

Any object exposing ``stringify(value) -> str`` and ``parse(text) -> value``
can be configured on a client in place of the default JSON serializer.
"""

from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Serializer(Protocol):
    """Serializer contract."""

    def stringify(self, value: Any) -> str:
        ...

    def parse(self, text: str) -> Any:
        ...


class JsonSerializer:
    """
    Default JSON serializer.

    Output is compact and keeps key insertion order, so serializing the same
    value twice yields the same text.
    """

    def __init__(self, ensure_ascii: bool = False) -> None:
        self.ensure_ascii = ensure_ascii

    def stringify(self, value: Any) -> str:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=self.ensure_ascii)

    def parse(self, text: str) -> Any:
        return json.loads(text)
