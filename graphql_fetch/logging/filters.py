"""
Logging filters for graphql_fetch.

This module provides a filter that masks credentials which may end up in
log messages, such as authorization headers and tokens passed in variables.
"""

import logging
import re
from typing import List, Pattern, Tuple


class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in log messages."""

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        self.rules: List[Tuple[Pattern[str], str]] = [
            # Bearer and basic credentials
            (re.compile(r"\b(bearer|basic)(\s+)([a-zA-Z0-9._~+/=-]{8,})", re.IGNORECASE), r"\1\2***MASKED***"),
            # Authorization and API key headers in "name: value" or "name=value" form
            (
                re.compile(
                    r"""((?:authorization|x-api-key|api[_-]?key|token|secret|password)["']?\s*[:=]\s*["']?)(?!\*\*\*)([^\s"',}]+)""",
                    re.IGNORECASE,
                ),
                r"\1***MASKED***",
            ),
            # URLs with credentials
            (re.compile(r"(https?://[^:/@\s]+):([^@\s]+)@", re.IGNORECASE), r"\1:***MASKED***@"),
        ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to mask sensitive data."""
        message = record.getMessage()
        masked = message
        for pattern, replacement in self.rules:
            masked = pattern.sub(replacement, masked)

        if masked != message:
            record.msg = masked
            record.args = ()

        return True
