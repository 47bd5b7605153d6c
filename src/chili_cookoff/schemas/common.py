"""Shared Pydantic helpers for request validation."""
from __future__ import annotations

import re
from typing import Annotated

from pydantic import Field

Rating = Annotated[int, Field(ge=1, le=5, description="Star rating from 1 to 5")]

_MALICIOUS_PATTERNS = (
    re.compile(r"<script[\s\S]*?>[\s\S]*?</script>", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<iframe[\s\S]*?>", re.IGNORECASE),
    re.compile(r"<embed[\s\S]*?>", re.IGNORECASE),
    re.compile(r"<object[\s\S]*?>", re.IGNORECASE),
    re.compile(r"eval\s*\(", re.IGNORECASE),
    re.compile(r"expression\s*\(", re.IGNORECASE),
)


def contains_malicious_content(value: str) -> bool:
    """Return True if the text matches a common script-injection pattern."""
    return any(pattern.search(value) for pattern in _MALICIOUS_PATTERNS)


def clean_optional_text(value: str | None, *, field: str) -> str | None:
    """Strip optional free text, map blanks to None and reject injection attempts."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if contains_malicious_content(value):
        raise ValueError(f"Invalid content detected in {field}")
    return value
