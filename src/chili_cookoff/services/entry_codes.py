"""Entry codes let entrants find and edit their own entry.

Codes look like ``CHILI-7X2M``; the alphabet skips characters that are easy
to misread (0, O, I).
"""

from __future__ import annotations

import re
import secrets

CODE_PREFIX = "CHILI-"
CODE_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZ"
CODE_LENGTH = 4

_CODE_PATTERN = re.compile(r"^CHILI-[1-9A-HJ-NP-Z]{4}$")


def generate_entry_code() -> str:
    """Return a random entry code such as ``CHILI-7X2M``."""
    suffix = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
    return f"{CODE_PREFIX}{suffix}"


def is_valid_entry_code(code: str) -> bool:
    return bool(_CODE_PATTERN.match(code))


def format_entry_code(code: str) -> str:
    """Normalize user-typed input (``chili 7x2m``, ``7x2m``) to ``CHILI-7X2M``.

    Input that cannot be interpreted is returned unchanged.
    """
    cleaned = re.sub(r"[^A-Z0-9]", "", code.upper())
    if cleaned.startswith("CHILI"):
        return f"{CODE_PREFIX}{cleaned[5:9]}"
    if len(cleaned) == CODE_LENGTH:
        return f"{CODE_PREFIX}{cleaned}"
    return code
