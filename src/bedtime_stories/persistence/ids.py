"""Identifier checks for values used as file names and key segments."""

import re

from bedtime_stories.errors import InvalidIdentifierError

_SAFE_ID = re.compile(r"[A-Za-z0-9_-]+")


def is_safe_id(value: str) -> bool:
    return bool(_SAFE_ID.fullmatch(value))


def checked_id(value: str, kind: str) -> str:
    """Return value unchanged, or raise InvalidIdentifierError."""
    if not is_safe_id(value):
        raise InvalidIdentifierError(kind, value)
    return value
