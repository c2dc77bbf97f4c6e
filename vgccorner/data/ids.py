"""Showdown-style identifiers."""

import re
from typing import Optional


NON_ID_PATTERN = re.compile(r'[^a-z0-9]')


def to_id(name: Optional[str]) -> str:
    """Normalize a display name to a Showdown-style id ('King's Shield' -> 'kingsshield')."""
    if not name:
        return ""
    return NON_ID_PATTERN.sub("", name.lower())
