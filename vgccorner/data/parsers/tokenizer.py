"""Tokenize Pokemon Showdown battle logs.

The log format is pipe-delimited, one event per line, with the command
in the second field:

    |move|p1a: Whimsicott|Tailwind|p1a: Whimsicott
    |switch|p1b: Typhlosion|Typhlosion-Hisui, L50, M|100/100

Anything that does not look like an event is dropped without error.
Field helpers in this module never raise; unparsable values fall back to
zero or None.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from loguru import logger

from ...config import DEFAULT_MAX_HP
from ..schemas import Side


DELIMITER = "|"

IDENTIFIER_PATTERN = re.compile(r'^p([12])([a-z]?):\s*(.*)$')
# At most 18 digits; longer runs parse as 0
INT_PATTERN = re.compile(r'^\s*([+-]?\d{1,18})(?!\d)')
LEVEL_PATTERN = re.compile(r'^L(\d{1,3})$')


@dataclass(frozen=True)
class LogEvent:
    """A single tokenized log line."""
    command: str
    fields: Tuple[str, ...]  # everything after the command
    raw: str

    def arg(self, index: int, default: str = "") -> str:
        """Get a field after the command, or a default when absent."""
        if 0 <= index < len(self.fields):
            return self.fields[index]
        return default

    def has_flag(self, flag: str) -> bool:
        """Check for a bracketed tag such as '[upkeep]' or '[from] ...'."""
        return any(f.startswith(flag) for f in self.fields)


def tokenize(text: str) -> List[LogEvent]:
    """Split raw log text into ordered events.

    Args:
        text: Raw battle log

    Returns:
        Events in log order; empty if nothing parsable was found
    """
    events: List[LogEvent] = []
    dropped = 0

    for line in (text or "").split("\n"):
        line = line.rstrip("\r")
        if not line.startswith(DELIMITER):
            if line.strip():
                dropped += 1
            continue

        parts = line.split(DELIMITER)
        if len(parts) < 2:
            dropped += 1
            continue

        events.append(LogEvent(command=parts[1], fields=tuple(parts[2:]), raw=line))

    if dropped:
        logger.debug(f"Dropped {dropped} non-event lines")

    return events


def parse_int(text: Optional[str]) -> int:
    """Parse a leading integer, defaulting to 0."""
    if not text:
        return 0
    match = INT_PATTERN.match(text)
    return int(match.group(1)) if match else 0


def parse_hp(text: Optional[str], previous_max: Optional[int] = None) -> Tuple[int, int]:
    """Parse an HP field into (current, max).

    Accepted shapes:
        "c/m"    -> (c, m), optionally followed by a status ("45/100 par")
        "n fnt"  -> (0, previous max or 100)
        "n"      -> (n, 100)

    Args:
        text: HP field from the log
        previous_max: Last known max HP of the member, if any

    Returns:
        Tuple of (current_hp, max_hp)
    """
    carried_max = previous_max if previous_max else DEFAULT_MAX_HP
    tokens = (text or "").replace("\\/", "/").split()
    if not tokens:
        return 0, carried_max

    if "fnt" in tokens[1:]:
        return 0, carried_max

    head = tokens[0]
    if "/" in head:
        current, _, maximum = head.partition("/")
        return max(0, parse_int(current)), max(0, parse_int(maximum))

    return max(0, parse_int(head)), DEFAULT_MAX_HP


def parse_hp_status(text: Optional[str]) -> Optional[str]:
    """Get the status suffix of an HP field ('45/100 par' -> 'par')."""
    tokens = (text or "").split()
    if len(tokens) > 1 and tokens[1] != "fnt":
        return tokens[1]
    return None


def side_from_token(token: Optional[str]) -> Optional[Side]:
    """Map 'p1', 'p2a: Name' or 'p1: Player' to a Side."""
    token = (token or "").strip()
    if token.startswith("p1"):
        return Side.PLAYER1
    if token.startswith("p2"):
        return Side.PLAYER2
    return None


def parse_identifier(identifier: Optional[str]) -> Tuple[Optional[Side], str, str]:
    """Parse a Pokemon identifier like 'p1a: Pikachu'.

    Returns:
        Tuple of (side, slot, pokemon_name); side is None when the
        identifier has no player prefix
    """
    identifier = (identifier or "").strip()
    match = IDENTIFIER_PATTERN.match(identifier)
    if match:
        side = Side.PLAYER1 if match.group(1) == "1" else Side.PLAYER2
        return side, match.group(2), match.group(3).strip()
    return None, "", identifier


def parse_details(details: Optional[str]) -> Tuple[str, int, str]:
    """Parse a details string like 'Ursaluna-Bloodmoon, L50, M'.

    Returns:
        Tuple of (species, level, gender)
    """
    parts = (details or "").split(",")
    species = parts[0].strip()
    level = 100  # Showdown omits the level at 100
    gender = ""

    for part in parts[1:]:
        part = part.strip()
        level_match = LEVEL_PATTERN.match(part)
        if level_match:
            level = int(level_match.group(1))
        elif part in ("M", "F"):
            gender = part

    return species, level, gender


def strip_effect_prefix(text: Optional[str]) -> str:
    """Drop 'move: ' / 'ability: ' / 'item: ' prefixes from effect names."""
    text = (text or "").strip()
    for prefix in ("move:", "ability:", "item:"):
        if text.lower().startswith(prefix):
            return text[len(prefix):].strip()
    return text
