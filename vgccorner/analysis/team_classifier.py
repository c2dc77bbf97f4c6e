"""Team archetype classification.

Scans a roster's abilities, items and known moves for speed control,
weather, terrain and choice items, then assigns exactly one archetype
from an ordered rule cascade (first matching rule wins).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from loguru import logger

from ..data.ids import to_id
from ..data.schemas import RosterEntry, TeamClassification


# Weather keyed by normalized ability / move id
WEATHER_ABILITIES: Dict[str, str] = {
    "drought": "sun",
    "drizzle": "rain",
    "sandstream": "sand",
    "snowwarning": "snow",
}

WEATHER_MOVES: Dict[str, str] = {
    "sunnyday": "sun",
    "raindance": "rain",
    "sandstorm": "sand",
    "snowscape": "snow",
    "hail": "snow",
}

WEATHER_NAMES: Dict[str, str] = {
    "sun": "Sun",
    "rain": "Rain",
    "sand": "Sand",
    "snow": "Snow",
}

CHOICE_ITEMS = frozenset({"choicespecs", "choiceband", "choicescarf"})

PSYCHIC_TERRAIN_MOVE = "psychicterrain"
PSYCHIC_TERRAIN_ABILITY = "psychicsurge"
EXPANDING_FORCE_MOVE = "expandingforce"

# Both species must be present
BALANCE_BROS = ("incineroar", "rillaboom")

UNCLASSIFIED = "Unclassified"

ARCHETYPE_DESCRIPTIONS: Dict[str, str] = {
    "Hard Trick Room": "A team built around Trick Room with multiple setters for reliability",
    "TailRoom": "A flexible team that can operate under both Tailwind and Trick Room",
    "Sun Offense": "An offensive team utilizing sun weather to power up Fire-type attacks",
    "Rain Offense": "An offensive team utilizing rain weather to power up Water-type attacks",
    "Balance Bros": "A balanced team featuring Incineroar and Rillaboom for defensive synergy",
    "Psy-Spam": "A team focused on Psychic Terrain with Expanding Force for massive spread damage",
    "Tailwind Hyper Offense": "An aggressive team using Tailwind and Choice items for overwhelming speed and power",
    "Tailwind": "A speed-based team utilizing Tailwind for speed control",
    "Trick Room": "A team utilizing Trick Room for speed control",
    "Sun": "A team utilizing sun weather",
    "Rain": "A team utilizing rain weather",
    "Sand": "A team utilizing sandstorm weather",
    "Snow": "A team utilizing snow weather",
    UNCLASSIFIED: "A team that doesn't fit standard VGC archetypes",
}

FALLBACK_DESCRIPTION = "A unique team composition"


def describe_archetype(archetype: str) -> str:
    """Get the description of an archetype label."""
    return ARCHETYPE_DESCRIPTIONS.get(archetype, FALLBACK_DESCRIPTION)


@dataclass
class _Capabilities:
    weather_type: Optional[str] = None
    species: set = field(default_factory=set)
    trick_room_users: List[str] = field(default_factory=list)
    tailwind_users: List[str] = field(default_factory=list)
    weather_setters: List[str] = field(default_factory=list)
    psychic_terrain_users: List[str] = field(default_factory=list)
    choice_users: List[str] = field(default_factory=list)
    expanding_force_users: List[str] = field(default_factory=list)

    def set_weather(self, weather: str, member: str):
        # First weather seen decides the type
        if self.weather_type is None:
            self.weather_type = weather
        _add_unique(self.weather_setters, member)


def _add_unique(users: List[str], member: str):
    if member not in users:
        users.append(member)


class TeamClassifier:
    """Assign an archetype to a roster."""

    def classify(self, roster: Sequence[RosterEntry]) -> TeamClassification:
        """Classify a roster.

        Args:
            roster: Roster entries in team preview order

        Returns:
            TeamClassification with flags, contributing members and archetype
        """
        caps = self._scan(roster)
        archetype = self.archetype(caps)

        logger.debug(f"Classified {len(roster)} member roster as {archetype!r}")

        return TeamClassification(
            archetype=archetype,
            description=describe_archetype(archetype),
            has_trick_room=bool(caps.trick_room_users),
            has_tailwind=bool(caps.tailwind_users),
            has_weather_setter=bool(caps.weather_setters),
            weather_type=caps.weather_type,
            has_psychic_terrain=bool(caps.psychic_terrain_users),
            has_balance_bros=all(s in caps.species for s in BALANCE_BROS),
            has_choice_items=bool(caps.choice_users),
            trick_room_users=tuple(caps.trick_room_users),
            tailwind_users=tuple(caps.tailwind_users),
            weather_setters=tuple(caps.weather_setters),
            psychic_terrain_users=tuple(caps.psychic_terrain_users),
            choice_users=tuple(caps.choice_users),
            expanding_force_users=tuple(caps.expanding_force_users),
        )

    def _scan(self, roster: Sequence[RosterEntry]) -> _Capabilities:
        caps = _Capabilities()

        for pokemon in roster:
            name = pokemon.name
            caps.species.add(pokemon.id or to_id(name))

            ability = to_id(pokemon.ability)
            if ability in WEATHER_ABILITIES:
                caps.set_weather(WEATHER_ABILITIES[ability], name)
            elif ability == PSYCHIC_TERRAIN_ABILITY:
                _add_unique(caps.psychic_terrain_users, name)

            if to_id(pokemon.item) in CHOICE_ITEMS:
                _add_unique(caps.choice_users, name)

            for move in pokemon.moves:
                move_id = to_id(move)
                if move_id == "trickroom":
                    _add_unique(caps.trick_room_users, name)
                elif move_id == "tailwind":
                    _add_unique(caps.tailwind_users, name)
                elif move_id in WEATHER_MOVES:
                    caps.set_weather(WEATHER_MOVES[move_id], name)
                elif move_id == PSYCHIC_TERRAIN_MOVE:
                    _add_unique(caps.psychic_terrain_users, name)
                elif move_id == EXPANDING_FORCE_MOVE:
                    _add_unique(caps.expanding_force_users, name)

        return caps

    @staticmethod
    def archetype(caps: _Capabilities) -> str:
        """Apply the archetype rules in priority order."""
        has_trick_room = bool(caps.trick_room_users)
        has_tailwind = bool(caps.tailwind_users)
        has_choice = bool(caps.choice_users)
        weather = caps.weather_type

        if len(caps.trick_room_users) >= 2:
            return "Hard Trick Room"
        if has_tailwind and has_trick_room:
            return "TailRoom"
        if weather == "sun":
            return "Sun Offense"
        if weather == "rain":
            return "Rain Offense"
        if all(s in caps.species for s in BALANCE_BROS):
            return "Balance Bros"
        if caps.psychic_terrain_users and caps.expanding_force_users:
            return "Psy-Spam"
        if has_tailwind and has_choice:
            return "Tailwind Hyper Offense"
        if has_tailwind:
            return "Tailwind"
        if has_trick_room:
            return "Trick Room"
        if weather is not None:
            return WEATHER_NAMES[weather]
        return UNCLASSIFIED


def classify_team(roster: Sequence[RosterEntry]) -> TeamClassification:
    """Classify a roster with the default classifier."""
    return TeamClassifier().classify(roster)
