"""Track battle state incrementally from log events.

One StateTracker lives for a single parse. It owns the roster of both
sides, the active member pointer, losses, side field effects and stat
stages. Only the active member's HP and status are tracked; benched
members keep whatever was last observed while they were active.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from loguru import logger

from ...config import DEFAULT_MAX_HP, ScoringConfig
from ..ids import to_id
from ..schemas import BoardState, PositionScore, RosterEntry, Side
from .tokenizer import (
    LogEvent, parse_details, parse_hp, parse_identifier, parse_int,
    side_from_token, strip_effect_prefix,
)


@dataclass
class TrackedPokemon:
    """Mutable state of a roster member during a parse."""
    name: str
    id: str = ""
    nickname: Optional[str] = None
    level: int = 100
    gender: str = ""

    # From team sheets or revealed during battle
    ability: Optional[str] = None
    item: Optional[str] = None
    moves: List[str] = field(default_factory=list)

    # Live fields, meaningful while active
    current_hp: int = 0
    max_hp: Optional[int] = None
    status: Optional[str] = None
    tera_type: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            self.id = to_id(self.name)

    def matches(self, name: str) -> bool:
        return self.name == name or (self.nickname is not None and self.nickname == name)

    def add_move(self, move: str):
        if move and move not in self.moves:
            self.moves.append(move)

    def snapshot(self) -> RosterEntry:
        """Create an immutable copy for the summary."""
        return RosterEntry(
            id=self.id,
            name=self.name,
            nickname=self.nickname,
            level=self.level,
            gender=self.gender,
            ability=self.ability,
            item=self.item,
            moves=tuple(self.moves),
            current_hp=self.current_hp,
            max_hp=self.max_hp,
            status=self.status,
            tera_type=self.tera_type,
        )


@dataclass
class SideState:
    """State of one player's side."""
    name: str = ""
    team_size: int = 0
    roster: List[TrackedPokemon] = field(default_factory=list)
    active: Optional[TrackedPokemon] = None
    losses: int = 0
    field_effects: List[str] = field(default_factory=list)
    stat_stages: Dict[str, int] = field(default_factory=dict)

    def find(self, name: str) -> Optional[TrackedPokemon]:
        """First roster entry whose name or nickname equals `name`."""
        for pokemon in self.roster:
            if pokemon.matches(name):
                return pokemon
        return None

    def alive_names(self) -> Tuple[str, ...]:
        """Roster members not observed fainted."""
        return tuple(
            p.name for p in self.roster
            if not (p.max_hp is not None and p.current_hp == 0)
        )


class StateTracker:
    """Mutable battle state for a single parse."""

    def __init__(self):
        self._sides: Dict[Side, SideState] = {
            Side.PLAYER1: SideState(),
            Side.PLAYER2: SideState(),
        }
        self.weather: Optional[str] = None
        self.terrain: Optional[str] = None

    def side(self, side: Side) -> SideState:
        return self._sides[side]

    def sides(self) -> Iterator[Tuple[Side, SideState]]:
        return iter(self._sides.items())

    def active(self, side: Side) -> Optional[TrackedPokemon]:
        return self._sides[side].active

    # ====================
    # Metadata
    # ====================

    def set_player_name(self, side: Side, name: str):
        self._sides[side].name = name

    def set_team_size(self, side: Side, size: int):
        self._sides[side].team_size = size

    def add_to_roster(self, side: Side, pokemon: TrackedPokemon):
        """Append in team preview order. Duplicate names add a second entry."""
        self._sides[side].roster.append(pokemon)

    def resolve_side(self, player_name: str) -> Side:
        """Map a player display name to its side.

        Returns:
            The matching side; Side.PLAYER2 when no registered name matches
        """
        for side, state in self._sides.items():
            if state.name and state.name == player_name:
                return side
        logger.warning(f"Player {player_name!r} is not registered, defaulting to {Side.PLAYER2.value}")
        return Side.PLAYER2

    # ====================
    # Active member
    # ====================

    def activate(self, side: Side, name: str, current_hp: int,
                 nickname: Optional[str] = None) -> Optional[TrackedPokemon]:
        """Point the side's active member at the first roster entry named `name`.

        Args:
            side: Side switching
            name: Species name of the incoming member
            current_hp: HP reported on the switch line
            nickname: Name used in identifiers for this member

        Returns:
            The activated entry, or None when the roster has no such member
        """
        state = self._sides[side]
        pokemon = None
        for candidate in state.roster:
            if candidate.name == name:
                pokemon = candidate
                break

        if pokemon is None:
            logger.debug(f"Switch to unknown member {name!r} on {side.value}")
            return None

        if pokemon.max_hp is None:
            pokemon.max_hp = DEFAULT_MAX_HP
        pokemon.current_hp = _clamp_hp(current_hp, pokemon.max_hp)
        if nickname:
            pokemon.nickname = nickname

        state.active = pokemon
        return pokemon

    def update_hp(self, side: Side, current_hp: int, max_hp: int, member: Optional[str] = None):
        """Apply an HP report to the side's active member.

        Reports naming another member (the partner slot in doubles) are
        ignored, since only the active member's HP is modeled.
        """
        pokemon = self._active_named(side, member)
        if pokemon is None:
            return
        if pokemon.max_hp is None:
            pokemon.max_hp = max_hp
        pokemon.current_hp = _clamp_hp(current_hp, pokemon.max_hp)

    def mark_fainted(self, side: Side, member: Optional[str] = None):
        """Count a loss and zero the fainted member's HP.

        The member stays on the roster. Without a name the active member
        is the one zeroed.
        """
        state = self._sides[side]
        pokemon = self._active_named(side, member)
        if pokemon is None and member:
            pokemon = state.find(member)
        if pokemon is not None:
            if pokemon.max_hp is None:
                pokemon.max_hp = DEFAULT_MAX_HP
            pokemon.current_hp = 0
        state.losses += 1

    def set_status(self, side: Side, status: str, member: Optional[str] = None):
        pokemon = self._active_named(side, member)
        if pokemon is not None:
            pokemon.status = status

    def set_tera_type(self, side: Side, tera_type: str, member: Optional[str] = None):
        pokemon = self._active_named(side, member)
        if pokemon is not None:
            pokemon.tera_type = tera_type

    def _active_named(self, side: Side, member: Optional[str]) -> Optional[TrackedPokemon]:
        """The active member, if `member` is empty or names it."""
        pokemon = self._sides[side].active
        if pokemon is None or (member and not pokemon.matches(member)):
            return None
        return pokemon

    # ====================
    # Field
    # ====================

    def record_field_effect(self, side: Side, effect: str):
        effects = self._sides[side].field_effects
        if effect not in effects:
            effects.append(effect)

    def remove_field_effect(self, side: Side, effect: str):
        effects = self._sides[side].field_effects
        if effect in effects:
            effects.remove(effect)

    def record_stat_stage(self, side: Side, stat: str, stages: int):
        """Last report wins; repeated reports for a stat do not accumulate."""
        self._sides[side].stat_stages[stat] = stages

    def set_weather(self, weather: Optional[str]):
        self.weather = weather

    def set_terrain(self, terrain: Optional[str]):
        self.terrain = terrain

    # ====================
    # Revealed information
    # ====================

    def find_member(self, side: Side, name: str) -> Optional[TrackedPokemon]:
        return self._sides[side].find(name)

    def reveal_move(self, side: Side, name: str, move: str):
        pokemon = self.find_member(side, name)
        if pokemon is None:
            logger.debug(f"Move {move!r} by unknown member {name!r} on {side.value}")
            return
        pokemon.add_move(move)

    def reveal_ability(self, side: Side, name: str, ability: str):
        pokemon = self.find_member(side, name)
        if pokemon is not None:
            pokemon.ability = ability

    def reveal_item(self, side: Side, name: str, item: str):
        pokemon = self.find_member(side, name)
        if pokemon is not None and pokemon.item is None:
            pokemon.item = item

    def apply_team_sheet(self, side: Side, sets: Sequence[TrackedPokemon]):
        """Merge open team sheet data into roster entries matched by species."""
        claimed = set()
        for poke_set in sets:
            for i, pokemon in enumerate(self._sides[side].roster):
                if i in claimed or pokemon.id != poke_set.id:
                    continue
                claimed.add(i)
                pokemon.ability = poke_set.ability or pokemon.ability
                pokemon.item = poke_set.item or pokemon.item
                pokemon.tera_type = poke_set.tera_type or pokemon.tera_type
                for move in poke_set.moves:
                    pokemon.add_move(move)
                break
            else:
                # Team sheet without a preview line for this member
                self._sides[side].roster.append(poke_set)

    # ====================
    # Event application
    # ====================

    def apply(self, event: LogEvent) -> Optional[TrackedPokemon]:
        """Apply a single in-battle event to the state.

        Returns:
            The newly activated member for switch-like events, else None
        """
        command = event.command
        if command in ("switch", "drag", "replace"):
            return self._apply_switch(event)
        elif command in ("-damage", "-heal"):
            self._apply_hp(event)
        elif command == "faint":
            self._apply_faint(event)
        elif command == "-status":
            self._apply_status(event)
        elif command == "-terastallize":
            self._apply_tera(event)
        elif command in ("-boost", "-unboost"):
            self._apply_stat_change(event)
        elif command in ("-sidestart", "-sideend"):
            self._apply_side_condition(event)
        elif command == "-weather":
            self._apply_weather(event)
        elif command in ("-fieldstart", "-fieldend"):
            self._apply_field(event)
        elif command == "move":
            side, _, name = parse_identifier(event.arg(0))
            if side is not None and event.arg(1):
                self.reveal_move(side, name, event.arg(1).strip())
        elif command == "-ability":
            side, _, name = parse_identifier(event.arg(0))
            if side is not None and event.arg(1):
                self.reveal_ability(side, name, strip_effect_prefix(event.arg(1)))
        elif command in ("-item", "-enditem"):
            side, _, name = parse_identifier(event.arg(0))
            if side is not None and event.arg(1):
                self.reveal_item(side, name, strip_effect_prefix(event.arg(1)))
        return None

    def _apply_switch(self, event: LogEvent) -> Optional[TrackedPokemon]:
        side, _, nickname = parse_identifier(event.arg(0))
        if side is None:
            return None
        species, _, _ = parse_details(event.arg(1))
        hp_field = event.arg(2)
        current_hp = parse_hp(hp_field)[0] if hp_field else DEFAULT_MAX_HP
        return self.activate(side, species, current_hp, nickname=nickname)

    def _apply_hp(self, event: LogEvent):
        side, _, name = parse_identifier(event.arg(0))
        if side is None or not event.arg(1):
            return
        active = self.active(side)
        current_hp, max_hp = parse_hp(event.arg(1), active.max_hp if active else None)
        self.update_hp(side, current_hp, max_hp, member=name)

    def _apply_faint(self, event: LogEvent):
        side, _, name = parse_identifier(event.arg(0))
        if side is not None:
            self.mark_fainted(side, member=name)

    def _apply_status(self, event: LogEvent):
        side, _, name = parse_identifier(event.arg(0))
        if side is not None and event.arg(1):
            self.set_status(side, event.arg(1), member=name)

    def _apply_tera(self, event: LogEvent):
        side, _, name = parse_identifier(event.arg(0))
        if side is not None and event.arg(1):
            self.set_tera_type(side, event.arg(1), member=name)

    def _apply_stat_change(self, event: LogEvent):
        side, _, _ = parse_identifier(event.arg(0))
        if side is None or not event.arg(1):
            return
        stages = parse_int(event.arg(2))
        if event.command == "-unboost":
            stages = -stages
        self.record_stat_stage(side, event.arg(1), stages)

    def _apply_side_condition(self, event: LogEvent):
        # Format: |-sidestart|p1: Player|move: Tailwind
        side = side_from_token(event.arg(0))
        condition = strip_effect_prefix(event.arg(1))
        if side is None or not condition:
            return
        if event.command == "-sidestart":
            self.record_field_effect(side, condition)
        else:
            self.remove_field_effect(side, condition)

    def _apply_weather(self, event: LogEvent):
        weather = event.arg(0)
        if event.has_flag("[upkeep]"):
            return
        if not weather or weather.lower() == "none":
            self.set_weather(None)
        else:
            self.set_weather(weather)

    def _apply_field(self, event: LogEvent):
        condition = strip_effect_prefix(event.arg(0))
        if "terrain" not in condition.lower():
            return
        if event.command == "-fieldstart":
            self.set_terrain(condition)
        elif self.terrain == condition:
            self.set_terrain(None)

    # ====================
    # Snapshots
    # ====================

    def position_score(self, scoring: Optional[ScoringConfig] = None) -> PositionScore:
        """Score both sides from the current active members and losses."""
        from ...analysis.position import PositionScorer

        return PositionScorer(scoring).score(self)

    def board_state(self) -> BoardState:
        p1 = self._sides[Side.PLAYER1]
        p2 = self._sides[Side.PLAYER2]
        return BoardState(
            player1_active=p1.active.snapshot() if p1.active else None,
            player2_active=p2.active.snapshot() if p2.active else None,
            player1_alive=p1.alive_names(),
            player2_alive=p2.alive_names(),
            player1_effects=tuple(p1.field_effects),
            player2_effects=tuple(p2.field_effects),
            weather=self.weather,
            terrain=self.terrain,
        )


def _clamp_hp(current: int, maximum: int) -> int:
    return max(0, min(current, maximum))
