"""Pydantic schemas for analyzed battles.

This module defines the immutable record produced by the replay parser:
the battle summary, its players and rosters, per-turn actions with their
impact, position scores, turning points and team classifications.
Every model is frozen; sequences are tuples and mappings are read-only
views, so a returned summary can be retained and shared without copying.
"""

from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


# ====================
# Enums
# ====================

class Side(str, Enum):
    """One of the two competing players."""
    PLAYER1 = "player1"
    PLAYER2 = "player2"

    @property
    def opponent(self) -> "Side":
        return Side.PLAYER2 if self is Side.PLAYER1 else Side.PLAYER1

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'Player 1'."""
        return "Player 1" if self is Side.PLAYER1 else "Player 2"


class Momentum(str, Enum):
    """Which side currently leads on position score."""
    PLAYER1 = "player1"
    PLAYER2 = "player2"
    NEUTRAL = "neutral"


class ActionType(str, Enum):
    MOVE = "move"
    SWITCH = "switch"
    ITEM = "item"


class Effectiveness(str, Enum):
    SUPER_EFFECTIVE = "super-effective"
    NOT_VERY_EFFECTIVE = "not-very-effective"
    IMMUNE = "immune"


class SpeedControl(str, Enum):
    """Tempo effect classified from the move used."""
    FLINCH = "flinch"
    PROTECT = "protect"
    TRICK_ROOM = "trick-room"
    TAILWIND = "tailwind"
    SPEED_DROP = "speed-drop"
    PARALYSIS = "paralysis"


class KeyMomentType(str, Enum):
    KO = "KO"
    TURNING_POINT = "turning_point"


class FrozenModel(BaseModel):
    """Base for all summary records."""

    model_config = ConfigDict(frozen=True)


def freeze_mapping(value: Mapping[Any, int]) -> Mapping[Any, int]:
    """Wrap a mapping in a read-only view over a private copy."""
    return MappingProxyType(dict(value))


# ====================
# Pokemon Schemas
# ====================

class MoveRef(FrozenModel):
    """Reference to a move by display name and normalized id."""
    id: str
    name: str


class RosterEntry(FrozenModel):
    """Value snapshot of a roster member.

    HP, status and tera type are only meaningful while the member is
    (or last was) active.
    """

    id: str
    name: str
    nickname: Optional[str] = None
    level: int = Field(default=0, ge=0)
    gender: str = ""
    ability: Optional[str] = None
    item: Optional[str] = None
    moves: Tuple[str, ...] = ()

    current_hp: int = Field(default=0, ge=0)
    max_hp: Optional[int] = Field(default=None, ge=0)
    status: Optional[str] = None
    tera_type: Optional[str] = None

    @model_validator(mode="after")
    def validate_hp(self) -> "RosterEntry":
        """Current HP never exceeds max HP."""
        if self.max_hp is not None and self.current_hp > self.max_hp:
            raise ValueError(f"{self.name}: current HP {self.current_hp} exceeds max {self.max_hp}")
        return self

    @property
    def is_fainted(self) -> bool:
        return self.max_hp is not None and self.current_hp == 0


# ====================
# Action Schemas
# ====================

class StatChange(FrozenModel):
    """A stat stage change reported after an action."""
    member: str
    stat: str
    stages: int


class MoveImpact(FrozenModel):
    """Consequences attributed to one action."""

    damage_dealt: int = Field(default=0, ge=0)
    healing_done: int = Field(default=0, ge=0)
    status_inflicted: Optional[str] = None
    fainted: Tuple[str, ...] = ()
    critical: bool = False
    missed: bool = False
    effectiveness: Optional[Effectiveness] = None
    speed_control: Optional[SpeedControl] = None
    weather_set: Optional[str] = None
    terrain_set: Optional[str] = None
    stat_changes: Tuple[StatChange, ...] = ()


class Action(FrozenModel):
    """A primary action (move or switch) taken by one side."""

    side: Side
    action_type: ActionType
    member: str
    move: Optional[MoveRef] = None
    switch_to: Optional[str] = None
    switched_in: Optional[RosterEntry] = None
    target: Optional[str] = None
    result: Optional[str] = None
    details: str = ""
    impact: Optional[MoveImpact] = None
    order: Optional[int] = Field(default=None, ge=0)


# ====================
# Turn Schemas
# ====================

class PositionScore(FrozenModel):
    """Competitive standing of both sides after a turn."""

    player1_score: float = Field(..., ge=0, le=100)
    player2_score: float = Field(..., ge=0, le=100)
    momentum: Momentum = Momentum.NEUTRAL

    @field_validator("player1_score", "player2_score")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        if not np.isfinite(v):
            raise ValueError(f"Score is not finite: {v}")
        return v

    def score(self, side: Side) -> float:
        return self.player1_score if side is Side.PLAYER1 else self.player2_score


class BoardState(FrozenModel):
    """Board after a turn has been fully processed."""

    player1_active: Optional[RosterEntry] = None
    player2_active: Optional[RosterEntry] = None
    player1_alive: Tuple[str, ...] = ()
    player2_alive: Tuple[str, ...] = ()
    player1_effects: Tuple[str, ...] = ()
    player2_effects: Tuple[str, ...] = ()
    weather: Optional[str] = None
    terrain: Optional[str] = None


class Turn(FrozenModel):
    """A single turn, numbered as declared in the transcript."""

    number: int
    actions: Tuple[Action, ...] = ()
    damage_dealt: Mapping[Side, int] = Field(default_factory=dict, validate_default=True)
    healing_done: Mapping[Side, int] = Field(default_factory=dict, validate_default=True)
    position_score: Optional[PositionScore] = None
    state_after: Optional[BoardState] = None

    @field_validator("damage_dealt", "healing_done")
    @classmethod
    def freeze_totals(cls, v: Mapping[Side, int]) -> Mapping[Side, int]:
        return freeze_mapping(v)

    @field_serializer("damage_dealt", "healing_done")
    def serialize_totals(self, v: Mapping[Side, int]) -> Dict[Side, int]:
        return dict(v)


# ====================
# Analysis Schemas
# ====================

class TurningPoint(FrozenModel):
    """A turn where the score gap swung significantly."""

    turn_number: int
    score1_before: float = Field(..., ge=0, le=100)
    score1_after: float = Field(..., ge=0, le=100)
    score2_before: float = Field(..., ge=0, le=100)
    score2_after: float = Field(..., ge=0, le=100)
    momentum_shift: float  # positive: player 1 gained
    significance: int = Field(..., ge=1, le=10)
    description: str


class KeyMoment(FrozenModel):
    turn_number: int
    description: str
    type: KeyMomentType
    significance: int = Field(..., ge=1, le=10)


class TeamClassification(FrozenModel):
    """Archetype of a roster plus the capabilities that produced it."""

    archetype: str
    description: str
    has_trick_room: bool = False
    has_tailwind: bool = False
    has_weather_setter: bool = False
    weather_type: Optional[str] = None
    has_psychic_terrain: bool = False
    has_balance_bros: bool = False
    has_choice_items: bool = False

    trick_room_users: Tuple[str, ...] = ()
    tailwind_users: Tuple[str, ...] = ()
    weather_setters: Tuple[str, ...] = ()
    psychic_terrain_users: Tuple[str, ...] = ()
    choice_users: Tuple[str, ...] = ()
    expanding_force_users: Tuple[str, ...] = ()


class EffectivenessStats(FrozenModel):
    super_effective: int = 0
    not_very_effective: int = 0
    neutral: int = 0


class PlayerStats(FrozenModel):
    move_count: int = 0
    switch_count: int = 0
    damage_dealt: int = 0
    damage_taken: int = 0
    healing_done: int = 0
    effectiveness: EffectivenessStats = Field(default_factory=EffectivenessStats)


class BattleStats(FrozenModel):
    """Aggregate statistics over the whole battle."""

    total_turns: int = 0
    move_frequency: Mapping[str, int] = Field(default_factory=dict, validate_default=True)
    switches: int = 0
    critical_hits: int = 0
    super_effective: int = 0
    not_very_effective: int = 0
    immune: int = 0
    avg_damage_per_turn: float = 0.0
    avg_heal_per_turn: float = 0.0
    player1_stats: PlayerStats = Field(default_factory=PlayerStats)
    player2_stats: PlayerStats = Field(default_factory=PlayerStats)
    turning_points: Tuple[TurningPoint, ...] = ()

    @field_validator("move_frequency")
    @classmethod
    def freeze_frequency(cls, v: Mapping[str, int]) -> Mapping[str, int]:
        return freeze_mapping(v)

    @field_serializer("move_frequency")
    def serialize_frequency(self, v: Mapping[str, int]) -> Dict[str, int]:
        return dict(v)

    def player_stats(self, side: Side) -> PlayerStats:
        return self.player1_stats if side is Side.PLAYER1 else self.player2_stats


# ====================
# Summary Schemas
# ====================

class Player(FrozenModel):
    name: str = ""
    team: Tuple[RosterEntry, ...] = ()
    team_size: int = 0
    losses: int = 0
    total_left: int = 0
    active: Optional[str] = None
    classification: Optional[TeamClassification] = None


class BattleSummary(FrozenModel):
    """Complete analysis of one battle transcript."""

    id: str
    format: str = ""
    timestamp: datetime
    player1: Player = Field(default_factory=Player)
    player2: Player = Field(default_factory=Player)
    winner: Optional[Side] = None
    turns: Tuple[Turn, ...] = ()
    stats: BattleStats = Field(default_factory=BattleStats)
    key_moments: Tuple[KeyMoment, ...] = ()

    def player(self, side: Side) -> Player:
        return self.player1 if side is Side.PLAYER1 else self.player2
