"""Attribute effect events to the action that caused them.

The log never links an effect to its cause; the events between one
primary action and the next are read as that action's consequences.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..ids import to_id
from ..schemas import Effectiveness, MoveImpact, Side, SpeedControl, StatChange
from .tokenizer import LogEvent, parse_hp, parse_identifier, parse_int, strip_effect_prefix


# Tempo effects keyed by normalized move id
SPEED_CONTROL_MOVES: Dict[str, SpeedControl] = {
    # Fake Out family
    "fakeout": SpeedControl.FLINCH,
    # Protect family
    "protect": SpeedControl.PROTECT,
    "detect": SpeedControl.PROTECT,
    "spikyshield": SpeedControl.PROTECT,
    "banefulbunker": SpeedControl.PROTECT,
    "kingsshield": SpeedControl.PROTECT,
    "silktrap": SpeedControl.PROTECT,
    "burningbulwark": SpeedControl.PROTECT,
    "obstruct": SpeedControl.PROTECT,
    # Field speed control
    "trickroom": SpeedControl.TRICK_ROOM,
    "tailwind": SpeedControl.TAILWIND,
    # Speed drops
    "icywind": SpeedControl.SPEED_DROP,
    "electroweb": SpeedControl.SPEED_DROP,
    "bulldoze": SpeedControl.SPEED_DROP,
    "rocktomb": SpeedControl.SPEED_DROP,
    "mudshot": SpeedControl.SPEED_DROP,
    "lowsweep": SpeedControl.SPEED_DROP,
    "scaryface": SpeedControl.SPEED_DROP,
    "stringshot": SpeedControl.SPEED_DROP,
    "cottonspore": SpeedControl.SPEED_DROP,
    # Paralysis
    "thunderwave": SpeedControl.PARALYSIS,
    "nuzzle": SpeedControl.PARALYSIS,
    "glare": SpeedControl.PARALYSIS,
    "stunspore": SpeedControl.PARALYSIS,
    "zapcannon": SpeedControl.PARALYSIS,
}

EFFECTIVENESS_EVENTS: Dict[str, Effectiveness] = {
    "-supereffective": Effectiveness.SUPER_EFFECTIVE,
    "-resisted": Effectiveness.NOT_VERY_EFFECTIVE,
    "-immune": Effectiveness.IMMUNE,
}

EFFECTIVENESS_DETAILS: Dict[Effectiveness, str] = {
    Effectiveness.SUPER_EFFECTIVE: "It's super effective",
    Effectiveness.NOT_VERY_EFFECTIVE: "It's not very effective",
    Effectiveness.IMMUNE: "It doesn't affect the target",
}

SPEED_CONTROL_DETAILS: Dict[SpeedControl, str] = {
    SpeedControl.PROTECT: "Protected itself",
    SpeedControl.TRICK_ROOM: "Dimensions twisted",
    SpeedControl.TAILWIND: "Tailwind blew",
    SpeedControl.SPEED_DROP: "Target's speed fell",
    SpeedControl.PARALYSIS: "Target was paralyzed",
}

# Commands buffered after a primary action
EFFECT_COMMANDS = frozenset({
    "-damage", "-heal", "-status", "faint", "-crit",
    "-supereffective", "-resisted", "-immune", "-miss",
    "-weather", "-fieldstart", "-boost", "-unboost",
})

HP_COMMANDS = frozenset({"-damage", "-heal"})


def classify_speed_control(move_name: Optional[str]) -> Optional[SpeedControl]:
    """Look up the tempo effect of a move by normalized id."""
    return SPEED_CONTROL_MOVES.get(to_id(move_name))


@dataclass
class Annotation:
    """Impact of one action plus the derived result tag and detail string."""
    impact: MoveImpact
    result: Optional[str] = None
    details: str = ""


@dataclass
class _ImpactDraft:
    damage_dealt: int = 0
    healing_done: int = 0
    status_inflicted: Optional[str] = None
    fainted: List[str] = field(default_factory=list)
    critical: bool = False
    missed: bool = False
    effectiveness: Optional[Effectiveness] = None
    speed_control: Optional[SpeedControl] = None
    weather_set: Optional[str] = None
    terrain_set: Optional[str] = None
    stat_changes: List[StatChange] = field(default_factory=list)

    def freeze(self) -> MoveImpact:
        return MoveImpact(
            damage_dealt=self.damage_dealt,
            healing_done=self.healing_done,
            status_inflicted=self.status_inflicted,
            fainted=tuple(self.fainted),
            critical=self.critical,
            missed=self.missed,
            effectiveness=self.effectiveness,
            speed_control=self.speed_control,
            weather_set=self.weather_set,
            terrain_set=self.terrain_set,
            stat_changes=tuple(self.stat_changes),
        )


class ImpactAnnotator:
    """Interpret a buffered run of effect events for one action."""

    def annotate(
        self,
        move_name: Optional[str],
        events: Sequence[LogEvent],
        hp_baselines: Optional[Dict[Tuple[Side, str], Optional[int]]] = None,
    ) -> Annotation:
        """Derive the impact of an action from the events that followed it.

        Args:
            move_name: Move used, or None for switches
            events: Effect events in log order
            hp_baselines: HP of each (side, member) before its first HP
                report in `events`, None when unknown

        Returns:
            Annotation with impact, result tag and details
        """
        draft = _ImpactDraft(speed_control=classify_speed_control(move_name))
        result: Optional[str] = None
        last_hp: Dict[Tuple[Side, str], Optional[int]] = dict(hp_baselines or {})

        for event in events:
            command = event.command

            if command in HP_COMMANDS:
                side, _, member = parse_identifier(event.arg(0))
                if side is None or not event.arg(1):
                    continue
                current, maximum = parse_hp(event.arg(1))
                previous = last_hp.get((side, member))
                if previous is None:
                    previous = maximum
                if current < previous:
                    draft.damage_dealt += previous - current
                elif current > previous:
                    draft.healing_done += current - previous
                last_hp[(side, member)] = current

            elif command == "-status":
                if event.arg(1):
                    draft.status_inflicted = event.arg(1)

            elif command == "faint":
                _, _, name = parse_identifier(event.arg(0))
                if name:
                    draft.fainted.append(name)

            elif command == "-crit":
                draft.critical = True
                result = "critical-hit"

            elif command in EFFECTIVENESS_EVENTS:
                draft.effectiveness = EFFECTIVENESS_EVENTS[command]
                result = draft.effectiveness.value

            elif command == "-miss":
                draft.missed = True
                result = "miss"

            elif command == "-weather":
                weather = event.arg(0)
                if weather and weather.lower() != "none" and not event.has_flag("[upkeep]"):
                    draft.weather_set = weather

            elif command == "-fieldstart":
                condition = strip_effect_prefix(event.arg(0))
                keyword = condition.lower()
                if "terrain" in keyword:
                    draft.terrain_set = condition
                elif "trick room" in keyword:
                    draft.speed_control = SpeedControl.TRICK_ROOM
                elif "tailwind" in keyword:
                    draft.speed_control = SpeedControl.TAILWIND

            elif command in ("-boost", "-unboost"):
                if len(event.fields) < 3:
                    continue
                _, _, member = parse_identifier(event.arg(0))
                stages = parse_int(event.arg(2))
                if command == "-unboost":
                    stages = -stages
                draft.stat_changes.append(StatChange(member=member, stat=event.arg(1), stages=stages))

        if result is None:
            if draft.missed:
                result = "miss"
            elif draft.fainted:
                result = "faint"
            elif draft.damage_dealt > 0:
                result = "success"

        impact = draft.freeze()
        return Annotation(impact=impact, result=result, details=describe_impact(impact))


def describe_impact(impact: MoveImpact) -> str:
    """Build a human-readable summary of an impact, empty if nothing notable."""
    details: List[str] = []

    if impact.critical:
        details.append("Critical hit")

    if impact.effectiveness is not None:
        details.append(EFFECTIVENESS_DETAILS[impact.effectiveness])

    if impact.speed_control is SpeedControl.FLINCH:
        details.append("Target flinched")
    elif impact.speed_control is not None:
        details.append(SPEED_CONTROL_DETAILS[impact.speed_control])

    for name in impact.fainted:
        details.append(f"{name} fainted")

    if impact.missed:
        details.append("But it missed")

    return ", ".join(details)
