"""Battle log parsers for Pokemon Showdown transcripts."""

from .move_impact import ImpactAnnotator, classify_speed_control, describe_impact
from .replay_parser import (
    LogTooLargeError,
    ReplayParseError,
    ReplayParser,
    parse_enhanced_showdown_log,
    parse_showdown_log,
    parse_team_sheet,
)
from .state_tracker import SideState, StateTracker, TrackedPokemon
from .tokenizer import LogEvent, parse_hp, tokenize
from .turn_assembler import TurnAssembler

__all__ = [
    "ImpactAnnotator",
    "classify_speed_control",
    "describe_impact",
    "LogTooLargeError",
    "ReplayParseError",
    "ReplayParser",
    "parse_enhanced_showdown_log",
    "parse_showdown_log",
    "parse_team_sheet",
    "SideState",
    "StateTracker",
    "TrackedPokemon",
    "LogEvent",
    "parse_hp",
    "tokenize",
    "TurnAssembler",
]
