"""VGC Corner: structured analysis of Pokemon Showdown battle logs."""

from .config import AnalysisConfig, load_config
from .data.parsers import (
    LogTooLargeError,
    ReplayParseError,
    ReplayParser,
    parse_enhanced_showdown_log,
    parse_showdown_log,
)
from .data.schemas import BattleSummary, Side

__version__ = "0.1.0"

__all__ = [
    "AnalysisConfig",
    "load_config",
    "LogTooLargeError",
    "ReplayParseError",
    "ReplayParser",
    "parse_enhanced_showdown_log",
    "parse_showdown_log",
    "BattleSummary",
    "Side",
]
