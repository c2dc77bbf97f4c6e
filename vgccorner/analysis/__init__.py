"""Analysis over parsed battles: scoring, statistics and team archetypes."""

from .battle_stats import BattleStatsCollector
from .position import PositionScorer, TurningPointDetector
from .team_classifier import TeamClassifier, classify_team, describe_archetype
from .timeline import timeline_frame

__all__ = [
    "BattleStatsCollector",
    "PositionScorer",
    "TurningPointDetector",
    "TeamClassifier",
    "classify_team",
    "describe_archetype",
    "timeline_frame",
]
