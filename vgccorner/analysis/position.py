"""Position scoring and turning point detection.

A side's position score blends the active member's remaining HP with the
share of the declared team still standing:

    score = 0.6 * hp_percent + 0.4 * team_percent

Each term is 0 when its denominator is unavailable (no active member, or
unknown team size). Turning points are turns where the change in score
gap between consecutive scored turns reaches the configured threshold.
"""

import math
from typing import TYPE_CHECKING, List, Optional, Sequence

import numpy as np
from loguru import logger

from ..config import HP_WEIGHT, TEAM_WEIGHT, ScoringConfig
from ..data.schemas import (
    KeyMoment, KeyMomentType, Momentum, PositionScore, Side, Turn, TurningPoint,
)

if TYPE_CHECKING:
    from ..data.parsers.state_tracker import SideState, StateTracker


def _percent(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return float(np.clip(numerator / denominator * 100.0, 0.0, 100.0))


class PositionScorer:
    """Score both sides from a StateTracker snapshot."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def side_score(self, state: "SideState") -> float:
        """Score one side on a 0-100 scale."""
        hp_term = 0.0
        active = state.active
        if active is not None and active.max_hp:
            hp_term = _percent(active.current_hp, active.max_hp)

        team_term = _percent(state.team_size - state.losses, state.team_size)

        return float(np.clip(HP_WEIGHT * hp_term + TEAM_WEIGHT * team_term, 0.0, 100.0))

    def momentum(self, score1: float, score2: float) -> Momentum:
        """The side ahead by more than the margin has momentum."""
        margin = self.config.momentum_margin
        if score1 - score2 > margin:
            return Momentum.PLAYER1
        if score2 - score1 > margin:
            return Momentum.PLAYER2
        return Momentum.NEUTRAL

    def score(self, tracker: "StateTracker") -> PositionScore:
        score1 = self.side_score(tracker.side(Side.PLAYER1))
        score2 = self.side_score(tracker.side(Side.PLAYER2))
        return PositionScore(
            player1_score=score1,
            player2_score=score2,
            momentum=self.momentum(score1, score2),
        )


class TurningPointDetector:
    """Flag turns where momentum swung significantly."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def detect(self, turns: Sequence[Turn]) -> List[TurningPoint]:
        """Compare consecutive scored turns.

        Args:
            turns: Turns in arrival order

        Returns:
            Turning points ordered by turn number
        """
        scored = [t for t in turns if t.position_score is not None]
        points: List[TurningPoint] = []

        for previous, current in zip(scored, scored[1:]):
            before = previous.position_score
            after = current.position_score

            delta1 = after.player1_score - before.player1_score
            delta2 = after.player2_score - before.player2_score
            shift = delta1 - delta2

            if abs(shift) < self.config.turning_point_threshold:
                continue

            gainer = Side.PLAYER1 if shift > 0 else Side.PLAYER2
            points.append(TurningPoint(
                turn_number=current.number,
                score1_before=before.player1_score,
                score1_after=after.player1_score,
                score2_before=before.player2_score,
                score2_after=after.player2_score,
                momentum_shift=shift,
                significance=self.significance(shift),
                description=f"{gainer.label} gained momentum ({abs(shift):.1f} point swing)",
            ))

        points.sort(key=lambda p: p.turn_number)
        logger.debug(f"Detected {len(points)} turning points over {len(scored)} scored turns")
        return points

    @staticmethod
    def significance(shift: float) -> int:
        """Scale a swing to 1-10: one point per 10 points of swing."""
        return max(1, min(10, int(math.floor(abs(shift) / 10))))

    @staticmethod
    def key_moments(points: Sequence[TurningPoint]) -> List[KeyMoment]:
        return [
            KeyMoment(
                turn_number=p.turn_number,
                description=p.description,
                type=KeyMomentType.TURNING_POINT,
                significance=p.significance,
            )
            for p in points
        ]
