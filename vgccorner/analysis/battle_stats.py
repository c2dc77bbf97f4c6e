"""Aggregate statistics for an analyzed battle."""

from collections import Counter
from typing import TYPE_CHECKING, Dict, Optional, Sequence

import numpy as np

from ..data.schemas import (
    ActionType, BattleStats, EffectivenessStats, PlayerStats, Side, Turn, TurningPoint,
)

if TYPE_CHECKING:
    from ..data.parsers.tokenizer import LogEvent


class BattleStatsCollector:
    """Count one-shot events during replay and summarize assembled turns.

    Crits and effectiveness tiers are counted from the event stream, so
    they are available even when actions carry no impact details.
    """

    def __init__(self):
        self.critical_hits: Counter = Counter()
        self.super_effective: Counter = Counter()
        self.not_very_effective: Counter = Counter()
        self.immune: Counter = Counter()

    def observe(self, event: "LogEvent", acting_side: Optional[Side]):
        """Count an event against the side of the most recent action."""
        if acting_side is None:
            return
        if event.command == "-crit":
            self.critical_hits[acting_side] += 1
        elif event.command == "-supereffective":
            self.super_effective[acting_side] += 1
        elif event.command == "-resisted":
            self.not_very_effective[acting_side] += 1
        elif event.command == "-immune":
            self.immune[acting_side] += 1

    def build(self, turns: Sequence[Turn], turning_points: Sequence[TurningPoint] = ()) -> BattleStats:
        move_frequency: Counter = Counter()
        move_counts: Counter = Counter()
        switch_counts: Counter = Counter()
        damage: Dict[Side, int] = {Side.PLAYER1: 0, Side.PLAYER2: 0}
        healing: Dict[Side, int] = {Side.PLAYER1: 0, Side.PLAYER2: 0}

        for turn in turns:
            for action in turn.actions:
                if action.action_type == ActionType.MOVE and action.move is not None:
                    move_frequency[action.move.id] += 1
                    move_counts[action.side] += 1
                elif action.action_type == ActionType.SWITCH:
                    switch_counts[action.side] += 1
            for side in Side:
                damage[side] += turn.damage_dealt.get(side, 0)
                healing[side] += turn.healing_done.get(side, 0)

        per_turn_damage = [sum(t.damage_dealt.values()) for t in turns]
        per_turn_healing = [sum(t.healing_done.values()) for t in turns]

        def player_stats(side: Side) -> PlayerStats:
            hits = (
                self.super_effective[side]
                + self.not_very_effective[side]
                + self.immune[side]
            )
            return PlayerStats(
                move_count=move_counts[side],
                switch_count=switch_counts[side],
                damage_dealt=damage[side],
                damage_taken=damage[side.opponent],
                healing_done=healing[side],
                effectiveness=EffectivenessStats(
                    super_effective=self.super_effective[side],
                    not_very_effective=self.not_very_effective[side],
                    neutral=max(0, move_counts[side] - hits),
                ),
            )

        return BattleStats(
            total_turns=len(turns),
            move_frequency=dict(move_frequency),
            switches=sum(switch_counts.values()),
            critical_hits=sum(self.critical_hits.values()),
            super_effective=sum(self.super_effective.values()),
            not_very_effective=sum(self.not_very_effective.values()),
            immune=sum(self.immune.values()),
            avg_damage_per_turn=float(np.mean(per_turn_damage)) if turns else 0.0,
            avg_heal_per_turn=float(np.mean(per_turn_healing)) if turns else 0.0,
            player1_stats=player_stats(Side.PLAYER1),
            player2_stats=player_stats(Side.PLAYER2),
            turning_points=tuple(turning_points),
        )
