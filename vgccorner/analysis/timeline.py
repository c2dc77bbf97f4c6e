"""Tabular momentum timeline for analysis and export."""

from typing import Any, Dict, List

import pandas as pd

from ..data.schemas import BattleSummary, Side


TIMELINE_COLUMNS = [
    "turn",
    "player1_score",
    "player2_score",
    "momentum",
    "player1_damage",
    "player2_damage",
    "player1_healing",
    "player2_healing",
    "actions",
]


def timeline_frame(summary: BattleSummary) -> pd.DataFrame:
    """Build one row per turn with scores, momentum and per-side totals.

    Args:
        summary: Parsed battle

    Returns:
        DataFrame with TIMELINE_COLUMNS, in turn arrival order. Scores and
        momentum are missing for turns without a score snapshot.
    """
    rows: List[Dict[str, Any]] = []

    for turn in summary.turns:
        score = turn.position_score
        rows.append({
            "turn": turn.number,
            "player1_score": score.player1_score if score is not None else None,
            "player2_score": score.player2_score if score is not None else None,
            "momentum": score.momentum.value if score is not None else None,
            "player1_damage": turn.damage_dealt.get(Side.PLAYER1, 0),
            "player2_damage": turn.damage_dealt.get(Side.PLAYER2, 0),
            "player1_healing": turn.healing_done.get(Side.PLAYER1, 0),
            "player2_healing": turn.healing_done.get(Side.PLAYER2, 0),
            "actions": len(turn.actions),
        })

    return pd.DataFrame(rows, columns=TIMELINE_COLUMNS)
