"""Group log events into turns of ordered actions.

Moves and switches are primary actions. Effect events (damage, faints,
effectiveness, ...) are buffered and attributed to the most recent
action when the next primary action or turn boundary arrives, since
adjacency in the log is the only link between a cause and its effects.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from loguru import logger

from ...config import ScoringConfig
from ..ids import to_id
from ..schemas import Action, ActionType, MoveRef, RosterEntry, Side, Turn
from .move_impact import EFFECT_COMMANDS, HP_COMMANDS, Annotation, ImpactAnnotator
from .state_tracker import StateTracker
from .tokenizer import LogEvent, parse_details, parse_identifier, parse_int


@dataclass
class ActionDraft:
    """An action still collecting its effects."""
    side: Side
    action_type: ActionType
    member: str
    order: int
    move: Optional[MoveRef] = None
    switch_to: Optional[str] = None
    switched_in: Optional[RosterEntry] = None
    target: Optional[str] = None
    annotation: Optional[Annotation] = None

    def freeze(self, detailed: bool) -> Action:
        action = Action(
            side=self.side,
            action_type=self.action_type,
            member=self.member,
            move=self.move,
            switch_to=self.switch_to,
            switched_in=self.switched_in,
            target=self.target,
        )
        if not detailed:
            return action

        update = {"order": self.order}
        if self.annotation is not None:
            update.update(
                impact=self.annotation.impact,
                result=self.annotation.result,
                details=self.annotation.details,
            )
        return action.model_copy(update=update)


@dataclass
class TurnDraft:
    number: int
    actions: List[ActionDraft] = field(default_factory=list)
    damage_dealt: Dict[Side, int] = field(default_factory=lambda: {Side.PLAYER1: 0, Side.PLAYER2: 0})
    healing_done: Dict[Side, int] = field(default_factory=lambda: {Side.PLAYER1: 0, Side.PLAYER2: 0})


class TurnAssembler:
    """Build turns from the event stream while keeping the tracker current.

    Args:
        tracker: State tracker for this parse
        detailed: Attach order, impact, result and details to actions
        scoring: Scoring settings for turn snapshots
    """

    def __init__(
        self,
        tracker: StateTracker,
        detailed: bool = True,
        scoring: Optional[ScoringConfig] = None,
        annotator: Optional[ImpactAnnotator] = None,
    ):
        self.tracker = tracker
        self.detailed = detailed
        self.scoring = scoring or ScoringConfig()
        self.annotator = annotator or ImpactAnnotator()

        self.turns: List[Turn] = []
        self._current: Optional[TurnDraft] = None
        self._pending: List[LogEvent] = []
        self._baselines: Dict[Tuple[Side, str], Optional[int]] = {}
        self._order = 0
        self.last_side: Optional[Side] = None

    @property
    def current_turn_number(self) -> int:
        return self._current.number if self._current is not None else 0

    def process(self, event: LogEvent):
        """Route one in-battle event."""
        command = event.command

        if command == "turn":
            self.start_turn(parse_int(event.arg(0)))
        elif command == "move":
            self._on_move(event)
            self.tracker.apply(event)
        elif command == "switch":
            self._on_switch(event)
        elif command in EFFECT_COMMANDS:
            self._on_effect(event)
            self.tracker.apply(event)
        else:
            self.tracker.apply(event)

    def start_turn(self, number: int):
        """Seal the closing turn and open the next one as numbered in the log."""
        self._seal()
        self._current = TurnDraft(number=number)
        self._order = 0

    def finish(self) -> List[Turn]:
        """Seal the last open turn and return all turns."""
        self._seal()
        return self.turns

    # ====================
    # Primary actions
    # ====================

    def _on_move(self, event: LogEvent):
        # |move|p1a: Gengar|Shadow Ball|p2a: Dusclops
        side, _, pokemon = parse_identifier(event.arg(0))
        move_name = event.arg(1).strip()
        if side is None or not move_name:
            logger.debug(f"Skipping malformed move line: {event.raw!r}")
            return

        self._flush()
        target = None
        if event.arg(2):
            _, _, target = parse_identifier(event.arg(2))

        self._append(ActionDraft(
            side=side,
            action_type=ActionType.MOVE,
            member=pokemon,
            order=self._order,
            move=MoveRef(id=to_id(move_name), name=move_name),
            target=target or None,
        ))

    def _on_switch(self, event: LogEvent):
        # |switch|p1b: Typhlosion|Typhlosion-Hisui, L50, M|100/100
        side, _, pokemon = parse_identifier(event.arg(0))
        species, _, _ = parse_details(event.arg(1))
        if side is None or not species:
            logger.debug(f"Skipping malformed switch line: {event.raw!r}")
            return

        self._flush()
        activated = self.tracker.apply(event)
        self._append(ActionDraft(
            side=side,
            action_type=ActionType.SWITCH,
            member=pokemon,
            order=self._order,
            switch_to=species,
            switched_in=activated.snapshot() if activated is not None else None,
        ))

    def _append(self, draft: ActionDraft):
        self.last_side = draft.side
        if self._current is None:
            # Leads sent out before the first turn marker are board setup
            return
        self._current.actions.append(draft)
        self._order += 1

    # ====================
    # Effects
    # ====================

    def _on_effect(self, event: LogEvent):
        if event.command in HP_COMMANDS:
            side, _, member = parse_identifier(event.arg(0))
            key = (side, member)
            if side is not None and key not in self._baselines:
                # Only the active member has a known HP
                active = self.tracker.active(side)
                known = active is not None and active.matches(member)
                self._baselines[key] = active.current_hp if known else None
        self._pending.append(event)

    def _flush(self):
        """Annotate the last action of the current turn with the buffered effects.

        Every move is annotated exactly once, with or without effects,
        so speed control is classified even for moves like Protect.
        Effects following a switch (hazards, abilities) are consumed
        without an impact.
        """
        events, baselines = self._pending, self._baselines
        self._pending, self._baselines = [], {}

        draft = self._current.actions[-1] if self._current is not None and self._current.actions else None
        if draft is None or draft.annotation is not None:
            if events:
                logger.debug(f"Dropping {len(events)} effects with no action to attribute")
            return
        if draft.move is None:
            if events:
                logger.debug(f"Dropping {len(events)} effects after a {draft.action_type.value}")
            return

        annotation = self.annotator.annotate(draft.move.name, events, baselines)
        draft.annotation = annotation

        self._current.damage_dealt[draft.side] += annotation.impact.damage_dealt
        self._current.healing_done[draft.side] += annotation.impact.healing_done

    def _seal(self):
        self._flush()
        if self._current is None:
            return

        current = self._current
        self.turns.append(Turn(
            number=current.number,
            actions=tuple(a.freeze(self.detailed) for a in current.actions),
            damage_dealt=dict(current.damage_dealt),
            healing_done=dict(current.healing_done),
            position_score=self.tracker.position_score(self.scoring),
            state_after=self.tracker.board_state(),
        ))
        self._current = None
