"""Parse Pokemon Showdown battle logs into battle summaries.

Parsing runs in two passes over the tokenized log. The first pass reads
metadata (players, team preview, team sheets, format, start time) so the
roster is complete before any switch is replayed. The second pass feeds
every event through the TurnAssembler, which keeps a StateTracker
current and snapshots position scores at each turn boundary.

Malformed input never fails a parse; the result is a best-effort
BattleSummary. The only failure is the optional size limit in
ParserConfig.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from loguru import logger

from ...analysis.battle_stats import BattleStatsCollector
from ...analysis.position import TurningPointDetector
from ...analysis.team_classifier import TeamClassifier
from ...config import AnalysisConfig
from ..ids import to_id
from ..schemas import BattleSummary, KeyMoment, KeyMomentType, Player, Side
from .state_tracker import StateTracker, TrackedPokemon
from .tokenizer import LogEvent, parse_details, parse_identifier, parse_int, side_from_token, tokenize
from .turn_assembler import TurnAssembler


class ReplayParseError(Exception):
    """A transcript could not be analyzed at all."""


class LogTooLargeError(ReplayParseError):
    """A transcript exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Battle log is {size} bytes, limit is {limit}")
        self.size = size
        self.limit = limit


class ReplayParser:
    """Build a BattleSummary from a Showdown battle log.

    One parser may be reused; all battle state is created per call.

    Args:
        config: Analysis settings, defaults when None
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self.classifier = TeamClassifier()
        self.detector = TurningPointDetector(self.config.scoring)

    def parse(self, log: str, detailed: bool = True) -> BattleSummary:
        """Parse a battle log.

        Args:
            log: Raw battle log text
            detailed: Attach order, impact and details to each action

        Returns:
            BattleSummary with a fresh id

        Raises:
            LogTooLargeError: If parser.max_log_bytes is set and exceeded
        """
        self._check_size(log or "")

        events = tokenize(log)
        tracker = StateTracker()

        battle_format, timestamp = self._read_metadata(events, tracker)

        assembler = TurnAssembler(tracker, detailed=detailed, scoring=self.config.scoring)
        stats = BattleStatsCollector()
        ko_moments: List[KeyMoment] = []
        winner: Optional[Side] = None

        for event in events:
            assembler.process(event)
            stats.observe(event, assembler.last_side)

            if event.command == "faint":
                moment = self._ko_moment(event, assembler.current_turn_number)
                if moment is not None:
                    ko_moments.append(moment)
            elif event.command == "win":
                winner = tracker.resolve_side(event.arg(0).strip())
            elif event.command == "tie":
                winner = None

        turns = assembler.finish()
        if not turns:
            logger.warning("No turns found in battle log")

        turning_points = self.detector.detect(turns)
        key_moments = ko_moments + self.detector.key_moments(turning_points)
        key_moments.sort(key=lambda m: m.turn_number)

        summary = BattleSummary(
            id=str(uuid.uuid4()),
            format=battle_format,
            timestamp=timestamp,
            player1=self._build_player(tracker, Side.PLAYER1),
            player2=self._build_player(tracker, Side.PLAYER2),
            winner=winner,
            turns=tuple(turns),
            stats=stats.build(turns, turning_points),
            key_moments=tuple(key_moments),
        )

        winner_label = winner.label if winner is not None else "none"
        logger.info(
            f"Parsed battle {summary.id}: format={battle_format!r}, "
            f"turns={len(turns)}, winner={winner_label}"
        )
        return summary

    # ====================
    # Metadata pass
    # ====================

    def _read_metadata(self, events: List[LogEvent], tracker: StateTracker) -> Tuple[str, datetime]:
        tier = ""
        generation = ""
        timestamp: Optional[datetime] = None

        for event in events:
            command = event.command

            if command == "player":
                # |player|p1|Name|avatar|rating
                side = side_from_token(event.arg(0))
                name = event.arg(1).strip()
                if side is not None and name:
                    tracker.set_player_name(side, name)

            elif command == "teamsize":
                side = side_from_token(event.arg(0))
                if side is not None:
                    tracker.set_team_size(side, parse_int(event.arg(1)))

            elif command == "poke":
                # |poke|p1|Urshifu-*, L50, F|item
                side = side_from_token(event.arg(0))
                species, level, gender = parse_details(event.arg(1))
                if side is not None and species:
                    tracker.add_to_roster(side, TrackedPokemon(name=species, level=level, gender=gender))

            elif command == "showteam":
                side = side_from_token(event.arg(0))
                if side is not None:
                    tracker.apply_team_sheet(side, parse_team_sheet("|".join(event.fields[1:])))

            elif command == "tier":
                tier = "|".join(event.fields).strip()

            elif command == "gen":
                generation = event.arg(0).strip()

            elif command == "t:":
                seconds = parse_int(event.arg(0))
                if seconds > 0 and timestamp is None:
                    try:
                        timestamp = datetime.fromtimestamp(seconds, tz=timezone.utc)
                    except (OverflowError, OSError, ValueError):
                        logger.debug(f"Ignoring out-of-range timestamp: {event.raw!r}")

        battle_format = tier or (f"Gen {generation}" if generation else "")
        return battle_format, timestamp or datetime.now(timezone.utc)

    # ====================
    # Summary pieces
    # ====================

    def _ko_moment(self, event: LogEvent, turn_number: int) -> Optional[KeyMoment]:
        side, _, name = parse_identifier(event.arg(0))
        if side is None:
            return None
        return KeyMoment(
            turn_number=turn_number,
            description=f"{side.label}'s {name} fainted",
            type=KeyMomentType.KO,
            significance=self.config.scoring.ko_significance,
        )

    def _build_player(self, tracker: StateTracker, side: Side) -> Player:
        state = tracker.side(side)
        team = tuple(p.snapshot() for p in state.roster)
        return Player(
            name=state.name,
            team=team,
            team_size=state.team_size,
            losses=state.losses,
            total_left=max(0, state.team_size - state.losses),
            active=state.active.name if state.active is not None else None,
            classification=self.classifier.classify(team),
        )

    def _check_size(self, log: str):
        limit = self.config.parser.max_log_bytes
        if limit is None:
            return
        size = len(log.encode("utf-8"))
        if size > limit:
            raise LogTooLargeError(size, limit)


def parse_team_sheet(packed: str) -> List[TrackedPokemon]:
    """Parse a packed team from an open team sheet.

    Members are separated by ']' and fields by '|':
    NICKNAME|SPECIES|ITEM|ABILITY|MOVES|NATURE|EVS|GENDER|IVS|SHINY|LEVEL|MISC
    where MISC ends with the tera type. SPECIES is blank when it equals
    NICKNAME.

    Args:
        packed: Team string with the side prefix removed

    Returns:
        One entry per member, in sheet order
    """
    team: List[TrackedPokemon] = []

    for member in packed.split("]"):
        fields = member.split("|")
        if len(fields) < 5 or not fields[0].strip():
            continue

        def field_at(index: int) -> str:
            return fields[index].strip() if index < len(fields) else ""

        species = field_at(1) or field_at(0)
        misc = field_at(11).split(",")
        tera_type = misc[5].strip() if len(misc) > 5 else ""
        level = parse_int(field_at(10))

        team.append(TrackedPokemon(
            name=species,
            id=to_id(species),
            level=level if level > 0 else 100,
            gender=field_at(7) if field_at(7) in ("M", "F") else "",
            ability=field_at(3) or None,
            item=field_at(2) or None,
            moves=[m.strip() for m in field_at(4).split(",") if m.strip()],
            tera_type=tera_type or None,
        ))

    return team


def parse_showdown_log(log: str, config: Optional[AnalysisConfig] = None) -> BattleSummary:
    """Parse a battle log into a summary with coarse per-turn actions."""
    return ReplayParser(config).parse(log, detailed=False)


def parse_enhanced_showdown_log(log: str, config: Optional[AnalysisConfig] = None) -> BattleSummary:
    """Parse a battle log with action order, impact and details on every action."""
    return ReplayParser(config).parse(log, detailed=True)
