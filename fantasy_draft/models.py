"""Data contracts shared by the slot resolver, scorer and orchestrator."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import snake_team_index
from .errors import DraftError, InvalidRecord


class DraftStatus(str, Enum):
    """Lifecycle status of a league's draft."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    PAUSED = "paused"
    COMPLETED = "completed"


class Priority(str, Enum):
    """Display tier of a recommendation."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _first_present(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return None


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return default
        return value.strip().lower() in {"1", "true", "yes", "y", "t"}
    return bool(value)


@dataclass(frozen=True)
class PlayerRef:
    """Player as supplied by the player directory.

    Attributes:
        id: Directory identifier
        name: Player's full name
        position: Position code (QB, RB, WR, TE, K, DEF, DP, LB, DB, DL)
        past_period_points: Fantasy points scored in the previous period
        available: False once the player has been drafted
        team: NFL team abbreviation
    """

    id: str
    name: str
    position: str
    past_period_points: float = 0.0
    available: bool = True
    team: str = "FA"

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "PlayerRef":
        """Normalise a loosely-typed player record.

        Args:
            record: Mapping read from an external source

        Returns:
            Validated PlayerRef

        Raises:
            InvalidRecord: If id, name or position is missing, or points
                are not numeric
        """
        player_id = _first_present(record, "id", "player_id")
        name = _first_present(record, "name", "Player")
        position = _first_present(record, "position", "Pos")

        if player_id is None or str(player_id).strip() == "":
            raise InvalidRecord(f"Player record has no id: {record!r}")
        if not name or not position:
            raise InvalidRecord(f"Player record missing name or position: {record!r}")

        points_raw = _first_present(
            record, "past_period_points", "pastPeriodPoints", "points", "Pts"
        )
        try:
            points = float(points_raw) if points_raw not in (None, "") else 0.0
        except (TypeError, ValueError) as e:
            raise InvalidRecord(
                f"Invalid points for player {player_id}: {points_raw!r}"
            ) from e
        if not math.isfinite(points):
            raise InvalidRecord(
                f"Non-finite points for player {player_id}: {points_raw!r}"
            )

        return cls(
            id=str(player_id).strip(),
            name=str(name).strip(),
            position=str(position).strip().upper(),
            past_period_points=points,
            available=_as_bool(record.get("available"), True),
            team=str(_first_present(record, "team", "Team") or "FA").strip(),
        )


@dataclass(frozen=True)
class RosterEntry:
    """One occupied roster slot.

    Attributes:
        team_id: Owning fantasy team
        player_id: Player filling the slot
        slot: Slot name (see ROSTER_SLOTS), or BENCH
        acquired_week: Week the player joined the roster
        acquired_type: How the player was acquired (draft, waiver, trade)
        position: Player position when known
        is_active: False once the entry was superseded or dropped
    """

    team_id: str
    player_id: str
    slot: str
    acquired_week: int = 1
    acquired_type: str = "draft"
    position: str | None = None
    is_active: bool = True

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "RosterEntry":
        """Normalise a loosely-typed roster row.

        Raises:
            InvalidRecord: If team, player or slot is missing
        """
        team_id = _first_present(record, "team_id", "fantasy_team_id")
        player_id = _first_present(record, "player_id", "id")
        slot = record.get("slot")

        if team_id is None or player_id is None or not slot:
            raise InvalidRecord(
                f"Roster record missing team, player or slot: {record!r}"
            )

        week_raw = _first_present(record, "acquired_week", "week")
        try:
            acquired_week = int(week_raw) if week_raw not in (None, "") else 1
        except (TypeError, ValueError) as e:
            raise InvalidRecord(f"Invalid week in roster record: {week_raw!r}") from e

        position = record.get("position")
        return cls(
            team_id=str(team_id),
            player_id=str(player_id),
            slot=str(slot).strip().upper(),
            acquired_week=acquired_week,
            acquired_type=str(record.get("acquired_type") or "draft"),
            position=str(position).strip().upper() if position else None,
            is_active=_as_bool(record.get("is_active"), True),
        )


@dataclass(frozen=True)
class RosterMove:
    """Move-history record written alongside a roster entry."""

    team_id: str
    player_id: str
    week: int
    action: str = "draft_pick"
    acquired_type: str = "draft"


@dataclass(frozen=True)
class DraftCandidate:
    """Scored player from one recommendation pass.

    Attributes:
        player: Candidate player
        raw_score: Past-period points before any multiplier
        adjusted_score: Score after need, scarcity and round weighting
        reason: Display text for the branch that fired
        priority: Display tier
    """

    player: PlayerRef
    raw_score: float
    adjusted_score: float
    reason: str
    priority: Priority


@dataclass(frozen=True)
class RosterNeedSnapshot:
    """Derived roster needs for one team.

    Attributes:
        unmet_slots: Slots still below capacity
        filled_slots: Slots that are met
        overfilled_slots: Slots holding more players than their capacity
        flex_available: FLEX is open and both RB and WR are met
        bench_remaining: Roster spots left before the bench cap
    """

    unmet_slots: frozenset[str]
    filled_slots: frozenset[str]
    overfilled_slots: frozenset[str]
    flex_available: bool
    bench_remaining: int


@dataclass(frozen=True)
class DraftTurnState:
    """Turn pointer for a league's draft, as read from the store.

    Attributes:
        league_id: League identifier
        draft_order: Team ids in first-round order
        current_pick: 0-based overall pick counter
        status: Draft lifecycle status
    """

    league_id: str
    draft_order: tuple[str, ...] = ()
    current_pick: int = 0
    status: DraftStatus = DraftStatus.PENDING

    @property
    def team_count(self) -> int:
        """Number of teams in the draft order."""
        return len(self.draft_order)

    @property
    def round_index(self) -> int:
        """0-based round of the current pick."""
        if not self.draft_order:
            return 0
        return self.current_pick // self.team_count

    @property
    def pick_in_round(self) -> int:
        """0-based position within the current round."""
        if not self.draft_order:
            return 0
        return self.current_pick % self.team_count

    def team_on_the_clock(self) -> str | None:
        """Return the team id due to pick, or None when nobody is."""
        if self.status != DraftStatus.IN_PROGRESS or not self.draft_order:
            return None
        index = snake_team_index(self.current_pick, self.team_count)
        return self.draft_order[index]


@dataclass
class PickResult:
    """Outcome of a commit or auto pick."""

    ok: bool
    player: PlayerRef | None = None
    slot: str | None = None
    error: DraftError | None = None
    turn_state: DraftTurnState | None = None
    attempt_id: str | None = None
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def success(
        cls,
        player: PlayerRef,
        slot: str,
        turn_state: DraftTurnState | None,
        attempt_id: str | None = None,
    ) -> "PickResult":
        """Build a successful result."""
        return cls(
            ok=True,
            player=player,
            slot=slot,
            turn_state=turn_state,
            attempt_id=attempt_id,
        )

    @classmethod
    def failure(
        cls,
        error: DraftError,
        player: PlayerRef | None = None,
        attempt_id: str | None = None,
    ) -> "PickResult":
        """Build a failed result."""
        return cls(ok=False, player=player, error=error, attempt_id=attempt_id)
