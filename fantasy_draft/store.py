"""Data-access boundary for player, roster and turn-pointer state."""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace

from .config import ROSTER_SLOTS
from .errors import TurnConflict
from .models import DraftStatus, DraftTurnState, PlayerRef, RosterEntry, RosterMove

logger = logging.getLogger(__name__)


class DraftStore(ABC):
    """Backend the draft engine reads from and writes to.

    Implementations raise ExternalWriteFailed when a write cannot be
    completed and TurnConflict when a turn-pointer update is stale.
    """

    @abstractmethod
    def get_players(self, league_id: str, week: int) -> list[PlayerRef]:
        """Return the player directory for a league and week."""

    @abstractmethod
    def get_roster(
        self, league_id: str, team_id: str, week: int | None = None
    ) -> list[RosterEntry]:
        """Return the active roster entries for a team in a league."""

    @abstractmethod
    def insert_roster_entry(
        self, league_id: str, entry: RosterEntry, attempt_id: str
    ) -> tuple[RosterEntry, bool]:
        """Append an active roster entry.

        Returns:
            Tuple of (stored entry, created). created is False when an entry
            already exists for attempt_id; the existing entry is returned.
        """

    @abstractmethod
    def get_attempt(self, league_id: str, attempt_id: str) -> RosterEntry | None:
        """Return the roster entry stored under attempt_id, if any."""

    @abstractmethod
    def record_move(self, league_id: str, move: RosterMove, attempt_id: str) -> None:
        """Append a move-history record (once per league and attempt_id)."""

    @abstractmethod
    def get_turn_state(self, league_id: str) -> DraftTurnState:
        """Read the turn pointer for a league."""

    @abstractmethod
    def advance_turn(
        self, league_id: str, expected_pick: int, status: DraftStatus
    ) -> DraftTurnState:
        """Increment the pick counter if it still equals expected_pick.

        Raises:
            TurnConflict: If the stored pick counter differs from expected_pick
        """

    @abstractmethod
    def save_turn_state(self, state: DraftTurnState) -> DraftTurnState:
        """Overwrite the turn pointer (lifecycle control only)."""

    @abstractmethod
    def clear_rosters(self, league_id: str) -> None:
        """Drop every drafted entry for a league's teams."""


class InMemoryDraftStore(DraftStore):
    """Process-local DraftStore used by the simulator, CLI and tests.

    Attributes:
        moves: Move-history log in insertion order
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._players: dict[str, dict[str, PlayerRef]] = {}
        self._rosters: dict[tuple[str, str], list[RosterEntry]] = {}
        self._turns: dict[str, DraftTurnState] = {}
        self._attempts: dict[tuple[str, str], RosterEntry] = {}
        self._recorded_moves: set[tuple[str, str]] = set()
        self.moves: list[RosterMove] = []

    def add_players(self, league_id: str, players: list[PlayerRef]) -> None:
        """Load players into a league's directory."""
        directory = self._players.setdefault(league_id, {})
        for player in players:
            directory[player.id] = player
        logger.debug(f"Loaded {len(players)} players into league {league_id}")

    def get_players(self, league_id: str, week: int = 1) -> list[PlayerRef]:
        return list(self._players.get(league_id, {}).values())

    def get_roster(
        self, league_id: str, team_id: str, week: int | None = None
    ) -> list[RosterEntry]:
        return [
            entry
            for entry in self._rosters.get((league_id, team_id), [])
            if entry.is_active and (week is None or entry.acquired_week <= week)
        ]

    def insert_roster_entry(
        self, league_id: str, entry: RosterEntry, attempt_id: str
    ) -> tuple[RosterEntry, bool]:
        key = (league_id, attempt_id)
        if key in self._attempts:
            logger.debug(f"Attempt {attempt_id} already stored, skipping insert")
            return self._attempts[key], False

        roster = self._rosters.setdefault((league_id, entry.team_id), [])

        # Last write wins: retire the oldest active entry of a full slot
        definition = ROSTER_SLOTS.get(entry.slot)
        if definition is not None:
            active = [
                i for i, e in enumerate(roster) if e.is_active and e.slot == entry.slot
            ]
            if len(active) >= definition.capacity:
                oldest = active[0]
                roster[oldest] = replace(roster[oldest], is_active=False)
                logger.debug(
                    f"Superseded {roster[oldest].player_id} in {entry.slot} "
                    f"for team {entry.team_id}"
                )

        roster.append(entry)
        self._attempts[key] = entry

        directory = self._players.get(league_id, {})
        if entry.player_id in directory:
            directory[entry.player_id] = replace(
                directory[entry.player_id], available=False
            )

        return entry, True

    def get_attempt(self, league_id: str, attempt_id: str) -> RosterEntry | None:
        return self._attempts.get((league_id, attempt_id))

    def record_move(self, league_id: str, move: RosterMove, attempt_id: str) -> None:
        key = (league_id, attempt_id)
        if key in self._recorded_moves:
            return
        self._recorded_moves.add(key)
        self.moves.append(move)

    def get_turn_state(self, league_id: str) -> DraftTurnState:
        return self._turns.get(league_id, DraftTurnState(league_id=league_id))

    def advance_turn(
        self, league_id: str, expected_pick: int, status: DraftStatus
    ) -> DraftTurnState:
        state = self.get_turn_state(league_id)
        if state.current_pick != expected_pick:
            raise TurnConflict(league_id, expected_pick, state.current_pick)

        new_state = replace(state, current_pick=expected_pick + 1, status=status)
        self._turns[league_id] = new_state
        return new_state

    def save_turn_state(self, state: DraftTurnState) -> DraftTurnState:
        self._turns[state.league_id] = state
        return state

    def clear_rosters(self, league_id: str) -> None:
        directory = self._players.get(league_id, {})

        for key in [key for key in self._rosters if key[0] == league_id]:
            for entry in self._rosters.pop(key):
                if entry.player_id in directory:
                    directory[entry.player_id] = replace(
                        directory[entry.player_id], available=True
                    )

        self._recorded_moves = {
            key for key in self._recorded_moves if key[0] != league_id
        }
        for key in [key for key in self._attempts if key[0] == league_id]:
            del self._attempts[key]
        logger.debug(f"Cleared rosters for league {league_id}")
