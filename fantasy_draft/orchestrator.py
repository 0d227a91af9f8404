"""Pick commitment and turn advancement for live drafts."""

import logging
from collections.abc import Iterable

from .config import DraftConfig
from .errors import (
    DraftError,
    DraftNotActive,
    ExternalWriteFailed,
    InconsistentTurnState,
    NoEligiblePlayers,
    NotTeamsTurn,
    PlayerUnavailable,
    SlotUnavailable,
    TurnConflict,
)
from .models import (
    DraftStatus,
    DraftTurnState,
    PickResult,
    PlayerRef,
    RosterEntry,
    RosterMove,
)
from .needs import analyze_needs
from .recommendations import score_candidates
from .slots import open_slots, resolve_slot, slot_feedback
from .store import DraftStore

logger = logging.getLogger(__name__)


def default_attempt_id(league_id: str, pick_number: int) -> str:
    """Idempotency key for the pick at a 0-based overall index."""
    return f"{league_id}:{pick_number}"


class DraftOrchestrator:
    """Commits picks against a DraftStore and advances the turn pointer.

    The orchestrator holds no draft state of its own. Callers must not run
    two picks for the same league concurrently; the store's compare-and-swap
    on the pick counter is the only arbitration.

    Attributes:
        store: Backend for players, rosters and the turn pointer
        draft_config: Draft settings (rounds, bench size, retries)
    """

    def __init__(self, store: DraftStore, draft_config: DraftConfig | None = None):
        """Initialize orchestrator.

        Args:
            store: Backend for players, rosters and the turn pointer
            draft_config: Draft configuration (defaults to DraftConfig())
        """
        if draft_config is None:
            draft_config = DraftConfig()

        self.store = store
        self.draft_config = draft_config

    def commit_pick(
        self,
        league_id: str,
        team_id: str,
        player_id: str,
        week: int,
        current_roster: list[RosterEntry] | None = None,
        attempt_id: str | None = None,
    ) -> PickResult:
        """Draft an explicitly chosen player.

        Args:
            league_id: League whose draft is running
            team_id: Team making the pick
            player_id: Directory id of the chosen player
            week: Week the pick is recorded for
            current_roster: Team roster; read from the store when omitted
            attempt_id: Idempotency key; replaying a key after a partial
                failure only advances the turn

        Returns:
            PickResult with the assigned slot, or the DraftError that
            stopped the pick
        """
        try:
            state = self._require_turn(league_id, team_id)
            if attempt_id is None:
                attempt_id = default_attempt_id(league_id, state.current_pick)
            prior = self._prior_attempt(state, team_id, attempt_id)

            roster = (
                current_roster
                if current_roster is not None
                else self.store.get_roster(league_id, team_id, week)
            )
            player = self._find_player(league_id, str(player_id), week, prior)
            return self._commit(state, team_id, player, roster, week, attempt_id, prior)
        except DraftError as e:
            logger.warning(f"Pick by team {team_id} in league {league_id} failed: {e}")
            return PickResult.failure(e, attempt_id=attempt_id)

    def auto_pick(
        self,
        league_id: str,
        team_id: str,
        available_players: Iterable[PlayerRef],
        current_roster: list[RosterEntry],
        week: int,
        attempt_id: str | None = None,
    ) -> PickResult:
        """Pick on behalf of a team whose turn timer expired.

        Args:
            league_id: League whose draft is running
            team_id: Team on the clock
            available_players: Player pool to choose from
            current_roster: Team's current roster
            week: Week the pick is recorded for
            attempt_id: Idempotency key (see commit_pick)

        Returns:
            PickResult with the chosen player and slot
        """
        try:
            state = self._require_turn(league_id, team_id)
            if attempt_id is None:
                attempt_id = default_attempt_id(league_id, state.current_pick)
            prior = self._prior_attempt(state, team_id, attempt_id)

            if prior is not None:
                player = self._find_player(league_id, prior.player_id, week, prior)
            else:
                team_count = state.team_count or self.draft_config.num_teams
                player = self.choose_auto_pick(
                    team_id, available_players, current_roster, team_count
                )
                logger.info(
                    f"Auto-pick for team {team_id}: {player.name} ({player.position})"
                )
            return self._commit(
                state, team_id, player, current_roster, week, attempt_id, prior
            )
        except DraftError as e:
            logger.warning(
                f"Auto-pick for team {team_id} in league {league_id} failed: {e}"
            )
            return PickResult.failure(e, attempt_id=attempt_id)

    def choose_auto_pick(
        self,
        team_id: str,
        available_players: Iterable[PlayerRef],
        current_roster: list[RosterEntry],
        team_count: int,
    ) -> PlayerRef:
        """Select the player an auto-pick should draft.

        The top-ranked recommendation that fits a slot wins. When the
        recommendation list is empty, or the roster already holds a full
        draft's worth of players, the slot-eligible player with the most
        raw points is used instead (ties keep input order).

        Raises:
            NoEligiblePlayers: If no available player fits any slot
        """
        roster = [entry for entry in current_roster if entry.is_active]
        pool = [player for player in available_players if player.available]
        round_number = len(roster) // max(team_count, 1) + 1

        if len(roster) < self.draft_config.total_rounds:
            needs = analyze_needs(roster, self.draft_config.bench_capacity)
            for candidate in score_candidates(pool, needs, round_number):
                if resolve_slot(candidate.player, roster) is not None:
                    logger.debug(
                        f"Recommended {candidate.player.name} "
                        f"(score {candidate.adjusted_score}, {candidate.reason})"
                    )
                    return candidate.player
            logger.debug(f"No recommendation for team {team_id}, using raw points")
        else:
            logger.debug(
                f"Roster for team {team_id} at cutoff, skipping recommendations"
            )

        eligible = [p for p in pool if resolve_slot(p, roster) is not None]
        if eligible:
            return max(eligible, key=lambda p: p.past_period_points)

        roster_complete = len(roster) >= self.draft_config.total_rounds or not any(
            open_slots(roster).values()
        )
        raise NoEligiblePlayers(team_id, roster_complete)

    def _require_turn(self, league_id: str, team_id: str) -> DraftTurnState:
        state = self.store.get_turn_state(league_id)
        if state.status != DraftStatus.IN_PROGRESS:
            raise DraftNotActive(league_id, state.status.value)

        on_the_clock = state.team_on_the_clock()
        if on_the_clock != team_id:
            raise NotTeamsTurn(team_id, on_the_clock)
        return state

    def _prior_attempt(
        self, state: DraftTurnState, team_id: str, attempt_id: str
    ) -> RosterEntry | None:
        prior = self.store.get_attempt(state.league_id, attempt_id)
        if prior is not None and prior.team_id != team_id:
            raise TurnConflict(
                state.league_id, state.current_pick, state.current_pick + 1
            )
        return prior

    def _find_player(
        self, league_id: str, player_id: str, week: int, prior: RosterEntry | None
    ) -> PlayerRef:
        for player in self.store.get_players(league_id, week):
            if player.id != player_id:
                continue
            # Already drafted by the attempt being replayed
            if player.available or (prior is not None and prior.player_id == player_id):
                return player
            break
        raise PlayerUnavailable(player_id)

    def _commit(
        self,
        state: DraftTurnState,
        team_id: str,
        player: PlayerRef,
        roster: list[RosterEntry],
        week: int,
        attempt_id: str,
        prior: RosterEntry | None,
    ) -> PickResult:
        league_id = state.league_id

        if prior is not None:
            if prior.player_id != player.id:
                raise TurnConflict(
                    league_id, state.current_pick, state.current_pick + 1
                )
            stored, created = prior, False
            logger.info(
                f"Replaying attempt {attempt_id}: {player.name} already in {prior.slot}"
            )
        else:
            slot = resolve_slot(player, roster)
            if slot is None:
                raise SlotUnavailable(
                    player.name, player.position, slot_feedback(player, roster) or ""
                )
            entry = RosterEntry(
                team_id=team_id,
                player_id=player.id,
                slot=slot,
                acquired_week=week,
                acquired_type="draft",
                position=player.position,
            )
            stored, created = self.store.insert_roster_entry(
                league_id, entry, attempt_id
            )
            if not created and (
                stored.player_id != player.id or stored.team_id != team_id
            ):
                # Another pick landed under the same attempt id first
                raise TurnConflict(
                    league_id, state.current_pick, state.current_pick + 1
                )

        try:
            self.store.record_move(
                league_id,
                RosterMove(team_id=team_id, player_id=player.id, week=week),
                attempt_id,
            )
            new_state = self._advance(state, attempt_id)
        except ExternalWriteFailed as e:
            raise InconsistentTurnState(league_id, attempt_id, str(e)) from e

        replayed = "" if created else " [replayed]"
        logger.debug(
            f"Pick {state.current_pick + 1}: team {team_id} drafts {player.name} "
            f"({player.position}) into {stored.slot}{replayed}"
        )
        if new_state.status == DraftStatus.COMPLETED:
            logger.info(f"Draft for league {league_id} completed")

        return PickResult.success(player, stored.slot, new_state, attempt_id)

    def _advance(self, state: DraftTurnState, attempt_id: str) -> DraftTurnState:
        league_id = state.league_id
        expected = state.current_pick
        team_count = state.team_count or self.draft_config.num_teams
        total_picks = team_count * self.draft_config.total_rounds
        if expected + 1 >= total_picks:
            status = DraftStatus.COMPLETED
        else:
            status = DraftStatus.IN_PROGRESS

        attempts = self.draft_config.max_turn_retries + 1
        for attempt in range(attempts):
            try:
                return self.store.advance_turn(league_id, expected, status)
            except TurnConflict as conflict:
                fresh = self.store.get_turn_state(league_id)
                if fresh.current_pick > expected:
                    logger.warning(
                        f"Turn pointer for league {league_id} already at "
                        f"{fresh.current_pick}, accepting"
                    )
                    return fresh
                logger.warning(f"{conflict}; retry {attempt + 1}")

        raise InconsistentTurnState(
            league_id,
            attempt_id,
            f"turn pointer update rejected {attempts} times",
        )


def commit_pick(
    store: DraftStore,
    league_id: str,
    team_id: str,
    player_id: str,
    week: int,
    current_roster: list[RosterEntry] | None = None,
    draft_config: DraftConfig | None = None,
) -> PickResult:
    """Draft an explicitly chosen player (see DraftOrchestrator.commit_pick)."""
    orchestrator = DraftOrchestrator(store, draft_config)
    return orchestrator.commit_pick(league_id, team_id, player_id, week, current_roster)


def auto_pick(
    store: DraftStore,
    league_id: str,
    team_id: str,
    available_players: Iterable[PlayerRef],
    current_roster: list[RosterEntry],
    week: int,
    draft_config: DraftConfig | None = None,
) -> PickResult:
    """Auto-draft for a team on the clock (see DraftOrchestrator.auto_pick)."""
    orchestrator = DraftOrchestrator(store, draft_config)
    return orchestrator.auto_pick(
        league_id, team_id, available_players, current_roster, week
    )
