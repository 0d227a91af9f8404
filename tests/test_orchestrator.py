"""Tests for pick commitment and turn advancement."""

from unittest.mock import Mock

import pytest

from fantasy_draft.config import DraftConfig
from fantasy_draft.control import start_draft
from fantasy_draft.errors import (
    DraftNotActive,
    ExternalWriteFailed,
    InconsistentTurnState,
    NoEligiblePlayers,
    NotTeamsTurn,
    PlayerUnavailable,
    SlotUnavailable,
    TurnConflict,
)
from fantasy_draft.models import (
    DraftStatus,
    DraftTurnState,
    PlayerRef,
    RosterEntry,
    RosterMove,
)
from fantasy_draft.orchestrator import (
    DraftOrchestrator,
    auto_pick,
    commit_pick,
    default_attempt_id,
)
from fantasy_draft.slots import SLOT_FULL_MESSAGES
from fantasy_draft.store import DraftStore, InMemoryDraftStore

LEAGUE = "league"


def sample_players() -> list[PlayerRef]:
    """Create a small player directory."""
    return [
        PlayerRef("qb1", "Josh Allen", "QB", 385.0),
        PlayerRef("qb2", "Lamar Jackson", "QB", 434.4),
        PlayerRef("rb1", "Bijan Robinson", "RB", 200.0),
        PlayerRef("rb2", "Derrick Henry", "RB", 180.0),
        PlayerRef("wr1", "Tyreek Hill", "WR", 190.0),
        PlayerRef("te1", "Travis Kelce", "TE", 150.0),
    ]


def make_store(
    team_ids: list[str], players: list[PlayerRef] | None = None
) -> InMemoryDraftStore:
    """Create a store with a running, unshuffled draft."""
    store = InMemoryDraftStore()
    store.add_players(LEAGUE, sample_players() if players is None else players)
    start_draft(store, LEAGUE, team_ids, shuffle=False)
    return store


def make_mock_store(state: DraftTurnState, players: list[PlayerRef]) -> Mock:
    """Create a mock store whose writes can be inspected."""
    store = Mock(spec=DraftStore)
    store.get_turn_state.return_value = state
    store.get_attempt.return_value = None
    store.get_players.return_value = players
    store.get_roster.return_value = []
    store.insert_roster_entry.side_effect = lambda league_id, entry, attempt_id: (
        entry,
        True,
    )
    return store


class FlakyMoveStore(InMemoryDraftStore):
    """In-memory store whose next move-history writes fail."""

    def __init__(self, failures: int = 1) -> None:
        super().__init__()
        self.failures = failures

    def record_move(self, league_id: str, move: RosterMove, attempt_id: str) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise ExternalWriteFailed("roster_moves insert timed out")
        super().record_move(league_id, move, attempt_id)


class StaleAttemptStore(InMemoryDraftStore):
    """In-memory store whose attempt lookups always miss."""

    def get_attempt(self, league_id: str, attempt_id: str) -> RosterEntry | None:
        return None


class TestCommitPick:
    """Test explicit picks."""

    def test_successful_pick(self) -> None:
        """Test a pick inserts the entry, records the move and advances."""
        store = make_store(["team-1", "team-2"])
        orchestrator = DraftOrchestrator(store, DraftConfig(num_teams=2))

        result = orchestrator.commit_pick(LEAGUE, "team-1", "qb1", week=1)

        assert result.ok
        assert result.slot == "QB"
        assert result.player is not None and result.player.id == "qb1"
        assert result.attempt_id == default_attempt_id(LEAGUE, 0)
        assert result.turn_state is not None
        assert result.turn_state.current_pick == 1
        assert result.turn_state.team_on_the_clock() == "team-2"

        roster = store.get_roster(LEAGUE, "team-1")
        assert [(e.player_id, e.slot, e.acquired_type) for e in roster] == [
            ("qb1", "QB", "draft")
        ]
        assert store.moves == [RosterMove("team-1", "qb1", 1)]

    def test_not_teams_turn(self) -> None:
        """Test a team cannot pick out of turn."""
        store = make_store(["team-1", "team-2"])

        result = commit_pick(store, LEAGUE, "team-2", "qb1", week=1)

        assert not result.ok
        assert isinstance(result.error, NotTeamsTurn)
        assert result.error.on_the_clock == "team-1"
        assert store.get_roster(LEAGUE, "team-2") == []

    def test_draft_not_active(self) -> None:
        """Test picks are rejected before the draft starts."""
        store = InMemoryDraftStore()
        store.add_players(LEAGUE, sample_players())

        result = commit_pick(store, LEAGUE, "team-1", "qb1", week=1)

        assert isinstance(result.error, DraftNotActive)
        assert result.error.status == "pending"

    def test_player_already_drafted(self) -> None:
        """Test a drafted player cannot be picked again."""
        store = make_store(["team-1", "team-2"])
        config = DraftConfig(num_teams=2)
        commit_pick(store, LEAGUE, "team-1", "rb1", week=1, draft_config=config)

        result = commit_pick(
            store, LEAGUE, "team-2", "rb1", week=1, draft_config=config
        )

        assert isinstance(result.error, PlayerUnavailable)
        assert store.get_turn_state(LEAGUE).current_pick == 1

    def test_unknown_player(self) -> None:
        """Test an id missing from the directory is unavailable."""
        store = make_store(["team-1"])

        result = commit_pick(store, LEAGUE, "team-1", "nobody", week=1)

        assert isinstance(result.error, PlayerUnavailable)

    def test_slot_unavailable_writes_nothing(self) -> None:
        """Test a full slot fails before any store write."""
        qb = PlayerRef("qb2", "Lamar Jackson", "QB", 434.4)
        state = DraftTurnState(LEAGUE, ("team-1",), 0, DraftStatus.IN_PROGRESS)
        store = make_mock_store(state, [qb])
        roster = [RosterEntry("team-1", "qb1", "QB")]

        result = DraftOrchestrator(store).commit_pick(
            LEAGUE, "team-1", "qb2", week=1, current_roster=roster
        )

        assert not result.ok
        assert isinstance(result.error, SlotUnavailable)
        assert result.error.reason == SLOT_FULL_MESSAGES["QB"]
        store.insert_roster_entry.assert_not_called()
        store.record_move.assert_not_called()
        store.advance_turn.assert_not_called()

    def test_rb_overflow_goes_to_flex(self) -> None:
        """Test a third RB is committed into FLEX."""
        store = make_store(["team-1"])
        roster = [RosterEntry("team-1", "x1", "RB"), RosterEntry("team-1", "x2", "RB")]

        result = commit_pick(
            store,
            LEAGUE,
            "team-1",
            "rb1",
            week=1,
            current_roster=roster,
            draft_config=DraftConfig(num_teams=1),
        )

        assert result.ok
        assert result.slot == "FLEX"

    def test_snake_order_across_rounds(self) -> None:
        """Test teams pick 1-2-2-1 over two rounds."""
        store = make_store(["team-1", "team-2"])
        orchestrator = DraftOrchestrator(store, DraftConfig(num_teams=2))

        picks = [
            ("team-1", "qb1"),
            ("team-2", "qb2"),
            ("team-2", "rb1"),
            ("team-1", "rb2"),
        ]
        for team_id, player_id in picks:
            result = orchestrator.commit_pick(LEAGUE, team_id, player_id, week=1)
            assert result.ok, result.error

        assert store.get_turn_state(LEAGUE).current_pick == 4
        assert store.get_turn_state(LEAGUE).team_on_the_clock() == "team-1"

    def test_last_pick_completes_draft(self) -> None:
        """Test the final pick marks the draft completed."""
        store = make_store(["team-1"])
        draft_config = DraftConfig(num_teams=1, total_rounds=2)
        orchestrator = DraftOrchestrator(store, draft_config)

        first = orchestrator.commit_pick(LEAGUE, "team-1", "qb1", week=1)
        second = orchestrator.commit_pick(LEAGUE, "team-1", "rb1", week=1)

        assert first.turn_state is not None
        assert first.turn_state.status == DraftStatus.IN_PROGRESS
        assert second.turn_state is not None
        assert second.turn_state.status == DraftStatus.COMPLETED
        assert second.turn_state.team_on_the_clock() is None

        after = orchestrator.commit_pick(LEAGUE, "team-1", "wr1", week=1)
        assert isinstance(after.error, DraftNotActive)

    def test_insert_failure_is_reported(self) -> None:
        """Test a failed roster write is returned without advancing."""
        qb = PlayerRef("qb1", "Josh Allen", "QB", 385.0)
        state = DraftTurnState(LEAGUE, ("team-1",), 0, DraftStatus.IN_PROGRESS)
        store = make_mock_store(state, [qb])
        store.insert_roster_entry.side_effect = ExternalWriteFailed("insert failed")

        result = DraftOrchestrator(store).commit_pick(LEAGUE, "team-1", "qb1", week=1)

        assert isinstance(result.error, ExternalWriteFailed)
        store.advance_turn.assert_not_called()


class TestTurnAdvance:
    """Test compare-and-swap on the turn pointer."""

    def test_retry_after_conflict(self) -> None:
        """Test a rejected update is retried."""
        qb = PlayerRef("qb1", "Josh Allen", "QB", 385.0)
        order = ("team-1", "team-2")
        state = DraftTurnState(LEAGUE, order, 0, DraftStatus.IN_PROGRESS)
        advanced = DraftTurnState(LEAGUE, order, 1, DraftStatus.IN_PROGRESS)
        store = make_mock_store(state, [qb])
        store.advance_turn.side_effect = [TurnConflict(LEAGUE, 0, 0), advanced]

        result = DraftOrchestrator(store, DraftConfig(num_teams=2)).commit_pick(
            LEAGUE, "team-1", "qb1", week=1
        )

        assert result.ok
        assert result.turn_state == advanced
        assert store.advance_turn.call_count == 2
        store.advance_turn.assert_called_with(LEAGUE, 0, DraftStatus.IN_PROGRESS)

    def test_pointer_already_advanced(self) -> None:
        """Test a pointer past the expected pick is accepted."""
        qb = PlayerRef("qb1", "Josh Allen", "QB", 385.0)
        state = DraftTurnState(LEAGUE, ("team-1", "team-2"), 0, DraftStatus.IN_PROGRESS)
        moved = DraftTurnState(LEAGUE, ("team-1", "team-2"), 1, DraftStatus.IN_PROGRESS)
        store = make_mock_store(state, [qb])
        store.get_turn_state.side_effect = [state, moved]
        store.advance_turn.side_effect = TurnConflict(LEAGUE, 0, 1)

        result = DraftOrchestrator(store, DraftConfig(num_teams=2)).commit_pick(
            LEAGUE, "team-1", "qb1", week=1
        )

        assert result.ok
        assert result.turn_state == moved
        assert store.advance_turn.call_count == 1

    def test_retries_exhausted(self) -> None:
        """Test repeated conflicts surface as an inconsistent turn state."""
        qb = PlayerRef("qb1", "Josh Allen", "QB", 385.0)
        state = DraftTurnState(LEAGUE, ("team-1", "team-2"), 0, DraftStatus.IN_PROGRESS)
        store = make_mock_store(state, [qb])
        store.advance_turn.side_effect = TurnConflict(LEAGUE, 0, 0)

        result = DraftOrchestrator(
            store, DraftConfig(num_teams=2, max_turn_retries=2)
        ).commit_pick(LEAGUE, "team-1", "qb1", week=1)

        assert isinstance(result.error, InconsistentTurnState)
        assert result.error.attempt_id == default_attempt_id(LEAGUE, 0)
        assert store.advance_turn.call_count == 3
        store.insert_roster_entry.assert_called_once()


class TestReplay:
    """Test recovery from a pick that committed without advancing."""

    def test_failed_move_record_then_replay(self) -> None:
        """Test replaying the same pick finishes it without a duplicate."""
        store = FlakyMoveStore()
        store.add_players(LEAGUE, sample_players())
        start_draft(store, LEAGUE, ["team-1", "team-2"], shuffle=False)
        orchestrator = DraftOrchestrator(store, DraftConfig(num_teams=2))

        first = orchestrator.commit_pick(LEAGUE, "team-1", "qb1", week=1)

        assert isinstance(first.error, InconsistentTurnState)
        assert first.attempt_id == "league:0"
        assert len(store.get_roster(LEAGUE, "team-1")) == 1
        assert store.get_turn_state(LEAGUE).current_pick == 0

        second = orchestrator.commit_pick(LEAGUE, "team-1", "qb1", week=1)

        assert second.ok
        assert second.slot == "QB"
        assert len(store.get_roster(LEAGUE, "team-1")) == 1
        assert store.moves == [RosterMove("team-1", "qb1", 1)]
        assert store.get_turn_state(LEAGUE).team_on_the_clock() == "team-2"

    def test_replay_with_different_player_conflicts(self) -> None:
        """Test an attempt id cannot be reused for another player."""
        store = FlakyMoveStore()
        store.add_players(LEAGUE, sample_players())
        start_draft(store, LEAGUE, ["team-1", "team-2"], shuffle=False)
        orchestrator = DraftOrchestrator(store, DraftConfig(num_teams=2))
        orchestrator.commit_pick(LEAGUE, "team-1", "qb1", week=1)

        result = orchestrator.commit_pick(LEAGUE, "team-1", "rb1", week=1)

        assert isinstance(result.error, TurnConflict)
        assert [e.player_id for e in store.get_roster(LEAGUE, "team-1")] == ["qb1"]

    def test_concurrent_pick_under_same_attempt_conflicts(self) -> None:
        """Test a pick that lost the insert race is not reported as drafted."""
        store = StaleAttemptStore()
        store.add_players(LEAGUE, sample_players())
        start_draft(store, LEAGUE, ["team-1", "team-2"], shuffle=False)
        # The timer auto-pick already stored qb1 under this pick's attempt id
        store.insert_roster_entry(
            LEAGUE, RosterEntry("team-1", "qb1", "QB"), default_attempt_id(LEAGUE, 0)
        )
        orchestrator = DraftOrchestrator(store, DraftConfig(num_teams=2))

        result = orchestrator.commit_pick(LEAGUE, "team-1", "rb1", week=1)

        assert not result.ok
        assert isinstance(result.error, TurnConflict)
        assert [e.player_id for e in store.get_roster(LEAGUE, "team-1")] == ["qb1"]
        players = {p.id: p for p in store.get_players(LEAGUE, 1)}
        assert players["rb1"].available is True
        assert store.get_turn_state(LEAGUE).current_pick == 0
        assert store.moves == []

    def test_auto_pick_replay_keeps_original_player(self) -> None:
        """Test an auto-pick replay re-uses the committed player."""
        store = FlakyMoveStore()
        store.add_players(LEAGUE, sample_players())
        start_draft(store, LEAGUE, ["team-1", "team-2"], shuffle=False)
        orchestrator = DraftOrchestrator(store, DraftConfig(num_teams=2))

        first = orchestrator.auto_pick(
            LEAGUE, "team-1", store.get_players(LEAGUE, 1), [], week=1
        )
        assert isinstance(first.error, InconsistentTurnState)
        drafted = store.get_roster(LEAGUE, "team-1")[0].player_id

        second = orchestrator.auto_pick(
            LEAGUE,
            "team-1",
            store.get_players(LEAGUE, 1),
            store.get_roster(LEAGUE, "team-1"),
            week=1,
        )

        assert second.ok
        assert second.player is not None and second.player.id == drafted
        assert len(store.get_roster(LEAGUE, "team-1")) == 1


class TestAutoPick:
    """Test auto-pick selection."""

    def test_picks_top_recommendation(self) -> None:
        """Test RB 200 is taken over QB 180 on an empty roster."""
        players = [
            PlayerRef("qb", "Josh Allen", "QB", 180.0),
            PlayerRef("rb", "Bijan Robinson", "RB", 200.0),
        ]
        store = make_store(["team-1"], players)

        result = auto_pick(
            store,
            LEAGUE,
            "team-1",
            players,
            [],
            week=1,
            draft_config=DraftConfig(num_teams=1),
        )

        assert result.ok
        assert result.player is not None and result.player.id == "rb"
        assert result.slot == "RB"

    def test_skips_top_candidate_without_slot(self) -> None:
        """Test a high-scoring player for a full slot is passed over."""
        players = [
            PlayerRef("qb", "Elite QB", "QB", 1000.0),
            PlayerRef("rb", "Starting RB", "RB", 100.0),
        ]
        roster = [RosterEntry("team-1", "old-qb", "QB")]
        orchestrator = DraftOrchestrator(InMemoryDraftStore())

        chosen = orchestrator.choose_auto_pick("team-1", players, roster, team_count=10)

        assert chosen.id == "rb"

    def test_zero_points_fallback(self) -> None:
        """Test a pool with no history still yields a pick."""
        players = [
            PlayerRef("k", "Rookie Kicker", "K", 0.0),
            PlayerRef("te", "Rookie TE", "TE", 0.0),
        ]
        store = make_store(["team-1"], players)

        result = auto_pick(
            store,
            LEAGUE,
            "team-1",
            players,
            [],
            week=1,
            draft_config=DraftConfig(num_teams=1),
        )

        assert result.ok
        assert result.player is not None and result.player.id == "k"
        assert result.slot == "K"

    def test_fallback_uses_raw_points_among_eligible(self) -> None:
        """Test the fallback skips players without a slot."""
        players = [
            PlayerRef("qb", "Backup QB", "QB", 0.0),
            PlayerRef("wr", "Rookie WR", "WR", 0.0),
        ]
        roster = [RosterEntry("team-1", "old-qb", "QB")]
        orchestrator = DraftOrchestrator(InMemoryDraftStore())

        chosen = orchestrator.choose_auto_pick("team-1", players, roster, team_count=10)

        assert chosen.id == "wr"

    def test_roster_at_cutoff_uses_raw_points(self) -> None:
        """Test a roster with a full draft's worth of players skips scoring."""
        draft_config = DraftConfig(total_rounds=2)
        orchestrator = DraftOrchestrator(InMemoryDraftStore(), draft_config)
        roster = [RosterEntry("team-1", "a", "RB"), RosterEntry("team-1", "b", "QB")]
        players = [
            PlayerRef("te", "Needed TE", "TE", 100.0),
            PlayerRef("k", "Kicker", "K", 120.0),
        ]

        chosen = orchestrator.choose_auto_pick("team-1", players, roster, team_count=1)

        assert chosen.id == "k"

    def test_ignores_unavailable_players(self) -> None:
        """Test drafted players are never auto-picked."""
        players = [
            PlayerRef("gone", "Drafted RB", "RB", 500.0, available=False),
            PlayerRef("rb", "Free RB", "RB", 100.0),
        ]
        orchestrator = DraftOrchestrator(InMemoryDraftStore())

        chosen = orchestrator.choose_auto_pick("team-1", players, [], team_count=10)

        assert chosen.id == "rb"

    def test_no_players_available(self) -> None:
        """Test an empty pool raises NoEligiblePlayers."""
        orchestrator = DraftOrchestrator(InMemoryDraftStore())

        with pytest.raises(NoEligiblePlayers) as exc_info:
            orchestrator.choose_auto_pick("team-1", [], [], team_count=10)

        assert exc_info.value.roster_complete is False
        assert "no players available" in str(exc_info.value)

    def test_roster_complete(self) -> None:
        """Test a full roster reports completion through the result."""
        slots = ["QB", "RB", "RB", "WR", "WR", "TE", "FLEX", "K", "DEF", "DP"]
        roster = [RosterEntry("team-1", f"p{i}", slot) for i, slot in enumerate(slots)]
        players = [PlayerRef("rb", "Extra RB", "RB", 100.0)]
        store = make_store(["team-1"], players)

        result = auto_pick(store, LEAGUE, "team-1", players, roster, week=1)

        assert isinstance(result.error, NoEligiblePlayers)
        assert result.error.roster_complete is True
        assert "roster complete" in str(result.error)
