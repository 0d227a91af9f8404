"""Full snake-draft simulation driven by auto-picks."""

import logging
import random
from dataclasses import dataclass

from .config import NUM_TEAMS, DraftConfig
from .control import start_draft
from .errors import DraftError
from .models import DraftStatus, PlayerRef, RosterEntry
from .orchestrator import DraftOrchestrator
from .store import InMemoryDraftStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulatedPick:
    """One pick made during a simulation.

    Attributes:
        pick_number: 1-based overall pick
        round_number: 1-based round
        team_id: Team that picked
        player: Player drafted
        slot: Slot the player filled
    """

    pick_number: int
    round_number: int
    team_id: str
    player: PlayerRef
    slot: str


class DraftSimulation:
    """Complete draft simulation state backed by an in-memory store.

    Attributes:
        store: In-memory backend holding players, rosters and the turn pointer
        orchestrator: Orchestrator committing every pick
        team_ids: Teams taking part
        draft_history: Log of all picks made
    """

    def __init__(
        self,
        players: list[PlayerRef],
        team_ids: list[str],
        draft_config: DraftConfig | None = None,
        league_id: str = "simulation",
        week: int = 1,
    ):
        """Initialize simulation with an empty draft and full player pool.

        Args:
            players: Player directory for the simulated league
            team_ids: Teams taking part
            draft_config: Draft configuration (defaults to one sized to team_ids)
            league_id: League identifier used in the store
            week: Week picks are recorded for
        """
        if draft_config is None:
            draft_config = DraftConfig(num_teams=len(team_ids))

        self.league_id = league_id
        self.week = week
        self.team_ids = list(team_ids)
        self.draft_config = draft_config
        self.store = InMemoryDraftStore()
        self.store.add_players(league_id, players)
        self.orchestrator = DraftOrchestrator(self.store, draft_config)
        self.draft_history: list[SimulatedPick] = []

    def start(self, seed: int | None = None, shuffle: bool = True) -> None:
        """Start the draft, shuffling the order with an optional seed."""
        start_draft(
            self.store,
            self.league_id,
            self.team_ids,
            rng=random.Random(seed),
            shuffle=shuffle,
        )

    @property
    def draft_order(self) -> list[str]:
        """Team ids in first-round order."""
        return list(self.store.get_turn_state(self.league_id).draft_order)

    @property
    def status(self) -> DraftStatus:
        """Current draft status."""
        return self.store.get_turn_state(self.league_id).status

    def make_auto_pick(self) -> SimulatedPick:
        """Auto-pick for the team on the clock.

        Returns:
            The pick that was made

        Raises:
            DraftError: If the draft is not running or the pick failed
        """
        state = self.store.get_turn_state(self.league_id)
        team_id = state.team_on_the_clock()
        if team_id is None:
            raise DraftError(f"No team on the clock in league {self.league_id}")

        result = self.orchestrator.auto_pick(
            self.league_id,
            team_id,
            self.store.get_players(self.league_id, self.week),
            self.store.get_roster(self.league_id, team_id, self.week),
            self.week,
        )
        if not result.ok or result.player is None or result.slot is None:
            raise result.error or DraftError(f"Auto-pick failed for team {team_id}")

        pick = SimulatedPick(
            pick_number=state.current_pick + 1,
            round_number=state.round_index + 1,
            team_id=team_id,
            player=result.player,
            slot=result.slot,
        )
        self.draft_history.append(pick)

        logger.debug(
            f"Pick {pick.pick_number}: {team_id} drafts {pick.player.name} "
            f"({pick.player.position}) -> {pick.slot}"
        )
        return pick

    def run(self) -> "DraftSimulation":
        """Auto-pick until the draft completes or a pick fails.

        Returns:
            Self reference after the draft
        """
        logger.info("Starting draft simulation...")

        while self.status == DraftStatus.IN_PROGRESS:
            try:
                self.make_auto_pick()
            except DraftError as e:
                pick_number = len(self.draft_history) + 1
                logger.warning(f"Could not complete pick {pick_number}: {e}")
                break

        logger.info(f"Draft simulation complete: {len(self.draft_history)} picks made")
        return self

    def roster(self, team_id: str) -> list[RosterEntry]:
        """Active roster for a team."""
        return self.store.get_roster(self.league_id, team_id)

    def team_points(self, team_id: str) -> float:
        """Sum of past-period points across a team's drafted players."""
        picks = [pick for pick in self.draft_history if pick.team_id == team_id]
        return sum(pick.player.past_period_points for pick in picks)


def simulate_full_draft(
    players: list[PlayerRef],
    num_teams: int = NUM_TEAMS,
    draft_config: DraftConfig | None = None,
    seed: int | None = None,
    shuffle: bool = True,
) -> DraftSimulation:
    """Simulate a complete snake draft where every team auto-picks.

    Args:
        players: Player pool
        num_teams: Number of teams in the draft
        draft_config: Draft configuration (defaults to DraftConfig(num_teams))
        seed: Seed for the draft-order shuffle
        shuffle: Keep team-1..team-N order when False

    Returns:
        Finished simulation
    """
    if draft_config is None:
        draft_config = DraftConfig(num_teams=num_teams)

    team_ids = [f"team-{i + 1}" for i in range(draft_config.num_teams)]
    simulation = DraftSimulation(players, team_ids, draft_config)
    simulation.start(seed=seed, shuffle=shuffle)
    return simulation.run()
