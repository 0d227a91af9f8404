"""Configuration data structures and settings for the draft engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RosterSlotDefinition:
    """Static definition of one roster slot.

    Attributes:
        slot_name: Slot identifier (QB, RB, FLEX, ...)
        capacity: Number of players the slot holds
        eligible_positions: Player positions allowed in the slot
    """

    slot_name: str
    capacity: int
    eligible_positions: frozenset[str]


# Roster slot configuration - the only copy of the slot limits
ROSTER_SLOTS: dict[str, RosterSlotDefinition] = {
    "QB": RosterSlotDefinition("QB", 1, frozenset({"QB"})),
    "RB": RosterSlotDefinition("RB", 2, frozenset({"RB"})),
    "WR": RosterSlotDefinition("WR", 2, frozenset({"WR"})),
    "TE": RosterSlotDefinition("TE", 1, frozenset({"TE"})),
    "FLEX": RosterSlotDefinition("FLEX", 1, frozenset({"RB", "WR"})),  # RB/WR only
    "K": RosterSlotDefinition("K", 1, frozenset({"K"})),
    "DEF": RosterSlotDefinition("DEF", 1, frozenset({"DEF"})),
    "DP": RosterSlotDefinition("DP", 1, frozenset({"DP", "LB", "DB", "DL"})),
}

# Positions eligible for the FLEX slot
FLEX_POSITIONS = frozenset({"RB", "WR"})

# Positions eligible for the defensive player (DP) slot
DP_POSITIONS = frozenset({"DP", "LB", "DB", "DL"})

# Every position the engine knows how to place
KNOWN_POSITIONS = frozenset(
    position for slot in ROSTER_SLOTS.values() for position in slot.eligible_positions
)

# Position scarcity multipliers (elite output at these positions is harder to replace)
SCARCITY_MULTIPLIERS = {
    "QB": 1.3,
    "TE": 1.2,
    "K": 1.1,
    "DEF": 1.1,
    "RB": 1.0,
    "WR": 1.0,
    "DP": 1.1,
    "LB": 1.1,
    "DB": 1.1,
    "DL": 1.1,
}

# Position priority for early rounds (1 = highest)
EARLY_ROUND_PRIORITY = {
    "RB": 1,
    "WR": 2,
    "QB": 3,
    "TE": 4,
    "DP": 5,
    "LB": 5,
    "DB": 5,
    "DL": 5,
    "DEF": 6,
    "K": 7,
}

# Priority rank used for positions missing from EARLY_ROUND_PRIORITY
DEFAULT_EARLY_ROUND_PRIORITY = 10

# Round-based adjustment applies up to and including this round
EARLY_ROUND_CUTOFF = 5

# Maximum roster size used for bench-space accounting
BENCH_CAPACITY = 14

# Rounds in a draft (one per structured roster slot)
DRAFT_ROUNDS = sum(slot.capacity for slot in ROSTER_SLOTS.values())

# Global draft configuration
NUM_TEAMS = 10  # Number of teams in the league

# Compare-and-swap retries when advancing the turn pointer
MAX_TURN_RETRIES = 3


def get_total_rounds() -> int:
    """Get the number of rounds in a draft.

    Returns:
        Number of draft rounds
    """
    return DRAFT_ROUNDS


def get_total_picks(num_teams: int = NUM_TEAMS) -> int:
    """Get the number of picks in a full draft.

    Args:
        num_teams: Number of teams in the draft

    Returns:
        Total picks across all rounds
    """
    return num_teams * get_total_rounds()


def snake_team_index(pick_number: int, num_teams: int) -> int:
    """Return the draft-order index on the clock at a 0-based overall pick.

    Even rounds run forward, odd rounds run in reverse.
    """
    if num_teams <= 0:
        raise ValueError(f"Invalid number of teams: {num_teams}")

    round_index, position_in_round = divmod(pick_number, num_teams)
    if round_index % 2 == 1:
        return num_teams - 1 - position_in_round
    return position_in_round


def generate_snake_order(
    num_teams: int = NUM_TEAMS, total_rounds: int | None = None
) -> list[int]:
    """Generate snake draft order for a given number of teams.

    Args:
        num_teams: Number of teams in the draft
        total_rounds: Number of rounds (defaults to DRAFT_ROUNDS)

    Returns:
        List of team indices representing snake draft order

    Example:
        For 4 teams, 3 rounds:
        Round 1: [0, 1, 2, 3]
        Round 2: [3, 2, 1, 0]
        Round 3: [0, 1, 2, 3]
        Result: [0, 1, 2, 3, 3, 2, 1, 0, 0, 1, 2, 3]
    """
    if total_rounds is None:
        total_rounds = get_total_rounds()

    return [
        snake_team_index(pick_number, num_teams)
        for pick_number in range(num_teams * total_rounds)
    ]


@dataclass
class DraftConfig:
    """Per-draft settings.

    Attributes:
        num_teams: Number of teams in the draft
        total_rounds: Rounds each team drafts
        bench_capacity: Maximum roster size used for bench accounting
        max_turn_retries: Retries for a rejected turn-pointer update
    """

    num_teams: int = NUM_TEAMS
    total_rounds: int = DRAFT_ROUNDS
    bench_capacity: int = BENCH_CAPACITY
    max_turn_retries: int = MAX_TURN_RETRIES

    @property
    def total_picks(self) -> int:
        """Total picks in the draft."""
        return self.num_teams * self.total_rounds

    def generate_snake_order(self) -> list[int]:
        """Generate the snake order for this draft."""
        return generate_snake_order(self.num_teams, self.total_rounds)

    def team_index_for_pick(self, pick_number: int) -> int:
        """Return the draft-order index on the clock at a 0-based pick."""
        return snake_team_index(pick_number, self.num_teams)
