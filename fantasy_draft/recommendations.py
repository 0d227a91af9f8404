"""Draft recommendation scoring based on roster needs."""

import logging
from collections.abc import Iterable

from .config import (
    BENCH_CAPACITY,
    DEFAULT_EARLY_ROUND_PRIORITY,
    DP_POSITIONS,
    EARLY_ROUND_CUTOFF,
    EARLY_ROUND_PRIORITY,
    FLEX_POSITIONS,
    SCARCITY_MULTIPLIERS,
)
from .models import DraftCandidate, PlayerRef, Priority, RosterEntry, RosterNeedSnapshot
from .needs import analyze_needs

logger = logging.getLogger(__name__)


def need_multiplier(position: str, needs: RosterNeedSnapshot) -> float:
    """Weight a position by how much the roster still needs it.

    Args:
        position: Player position code
        needs: Current roster needs

    Returns:
        Multiplier applied to the player's base score
    """
    has_bench = needs.bench_remaining > 0

    if position in needs.unmet_slots:
        return 2.0
    if position in FLEX_POSITIONS:
        if needs.flex_available:
            return 1.5
        return 0.7 if has_bench else 0.3
    if position in DP_POSITIONS:
        if "DP" in needs.unmet_slots:
            return 1.8
        return 0.5 if has_bench else 0.2
    if position in needs.filled_slots:
        return 0.5 if has_bench else 0.1
    return 1.0


def round_adjustment(position: str, round_number: int) -> float:
    """Bias early rounds toward core positions.

    Returns:
        (11 - priority rank) / 10 in rounds up to EARLY_ROUND_CUTOFF, else 1.0
    """
    if round_number > EARLY_ROUND_CUTOFF:
        return 1.0
    rank = EARLY_ROUND_PRIORITY.get(position, DEFAULT_EARLY_ROUND_PRIORITY)
    return (11 - rank) / 10


def calculate_recommendation_score(
    player: PlayerRef, needs: RosterNeedSnapshot, round_number: int
) -> float:
    """Calculate recommendation score for a player.

    Players with no past-period points always score 0.

    Args:
        player: Candidate player
        needs: Current roster needs
        round_number: 1-based draft round

    Returns:
        Adjusted score rounded to 2 decimal places
    """
    base = player.past_period_points
    if base == 0:
        return 0.0

    score = base * need_multiplier(player.position, needs)
    score *= SCARCITY_MULTIPLIERS.get(player.position, 1.0)
    score *= round_adjustment(player.position, round_number)

    return round(score, 2)


def describe_candidate(
    player: PlayerRef, needs: RosterNeedSnapshot
) -> tuple[str, Priority]:
    """Build the display reason and priority for a candidate."""
    position = player.position

    if position in needs.unmet_slots:
        reason, priority = f"You need a {position}", Priority.HIGH
    elif position in FLEX_POSITIONS and needs.flex_available:
        reason, priority = "Can fill FLEX slot", Priority.HIGH
    elif position in DP_POSITIONS and "DP" in needs.unmet_slots:
        reason, priority = "Can fill DP slot", Priority.HIGH
    elif needs.bench_remaining > 0:
        reason, priority = "Good value for bench", Priority.LOW
    else:
        reason, priority = "Best available player", Priority.MEDIUM

    if player.past_period_points > 0:
        reason += f" ({player.past_period_points:g} pts last season)"

    return reason, priority


def score_candidates(
    players: Iterable[PlayerRef], needs: RosterNeedSnapshot, round_number: int
) -> list[DraftCandidate]:
    """Rank players for the current pick.

    Ties keep input order.

    Args:
        players: Candidate players
        needs: Current roster needs
        round_number: 1-based draft round

    Returns:
        Candidates with a positive score, highest score first
    """
    candidates = []
    for player in players:
        adjusted = calculate_recommendation_score(player, needs, round_number)
        if adjusted <= 0:
            continue

        reason, priority = describe_candidate(player, needs)
        candidates.append(
            DraftCandidate(
                player=player,
                raw_score=player.past_period_points,
                adjusted_score=adjusted,
                reason=reason,
                priority=priority,
            )
        )

    candidates.sort(key=lambda c: c.adjusted_score, reverse=True)
    return candidates


def recommend(
    available_players: Iterable[PlayerRef],
    roster_entries: Iterable[RosterEntry],
    round_number: int = 1,
    top_n: int = 10,
    bench_capacity: int = BENCH_CAPACITY,
) -> list[DraftCandidate]:
    """Get draft recommendations based on available players and roster needs.

    Args:
        available_players: Player pool; drafted players are skipped
        roster_entries: Team's current roster
        round_number: 1-based draft round
        top_n: Maximum number of recommendations
        bench_capacity: Maximum roster size for bench accounting

    Returns:
        Up to top_n candidates, highest score first
    """
    needs = analyze_needs(roster_entries, bench_capacity)
    pool = [player for player in available_players if player.available]
    ranked = score_candidates(pool, needs, round_number)

    logger.debug(
        f"Round {round_number}: {len(ranked)} of {len(pool)} players scored, "
        f"needs={sorted(needs.unmet_slots)}"
    )
    return ranked[:top_n]
