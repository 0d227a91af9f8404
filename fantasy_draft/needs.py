"""Roster need analysis."""

import logging
from collections.abc import Iterable

from .config import BENCH_CAPACITY, ROSTER_SLOTS
from .models import RosterEntry, RosterNeedSnapshot
from .slots import count_slots

logger = logging.getLogger(__name__)


def analyze_needs(
    roster_entries: Iterable[RosterEntry], bench_capacity: int = BENCH_CAPACITY
) -> RosterNeedSnapshot:
    """Derive unmet, filled and over-filled slots from a roster snapshot.

    FLEX counts as met when a FLEX slot is occupied or when RB/WR occupancy
    exceeds its own capacity. DP counts as met when a DP slot is occupied or
    any LB/DB/DL entry exists.

    Args:
        roster_entries: Current roster
        bench_capacity: Maximum roster size for bench accounting

    Returns:
        RosterNeedSnapshot for the roster
    """
    entries = [entry for entry in roster_entries if entry.is_active]
    slot_counts = count_slots(entries)

    unmet: set[str] = set()
    filled: set[str] = set()
    overfilled: set[str] = set()

    for slot_name, definition in ROSTER_SLOTS.items():
        occupancy = slot_counts[slot_name]

        if occupancy > definition.capacity:
            overfilled.add(slot_name)

        if slot_name == "FLEX":
            met = (
                occupancy > 0
                or slot_counts["RB"] > ROSTER_SLOTS["RB"].capacity
                or slot_counts["WR"] > ROSTER_SLOTS["WR"].capacity
            )
        elif slot_name == "DP":
            met = (
                occupancy > 0
                or slot_counts["LB"] > 0
                or slot_counts["DB"] > 0
                or slot_counts["DL"] > 0
            )
        else:
            met = occupancy >= definition.capacity

        if met:
            filled.add(slot_name)
        else:
            unmet.add(slot_name)

    flex_available = "FLEX" in unmet and "RB" in filled and "WR" in filled
    bench_remaining = max(0, bench_capacity - len(entries))

    return RosterNeedSnapshot(
        unmet_slots=frozenset(unmet),
        filled_slots=frozenset(filled),
        overfilled_slots=frozenset(overfilled),
        flex_available=flex_available,
        bench_remaining=bench_remaining,
    )
