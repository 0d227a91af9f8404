"""Roster slot resolution for drafted players."""

import logging
from collections import Counter
from collections.abc import Iterable

from .config import DP_POSITIONS, FLEX_POSITIONS, ROSTER_SLOTS
from .models import PlayerRef, RosterEntry

logger = logging.getLogger(__name__)

# Feedback shown when a player's starting slots are full
SLOT_FULL_MESSAGES = {
    "QB": "You already have the maximum of starting QBs.",
    "RB": "You already have the maximum of starting RBs and FLEX.",
    "WR": "You already have the maximum of starting WRs and FLEX.",
    "TE": "You already have the maximum of starting TEs.",
    "K": "You already have the maximum of Kickers.",
    "DEF": "You already have the maximum of Defenses.",
    "DP": "You already have the maximum of Defensive Players.",
}


def count_slots(roster_entries: Iterable[RosterEntry]) -> Counter[str]:
    """Count active roster entries per slot.

    Args:
        roster_entries: Current roster snapshot

    Returns:
        Counter mapping slot name -> number of active entries
    """
    return Counter(entry.slot for entry in roster_entries if entry.is_active)


def _has_capacity(slot_name: str, slot_counts: Counter[str]) -> bool:
    return slot_counts[slot_name] < ROSTER_SLOTS[slot_name].capacity


def resolve_slot_for_position(position: str, slot_counts: Counter[str]) -> str | None:
    """Pick the slot a player at ``position`` would fill.

    Native slot first, then FLEX for RB/WR, then DP for defensive players.
    Unknown positions never resolve.

    Args:
        position: Player position code
        slot_counts: Active occupancy per slot

    Returns:
        Slot name, or None if no eligible slot has capacity
    """
    native = ROSTER_SLOTS.get(position)
    if (
        native is not None
        and position in native.eligible_positions
        and _has_capacity(position, slot_counts)
    ):
        return position

    if position in FLEX_POSITIONS and _has_capacity("FLEX", slot_counts):
        return "FLEX"

    if position in DP_POSITIONS and _has_capacity("DP", slot_counts):
        return "DP"

    return None


def resolve_slot(
    player: PlayerRef, roster_entries: Iterable[RosterEntry]
) -> str | None:
    """Decide which roster slot a player can fill.

    Args:
        player: Player being drafted
        roster_entries: Team's current roster

    Returns:
        Slot name, or None if the player cannot be placed
    """
    slot = resolve_slot_for_position(player.position, count_slots(roster_entries))
    logger.debug(f"Resolved {player.name} ({player.position}) -> {slot}")
    return slot


def open_slots(roster_entries: Iterable[RosterEntry]) -> dict[str, int]:
    """Get count of available roster slots by slot name.

    Returns:
        Dictionary mapping slot -> number of open places
    """
    slot_counts = count_slots(roster_entries)
    return {
        name: max(0, definition.capacity - slot_counts[name])
        for name, definition in ROSTER_SLOTS.items()
    }


def can_draft_player(player: PlayerRef, roster_entries: Iterable[RosterEntry]) -> bool:
    """Check if a player can be placed on the roster."""
    return resolve_slot(player, roster_entries) is not None


def slot_feedback(
    player: PlayerRef, roster_entries: Iterable[RosterEntry]
) -> str | None:
    """Explain why a player cannot be drafted.

    Returns:
        Message for the user, or None if the player can be drafted
    """
    slot_counts = count_slots(roster_entries)
    if resolve_slot_for_position(player.position, slot_counts) is not None:
        return None

    if player.position in DP_POSITIONS:
        return SLOT_FULL_MESSAGES["DP"]
    if player.position in SLOT_FULL_MESSAGES:
        return SLOT_FULL_MESSAGES[player.position]
    return f"Position {player.position} has no roster slot."
