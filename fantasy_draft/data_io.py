"""Data input module for player directory and roster files."""

import csv
import logging
from pathlib import Path

from .config import KNOWN_POSITIONS
from .errors import InvalidRecord
from .models import PlayerRef, RosterEntry

logger = logging.getLogger(__name__)


def load_player_data(
    csv_path: str | Path, known_positions_only: bool = True
) -> list[PlayerRef]:
    """Load player directory rows from a CSV file.

    Recognised columns: id (or player_id), Player (or name), Pos (or
    position), Team (or team), Pts (or points), available. Without an id
    column the player name is used as the id.

    Args:
        csv_path: Path to CSV file with player rows
        known_positions_only: Skip positions with no roster slot

    Returns:
        List of players in file order

    Filters applied:
        - Rows missing a name or position
        - Rows with non-numeric points
        - Positions outside KNOWN_POSITIONS (when known_positions_only)
    """
    players = []
    skipped = 0

    with open(csv_path, "r", newline="") as f:
        reader = csv.DictReader(f)

        for row in reader:
            if not row:
                continue

            record = dict(row)
            if not record.get("id") and not record.get("player_id"):
                record["id"] = record.get("Player") or record.get("name")

            try:
                player = PlayerRef.from_record(record)
            except InvalidRecord as e:
                skipped += 1
                logger.debug(f"Skipping player row: {e}")
                continue

            if known_positions_only and player.position not in KNOWN_POSITIONS:
                skipped += 1
                continue

            players.append(player)

    if skipped:
        logger.info(f"Skipped {skipped} player rows from {csv_path}")
    logger.debug(f"Loaded {len(players)} players from {csv_path}")
    return players


def load_roster_data(
    csv_path: str | Path, team_id: str | None = None
) -> list[RosterEntry]:
    """Load roster rows from a CSV file.

    Recognised columns: team_id (or fantasy_team_id), player_id, slot,
    acquired_week (or week), acquired_type, position, is_active.

    Args:
        csv_path: Path to CSV file with roster rows
        team_id: Keep only this team's rows; a missing team column is
            filled with it

    Returns:
        List of roster entries in file order

    Raises:
        InvalidRecord: If a row cannot be normalised
    """
    entries = []

    with open(csv_path, "r", newline="") as f:
        reader = csv.DictReader(f)

        for line_number, row in enumerate(reader, start=2):
            if not row or not any(row.values()):
                continue

            record = dict(row)
            if team_id is not None and not (
                record.get("team_id") or record.get("fantasy_team_id")
            ):
                record["team_id"] = team_id

            try:
                entry = RosterEntry.from_record(record)
            except InvalidRecord as e:
                raise InvalidRecord(f"{csv_path}:{line_number}: {e}") from e

            if team_id is not None and entry.team_id != team_id:
                continue
            entries.append(entry)

    logger.debug(f"Loaded {len(entries)} roster entries from {csv_path}")
    return entries
