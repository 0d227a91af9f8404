"""Error types raised and reported by the draft engine."""


class DraftError(Exception):
    """Base class for draft engine errors."""


class SlotUnavailable(DraftError):
    """No roster slot has remaining capacity for the player."""

    def __init__(self, player_name: str, position: str, reason: str = "") -> None:
        self.player_name = player_name
        self.position = position
        self.reason = reason
        message = f"No open roster slot for {player_name} ({position})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NoEligiblePlayers(DraftError):
    """Auto-pick found nothing draftable."""

    def __init__(self, team_id: str, roster_complete: bool) -> None:
        self.team_id = team_id
        self.roster_complete = roster_complete
        detail = "roster complete" if roster_complete else "no players available"
        super().__init__(f"Auto-pick failed for team {team_id}: {detail}")


class PlayerUnavailable(DraftError):
    """Player is unknown to the directory or already drafted."""

    def __init__(self, player_id: str) -> None:
        self.player_id = player_id
        super().__init__(f"Player {player_id} is not available")


class DraftNotActive(DraftError):
    """Draft is not accepting picks."""

    def __init__(self, league_id: str, status: str) -> None:
        self.league_id = league_id
        self.status = status
        super().__init__(f"Draft for league {league_id} is {status}, not in_progress")


class NotTeamsTurn(DraftError):
    """A team tried to pick while another team is on the clock."""

    def __init__(self, team_id: str, on_the_clock: str | None) -> None:
        self.team_id = team_id
        self.on_the_clock = on_the_clock
        super().__init__(
            f"Team {team_id} is not on the clock (current: {on_the_clock})"
        )


class ExternalWriteFailed(DraftError):
    """A store write failed. Never retried by the engine."""


class TurnConflict(DraftError):
    """Turn-pointer compare-and-swap was rejected."""

    def __init__(self, league_id: str, expected_pick: int, actual_pick: int) -> None:
        self.league_id = league_id
        self.expected_pick = expected_pick
        self.actual_pick = actual_pick
        super().__init__(
            f"Turn pointer for league {league_id} is at {actual_pick}, "
            f"expected {expected_pick}"
        )


class InconsistentTurnState(DraftError):
    """Roster entry was committed but the turn pointer was not advanced."""

    def __init__(self, league_id: str, attempt_id: str, detail: str) -> None:
        self.league_id = league_id
        self.attempt_id = attempt_id
        super().__init__(
            f"Pick {attempt_id} in league {league_id} committed without "
            f"turn advance: {detail}"
        )


class InvalidDraftTransition(DraftError):
    """Draft status change not allowed from the current status."""

    def __init__(self, league_id: str, current: str, target: str) -> None:
        self.league_id = league_id
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move draft for league {league_id} from {current} to {target}"
        )


class InvalidRecord(DraftError, ValueError):
    """External record could not be normalised."""
