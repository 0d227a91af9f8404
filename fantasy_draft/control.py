"""Draft lifecycle control: start, pause, resume, complete and reset."""

import logging
import random
from dataclasses import replace

from .errors import InvalidDraftTransition
from .models import DraftStatus, DraftTurnState
from .store import DraftStore

logger = logging.getLogger(__name__)

# Allowed status changes (start_draft leaves pending; reset works from any status)
ALLOWED_TRANSITIONS = {
    DraftStatus.PENDING: set(),
    DraftStatus.IN_PROGRESS: {DraftStatus.PAUSED, DraftStatus.COMPLETED},
    DraftStatus.PAUSED: {DraftStatus.IN_PROGRESS, DraftStatus.COMPLETED},
    DraftStatus.COMPLETED: set(),
}


def _transition(
    store: DraftStore, league_id: str, target: DraftStatus
) -> DraftTurnState:
    state = store.get_turn_state(league_id)
    if target not in ALLOWED_TRANSITIONS[state.status]:
        raise InvalidDraftTransition(league_id, state.status.value, target.value)

    new_state = store.save_turn_state(replace(state, status=target))
    logger.info(f"Draft for league {league_id}: {state.status.value} -> {target.value}")
    return new_state


def start_draft(
    store: DraftStore,
    league_id: str,
    team_ids: list[str],
    rng: random.Random | None = None,
    shuffle: bool = True,
) -> DraftTurnState:
    """Start a pending draft with a (shuffled) draft order.

    Args:
        store: Backend holding the turn pointer
        league_id: League to start
        team_ids: Teams taking part
        rng: Random source for the shuffle (defaults to module random)
        shuffle: Keep team_ids order when False

    Returns:
        New turn state at pick 0

    Raises:
        ValueError: If no teams are given
        InvalidDraftTransition: If the draft is not pending
    """
    if not team_ids:
        raise ValueError(f"No teams in league {league_id}")

    state = store.get_turn_state(league_id)
    if state.status != DraftStatus.PENDING:
        raise InvalidDraftTransition(
            league_id, state.status.value, DraftStatus.IN_PROGRESS.value
        )

    order = list(team_ids)
    if shuffle:
        (rng or random).shuffle(order)

    new_state = store.save_turn_state(
        DraftTurnState(
            league_id=league_id,
            draft_order=tuple(order),
            current_pick=0,
            status=DraftStatus.IN_PROGRESS,
        )
    )
    logger.info(f"Draft for league {league_id} started with {len(order)} teams")
    logger.debug(f"Draft order: {order}")
    return new_state


def pause_draft(store: DraftStore, league_id: str) -> DraftTurnState:
    """Pause a running draft."""
    return _transition(store, league_id, DraftStatus.PAUSED)


def resume_draft(store: DraftStore, league_id: str) -> DraftTurnState:
    """Resume a paused draft."""
    return _transition(store, league_id, DraftStatus.IN_PROGRESS)


def complete_draft(store: DraftStore, league_id: str) -> DraftTurnState:
    """Force a running or paused draft to completed."""
    return _transition(store, league_id, DraftStatus.COMPLETED)


def reset_draft(store: DraftStore, league_id: str) -> DraftTurnState:
    """Put a draft back to pending and drop every drafted roster entry.

    The draft order is kept so the league can restart with the same teams.
    """
    store.clear_rosters(league_id)
    state = store.get_turn_state(league_id)
    new_state = store.save_turn_state(
        replace(state, current_pick=0, status=DraftStatus.PENDING)
    )
    logger.info(f"Draft for league {league_id} reset")
    return new_state
