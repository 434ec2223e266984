"""Timed status effects (Rooted, Shielded), keyed by piece identity.

Statuses are attached to a PieceId rather than a square, so a status follows
its bearer around the board without any migration step.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from manachess.game.state import GameState, PieceId, Status, StatusType


def statuses_for(state: GameState, piece_id: Optional[PieceId]) -> tuple[Status, ...]:
    if piece_id is None:
        return ()
    return state.statuses.get(piece_id, ())


def add_status(state: GameState, piece_id: PieceId, status: Status) -> GameState:
    """Attach a status. A piece may carry several at once."""
    statuses = dict(state.statuses)
    statuses[piece_id] = statuses.get(piece_id, ()) + (status,)
    return replace(state, statuses=statuses)


def has_status(state: GameState, piece_id: Optional[PieceId], status_type: StatusType) -> bool:
    return any(s.status_type == status_type for s in statuses_for(state, piece_id))


def remove_expired(state: GameState) -> GameState:
    """Drop every status whose expiry turn has been reached.

    A status survives while ``expires_on_turn > turn_number``. Identities left
    with no statuses are removed from the map.
    """
    turn = state.turn_number
    statuses = {}
    for piece_id, current in state.statuses.items():
        kept = tuple(s for s in current if s.expires_on_turn > turn)
        if kept:
            statuses[piece_id] = kept
    return replace(state, statuses=statuses)


def consume_one(state: GameState, piece_id: PieceId, status_type: StatusType) -> GameState:
    """Remove the first status of the given type, leaving the others."""
    current = state.statuses.get(piece_id, ())
    for i, status in enumerate(current):
        if status.status_type == status_type:
            kept = current[:i] + current[i + 1:]
            break
    else:
        return state

    statuses = dict(state.statuses)
    if kept:
        statuses[piece_id] = kept
    else:
        del statuses[piece_id]
    return replace(state, statuses=statuses)
