"""Capture interception: a Shielded piece turns the capture into a lost turn."""

from __future__ import annotations

import logging
from typing import Optional

import chess

from manachess.game.rules import ChessRules, MoveRecord
from manachess.game.state import GameState, StatusType
from manachess.game.statuses import consume_one, has_status
from manachess.game.turn import advance_turn

logger = logging.getLogger("manachess.captures")


def is_capture_blocked(state: GameState, square: Optional[chess.Square]) -> bool:
    """True if the piece on ``square`` carries a shield."""
    if square is None:
        return False
    return has_status(state, state.registry.id_at(square), StatusType.SHIELDED)


def resolve_blocked_capture(state: GameState, rules: ChessRules,
                            move: MoveRecord) -> Optional[GameState]:
    """Reject a capture against a shielded piece.

    The board stays as it is, the shield is consumed and the mover's turn is
    spent. Returns None (nothing happens) when the mover is in check, since
    the turn cannot be passed then.
    """
    target = move.captured_square
    target_id = state.registry.id_at(target)
    if not rules.pass_turn():
        logger.debug(f"{move.san} blocked by shield but mover is in check; ignored")
        return None

    state = consume_one(state, target_id, StatusType.SHIELDED)
    description = f"{move.san} blocked by shield on {chess.square_name(target)}"
    logger.info(description)
    return advance_turn(state, rules.turn, description)
