"""ManaChess game engine: state, identity registry, statuses, economy, turn cycle."""

from manachess.game.state import (
    GameState, Side, PieceId, PieceFacts, PieceRegistry, Status, StatusType,
)
from manachess.game.rules import ChessRules, GameOver, LegalMove, MoveFlag, MoveRecord
from manachess.game.registry import seed, reconcile, prune_dead_ids
from manachess.game.statuses import add_status, has_status, remove_expired, consume_one
from manachess.game.economy import (
    can_afford, spend_mana, regen, get_cooldown_available_turn, set_cooldown,
)
from manachess.game.turn import new_game_state, advance_turn, MAX_LOG_ENTRIES
from manachess.game.board import adjacent_squares, render_board

__all__ = [
    "GameState", "Side", "PieceId", "PieceFacts", "PieceRegistry", "Status", "StatusType",
    "ChessRules", "GameOver", "LegalMove", "MoveFlag", "MoveRecord",
    "seed", "reconcile", "prune_dead_ids",
    "add_status", "has_status", "remove_expired", "consume_one",
    "can_afford", "spend_mana", "regen", "get_cooldown_available_turn", "set_cooldown",
    "new_game_state", "advance_turn", "MAX_LOG_ENTRIES",
    "adjacent_squares", "render_board",
]
