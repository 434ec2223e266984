"""Square helpers and text-based board rendering."""

from __future__ import annotations

from typing import Iterable, Optional

import chess

from manachess.game.state import GameState, Side, StatusType
from manachess.game.statuses import has_status


def adjacent_squares(square: chess.Square) -> list[chess.Square]:
    """The up to eight squares at king distance 1."""
    return [sq for sq in chess.SQUARES if chess.square_distance(square, sq) == 1]


def adjacent_enemy_squares(state: GameState, square: chess.Square, side: Side) -> list[chess.Square]:
    """Adjacent squares holding a live piece of the opponent of ``side``."""
    result = []
    for sq in adjacent_squares(square):
        facts = state.registry.piece_at(sq)
        if facts is not None and facts.side != side:
            result.append(sq)
    return result


def parse_square(text: str) -> Optional[chess.Square]:
    """Parse 'e4' style input. Returns None for anything else."""
    try:
        return chess.parse_square(text.strip().lower())
    except ValueError:
        return None


def render_board(board: chess.Board, state: Optional[GameState] = None,
                 selected: Optional[chess.Square] = None,
                 targets: Iterable[chess.Square] = ()) -> str:
    """Render the board as a text string.

    Args:
        board: Position to draw.
        state: Optional ability state. Adds a mana/turn header and status
            badges: ``#`` around a rooted piece, ``()`` around a shielded one.
        selected: Optional selected square, drawn as ``[X]``.
        targets: Squares to mark as move or cast targets (``.`` or ``x``).
    """
    lines = []
    target_set = set(targets)

    if state is not None:
        side = Side.from_color(board.turn)
        lines.append(f"Turn {state.turn_number} - {side.title} to move")
        lines.append(f"Mana: White={state.mana[Side.WHITE]}/{state.max_mana[Side.WHITE]}"
                     f"  Black={state.mana[Side.BLACK]}/{state.max_mana[Side.BLACK]}")
    lines.append("")

    lines.append("    a   b   c   d   e   f   g   h")
    lines.append("  +---+---+---+---+---+---+---+---+")

    for rank in range(7, -1, -1):
        row_str = f"{rank + 1} |"
        for file in range(8):
            sq = chess.square(file, rank)
            piece = board.piece_at(sq)
            display = piece.symbol() if piece is not None else " "
            if sq in target_set:
                display = "x" if piece is not None else "."

            left, right = " ", " "
            if sq == selected:
                left, right = "[", "]"
            elif state is not None and piece is not None:
                piece_id = state.registry.id_at(sq)
                if has_status(state, piece_id, StatusType.ROOTED):
                    left, right = "#", "#"
                elif has_status(state, piece_id, StatusType.SHIELDED):
                    left, right = "(", ")"
            row_str += f"{left}{display}{right}|"
        row_str += f" {rank + 1}"
        lines.append(row_str)
        lines.append("  +---+---+---+---+---+---+---+---+")

    lines.append("    a   b   c   d   e   f   g   h")

    return "\n".join(lines)
