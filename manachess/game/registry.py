"""Stable piece identities that survive moves, captures, castling and promotion.

The registry is rebuilt once per accepted move from the MoveRecord produced by
the rules engine. Identities are handed out once at game start and never
reused; a captured piece's identity simply disappears.
"""

from __future__ import annotations

import logging
from dataclasses import replace

import chess

from manachess.game.rules import MoveFlag, MoveRecord, en_passant_victim_square
from manachess.game.state import PieceFacts, PieceId, PieceRegistry, Side, Status

logger = logging.getLogger("manachess.registry")

# Rook hops for castling, by flag: (from_file, to_file)
CASTLE_ROOK_FILES = {
    MoveFlag.KINGSIDE_CASTLE: (7, 5),   # h -> f
    MoveFlag.QUEENSIDE_CASTLE: (0, 3),  # a -> d
}


def _make_id(facts: PieceFacts, n: int) -> PieceId:
    return f"{facts.side.char}{chess.piece_symbol(facts.piece_type)}-{n}"


def seed(board: chess.Board) -> PieceRegistry:
    """Assign a fresh identity to every occupied square of a position.

    Squares are scanned from rank 8 down to rank 1, a-file to h-file.
    """
    square_to_id = {}
    id_to_piece = {}
    next_id = 1

    for rank in range(7, -1, -1):
        for file in range(8):
            sq = chess.square(file, rank)
            piece = board.piece_at(sq)
            if piece is None:
                continue
            facts = PieceFacts(Side.from_color(piece.color), piece.piece_type)
            piece_id = _make_id(facts, next_id)
            next_id += 1
            square_to_id[sq] = piece_id
            id_to_piece[piece_id] = facts

    return PieceRegistry(square_to_id=square_to_id, id_to_piece=id_to_piece)


def reconcile(registry: PieceRegistry, move: MoveRecord) -> PieceRegistry:
    """Follow one applied move: drop captured identities, relocate movers.

    If no identity sits on the move's source square the registry is returned
    unchanged; that means the rules engine and registry disagree.
    """
    moving_id = registry.square_to_id.get(move.from_square)
    if moving_id is None:
        logger.warning(f"No identity on {chess.square_name(move.from_square)} "
                       f"for {move.san or 'move'}; registry left unchanged")
        return registry

    square_to_id = dict(registry.square_to_id)
    id_to_piece = dict(registry.id_to_piece)

    def remove_at(square: chess.Square) -> None:
        victim = square_to_id.pop(square, None)
        if victim is not None:
            del id_to_piece[victim]
            logger.debug(f"{victim} captured on {chess.square_name(square)}")

    # Ordinary capture
    occupant = square_to_id.get(move.to_square)
    if occupant is not None and id_to_piece[occupant].side != move.side:
        remove_at(move.to_square)

    if MoveFlag.EN_PASSANT in move.flags:
        remove_at(en_passant_victim_square(move.to_square, move.side))

    del square_to_id[move.from_square]
    square_to_id[move.to_square] = moving_id

    if MoveFlag.PROMOTION in move.flags and move.promotion is not None:
        id_to_piece[moving_id] = replace(id_to_piece[moving_id], piece_type=move.promotion)

    for flag, (rook_from_file, rook_to_file) in CASTLE_ROOK_FILES.items():
        if flag not in move.flags:
            continue
        back_rank = chess.square_rank(move.from_square)
        rook_from = chess.square(rook_from_file, back_rank)
        rook_to = chess.square(rook_to_file, back_rank)
        rook_id = square_to_id.pop(rook_from, None)
        if rook_id is not None:
            square_to_id[rook_to] = rook_id

    return replace(registry, square_to_id=square_to_id, id_to_piece=id_to_piece)


def prune_dead_ids(registry: PieceRegistry,
                   statuses: dict[PieceId, tuple[Status, ...]],
                   cooldowns: dict[PieceId, dict[str, int]],
                   ) -> tuple[dict[PieceId, tuple[Status, ...]], dict[PieceId, dict[str, int]]]:
    """Drop status and cooldown entries of identities no longer on the board."""
    live = registry.id_to_piece
    return (
        {pid: s for pid, s in statuses.items() if pid in live},
        {pid: c for pid, c in cooldowns.items() if pid in live},
    )
