"""Chess legality, backed by python-chess.

ChessRules is the only place that touches chess.Board. It answers legality
questions and, when a move is applied, returns a MoveRecord describing it
so the identity registry can follow along.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import chess

from manachess.game.state import Side

logger = logging.getLogger("manachess.rules")


class MoveFlag(str, Enum):
    CAPTURE = "capture"
    EN_PASSANT = "en_passant"
    KINGSIDE_CASTLE = "kingside_castle"
    QUEENSIDE_CASTLE = "queenside_castle"
    PROMOTION = "promotion"


@dataclass(frozen=True)
class LegalMove:
    from_square: chess.Square
    to_square: chess.Square
    is_capture: bool
    san: str


@dataclass(frozen=True)
class MoveRecord:
    """Description of one move, taken from the position BEFORE it is played."""
    from_square: chess.Square
    to_square: chess.Square
    piece_type: chess.PieceType  # moved piece, before promotion
    side: Side
    flags: frozenset[MoveFlag] = frozenset()
    captured: Optional[chess.PieceType] = None
    promotion: Optional[chess.PieceType] = None
    san: str = ""

    @property
    def is_capture(self) -> bool:
        return MoveFlag.CAPTURE in self.flags

    @property
    def captured_square(self) -> Optional[chess.Square]:
        """Square of the captured piece; differs from to_square for en passant."""
        if MoveFlag.EN_PASSANT in self.flags:
            return en_passant_victim_square(self.to_square, self.side)
        if self.is_capture:
            return self.to_square
        return None


@dataclass(frozen=True)
class GameOver:
    over: bool
    reason: Optional[str] = None


def en_passant_victim_square(to_square: chess.Square, side: Side) -> chess.Square:
    """The pawn taken en passant sits one rank behind the destination."""
    step = -1 if side == Side.WHITE else 1
    return chess.square(chess.square_file(to_square), chess.square_rank(to_square) + step)


class ChessRules:
    """Thin stateful wrapper over a python-chess board."""

    def __init__(self, fen: Optional[str] = None):
        self.board = chess.Board(fen) if fen else chess.Board()

    @property
    def turn(self) -> Side:
        return Side.from_color(self.board.turn)

    def fen(self) -> str:
        return self.board.fen()

    def is_in_check(self) -> bool:
        return self.board.is_check()

    def game_over(self) -> GameOver:
        """Checkmate, stalemate or a draw. Threefold repetition and the
        50-move rule end the game without waiting for a claim."""
        if not self.board.is_game_over(claim_draw=True):
            return GameOver(False)
        if self.board.is_checkmate():
            return GameOver(True, "Checkmate")
        if self.board.is_stalemate():
            return GameOver(True, "Stalemate")
        if (self.board.is_insufficient_material()
                or self.board.is_seventyfive_moves()
                or self.board.is_fivefold_repetition()
                or self.board.can_claim_draw()):
            return GameOver(True, "Draw")
        return GameOver(True, "Game over")

    def legal_moves_from(self, square: chess.Square) -> list[LegalMove]:
        """All legal moves of the piece on a square (side to move only)."""
        moves = []
        for move in self.board.generate_legal_moves(from_mask=chess.BB_SQUARES[square]):
            moves.append(LegalMove(
                from_square=move.from_square,
                to_square=move.to_square,
                is_capture=self.board.is_capture(move),
                san=self.board.san(move),
            ))
        return moves

    def _to_move(self, from_square: chess.Square, to_square: chess.Square) -> chess.Move:
        # Promotions always queen
        promotion = None
        if self.board.piece_type_at(from_square) == chess.PAWN \
                and chess.square_rank(to_square) in (0, 7):
            promotion = chess.QUEEN
        return chess.Move(from_square, to_square, promotion=promotion)

    def describe(self, move: chess.Move) -> MoveRecord:
        """Build the MoveRecord for a legal move in the current position."""
        board = self.board
        flags = set()
        captured = None

        if board.is_en_passant(move):
            flags.update((MoveFlag.CAPTURE, MoveFlag.EN_PASSANT))
            captured = chess.PAWN
        elif board.is_capture(move):
            flags.add(MoveFlag.CAPTURE)
            captured = board.piece_type_at(move.to_square)

        if board.is_kingside_castling(move):
            flags.add(MoveFlag.KINGSIDE_CASTLE)
        elif board.is_queenside_castling(move):
            flags.add(MoveFlag.QUEENSIDE_CASTLE)

        if move.promotion:
            flags.add(MoveFlag.PROMOTION)

        return MoveRecord(
            from_square=move.from_square,
            to_square=move.to_square,
            piece_type=board.piece_type_at(move.from_square),
            side=self.turn,
            flags=frozenset(flags),
            captured=captured,
            promotion=move.promotion,
            san=board.san(move),
        )

    def preview(self, from_square: chess.Square, to_square: chess.Square) -> Optional[MoveRecord]:
        """Describe a move without playing it. None if the move is illegal."""
        move = self._to_move(from_square, to_square)
        if move not in self.board.legal_moves:
            return None
        return self.describe(move)

    def try_move(self, from_square: chess.Square, to_square: chess.Square) -> Optional[MoveRecord]:
        """Play a move if legal and return its record, else None."""
        move = self._to_move(from_square, to_square)
        if move not in self.board.legal_moves:
            logger.debug(f"Rejected {chess.square_name(from_square)}{chess.square_name(to_square)}")
            return None
        record = self.describe(move)
        self.board.push(move)
        return record

    def pass_turn(self) -> bool:
        """Hand the move to the opponent without touching the board.

        Refused while in check, since the king would be left en prise.
        """
        if self.board.is_check():
            return False
        self.board.push(chess.Move.null())
        return True
