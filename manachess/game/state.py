"""Game state representation for ManaChess.

A GameState is an immutable snapshot. Every accepted action (move, ability
cast, blocked capture, turn pass) produces a new one; helpers in the
registry, statuses, economy and turn modules never modify their input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional

import chess


class Side(IntEnum):
    WHITE = 0
    BLACK = 1

    @classmethod
    def from_color(cls, color: chess.Color) -> Side:
        return cls.WHITE if color == chess.WHITE else cls.BLACK

    @property
    def color(self) -> chess.Color:
        return chess.WHITE if self == Side.WHITE else chess.BLACK

    @property
    def opponent(self) -> Side:
        return Side(1 - self)

    @property
    def char(self) -> str:
        return "w" if self == Side.WHITE else "b"

    @property
    def title(self) -> str:
        return "White" if self == Side.WHITE else "Black"


# Stable identity of one physical piece, e.g. "wn-7"
PieceId = str


class StatusType(str, Enum):
    ROOTED = "rooted"
    SHIELDED = "shielded"


@dataclass(frozen=True)
class Status:
    """A timed status attached to a piece identity."""
    status_type: StatusType
    expires_on_turn: int


@dataclass(frozen=True)
class PieceFacts:
    side: Side
    piece_type: chess.PieceType

    @property
    def symbol(self) -> str:
        """Upper case for White, lower case for Black (FEN style)."""
        sym = chess.piece_symbol(self.piece_type)
        return sym.upper() if self.side == Side.WHITE else sym

    @property
    def name(self) -> str:
        return chess.piece_name(self.piece_type)


@dataclass(frozen=True)
class PieceRegistry:
    """Bidirectional square <-> identity map for the pieces on the board."""
    square_to_id: dict[chess.Square, PieceId] = field(default_factory=dict)
    id_to_piece: dict[PieceId, PieceFacts] = field(default_factory=dict)

    def id_at(self, square: chess.Square) -> Optional[PieceId]:
        return self.square_to_id.get(square)

    def piece_at(self, square: chess.Square) -> Optional[PieceFacts]:
        piece_id = self.square_to_id.get(square)
        if piece_id is None:
            return None
        return self.id_to_piece[piece_id]

    def square_of(self, piece_id: PieceId) -> Optional[chess.Square]:
        for square, pid in self.square_to_id.items():
            if pid == piece_id:
                return square
        return None

    def is_live(self, piece_id: PieceId) -> bool:
        return piece_id in self.id_to_piece

    def __len__(self) -> int:
        return len(self.id_to_piece)


@dataclass(frozen=True)
class GameState:
    """Complete ability-layer state for one game.

    Board occupancy itself is owned by the chess rules engine; the registry
    mirrors it with stable identities.
    """
    turn_number: int = 1
    mana: dict[Side, int] = field(default_factory=lambda: {Side.WHITE: 0, Side.BLACK: 0})
    max_mana: dict[Side, int] = field(default_factory=lambda: {Side.WHITE: 0, Side.BLACK: 0})
    registry: PieceRegistry = field(default_factory=PieceRegistry)
    statuses: dict[PieceId, tuple[Status, ...]] = field(default_factory=dict)
    cooldowns: dict[PieceId, dict[str, int]] = field(default_factory=dict)
    log: tuple[str, ...] = ()
