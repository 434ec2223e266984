"""One game of ManaChess driven by square clicks.

GameSession owns the rules engine, the current GameState snapshot, the
ability resolver and the UI selection. A presentation layer only needs to
forward clicks and read back the snapshot and the view helpers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import chess

from manachess.config import RulesConfig
from manachess.game.rules import ChessRules, GameOver, LegalMove
from manachess.game.state import GameState, StatusType
from manachess.game.statuses import has_status, statuses_for
from manachess.game.turn import advance_turn, new_game_state
from manachess.rpg.abilities import AbilityView
from manachess.rpg.captures import is_capture_blocked, resolve_blocked_capture
from manachess.rpg.resolver import AbilityResolver, CastingMove, CastingTarget

logger = logging.getLogger("manachess.session")


@dataclass(frozen=True)
class TargetSet:
    targets: frozenset[chess.Square] = frozenset()
    captures: frozenset[chess.Square] = frozenset()


class GameSession:
    """Click-driven game controller."""

    def __init__(self, config: Optional[RulesConfig] = None, fen: Optional[str] = None):
        self.config = config or RulesConfig()
        self.rules = ChessRules(fen)
        self.state: GameState = new_game_state(self.rules.board, self.config)
        self.resolver = AbilityResolver(self.rules, self.config)
        self.selected: Optional[chess.Square] = None
        self.last_move: Optional[str] = None

    # --- Queries ---

    def is_rooted(self, square: chess.Square) -> bool:
        return has_status(self.state, self.state.registry.id_at(square), StatusType.ROOTED)

    def badges(self, square: chess.Square) -> frozenset[StatusType]:
        """Status types carried by the piece on a square, for rendering."""
        piece_id = self.state.registry.id_at(square)
        return frozenset(s.status_type for s in statuses_for(self.state, piece_id))

    def legal_moves(self, square: chess.Square) -> list[LegalMove]:
        """Legal moves from a square, after rooting is applied."""
        if self.is_rooted(square):
            return []
        return self.rules.legal_moves_from(square)

    def legal_targets(self, square: chess.Square) -> TargetSet:
        moves = self.legal_moves(square)
        return TargetSet(
            targets=frozenset(m.to_square for m in moves),
            captures=frozenset(m.to_square for m in moves if m.is_capture),
        )

    def playable_moves(self) -> list[LegalMove]:
        """Every legal move of the side to move whose piece is not rooted."""
        moves = []
        for square in chess.SquareSet(self.rules.board.occupied_co[self.rules.board.turn]):
            moves.extend(self.legal_moves(square))
        return moves

    def _escapes_check(self, move: LegalMove) -> bool:
        # A capture of a shielded piece is refused while in check
        record = self.rules.preview(move.from_square, move.to_square)
        return record is not None and not (
            record.is_capture and is_capture_blocked(self.state, record.captured_square))

    def game_over(self) -> GameOver:
        """The rules engine result, extended for checks that only rooted or
        shielded pieces stand in the way of answering."""
        result = self.rules.game_over()
        if result.over or not self.rules.is_in_check():
            return result
        playable = self.playable_moves()
        if not playable:
            return GameOver(True, "Checkmate (rooted)")
        if not any(self._escapes_check(m) for m in playable):
            return GameOver(True, "Checkmate (shielded)")
        return result

    def ability_view(self) -> Optional[AbilityView]:
        """The selected piece's ability, or None if there is nothing to show."""
        if self.selected is None or self.resolver.casting:
            return None
        ability = self.resolver.ability_for(self.state, self.selected)
        if ability is None:
            return None
        reason = self.resolver.blocker(self.state, self.selected)
        return AbilityView(
            title=ability.title,
            description=ability.description,
            enabled=reason is None,
            reason_disabled=reason,
        )

    @property
    def mode_label(self) -> Optional[str]:
        state = self.resolver.state
        if isinstance(state, CastingMove):
            return f"{state.ability.title}: choose a destination"
        if isinstance(state, CastingTarget):
            return f"{state.ability.title}: choose an adjacent enemy to root"
        return None

    # --- Actions ---

    def clear_selection(self) -> None:
        self.selected = None

    def select(self, square: chess.Square) -> None:
        """Select a piece of the side to move. Rooted pieces can be selected
        but have no targets."""
        facts = self.state.registry.piece_at(square)
        if facts is None or facts.side != self.rules.turn:
            self.clear_selection()
            return
        self.selected = square

    def click(self, square: chess.Square) -> bool:
        """Handle a square click. Returns True if a game action was accepted."""
        if self.game_over().over:
            self.resolver.cancel()
            return False

        if self.resolver.casting:
            before = self.state
            self.state = self.resolver.click(self.state, square)
            self.clear_selection()
            if self.state is before:
                return False
            self.last_move = self.state.log[0]
            return True

        if self.selected is not None and square in self.legal_targets(self.selected).targets:
            accepted = self._play_move(self.selected, square)
            self.clear_selection()
            return accepted

        self.select(square)
        return False

    def cast(self) -> bool:
        """Cast the selected piece's ability.

        Returns True if the cast resolved immediately (Bulwark) or entered its
        move phase (Charge).
        """
        if self.selected is None or self.game_over().over:
            return False
        before = self.state
        self.state = self.resolver.cast(self.state, self.selected)
        started = self.resolver.casting or self.state is not before
        if started:
            self.clear_selection()
        return started

    def pass_turn(self) -> bool:
        """Pass when every piece that could move is rooted."""
        if self.resolver.casting or self.game_over().over or self.playable_moves():
            return False
        side = self.rules.turn
        if not self.rules.pass_turn():
            return False
        self.state = advance_turn(self.state, self.rules.turn, f"{side.title} passes")
        self.clear_selection()
        return True

    def _play_move(self, from_square: chess.Square, to_square: chess.Square) -> bool:
        record = self.rules.preview(from_square, to_square)
        if record is None:
            return False

        if record.is_capture and is_capture_blocked(self.state, record.captured_square):
            next_state = resolve_blocked_capture(self.state, self.rules, record)
            if next_state is None:
                return False
            self.state = next_state
            self.last_move = record.san
            return True

        record = self.rules.try_move(from_square, to_square)
        if record is None:
            return False
        self.state = advance_turn(self.state, self.rules.turn, record.san, move=record)
        self.last_move = record.san
        logger.info(f"{record.side.title} plays {record.san}")
        return True
