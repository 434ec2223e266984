"""Ability casting as a small state machine over square clicks.

    Idle --cast Charge--> CastingMove --legal click--> CastingTarget --click--> Idle
                               |                            |
                               +--other click--> Idle       +--other click--> Idle

Bulwark resolves in one step and never leaves Idle. A cancelled cast
changes nothing; once the Charge move has been played it is never undone,
cancelling in CastingTarget only skips the root.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

import chess

from manachess.config import RulesConfig
from manachess.game.board import adjacent_enemy_squares
from manachess.game.economy import set_cooldown, spend_mana
from manachess.game.rules import ChessRules
from manachess.game.state import GameState, Status, StatusType
from manachess.game.statuses import add_status
from manachess.game.turn import advance_turn, append_log
from manachess.rpg.abilities import Ability, AbilityKind, build_abilities, cast_blocker
from manachess.rpg.captures import is_capture_blocked

logger = logging.getLogger("manachess.resolver")


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class CastingMove:
    """Movement ability declared; waiting for the destination click."""
    ability: Ability
    from_square: chess.Square
    targets: frozenset[chess.Square]


@dataclass(frozen=True)
class CastingTarget:
    """Move resolved; waiting for the secondary target click."""
    ability: Ability
    landing_square: chess.Square
    targets: frozenset[chess.Square]


ResolverState = Union[Idle, CastingMove, CastingTarget]

IDLE = Idle()


class AbilityResolver:
    """Drives ability casts against a ChessRules board.

    The resolver holds only its own cast phase; every method takes the
    current GameState and returns the next one (the same object when
    nothing happened).
    """

    def __init__(self, rules: ChessRules, config: Optional[RulesConfig] = None):
        self.rules = rules
        self.config = config or RulesConfig()
        self.abilities = build_abilities(self.config)
        self.state: ResolverState = IDLE

    @property
    def casting(self) -> bool:
        return not isinstance(self.state, Idle)

    def ability_for(self, game: GameState, square: chess.Square) -> Optional[Ability]:
        facts = game.registry.piece_at(square)
        if facts is None:
            return None
        return self.abilities.get(facts.piece_type)

    def blocker(self, game: GameState, square: chess.Square) -> Optional[str]:
        """Why the piece on ``square`` cannot cast now, or None if it can."""
        ability = self.ability_for(game, square)
        piece_id = game.registry.id_at(square)
        if ability is None or piece_id is None:
            return "No ability"
        if game.registry.id_to_piece[piece_id].side != self.rules.turn:
            return "Not your turn"

        reason = cast_blocker(game, piece_id, ability)
        if reason is not None:
            return reason
        if ability.kind == AbilityKind.INSTANT and self.rules.is_in_check():
            return "In check"
        if ability.kind == AbilityKind.MOVEMENT and not self._move_targets(game, square):
            return "No legal destination"
        return None

    def _move_targets(self, game: GameState, square: chess.Square) -> frozenset[chess.Square]:
        # Shielded pieces cannot be taken by a Charge
        return frozenset(
            m.to_square for m in self.rules.legal_moves_from(square)
            if not (m.is_capture and is_capture_blocked(game, m.to_square))
        )

    def cast(self, game: GameState, square: chess.Square) -> GameState:
        """Cast the ability of the piece on ``square``."""
        if self.casting:
            return game
        reason = self.blocker(game, square)
        if reason is not None:
            logger.debug(f"Cast on {chess.square_name(square)} refused: {reason}")
            return game

        ability = self.ability_for(game, square)
        if ability.kind == AbilityKind.MOVEMENT:
            self.state = CastingMove(ability, square, self._move_targets(game, square))
            logger.debug(f"{ability.title} declared from {chess.square_name(square)}")
            return game
        return self._resolve_instant(game, square, ability)

    def _resolve_instant(self, game: GameState, square: chess.Square, ability: Ability) -> GameState:
        piece_id = game.registry.id_at(square)
        side = game.registry.id_to_piece[piece_id].side
        cast_turn = game.turn_number

        if not self.rules.pass_turn():
            return game

        game = spend_mana(game, side, ability.cost)
        game = set_cooldown(game, piece_id, ability.ability_id, cast_turn + ability.cooldown)
        description = f"{ability.title} {chess.square_name(square)}"
        game = advance_turn(game, self.rules.turn, description)
        game = add_status(game, piece_id, Status(
            StatusType.SHIELDED, game.turn_number + self.config.shield_duration))

        logger.info(f"{side.title} casts {description}")
        return game

    def click(self, game: GameState, square: chess.Square) -> GameState:
        """Feed a square click to the cast in progress."""
        state = self.state
        if isinstance(state, CastingMove):
            return self._click_move(game, state, square)
        if isinstance(state, CastingTarget):
            return self._click_target(game, state, square)
        return game

    def cancel(self) -> None:
        self.state = IDLE

    def _click_move(self, game: GameState, state: CastingMove, square: chess.Square) -> GameState:
        self.state = IDLE
        if square not in state.targets:
            logger.debug(f"{state.ability.title} cancelled")
            return game

        piece_id = game.registry.id_at(state.from_square)
        cast_turn = game.turn_number
        record = self.rules.try_move(state.from_square, square)
        if record is None:
            return game

        ability = state.ability
        game = spend_mana(game, record.side, ability.cost)
        game = set_cooldown(game, piece_id, ability.ability_id, cast_turn + ability.cooldown)
        game = advance_turn(game, self.rules.turn, f"{ability.title} {record.san}", move=record)
        logger.info(f"{record.side.title} casts {ability.title} {record.san}")

        targets = adjacent_enemy_squares(game, square, record.side)
        if targets:
            self.state = CastingTarget(ability, square, frozenset(targets))
        return game

    def _click_target(self, game: GameState, state: CastingTarget, square: chess.Square) -> GameState:
        self.state = IDLE
        if square not in state.targets:
            logger.debug(f"{state.ability.title} target skipped")
            return game

        victim = game.registry.id_at(square)
        game = add_status(game, victim, Status(
            StatusType.ROOTED, game.turn_number + self.config.root_duration))
        return append_log(game, f"Root {chess.square_name(square)}")
