"""The two piece abilities and their cast preconditions.

  Charge (knight, movement): move the knight, then root one adjacent enemy.
  Bulwark (rook, instant): spend the turn to shield the rook.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import chess

from manachess.config import RulesConfig
from manachess.game.economy import can_afford, get_cooldown_available_turn
from manachess.game.state import GameState, PieceId, StatusType
from manachess.game.statuses import has_status

ABILITY_CHARGE = "KNIGHT_CHARGE"
ABILITY_BULWARK = "ROOK_BULWARK"


class AbilityKind(str, Enum):
    MOVEMENT = "movement"  # resolves through a move, optionally a second target
    INSTANT = "instant"    # resolves immediately on cast


@dataclass(frozen=True)
class Ability:
    ability_id: str
    title: str
    description: str
    piece_type: chess.PieceType
    kind: AbilityKind
    cost: int
    cooldown: int


@dataclass(frozen=True)
class AbilityView:
    """What the HUD shows for the selected piece's ability."""
    title: str
    description: str
    enabled: bool
    reason_disabled: Optional[str] = None


def build_abilities(config: Optional[RulesConfig] = None) -> dict[chess.PieceType, Ability]:
    """Abilities keyed by the piece type that owns them."""
    config = config or RulesConfig()
    charge = Ability(
        ability_id=ABILITY_CHARGE,
        title="Charge",
        description=(f"Move this knight, then root an adjacent enemy for "
                     f"{config.root_duration} turns. Cost {config.charge.cost} mana."),
        piece_type=chess.KNIGHT,
        kind=AbilityKind.MOVEMENT,
        cost=config.charge.cost,
        cooldown=config.charge.cooldown,
    )
    bulwark = Ability(
        ability_id=ABILITY_BULWARK,
        title="Bulwark",
        description=(f"Spend the turn to shield this rook: the next capture "
                     f"against it is blocked. Cost {config.bulwark.cost} mana."),
        piece_type=chess.ROOK,
        kind=AbilityKind.INSTANT,
        cost=config.bulwark.cost,
        cooldown=config.bulwark.cooldown,
    )
    return {charge.piece_type: charge, bulwark.piece_type: bulwark}


def cast_blocker(state: GameState, piece_id: PieceId, ability: Ability) -> Optional[str]:
    """Reason the piece cannot cast the ability right now, or None if it can.

    Checks run in a fixed order: piece type, rooted, cooldown, mana.
    """
    facts = state.registry.id_to_piece.get(piece_id)
    if facts is None:
        return "No such piece"
    if facts.piece_type != ability.piece_type:
        return f"Requires a {chess.piece_name(ability.piece_type)}"
    if has_status(state, piece_id, StatusType.ROOTED):
        return "Rooted"

    available = get_cooldown_available_turn(state, piece_id, ability.ability_id)
    if available > state.turn_number:
        return f"On cooldown until turn {available}"

    if not can_afford(state, facts.side, ability.cost):
        return f"Not enough mana ({ability.cost} needed)"
    return None
