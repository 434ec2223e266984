"""Game start and the post-action turn cycle.

advance_turn runs after every accepted action, in a fixed order:

  1. turn_number += 1
  2. expire statuses (against the NEW turn number)
  3. reconcile the registry with the move (skipped for board-less actions)
  4. prune statuses/cooldowns of captured identities
  5. regenerate mana for the side now to act
  6. prepend a description to the log
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

import chess

from manachess.config import RulesConfig
from manachess.game.economy import regen
from manachess.game.registry import prune_dead_ids, reconcile, seed
from manachess.game.rules import MoveRecord
from manachess.game.state import GameState, Side
from manachess.game.statuses import remove_expired

logger = logging.getLogger("manachess.turn")

MAX_LOG_ENTRIES = 10


def new_game_state(board: chess.Board, config: Optional[RulesConfig] = None) -> GameState:
    """Initial state: registry seeded from the position, no statuses or cooldowns."""
    config = config or RulesConfig()
    return GameState(
        turn_number=1,
        mana={Side.WHITE: config.starting_mana.white, Side.BLACK: config.starting_mana.black},
        max_mana={Side.WHITE: config.max_mana.white, Side.BLACK: config.max_mana.black},
        registry=seed(board),
        log=("Game start.",),
    )


def append_log(state: GameState, entry: str) -> GameState:
    """Prepend a log entry, keeping the newest MAX_LOG_ENTRIES."""
    return replace(state, log=((entry,) + state.log)[:MAX_LOG_ENTRIES])


def advance_turn(state: GameState, side_to_act: Side, description: str,
                 move: Optional[MoveRecord] = None) -> GameState:
    """Run the turn cycle and return the next snapshot.

    Args:
        state: Snapshot before the action's turn bookkeeping.
        side_to_act: Side that moves next (receives mana).
        description: Human-readable log line for the action.
        move: The move just played, or None when the board did not change
            (blocked capture, Bulwark, pass).
    """
    state = replace(state, turn_number=state.turn_number + 1)
    state = remove_expired(state)

    if move is not None:
        state = replace(state, registry=reconcile(state.registry, move))

    statuses, cooldowns = prune_dead_ids(state.registry, state.statuses, state.cooldowns)
    state = replace(state, statuses=statuses, cooldowns=cooldowns)

    state = regen(state, side_to_act)
    state = append_log(state, description)

    logger.debug(f"Turn {state.turn_number}: {description} "
                 f"(mana W={state.mana[Side.WHITE]} B={state.mana[Side.BLACK]})")
    return state
