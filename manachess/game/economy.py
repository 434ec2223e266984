"""Mana pools and per-piece ability cooldowns."""

from __future__ import annotations

from dataclasses import replace

from manachess.game.state import GameState, PieceId, Side


def can_afford(state: GameState, side: Side, cost: int) -> bool:
    return state.mana[side] >= cost


def spend_mana(state: GameState, side: Side, cost: int) -> GameState:
    """Subtract mana. Callers gate with can_afford first.

    Raises:
        ValueError: if the side cannot pay, which is a caller bug.
    """
    have = state.mana[side]
    if cost > have:
        raise ValueError(f"{side.title} cannot spend {cost} mana (has {have})")
    return replace(state, mana={**state.mana, side: have - cost})


def regen(state: GameState, side_to_act: Side) -> GameState:
    """+1 mana for the side about to move, clamped to its cap."""
    current = state.mana[side_to_act]
    gained = min(state.max_mana[side_to_act], current + 1)
    if gained == current:
        return state
    return replace(state, mana={**state.mana, side_to_act: gained})


def get_cooldown_available_turn(state: GameState, piece_id: PieceId, ability_id: str) -> int:
    """Turn on which the ability is usable again. 0 if never used."""
    return state.cooldowns.get(piece_id, {}).get(ability_id, 0)


def set_cooldown(state: GameState, piece_id: PieceId, ability_id: str,
                 available_on_turn: int) -> GameState:
    cooldowns = dict(state.cooldowns)
    cooldowns[piece_id] = {**cooldowns.get(piece_id, {}), ability_id: available_on_turn}
    return replace(state, cooldowns=cooldowns)
