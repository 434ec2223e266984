#!/usr/bin/env python3
"""Interactive CLI for playing ManaChess hot-seat.

Usage:
    python scripts/play.py                          # standard start, default rules
    python scripts/play.py --config configs/rules.yaml
    python scripts/play.py --fen "8/8/8/8/1p6/3p4/8/1N6 w - - 0 1"

Commands at the prompt:
    e2          click a square (select, move, or pick a cast target)
    cast        cast the selected piece's ability
    pass        pass the turn (only when every movable piece is rooted)
    log         show the recent action log
    q           quit
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from manachess.config import load_config
from manachess.game.board import parse_square, render_board
from manachess.rpg.resolver import CastingMove, CastingTarget
from manachess.session import GameSession


def display_state(session: GameSession):
    """Print the board, the HUD and the current ability."""
    resolver_state = session.resolver.state
    if isinstance(resolver_state, (CastingMove, CastingTarget)):
        targets = resolver_state.targets
    elif session.selected is not None:
        targets = session.legal_targets(session.selected).targets
    else:
        targets = ()

    print(render_board(session.rules.board, session.state,
                       selected=session.selected, targets=targets))
    print()

    if session.rules.is_in_check():
        print("Check!")
    print(f"Last move: {session.last_move or '-'}")
    if session.mode_label:
        print(session.mode_label)

    view = session.ability_view()
    if view is not None:
        status = "ready" if view.enabled else f"disabled: {view.reason_disabled}"
        print(f"Ability: {view.title} ({status})")
        print(f"  {view.description}")
    print()


def play_game(session: GameSession):
    """Run the prompt loop until the game ends or the user quits."""
    print("=" * 60)
    print("  ManaChess")
    print("=" * 60)

    while True:
        display_state(session)

        over = session.game_over()
        if over.over:
            print(f"Game over: {over.reason}")
            break

        inp = input("> ").strip().lower()
        if inp == "q":
            print("Game aborted.")
            return
        if inp == "cast":
            if not session.cast():
                print("Nothing to cast.")
            continue
        if inp == "pass":
            if not session.pass_turn():
                print("You still have a legal move.")
            continue
        if inp == "log":
            for entry in session.state.log:
                print(f"  {entry}")
            continue

        square = parse_square(inp)
        if square is None:
            print("Invalid input. Enter a square (e.g. e2), 'cast', 'pass', 'log' or 'q'.")
            continue
        session.click(square)

    print(f"Game ended on turn {session.state.turn_number}")


def main():
    parser = argparse.ArgumentParser(description="Play ManaChess")
    parser.add_argument("--config", default=None,
                        help="Path to rules YAML (default: configs/rules.yaml)")
    parser.add_argument("--fen", default=None, help="Start from this position")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    config = load_config(args.config)
    play_game(GameSession(config=config, fen=args.fen))


if __name__ == "__main__":
    main()
