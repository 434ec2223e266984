"""Tests for square helpers and board rendering."""

import chess

from manachess.game.board import (
    adjacent_enemy_squares, adjacent_squares, parse_square, render_board,
)
from manachess.game.state import Side, Status, StatusType
from manachess.game.statuses import add_status
from manachess.game.turn import new_game_state

from tests.positions import CHARGE_FEN, ROOKS_FEN


class TestSquares:
    def test_adjacent_corner(self):
        assert set(adjacent_squares(chess.A1)) == {chess.A2, chess.B1, chess.B2}

    def test_adjacent_center(self):
        squares = adjacent_squares(chess.E4)
        assert len(squares) == 8
        assert chess.E4 not in squares

    def test_adjacent_enemies(self):
        state = new_game_state(chess.Board(CHARGE_FEN))
        # a3 is two files away from c3 and does not count
        assert set(adjacent_enemy_squares(state, chess.C3, Side.WHITE)) == {chess.B4, chess.D3}
        assert adjacent_enemy_squares(state, chess.C3, Side.BLACK) == []

    def test_parse_square(self):
        assert parse_square("e4") == chess.E4
        assert parse_square(" H8 ") == chess.H8
        assert parse_square("z9") is None
        assert parse_square("cast") is None


class TestRender:
    def test_plain(self):
        text = render_board(chess.Board())
        assert "a   b   c" in text
        assert " K |" in text

    def test_header_and_badges(self):
        board = chess.Board(ROOKS_FEN)
        state = new_game_state(board)
        state = add_status(state, state.registry.id_at(chess.A1), Status(StatusType.SHIELDED, 5))
        state = add_status(state, state.registry.id_at(chess.A8), Status(StatusType.ROOTED, 5))
        text = render_board(board, state)
        assert "Turn 1 - White to move" in text
        assert "Mana: White=2/3  Black=2/3" in text
        assert "(R)" in text
        assert "#r#" in text

    def test_selection_and_targets(self):
        board = chess.Board()
        text = render_board(board, selected=chess.E2, targets=[chess.E3, chess.E4])
        assert "[P]" in text
        assert text.count(" . ") == 2
