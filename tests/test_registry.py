"""Tests for piece identity tracking across moves."""

import random

import chess

from manachess.game.registry import prune_dead_ids, reconcile, seed
from manachess.game.rules import ChessRules, MoveFlag, MoveRecord
from manachess.game.state import Side, Status, StatusType
from manachess.session import GameSession

from tests.positions import CASTLING_FEN, EN_PASSANT_FEN, PROMOTION_FEN


def _play(rules, registry, *uci_moves):
    """Apply moves on the rules engine and follow them in the registry."""
    for uci in uci_moves:
        move = chess.Move.from_uci(uci)
        record = rules.try_move(move.from_square, move.to_square)
        assert record is not None, f"{uci} should be legal"
        registry = reconcile(registry, record)
    return registry


class TestSeed:
    def test_one_identity_per_piece(self):
        registry = seed(chess.Board())
        assert len(registry) == 32
        assert len(registry.square_to_id) == 32
        assert len(set(registry.square_to_id.values())) == 32

    def test_scan_order_and_id_format(self):
        registry = seed(chess.Board())
        # Rank 8 is scanned first, a-file to h-file
        assert registry.id_at(chess.A8) == "br-1"
        assert registry.id_at(chess.E1) == "wk-29"
        assert registry.id_at(chess.H1) == "wr-32"

    def test_facts(self):
        registry = seed(chess.Board())
        facts = registry.piece_at(chess.G8)
        assert facts.side == Side.BLACK
        assert facts.piece_type == chess.KNIGHT
        assert registry.piece_at(chess.E4) is None

    def test_empty_board(self):
        registry = seed(chess.Board(None))
        assert len(registry) == 0


class TestReconcile:
    def test_quiet_move_keeps_identity(self):
        rules = ChessRules()
        registry = seed(rules.board)
        pawn = registry.id_at(chess.E2)
        registry = _play(rules, registry, "e2e4")
        assert registry.id_at(chess.E4) == pawn
        assert registry.id_at(chess.E2) is None
        assert len(registry) == 32

    def test_capture_removes_victim(self):
        rules = ChessRules()
        registry = seed(rules.board)
        victim = registry.id_at(chess.D7)
        attacker = registry.id_at(chess.E2)
        registry = _play(rules, registry, "e2e4", "d7d5", "e4d5")
        assert len(registry) == 31
        assert not registry.is_live(victim)
        assert registry.id_at(chess.D5) == attacker

    def test_input_not_mutated(self):
        rules = ChessRules()
        before = seed(rules.board)
        snapshot = dict(before.square_to_id)
        _play(rules, before, "g1f3")
        assert before.square_to_id == snapshot

    def test_promotion_preserves_identity(self):
        rules = ChessRules(PROMOTION_FEN)
        registry = seed(rules.board)
        pawn = registry.id_at(chess.A7)
        record = rules.try_move(chess.A7, chess.A8)
        assert MoveFlag.PROMOTION in record.flags
        assert record.promotion == chess.QUEEN
        registry = reconcile(registry, record)
        assert registry.id_at(chess.A8) == pawn
        assert registry.id_to_piece[pawn].piece_type == chess.QUEEN
        assert registry.id_to_piece[pawn].side == Side.WHITE

    def test_en_passant_removes_pawn_behind_destination(self):
        rules = ChessRules(EN_PASSANT_FEN)
        registry = seed(rules.board)
        capturer = registry.id_at(chess.E5)
        victim = registry.id_at(chess.D5)
        assert registry.id_at(chess.D6) is None

        record = rules.try_move(chess.E5, chess.D6)
        assert MoveFlag.EN_PASSANT in record.flags
        assert record.captured_square == chess.D5
        registry = reconcile(registry, record)

        assert registry.id_at(chess.D6) == capturer
        assert registry.id_at(chess.D5) is None
        assert not registry.is_live(victim)
        assert len(registry) == 3

    def test_kingside_castle_moves_exactly_king_and_rook(self):
        rules = ChessRules(CASTLING_FEN)
        before = seed(rules.board)
        king = before.id_at(chess.E1)
        rook = before.id_at(chess.H1)

        after = _play(rules, before, "e1g1")

        assert after.id_at(chess.G1) == king
        assert after.id_at(chess.F1) == rook
        assert after.id_at(chess.E1) is None
        assert after.id_at(chess.H1) is None
        untouched = {sq: pid for sq, pid in before.square_to_id.items()
                     if sq not in (chess.E1, chess.H1)}
        for sq, pid in untouched.items():
            assert after.id_at(sq) == pid
        assert len(after) == len(before)

    def test_queenside_castle(self):
        rules = ChessRules(CASTLING_FEN)
        registry = seed(rules.board)
        king = registry.id_at(chess.E8)
        rook = registry.id_at(chess.A8)

        registry = _play(rules, registry, "e1g1", "e8c8")

        assert registry.id_at(chess.C8) == king
        assert registry.id_at(chess.D8) == rook
        assert registry.id_at(chess.A8) is None
        assert registry.id_at(chess.H8) is not None

    def test_missing_source_is_noop(self):
        registry = seed(chess.Board())
        record = MoveRecord(
            from_square=chess.E4, to_square=chess.E5,
            piece_type=chess.PAWN, side=Side.WHITE,
        )
        assert reconcile(registry, record) is registry

    def test_own_piece_on_destination_not_removed(self):
        """Only an opponent identity on the destination counts as captured."""
        registry = seed(chess.Board())
        record = MoveRecord(
            from_square=chess.G1, to_square=chess.E2,
            piece_type=chess.KNIGHT, side=Side.WHITE,
        )
        pawn = registry.id_at(chess.E2)
        after = reconcile(registry, record)
        assert after.is_live(pawn)


class TestPruneDeadIds:
    def test_drops_effects_of_captured_pieces(self):
        rules = ChessRules()
        registry = seed(rules.board)
        victim = registry.id_at(chess.D7)
        survivor = registry.id_at(chess.E2)
        statuses = {
            victim: (Status(StatusType.SHIELDED, 9),),
            survivor: (Status(StatusType.ROOTED, 9),),
        }
        cooldowns = {victim: {"X": 4}, survivor: {"X": 5}}

        registry = _play(rules, registry, "e2e4", "d7d5", "e4d5")
        statuses, cooldowns = prune_dead_ids(registry, statuses, cooldowns)

        assert victim not in statuses
        assert victim not in cooldowns
        assert statuses[survivor] == (Status(StatusType.ROOTED, 9),)
        assert cooldowns[survivor] == {"X": 5}


class TestRegistryInvariants:
    def test_random_games_keep_registry_in_sync(self):
        """Registry mirrors the board through random play, ids never come back."""
        rng = random.Random(7)
        for _ in range(5):
            session = GameSession()
            removed = set()
            for _ in range(120):
                if session.game_over().over:
                    break
                previous = set(session.state.registry.id_to_piece)
                move = rng.choice(session.playable_moves())
                assert session.click(move.from_square) is False
                assert session.click(move.to_square) is True

                registry = session.state.registry
                piece_map = session.rules.board.piece_map()
                assert len(registry) == len(piece_map)
                assert set(registry.square_to_id) == set(piece_map)
                for sq, piece in piece_map.items():
                    facts = registry.piece_at(sq)
                    assert facts.piece_type == piece.piece_type
                    assert facts.side.color == piece.color

                live = set(registry.id_to_piece)
                assert not (live & removed)
                removed |= previous - live
