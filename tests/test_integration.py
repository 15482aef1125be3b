"""
Integration test suite for the ChessMate engine.

Tests components working together end-to-end:
- Game wrapper (scripted games, promotion choice, undo, terminal states)
- Engine vs engine games
- Legal move sets cross-checked against python-chess
- Interactive CLI loop with scripted input
- FastAPI REST API
"""

import random

import chess
import pytest

from chessmate.core.attacks import is_in_check
from chessmate.core.board import Position, Side, EMPTY
from chessmate.core.movegen import generate_legal_moves
from chessmate.core.moves import apply_move
from chessmate.core.search import NoLegalMovesError
from chessmate.core.utils import square_name
from chessmate.main import Engine
from interface import cli

FOOLS_MATE = ["f2f3", "e7e5", "g2g4", "d8h4"]


def to_fen(position: Position, side: Side) -> str:
    """FEN for the reference library; castling letters come from our flags."""
    ranks = []
    for row in position.board:
        out, empties = "", 0
        for cell in row:
            if cell == EMPTY:
                empties += 1
                continue
            if empties:
                out += str(empties)
                empties = 0
            out += cell
        ranks.append(out + (str(empties) if empties else ""))

    rights = ""
    if not position.white_king_moved:
        rights += "" if position.white_krook_moved else "K"
        rights += "" if position.white_qrook_moved else "Q"
    if not position.black_king_moved:
        rights += "" if position.black_krook_moved else "k"
        rights += "" if position.black_qrook_moved else "q"

    ep = square_name(*position.en_passant) if position.en_passant else "-"
    turn = "w" if side is Side.WHITE else "b"
    return f"{'/'.join(ranks)} {turn} {rights or '-'} {ep} 0 1"


def our_uci(moves):
    out = set()
    for m in moves:
        text = square_name(m.src_row, m.src_col) + square_name(m.dst_row, m.dst_col)
        out.add(text + (m.promotion.lower() if m.promotion else ""))
    return out


def reference_uci(board: chess.Board):
    # the engine only ever offers queen promotions
    return {m.uci() for m in board.legal_moves if m.promotion in (None, chess.QUEEN)}


# ════════════════════════════════════════════════════════════════════════════
#  GAME WRAPPER
# ════════════════════════════════════════════════════════════════════════════


class TestEngineWrapper:
    def test_initial_state(self):
        e = Engine(depth=1)
        assert e.turn is Side.WHITE
        assert len(e.get_legal_moves()) == 20
        assert e.status() == "ongoing"

    def test_make_legal_move(self):
        e = Engine(depth=1)
        assert e.make_move("e2e4") is True
        assert e.move_history == ["e2e4"]
        assert e.turn is Side.BLACK

    def test_make_illegal_move(self):
        e = Engine(depth=1)
        assert e.make_move("e2e5") is False
        assert e.make_move("e7e5") is False  # wrong side
        assert e.turn is Side.WHITE

    def test_make_garbage_input(self):
        e = Engine(depth=1)
        assert e.make_move("zzzz") is False
        assert e.make_move("") is False
        assert e.make_move("e2") is False
        assert e.move_history == []

    def test_fools_mate(self):
        e = Engine(depth=1)
        for move in FOOLS_MATE:
            assert e.make_move(move)
        assert e.status() == "checkmate"
        assert e.in_check()
        assert e.winner() is Side.BLACK
        assert e.get_legal_moves() == []
        with pytest.raises(NoLegalMovesError):
            e.get_best_move()

    def test_stalemate(self):
        e = Engine(depth=1)
        e.position = Position.from_rows([
            "k.......",
            "........",
            ".Q......",
            "........",
            "........",
            "........",
            "........",
            ".......K",
        ])
        e.turn = Side.BLACK
        assert e.status() == "stalemate"
        assert e.is_game_over()
        assert e.winner() is None

    def test_undo_restores_everything(self):
        e = Engine(depth=1)
        start = e.position.copy()
        e.make_move("e2e4")
        e.make_move("e7e5")
        e.make_move("e1e2")
        assert e.position.white_king_moved
        e.undo_move()
        e.undo_move()
        e.undo_move()
        assert e.position == start
        assert e.turn is Side.WHITE
        assert e.move_history == []

    def test_undo_empty(self):
        e = Engine(depth=1)
        e.undo_move()  # Should not crash
        assert e.position == Position.initial()

    def test_undo_restores_en_passant(self):
        e = Engine(depth=1)
        e.make_move("e2e4")
        e.make_move("g8f6")
        assert e.position.en_passant is None
        e.undo_move()
        assert e.position.en_passant == (5, 4)

    def test_reset(self):
        e = Engine(depth=1)
        e.make_move("e2e4")
        e.reset()
        assert e.position == Position.initial()
        assert e.turn is Side.WHITE
        assert e.move_history == []

    def test_promotion_choices(self):
        rows = [
            ".......k",
            "P.......",
            "........",
            "........",
            "........",
            "........",
            "........",
            "....K...",
        ]
        e = Engine(depth=1)
        e.position = Position.from_rows(rows)
        assert e.make_move("a7a8=N")
        assert e.position.board[0][0] == "N"
        assert e.move_history == ["a7a8=N"]

        e.position = Position.from_rows(rows)
        e.turn = Side.WHITE
        assert e.make_move("a7a8")
        assert e.position.board[0][0] == "Q"

        e.position = Position.from_rows(rows)
        e.turn = Side.WHITE
        assert e.make_move("e1e2=Q") is False

    def test_castling_via_wrapper(self):
        e = Engine(depth=1)
        for move in ["e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6"]:
            assert e.make_move(move)
        assert "e1g1" in e.get_legal_moves()
        assert e.make_move("e1g1")
        assert "".join(e.position.board[7]) == "RNBQ.RK."

    def test_best_move_is_legal(self):
        e = Engine(depth=2)
        e.make_move("e2e4")
        legal = e.get_legal_moves()
        move, score = e.get_best_move()
        assert move in legal
        assert isinstance(score, int)
        assert e.move_history == ["e2e4"]

    def test_render(self):
        e = Engine(depth=1)
        assert e.render().splitlines()[2] == "7 p p p p p p p p"


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE: FULL GAME SIMULATIONS
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    def test_engine_vs_engine_stays_legal(self):
        """Two shallow engines play; every chosen move must be in the legal set."""
        e = Engine(depth=1)
        for _ in range(16):
            if e.is_game_over():
                break
            legal = e.get_legal_moves()
            before = e.position.copy()
            move, _ = e.get_best_move()
            assert e.position == before
            assert move in legal
            e.make_move(move)
        assert len(e.move_history) > 0

    def test_engine_mates_from_scripted_opening(self):
        """Black at depth 3 must find the fool's mate queen move."""
        e = Engine(depth=3)
        for move in FOOLS_MATE[:3]:
            e.make_move(move)
        assert e.play_best_move() == "d8h4"
        assert e.status() == "checkmate"


# ════════════════════════════════════════════════════════════════════════════
#  REFERENCE CROSS-CHECK (python-chess)
# ════════════════════════════════════════════════════════════════════════════


class TestReferenceCrossCheck:
    def test_initial_position_matches(self):
        p = Position.initial()
        ref = chess.Board(to_fen(p, Side.WHITE))
        assert our_uci(generate_legal_moves(p, Side.WHITE)) == reference_uci(ref)

    @pytest.mark.parametrize("seed", [1, 7, 42, 2024])
    def test_random_games_match(self, seed):
        rng = random.Random(seed)
        p = Position.initial()
        side = Side.WHITE
        for _ in range(80):
            ref = chess.Board(to_fen(p, side))
            moves = generate_legal_moves(p, side)
            assert our_uci(moves) == reference_uci(ref), to_fen(p, side)
            assert is_in_check(p, side) == ref.is_check()
            if not moves:
                break
            apply_move(p, rng.choice(moves))
            side = side.opponent

    @pytest.mark.parametrize("fen_rows, side", [
        (("r...k..r", "........", "........", "........", "........", "........", "........", "R...K..R"), Side.WHITE),
        (("r...k..r", "........", "........", ".....R..", "........", "........", "........", "R...K..R"), Side.BLACK),
        (("....k...", "......P.", "........", "..pP....", "........", "........", "........", "....K..."), Side.WHITE),
    ])
    def test_special_positions_match(self, fen_rows, side):
        p = Position.from_rows(fen_rows)
        ref = chess.Board(to_fen(p, side))
        assert our_uci(generate_legal_moves(p, side)) == reference_uci(ref)


# ════════════════════════════════════════════════════════════════════════════
#  CLI
# ════════════════════════════════════════════════════════════════════════════


def scripted(*lines):
    it = iter(lines)

    def _input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    return _input


class TestCLI:
    def test_rejects_illegal_then_quits(self):
        out = []
        e = Engine(depth=1)
        result = cli.play(e, Side.WHITE, scripted("e2e5", "e1e2", "quit"), out.append)
        assert result == "Game aborted."
        assert out.count("Illegal move. Try again.") == 2
        assert "Invalid move format." not in out
        assert e.move_history == []

    def test_malformed_input_reported_separately(self):
        out = []
        e = Engine(depth=1)
        cli.play(e, Side.WHITE, scripted("zzzz", "e2", "quit"), out.append)
        assert out.count("Invalid move format.") == 2
        assert "Illegal move. Try again." not in out
        assert e.move_history == []

    def test_engine_replies_to_human(self):
        out = []
        e = Engine(depth=1)
        cli.play(e, Side.WHITE, scripted("e2e4"), out.append)
        assert e.move_history[0] == "e2e4"
        assert len(e.move_history) == 2
        assert any(line.startswith("AI plays: ") for line in out)

    def test_engine_moves_first_when_human_is_black(self):
        out = []
        e = Engine(depth=1)
        cli.play(e, Side.BLACK, scripted("quit"), out.append)
        assert len(e.move_history) == 1
        assert out[1].startswith("AI plays: ")

    def test_undo_takes_back_pair(self):
        e = Engine(depth=1)
        cli.play(e, Side.WHITE, scripted("e2e4", "undo", "quit"), lambda _: None)
        assert e.move_history == []
        assert e.position == Position.initial()

    def test_reports_checkmate(self):
        out = []
        e = Engine(depth=1)
        for move in FOOLS_MATE:
            e.make_move(move)
        result = cli.play(e, Side.WHITE, scripted(), out.append)
        assert result == "White is checkmated. Black wins!"
        assert out[-1] == result

    def test_main_parses_arguments(self, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", scripted("quit"))
        assert cli.main(["--depth", "1", "--side", "white"]) == 0
        assert "Game Over" in capsys.readouterr().out

    def test_main_rejects_bad_depth(self):
        with pytest.raises(SystemExit):
            cli.main(["--depth", "0"])


# ════════════════════════════════════════════════════════════════════════════
#  FASTAPI REST API
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests FastAPI endpoints."""

    def setup_method(self):
        from fastapi.testclient import TestClient
        from interface.api import app, engine

        self.client = TestClient(app)
        self.engine = engine
        # Reset state before each test
        engine.reset()

    def test_get_board_initial(self):
        response = self.client.get("/board")
        assert response.status_code == 200
        data = response.json()
        assert data["board"][0] == "rnbqkbnr"
        assert data["turn"] == "white"
        assert data["status"] == "ongoing"
        assert data["is_game_over"] is False
        assert len(data["legal_moves"]) == 20

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"move": "e2e4"})
        assert response.status_code == 200
        data = response.json()
        assert data["move"] == "e2e4"
        assert data["board"][4] == "....P..."
        assert data["turn"] == "black"

    def test_post_move_illegal(self):
        response = self.client.post("/move", json={"move": "e2e5"})
        assert response.status_code == 400

    def test_post_move_invalid_format(self):
        response = self.client.post("/move", json={"move": "zzzz"})
        assert response.status_code == 400

    def test_search_returns_move(self):
        response = self.client.post("/search", json={"depth": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["best_move"] in self.engine.get_legal_moves()
        assert data["nodes"] > 0
        # searching plays nothing
        assert self.engine.move_history == []

    def test_search_rejects_negative_depth(self):
        response = self.client.post("/search", json={"depth": -1})
        assert response.status_code == 400

    def test_search_and_play_reject_zero_depth(self):
        assert self.client.post("/search", json={"depth": 0}).status_code == 400
        assert self.client.post("/play", json={"depth": 0}).status_code == 400
        assert self.engine.move_history == []

    def test_search_reports_depth_searched(self):
        # White to move: a depth-3 request is searched at depth 2 when leaves are aligned
        expected = self.engine.search.leaf_aligned_depth(Side.WHITE, 3)
        response = self.client.post("/search", json={"depth": 3})
        assert response.status_code == 200
        assert response.json()["depth"] == expected

    def test_play_advances_game(self):
        response = self.client.post("/play", json={"depth": 1})
        assert response.status_code == 200
        assert response.json()["turn"] == "black"
        assert len(self.engine.move_history) == 1

    def test_undo(self):
        self.client.post("/move", json={"move": "e2e4"})
        response = self.client.post("/undo")
        assert response.status_code == 200
        assert response.json()["turn"] == "white"
        assert response.json()["history"] == []

    def test_game_over_flow(self):
        for move in FOOLS_MATE:
            assert self.client.post("/move", json={"move": move}).status_code == 200
        data = self.client.get("/board").json()
        assert data["status"] == "checkmate"
        assert data["in_check"] is True
        assert self.client.post("/search", json={"depth": 1}).status_code == 400
        assert self.client.post("/play", json={}).status_code == 400
        assert self.client.post("/move", json={"move": "a2a3"}).status_code == 400

    def test_reset_board(self):
        self.client.post("/move", json={"move": "e2e4"})
        response = self.client.post("/reset")
        assert response.status_code == 200
        assert response.json()["history"] == []
        assert response.json()["board"][6] == "PPPPPPPP"
