"""
Integration test suite for DuelChess.

Tests components working together end-to-end:
- Game sessions (human moves, AI replies, status, undo)
- Engine vs engine games across difficulty tiers
- FastAPI REST API
- Terminal play loop
- TOML configuration loading
"""

import chess
import pytest

from duelchess.config import Config
from duelchess.core.difficulty import Difficulty, DifficultyProfile, build_profiles
from duelchess.core.evaluator import Evaluator
from duelchess.core.utils import MATE_SCORE
from duelchess.errors import ConfigError, IllegalMove, InvalidPosition, UnknownDifficultyTier
from duelchess.game import Game
from interface import cli

FOOLS_MATE_SETUP = "rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq - 0 2"
MATE_IN_ONE = DifficultyProfile(Difficulty.EXPERT, max_depth=1, random_fraction=0.0)

# ════════════════════════════════════════════════════════════════════════════
#  GAME SESSION
# ════════════════════════════════════════════════════════════════════════════


class TestGame:
    def test_human_move_returns_san(self):
        game = Game("EASY", seed=1)
        assert game.play("e2e4") == "e4"
        assert game.play("e5") == "e5"
        assert game.board.move_history == ["e4", "e5"]

    def test_illegal_human_move(self):
        game = Game("EASY")
        with pytest.raises(IllegalMove):
            game.play("e2e5")
        assert game.fen == chess.STARTING_FEN

    def test_unknown_difficulty(self):
        with pytest.raises(UnknownDifficultyTier):
            Game("impossible")

    def test_invalid_fen(self):
        with pytest.raises(InvalidPosition):
            Game("EASY", fen="8/8/8")

    def test_ai_reply_is_legal_san(self):
        game = Game("MEDIUM", seed=3)
        game.play("e4")
        before = chess.Board(game.fen)
        san = game.ai_move()
        assert before.parse_san(san) in before.legal_moves
        assert game.board.board.turn == chess.WHITE

    def test_ai_delivers_mate(self):
        game = Game(MATE_IN_ONE, fen=FOOLS_MATE_SETUP)
        assert game.ai_move() == "Qh4#"
        assert game.is_over()
        assert game.status() == "checkmate"
        assert game.result() == "0-1"
        assert game.evaluate() == -MATE_SCORE

    def test_ai_move_after_game_over(self):
        game = Game(MATE_IN_ONE, fen=FOOLS_MATE_SETUP)
        game.ai_move()
        assert game.ai_move() is None

    def test_undo_takes_back_both_sides(self):
        game = Game("EASY", seed=5)
        game.play("d4")
        game.ai_move()
        game.undo(2)
        assert game.fen == chess.STARTING_FEN

    def test_same_seed_same_game(self):
        def play_out(seed):
            game = Game("EASY", seed=seed)
            for _ in range(6):
                game.ai_move()
            return list(game.board.move_history)

        assert play_out(11) == play_out(11)


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE
# ════════════════════════════════════════════════════════════════════════════


class TestEngineVsEngine:
    @pytest.mark.parametrize("tier", ["EASY", "MEDIUM"])
    def test_plays_legal_moves_until_limit(self, tier):
        game = Game(tier, seed=7)
        for _ in range(16):
            if game.is_over():
                break
            board = chess.Board(game.fen)
            san = game.ai_move()
            assert board.parse_san(san) in board.legal_moves
        assert game.board.board.is_valid()

    def test_endgame_kqk_makes_progress(self):
        game = Game("MEDIUM", fen="4k3/8/8/8/8/8/8/3QK3 w - - 0 1", seed=2)
        start = game.evaluate()
        assert start > 800
        game.ai_move()
        assert game.evaluate() > 0


# ════════════════════════════════════════════════════════════════════════════
#  REST API INTEGRATION
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests FastAPI REST API endpoints."""

    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app, board

        self.client = TestClient(app)
        board.reset()

    def test_get_board_initial(self):
        response = self.client.get("/board")
        assert response.status_code == 200
        data = response.json()
        assert data["fen"] == chess.STARTING_FEN
        assert data["turn"] == "white"
        assert data["is_game_over"] is False
        assert data["status"] == "ongoing"
        assert len(data["legal_moves"]) == 20

    def test_square_targets(self):
        response = self.client.get("/moves/b1")
        assert response.status_code == 200
        assert sorted(response.json()["targets"]) == ["a3", "c3"]

    def test_square_targets_invalid(self):
        assert self.client.get("/moves/k9").status_code == 400

    def test_post_move_uci_and_san(self):
        r = self.client.post("/move", json={"move": "e2e4"})
        assert r.status_code == 200
        assert r.json()["san"] == "e4"
        r = self.client.post("/move", json={"move": "Nc6"})
        assert r.status_code == 200
        assert r.json()["move"] == "b8c6"

    def test_post_move_illegal(self):
        assert self.client.post("/move", json={"move": "e2e5"}).status_code == 400
        assert self.client.post("/move", json={"move": "zzzz"}).status_code == 400

    def test_set_position(self):
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
        response = self.client.post("/position", json={"fen": fen})
        assert response.status_code == 200
        assert response.json()["fen"] == fen

    def test_set_position_invalid(self):
        assert self.client.post("/position", json={"fen": "invalid"}).status_code == 400

    def test_search_does_not_play(self):
        response = self.client.post("/search", json={"difficulty": "medium", "seed": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["difficulty"] == "MEDIUM"
        assert chess.Move.from_uci(data["best_move"]) in chess.Board().legal_moves
        assert data["fen"] == chess.STARTING_FEN

    def test_search_default_difficulty(self):
        response = self.client.post("/search")
        assert response.status_code == 200
        assert response.json()["best_move"] is not None

    def test_search_unknown_difficulty(self):
        response = self.client.post("/search", json={"difficulty": "godlike"})
        assert response.status_code == 400

    def test_search_finds_mate(self):
        self.client.post("/position", json={"fen": "6k1/5ppp/8/8/8/2N5/q7/3R3K w - - 0 1"})
        response = self.client.post("/search", json={"difficulty": "EXPERT"})
        data = response.json()
        assert data["san"] == "Rd8#"
        # Searched score: mate one ply after the root.
        assert data["score"] == MATE_SCORE - 1
        assert data["display"] == "mate 1"
        assert data["depth"] == 4

    def test_search_game_over_returns_400(self):
        fen = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        self.client.post("/position", json={"fen": fen})
        assert self.client.post("/search").status_code == 400
        assert self.client.post("/ai-move").status_code == 400

    def test_ai_move_plays(self):
        self.client.post("/move", json={"move": "e4"})
        response = self.client.post("/ai-move", json={"difficulty": "EASY", "seed": 4})
        assert response.status_code == 200
        data = response.json()
        assert data["fen"] != chess.STARTING_FEN
        r = self.client.get("/board")
        assert r.json()["turn"] == "white"
        assert r.json()["history"][1] == data["san"]

    def test_evaluate(self):
        response = self.client.get("/evaluate")
        data = response.json()
        assert data["score"] == Evaluator().evaluate(chess.Board())
        assert data["leader"] == "white"
        assert data["display"].startswith("cp ")

    def test_evaluate_black_ahead(self):
        self.client.post("/position", json={"fen": "4kq2/8/8/8/8/8/8/4K3 w - - 0 1"})
        assert self.client.get("/evaluate").json()["leader"] == "black"

    def test_reset_board(self):
        self.client.post("/move", json={"move": "e2e4"})
        response = self.client.post("/reset")
        assert response.status_code == 200
        assert response.json()["fen"] == chess.STARTING_FEN


# ════════════════════════════════════════════════════════════════════════════
#  TERMINAL INTERFACE
# ════════════════════════════════════════════════════════════════════════════


class TestCLI:
    def _scripted(self, answers):
        it = iter(answers)
        return lambda prompt="": next(it)

    def test_engine_mates_human(self):
        game = Game(MATE_IN_ONE, fen="rnbqkbnr/pppp1ppp/8/4p3/8/5P2/PPPPP1PP/RNBQKBNR w KQkq - 0 2")
        output = []
        result = cli.run(game, chess.WHITE, read=self._scripted(["g4"]), write=output.append)
        assert result == "0-1"
        assert "Engine plays: Qh4# | Eval: -900000" in output

    def test_illegal_input_reprompts(self):
        game = Game("EASY", seed=1)
        output = []
        cli.run(game, chess.WHITE, read=self._scripted(["e2e5", "quit"]), write=output.append)
        assert any(str(line).startswith("Illegal move") for line in output)
        assert game.fen == chess.STARTING_FEN

    def test_undo_command(self):
        game = Game("EASY", seed=1)
        cli.run(game, chess.WHITE, read=self._scripted(["e4", "undo", "quit"]), write=lambda *_: None)
        assert game.fen == chess.STARTING_FEN

    def test_parser_normalizes_difficulty(self):
        args = cli.build_parser().parse_args(["--difficulty", "hard", "--color", "black"])
        assert args.difficulty == "HARD"
        assert args.color == "black"

    def test_parser_rejects_unknown_difficulty(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["--difficulty", "legendary"])

    def test_main_reports_bad_fen(self, capsys):
        assert cli.main(["--fen", "not-a-fen"]) == 2
        assert "Invalid FEN" in capsys.readouterr().out


# ════════════════════════════════════════════════════════════════════════════
#  CONFIGURATION
# ════════════════════════════════════════════════════════════════════════════


class TestConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        cfg = Config.load_from_toml(str(tmp_path / "absent.toml"))
        assert cfg.eval.mobility_weight == 2
        assert cfg.difficulty.tiers["EXPERT"]["max_depth"] == 4

    def test_toml_overrides(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            'log_level = "debug"\n'
            "[eval]\n"
            "protected_piece_bonus = 10\n"
            "unknown_key = 1\n"
            "[difficulty]\n"
            'default = "hard"\n'
            "[difficulty.expert]\n"
            "max_depth = 5\n"
        )
        cfg = Config.load_from_toml(str(path))
        assert cfg.log_level == "DEBUG"
        assert cfg.eval.protected_piece_bonus == 10
        assert not hasattr(cfg.eval, "unknown_key")
        assert cfg.difficulty.default == "HARD"
        assert cfg.difficulty.tiers["EXPERT"]["max_depth"] == 5
        assert cfg.difficulty.tiers["EXPERT"]["random_fraction"] == 0.0

        profiles = build_profiles(cfg.difficulty)
        assert profiles[Difficulty.EXPERT].max_depth == 5

    def test_partial_piece_values_keep_the_rest(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[eval.piece_values]\nQUEEN = 950\n")
        cfg = Config.load_from_toml(str(path))
        assert cfg.eval.piece_values["QUEEN"] == 950
        assert cfg.eval.piece_values["PAWN"] == 100
        assert Config().eval.piece_values["QUEEN"] == 900

        board = chess.Board("4k3/8/8/8/8/8/8/3QK3 w - - 0 1")
        stock = Evaluator(Config().eval).evaluate(board)
        assert Evaluator(cfg.eval).evaluate(board) == stock + 50

    def test_toml_breaking_monotonicity_rejected(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[difficulty.easy]\nmax_depth = 6\n")
        cfg = Config.load_from_toml(str(path))
        with pytest.raises(ConfigError):
            build_profiles(cfg.difficulty)

    def test_defaults_not_shared(self):
        a, b = Config(), Config()
        a.difficulty.tiers["EASY"]["max_depth"] = 9
        assert b.difficulty.tiers["EASY"]["max_depth"] == 1
