"""FastAPI REST interface for the engine."""

import logging
import threading

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Optional

from duelchess.config import CONFIG
from duelchess.core.board import ChessBoard
from duelchess.core.difficulty import resolve_difficulty
from duelchess.core.evaluator import Evaluator
from duelchess.core.search import SearchEngine
from duelchess.core.utils import format_score
from duelchess.errors import EngineError

logging.basicConfig(level=CONFIG.log_level)
_log = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared game state; one engine, so searches are serialized by the lock.
evaluator = Evaluator()
engine = SearchEngine(evaluator)
board = ChessBoard()
_board_lock = threading.Lock()


class FenRequest(BaseModel):
    fen: str


class MoveRequest(BaseModel):
    move: str  # UCI ("e2e4") or SAN ("e4")


class SearchRequest(BaseModel):
    difficulty: str = CONFIG.difficulty.default
    seed: Optional[int] = None


def _engine_for(req: SearchRequest) -> SearchEngine:
    return SearchEngine(evaluator, seed=req.seed) if req.seed is not None else engine


def _choose(req: SearchRequest):
    """Resolve the tier and pick a move on a copy of the shared board."""
    try:
        profile = resolve_difficulty(req.difficulty)
    except EngineError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if board.is_game_over():
        raise HTTPException(status_code=400, detail="Game is already over")
    search_board = board.board.copy()
    try:
        result = _engine_for(req).choose(search_board, profile)
    except EngineError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return profile, result


@app.get("/board")
def get_board():
    with _board_lock:
        b = board.board
        return {
            "fen": b.fen(),
            "turn": "white" if b.turn == chess.WHITE else "black",
            "legal_moves": board.get_legal_moves(),
            "history": list(board.move_history),
            "is_game_over": board.is_game_over(),
            "result": board.result() if board.is_game_over() else None,
            "status": board.status(),
        }


@app.get("/moves/{square}")
def get_targets(square: str):
    with _board_lock:
        try:
            targets = board.legal_targets(square)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid square: {square}")
        return {"square": square, "targets": targets}


@app.post("/position")
def set_position(req: FenRequest):
    with _board_lock:
        try:
            board.set_fen(req.fen)
        except EngineError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"fen": board.get_fen()}


@app.post("/move")
def make_move(req: MoveRequest):
    with _board_lock:
        move = board.parse_move(req.move)
        if move is None:
            raise HTTPException(status_code=400, detail=f"Illegal move: {req.move}")
        san = board.push(move)
        return {"fen": board.get_fen(), "move": move.uci(), "san": san}


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _board_lock:
        profile, result = _choose(req)
        move = result.move
        return {
            "difficulty": profile.tier.value,
            "best_move": move.uci() if move else None,
            "san": board.board.san(move) if move else None,
            "score": result.score,
            "display": format_score(result.score),
            "depth": result.depth,
            "fen": board.get_fen(),
        }


@app.post("/ai-move")
def ai_move(req: SearchRequest = SearchRequest()):
    with _board_lock:
        profile, result = _choose(req)
        move = result.move
        if move is None:
            raise HTTPException(status_code=400, detail="No legal move")
        uci = move.uci()
        san = board.push(move)
        _log.info("%s plays %s", profile.tier.value, san)
        return {
            "difficulty": profile.tier.value,
            "move": uci,
            "san": san,
            "fen": board.get_fen(),
            "is_game_over": board.is_game_over(),
            "status": board.status(),
        }


@app.get("/evaluate")
def evaluate_position():
    with _board_lock:
        score = evaluator.evaluate(board.board)
        if score > 0:
            leader = "white"
        elif score < 0:
            leader = "black"
        else:
            leader = None
        return {"score": score, "display": format_score(score), "leader": leader,
                "fen": board.get_fen()}


@app.post("/reset")
def reset_board():
    with _board_lock:
        board.reset()
        return {"fen": board.get_fen()}
