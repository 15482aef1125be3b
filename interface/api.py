"""FastAPI REST interface for the engine."""

import logging
import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Optional

from chessmate.config import CONFIG
from chessmate.core.search import NoLegalMovesError
from chessmate.main import Engine

logging.basicConfig(level=CONFIG.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared game; the search mutates the live position, so every request holds the lock.
engine = Engine(depth=CONFIG.search.depth)
_engine_lock = threading.Lock()


class MoveRequest(BaseModel):
    move: str  # coordinate notation e.g. "e2e4" or "e7e8=Q"


class SearchRequest(BaseModel):
    depth: Optional[int] = None


def _board_state():
    status = engine.status()
    return {
        "board": ["".join(row) for row in engine.position.board],
        "turn": str(engine.turn),
        "legal_moves": engine.get_legal_moves(),
        "in_check": engine.in_check(),
        "status": status,
        "is_game_over": status != "ongoing",
        "history": list(engine.move_history),
    }


def _check_depth(depth: Optional[int]) -> int:
    depth = depth if depth is not None else engine.search.max_depth
    if depth < 1:
        raise HTTPException(status_code=400, detail="depth must be at least 1")
    return depth


@app.get("/board")
def get_board():
    with _engine_lock:
        return _board_state()


@app.post("/move")
def make_move(req: MoveRequest):
    with _engine_lock:
        if engine.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        if not engine.make_move(req.move):
            raise HTTPException(status_code=400, detail=f"Illegal or malformed move: {req.move}")
        state = _board_state()
        state["move"] = engine.move_history[-1]
        return state


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _engine_lock:
        depth = _check_depth(req.depth)
        try:
            best, score = engine.get_best_move(depth)
        except NoLegalMovesError:
            raise HTTPException(status_code=400, detail="Game is already over")
        searched = engine.search.leaf_aligned_depth(engine.turn, depth)
        return {"best_move": best, "score": score, "depth": searched, "nodes": engine.search.nodes}


@app.post("/play")
def play_move(req: SearchRequest = SearchRequest()):
    with _engine_lock:
        depth = _check_depth(req.depth)
        try:
            move = engine.play_best_move(depth)
        except NoLegalMovesError:
            raise HTTPException(status_code=400, detail="Game is already over")
        state = _board_state()
        state["move"] = move
        return state


@app.post("/undo")
def undo_move():
    with _engine_lock:
        engine.undo_move()
        return _board_state()


@app.post("/reset")
def reset_board():
    with _engine_lock:
        engine.reset()
        logger.info("game reset")
        return _board_state()
