"""FastAPI REST interface for a human-vs-computer game session."""

import asyncio
import logging

import chess
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from checkmate_ai.advisor import advisor_from_config
from checkmate_ai.config import CONFIG, Difficulty
from checkmate_ai.errors import IllegalMoveRequested
from checkmate_ai.game import Game
from checkmate_ai.main import ChessAI

logging.basicConfig(level=CONFIG.log_level)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")


def new_game(player_color: str = CONFIG.ui.default_player_color,
             difficulty: str = CONFIG.ui.default_difficulty) -> Game:
    ai = ChessAI(difficulty, advisor=advisor_from_config(CONFIG), cfg=CONFIG)
    return Game(player_color=player_color, difficulty=difficulty, ai=ai)


# Single shared session, replaced by POST /game/new.
game = new_game()
_game_lock = asyncio.Lock()


class NewGameRequest(BaseModel):
    player_color: str = CONFIG.ui.default_player_color
    difficulty: str = CONFIG.ui.default_difficulty

    @field_validator("player_color")
    @classmethod
    def check_color(cls, v: str) -> str:
        if v.lower() not in ("white", "black", "random"):
            raise ValueError("player_color must be white, black or random")
        return v.lower()

    @field_validator("difficulty")
    @classmethod
    def check_difficulty(cls, v: str) -> str:
        return Difficulty.from_name(v).value


class MoveRequest(BaseModel):
    move: str  # SAN or UCI, e.g. "e4" or "e2e4"


def _record_dict(record) -> dict:
    return {
        **record.info.to_dict(),
        "fen": record.fen,
        "player": record.player,
        "timestamp": record.timestamp,
    }


def _game_state(g: Game) -> dict:
    result = g.result()
    return {
        "fen": g.board.fen(),
        "turn": "white" if g.board.turn == chess.WHITE else "black",
        "player_color": "white" if g.player_color == chess.WHITE else "black",
        "difficulty": g.difficulty.value,
        "legal_moves": g.legal_moves(),
        "is_game_over": result is not None,
        "result": None if result is None else {
            "kind": result.kind, "winner": result.winner, "reason": result.reason,
        },
        "status": g.status_message(),
        "history": [_record_dict(r) for r in g.history],
        "sources": g.ai.get_active_sources(),
    }


@app.get("/game")
async def get_game():
    return _game_state(game)


@app.post("/game/new")
async def start_game(req: NewGameRequest = NewGameRequest()):
    global game
    async with _game_lock:
        await game.ai.aclose()
        game = new_game(req.player_color, req.difficulty)
        return _game_state(game)


@app.post("/game/move")
async def make_move(req: MoveRequest):
    async with _game_lock:
        try:
            record = game.player_move(req.move)
        except IllegalMoveRequested as e:
            raise HTTPException(status_code=400, detail=e.message)
        return {"move": _record_dict(record), "fen": game.board.fen(), "status": game.status_message()}


@app.post("/game/engine-move")
async def engine_move():
    async with _game_lock:
        if game.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        if game.is_player_turn:
            raise HTTPException(status_code=400, detail="It is the player's turn")
        record = await game.engine_move()
        if record is None:
            raise HTTPException(status_code=400, detail="Engine has no move")
        return {"move": _record_dict(record), "fen": game.board.fen(), "status": game.status_message()}


@app.post("/game/undo")
async def undo_move():
    async with _game_lock:
        undone = game.undo()
        return {"undone": undone, "fen": game.board.fen()}


@app.get("/engine/status")
async def engine_status():
    return {
        "status": game.ai.get_status_message(),
        "sources": game.ai.get_active_sources(),
        "difficulty": game.difficulty.value,
        "thinking": game.ai.thinking,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=CONFIG.ui.api_port)
