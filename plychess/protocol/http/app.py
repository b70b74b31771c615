from __future__ import annotations

import logging
import random
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .error import install_error_handlers
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ... import config
from ...engine.game import Game
from ...engine.move import parse_uci
from ...engine.perft import perft as perft_nodes
from ...search.service import SearchResult, SearchService


logger = logging.getLogger(__name__)


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class MoveRequest(BaseModel):
    move: str = Field(..., description="Long algebraic move, e.g., e2e4 or e7e8q")


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=0, le=config.MAX_API_DEPTH)
    movetime_ms: Optional[int] = Field(default=None, ge=1)
    node_budget: Optional[int] = Field(default=None, ge=1)
    seed: Optional[int] = Field(default=None, description="Tie-break seed for reproducible picks")


class PerftRequest(BaseModel):
    fen: str
    depth: int = Field(default=1, ge=0, le=4)


class GameState(BaseModel):
    game_id: str
    fen: str
    legal_moves: list[str]
    in_check: bool
    checkmate: bool
    stalemate: bool
    draw: bool
    draw_reason: Optional[str]
    game_over: bool
    last_move: Optional[str]
    move_history: list[str]


def create_app() -> FastAPI:
    app = FastAPI(title="plychess API", version="0.1.0")

    logging.basicConfig(level=config.LOG_LEVEL)
    config.log_overrides()

    app.add_middleware(RequestIDLoggingMiddleware)
    # Engine ValueErrors (bad FEN, bad or illegal move, empty undo) become 400s
    install_error_handlers(app)

    store = InMemorySessionStore(max_sessions=config.MAX_SESSIONS)

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game() -> CreateGameResponse:
        game_id = store.create(Game.new())
        game = _require_game(store, game_id)
        return CreateGameResponse(game_id=game_id, fen=game.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _game_state(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        _require_game(store, game_id)
        store.set(game_id, Game.from_fen(req.fen))
        return _game_state(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        game.apply_move(parse_uci(req.move))
        return _game_state(game_id, game)

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    async def undo(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        game.undo_move()
        return _game_state(game_id, game)

    # Plain def: runs in the threadpool, off the event loop
    @app.post("/api/games/{game_id}/search")
    def search(game_id: str, req: SearchRequest) -> Dict[str, Any]:
        game = _require_game(store, game_id)
        rng = random.Random(req.seed) if req.seed is not None else None
        movetime_ms = req.movetime_ms
        if movetime_ms is None:
            movetime_ms = config.API_MOVETIME_MS
        res = SearchService(rng).search(
            game,
            depth=req.depth,
            movetime_ms=movetime_ms,
            node_budget=req.node_budget,
        )
        return _search_payload(res)

    @app.post("/api/perft")
    def perft(req: PerftRequest) -> Dict[str, Any]:
        game = Game.from_fen(req.fen)
        return {"nodes": perft_nodes(game.position, req.depth)}

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _game_state(game_id: str, game: Game) -> GameState:
    history = game.move_history_uci()
    checkmate = game.checkmate()
    draw_reason = game.draw_reason()
    return GameState(
        game_id=game_id,
        fen=game.to_fen(),
        legal_moves=[m.to_uci() for m in game.legal_moves()],
        in_check=game.in_check(),
        checkmate=checkmate,
        stalemate=game.stalemate(),
        draw=draw_reason is not None,
        draw_reason=draw_reason,
        game_over=game.is_game_over(),
        last_move=history[-1] if history else None,
        move_history=history,
    )


def _search_payload(res: SearchResult) -> Dict[str, Any]:
    # Mate scores are infinite and not JSON-representable; report the winner instead
    score: Optional[Dict[str, Any]]
    winner = res.mate_for
    if winner is not None:
        score = {"mate": winner.value}
    elif res.score is not None:
        score = {"material": int(res.score)}
    else:
        score = None
    return {
        "best_move": res.best_move.to_uci() if res.best_move else None,
        "score": score,
        "depth": res.depth,
        "nodes": res.nodes,
        "time_ms": res.time_ms,
        "ties": [m.to_uci() for m in res.ties],
        "iters": res.iters,
        "stopped": res.stopped,
    }


# Default app for non-factory servers
app = create_app()
