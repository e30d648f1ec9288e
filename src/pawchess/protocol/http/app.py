from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    game_rule_exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ...config import Settings
from ...engine.errors import IllegalMoveError, NoPendingPromotionError, TurnError
from ...engine.game import GameState, Outcome
from ...engine.move import parse_uci
from ...engine.perft import perft as perft_nodes
from ...engine.piece import parse_promotion
from ...play.controller import ChessController
from ...play.scheduler import Scheduler


logger = logging.getLogger(__name__)

MAX_PERFT_DEPTH = 4


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class SelectRequest(BaseModel):
    square: int = Field(..., ge=0, le=63, description="Square index, 0 = a8, 63 = h1")


class MoveRequest(BaseModel):
    move: str = Field(..., description="Long algebraic move, e.g. e2e4 or e7e8q")


class PromotionRequest(BaseModel):
    piece: str = Field(..., description="Promotion piece: q, r, b or n")


class DestinationsResponse(BaseModel):
    square: int
    destinations: list[int]


class GameView(BaseModel):
    game_id: str
    fen: str
    board: list[Optional[str]]
    side_to_move: Optional[str]
    human_side: str
    status: str
    in_check: bool
    checkmate: bool
    stalemate: bool
    over: bool
    outcome: Optional[str]
    winner: Optional[str]
    selection: Optional[int]
    destinations: list[int]
    pending_promotion: Optional[int]
    locked: bool
    opponent_thinking: bool
    last_move: Optional[str]
    move_history: list[str]


def create_app(
    settings: Optional[Settings] = None, *, scheduler: Optional[Scheduler] = None
) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="Pawchess API", version="0.1.0")

    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    for exc_type in (IllegalMoveError, NoPendingPromotionError, TurnError):
        app.add_exception_handler(exc_type, game_rule_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore(lambda: ChessController(settings, scheduler=scheduler))
    app.state.settings = settings
    app.state.store = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game() -> CreateGameResponse:
        game_id = store.create()
        controller = _require_game(store, game_id)
        logger.info("game created", extra={"game_id": game_id})
        return CreateGameResponse(game_id=game_id, fen=controller.state.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameView)
    async def get_state(game_id: str) -> GameView:
        return _view(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/select", response_model=GameView)
    async def select_square(game_id: str, req: SelectRequest) -> GameView:
        controller = _require_game(store, game_id)
        controller.on_square_selected(req.square)
        return _view(game_id, controller)

    @app.post("/api/games/{game_id}/move", response_model=GameView)
    async def make_move(game_id: str, req: MoveRequest) -> GameView:
        controller = _require_game(store, game_id)
        try:
            move = parse_uci(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        controller.submit_move(move)
        return _view(game_id, controller)

    @app.post("/api/games/{game_id}/promotion", response_model=GameView)
    async def choose_promotion(game_id: str, req: PromotionRequest) -> GameView:
        controller = _require_game(store, game_id)
        try:
            kind = parse_promotion(req.piece)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        controller.on_promotion_choice(kind)
        return _view(game_id, controller)

    @app.post("/api/games/{game_id}/new", response_model=GameView)
    async def new_game(game_id: str) -> GameView:
        controller = _require_game(store, game_id)
        controller.on_new_game()
        return _view(game_id, controller)

    @app.post("/api/games/{game_id}/position", response_model=GameView)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameView:
        controller = _require_game(store, game_id)
        try:
            controller.load_position(req.fen)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid FEN")
        return _view(game_id, controller)

    @app.get("/api/games/{game_id}/destinations/{square}", response_model=DestinationsResponse)
    async def destinations(game_id: str, square: int) -> DestinationsResponse:
        controller = _require_game(store, game_id)
        if square < 0 or square > 63:
            raise HTTPException(status_code=400, detail="square must be in 0..63")
        dests = controller.get_legal_destinations(square)
        return DestinationsResponse(square=square, destinations=sorted(dests))

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"status": "deleted"}

    @app.post("/api/perft")
    async def perft(payload: Dict[str, Any]) -> Dict[str, Any]:
        fen = payload.get("fen")
        try:
            depth = int(payload.get("depth", 1))
        except (TypeError, ValueError):
            raise HTTPException(status_code=400, detail="depth must be an integer")
        if not fen:
            raise HTTPException(status_code=400, detail="fen is required")
        if depth < 0:
            raise HTTPException(status_code=400, detail="depth must be >= 0")
        if depth > MAX_PERFT_DEPTH:
            raise HTTPException(status_code=400, detail=f"depth must be <= {MAX_PERFT_DEPTH}")
        try:
            state = GameState.from_fen(fen)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid FEN")
        return {"nodes": perft_nodes(state, depth)}

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> ChessController:
    controller = store.get(game_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="game not found")
    return controller


def _view(game_id: str, controller: ChessController) -> GameView:
    with controller.lock:
        st = controller.state
        history = [m.to_uci() for m in st.history]
        selection_dests = (
            sorted(controller.get_legal_destinations(st.selection))
            if st.selection is not None
            else []
        )
        return GameView(
            game_id=game_id,
            fen=st.to_fen(),
            board=st.board.symbols(),
            side_to_move=st.side_to_move.value if st.side_to_move else None,
            human_side=controller.human_side.value,
            status=controller.get_status_text(),
            in_check=st.check,
            checkmate=st.outcome is Outcome.CHECKMATE,
            stalemate=st.outcome is Outcome.STALEMATE,
            over=st.is_over,
            outcome=st.outcome.value if st.outcome else None,
            winner=st.winner.value if st.winner else None,
            selection=st.selection,
            destinations=selection_dests,
            pending_promotion=st.pending_promotion,
            locked=st.locked,
            opponent_thinking=controller.opponent_pending,
            last_move=history[-1] if history else None,
            move_history=history,
        )
