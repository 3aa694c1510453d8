"""HTTP routes a board UI calls. Thin layer: parse the request, hand it to the ChessService, return its response."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from uuid import UUID

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from src.api.models import (
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    HighlightRequest,
    HighlightResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveBody,
    MoveRequest,
    MoveResponse,
    ResetGameRequest,
)
from src.core.config import CORS_ORIGINS, configure_logging
from src.core.exceptions import GameError, RepositoryError
from src.db.database import get_db, init_db
from src.db.sql_repository import SQLGameRepository
from src.services.chess_service import ChessService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    init_db()
    logger.info("Chess backend started")
    yield


app = FastAPI(
    title="Chess Rules Engine API",
    description="Legal moves, move attempts and game state for chess games stored in a database.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_service(db: Session = Depends(get_db)) -> ChessService:
    return ChessService(SQLGameRepository(db))


# --- ERROR HANDLING ---
@app.exception_handler(RepositoryError)
async def repository_error_handler(_: Request, exc: RepositoryError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(GameError)
async def game_error_handler(_: Request, exc: GameError) -> JSONResponse:
    logger.warning("Bad request: %s", exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


# --- ROUTES ---
@app.get("/")
def health_check() -> dict[str, str]:
    return {"message": "Healthy"}


@app.post("/games", status_code=status.HTTP_201_CREATED)
def create_game(service: ChessService = Depends(get_service)) -> GameResponse:
    return service.create_new_game()


@app.get("/games/{game_id}")
def get_game(game_id: UUID, service: ChessService = Depends(get_service)) -> GameResponse:
    return service.get_game_state(GetGameRequest(game_id=game_id))


@app.get("/games/{game_id}/legal-moves")
def legal_moves(
    game_id: UUID, square: str, service: ChessService = Depends(get_service)
) -> LegalMovesResponse:
    return service.legal_moves(LegalMovesRequest(game_id=game_id, square=square))


@app.post("/games/{game_id}/moves")
def make_move(
    game_id: UUID, body: MoveBody, service: ChessService = Depends(get_service)
) -> MoveResponse:
    request = MoveRequest(
        game_id=game_id, from_square=body.from_square, to_square=body.to_square
    )
    return service.make_move(request)


@app.get("/games/{game_id}/highlight")
def square_highlight(
    game_id: UUID,
    square: str,
    selected: Optional[str] = None,
    service: ChessService = Depends(get_service),
) -> HighlightResponse:
    request = HighlightRequest(game_id=game_id, square=square, selected=selected)
    return service.square_highlight(request)


@app.post("/games/{game_id}/reset")
def reset_game(game_id: UUID, service: ChessService = Depends(get_service)) -> GameResponse:
    return service.reset_game(ResetGameRequest(game_id=game_id))


@app.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_game(game_id: UUID, service: ChessService = Depends(get_service)) -> None:
    service.delete_game(DeleteGameRequest(game_id=game_id))
