"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    HighlightRequest,
    HighlightResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    ResetGameRequest,
)
from src.chess.game import Game
from src.chess.square import Square
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game.

    Stateless: every call rebuilds the Game from the stored record, acts on it, and writes the result back.
    """

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self) -> GameResponse:
        """Start a game in the standard starting position."""
        new_game = Game()
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s", game_id)
        return self._create_game_response(game_id, Game.from_model(stored_game))

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """Retrieve current game state."""
        game = self._load_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal destinations of the piece on the requested square (for move-target highlighting)."""
        game = self._load_game(request.game_id)
        destinations = game.legal_moves(Square.from_algebraic(request.square))
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            legal_moves=sorted(square.to_algebraic() for square in destinations),
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. A rejected move is reported back, and nothing is stored."""
        game = self._load_game(request.game_id)

        accepted = game.attempt_move(
            Square.from_algebraic(request.from_square),
            Square.from_algebraic(request.to_square),
        )
        if accepted:
            self.repo.update_game(request.game_id, game.to_model())

        return MoveResponse(
            accepted=accepted,
            game=self._create_game_response(request.game_id, game),
        )

    def square_highlight(self, request: HighlightRequest) -> HighlightResponse:
        game = self._load_game(request.game_id)
        selected = (
            Square.from_algebraic(request.selected)
            if request.selected is not None
            else None
        )
        highlight = game.square_highlight(Square.from_algebraic(request.square), selected)
        return HighlightResponse(
            game_id=request.game_id, square=request.square, highlight=highlight
        )

    def reset_game(self, request: ResetGameRequest) -> GameResponse:
        """Start over, keeping the same game ID."""
        game = self._load_game(request.game_id)
        game.reset()
        self.repo.update_game(request.game_id, game.to_model())
        logger.info("Reset game %s", request.game_id)
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        deleted = self.repo.delete_game(request.game_id)
        if deleted is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        return GameResponse.from_state(game_id, game.state)

    def _load_game(self, game_id: UUID) -> Game:
        return Game.from_model(self._fetch_game(game_id))

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
