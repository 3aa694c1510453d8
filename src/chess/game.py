"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
passes this information to the service layer, which can then pass it onwards to the API layer.

The state of a game is an immutable GameState. Playing a move never modifies a GameState: `play_move()` returns the next one,
and the Game replaces its current state with it.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.attacks import is_king_in_check
from src.chess.board import Board, validate_kings
from src.chess.execution import apply_move
from src.chess.legality import all_legal_moves, has_any_legal_move, legal_moves
from src.chess.notation import algebraic_notation
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.exceptions import GameStateError, IllegalMoveError, InvalidSquareError
from src.core.models import GameModel
from src.core.shared_types import (
    TERMINAL_STATUSES,
    CastlingSide,
    Color,
    PieceType,
    SquareHighlight,
    Status,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveRecord:
    """A move that has been played. Created once, never changed afterwards."""

    from_square: Square
    to_square: Square
    piece: Piece  # the piece as it was before moving
    captured_piece: Optional[Piece]
    is_capture: bool
    is_check: bool
    is_checkmate: bool
    notation: str
    castling: Optional[CastlingSide] = None
    en_passant: bool = False
    promotion: Optional[PieceType] = None

    def to_uci(self) -> str:
        """
        Coordinate notation: <from_square><to_square>, plus a 'q' when the pawn promoted.
        ex. "e2e4", "e1g1" (castling), "e7e8q"
        """
        promotion_char = "q" if self.promotion == PieceType.QUEEN else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{promotion_char}"


def parse_uci(uci: str) -> tuple[Square, Square]:
    """Inverse of `MoveRecord.to_uci()`. Promotion is implied by the move, so a trailing piece letter is ignored."""
    if len(uci) not in (4, 5):
        raise InvalidSquareError(f"Cannot interpret {uci!r} as a move in coordinate notation.")
    return Square.from_algebraic(uci[:2]), Square.from_algebraic(uci[2:4])


@dataclass(frozen=True)
class GameState:
    board: Board
    current_player: Color = Color.WHITE
    move_history: tuple[MoveRecord, ...] = field(default_factory=tuple)
    status: Status = Status.PLAYING
    en_passant_square: Optional[Square] = None

    @classmethod
    def initial(cls) -> Self:
        """Standard starting position, white to move."""
        return cls(board=Board.starting_position())

    @property
    def move_number(self) -> int:
        """Full move number: starts at 1 and increments after every move black makes."""
        return len(self.move_history) // 2 + 1

    @property
    def is_over(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def winner(self) -> Optional[Color]:
        """Only checkmate has a winner: the player who is to move just got mated."""
        if self.status != Status.CHECKMATE:
            return None
        return self.current_player.opponent

    def captured_pieces(self) -> dict[Color, list[Piece]]:
        """Pieces taken so far, grouped by the color of the piece that got taken."""
        captured: dict[Color, list[Piece]] = {color: [] for color in Color}
        for move in self.move_history:
            if move.captured_piece is not None:
                captured[move.captured_piece.color].append(move.captured_piece)
        return captured


def determine_status(board: Board, color: Color, en_passant_square: Optional[Square]) -> Status:
    """
    Status from the point of view of the player about to move
    ----

    in check + no legal move --> checkmate
    not in check + no legal move --> stalemate
    in check + legal move --> check
    otherwise --> playing
    """
    in_check = is_king_in_check(board, color)
    can_move = has_any_legal_move(board, color, en_passant_square)
    if not can_move:
        return Status.CHECKMATE if in_check else Status.STALEMATE
    return Status.CHECK if in_check else Status.PLAYING


def play_move(state: GameState, from_square: Square, to_square: Square) -> Optional[GameState]:
    """
    Attempt to make a move
    -----

    1. reject (return None) if there is no piece of the player to move on `from_square`, or the move is not legal
    2. update the board (castling / en passant / promotion are applied by the executor)
    3. flip the player to move, store the new en passant square
    4. determine check / checkmate / stalemate for the opponent
    5. write the move record (incl. notation) to the history
    """
    from_square.assert_within_bounds()
    to_square.assert_within_bounds()

    mover = state.current_player
    piece = state.board.piece(from_square)
    if piece is None or piece.color != mover:
        return None

    if to_square not in legal_moves(state.board, from_square, mover, state.en_passant_square):
        return None

    new_board, outcome = apply_move(
        state.board, from_square, to_square, mover, state.en_passant_square
    )

    opponent = mover.opponent
    status = determine_status(new_board, opponent, outcome.next_en_passant_square)
    is_check = status in (Status.CHECK, Status.CHECKMATE)
    is_checkmate = status == Status.CHECKMATE

    record = MoveRecord(
        from_square=from_square,
        to_square=to_square,
        piece=outcome.moved_piece,
        captured_piece=outcome.captured_piece,
        is_capture=outcome.is_capture,
        is_check=is_check,
        is_checkmate=is_checkmate,
        notation=algebraic_notation(
            piece=outcome.moved_piece,
            from_square=from_square,
            to_square=to_square,
            is_capture=outcome.is_capture,
            is_check=is_check,
            is_checkmate=is_checkmate,
            castling=outcome.castling,
            promotion=outcome.promotion,
        ),
        castling=outcome.castling,
        en_passant=outcome.en_passant,
        promotion=outcome.promotion,
    )

    return GameState(
        board=new_board,
        current_player=opponent,
        move_history=state.move_history + (record,),
        status=status,
        en_passant_square=outcome.next_en_passant_square,
    )


class Game:
    """Owns the one authoritative GameState of a game and answers the questions a board UI asks."""

    def __init__(self, state: Optional[GameState] = None) -> None:
        if state is None:
            state = GameState.initial()
        validate_kings(state.board)
        self._state = state

    @property
    def state(self) -> GameState:
        return self._state

    # --- DOMAIN LAYER API ---
    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Rebuild a game by replaying the stored moves from the starting position"""
        if model.status not in [status.value for status in Status]:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )

        game = cls()
        for move_uci in model.moves:
            from_square, to_square = parse_uci(move_uci)
            if not game.attempt_move(from_square, to_square):
                raise IllegalMoveError(
                    f"Stored move {move_uci!r} (move {game.state.move_number}) is not legal in this position."
                )

        if game.state.status != Status(model.status):
            logger.warning(
                "Stored status %r does not match replayed status %r",
                model.status,
                game.state.status.value,
            )
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            moves=[move.to_uci() for move in self._state.move_history],
            notation=[move.notation for move in self._state.move_history],
            status=self._state.status.value,
        )

    def legal_moves(self, square: Square) -> set[Square]:
        """Legal destinations for the piece on the square. Empty if it is not a piece of the player to move."""
        square.assert_within_bounds()
        return legal_moves(
            self._state.board,
            square,
            self._state.current_player,
            self._state.en_passant_square,
        )

    def all_legal_moves(self) -> dict[Square, set[Square]]:
        return all_legal_moves(
            self._state.board, self._state.current_player, self._state.en_passant_square
        )

    def attempt_move(self, from_square: Square, to_square: Square) -> bool:
        """Play the move if it is legal. Returns False (and changes nothing) otherwise."""
        next_state = play_move(self._state, from_square, to_square)
        if next_state is None:
            logger.debug(
                "Rejected move %s%s for %s",
                from_square.to_algebraic(),
                to_square.to_algebraic(),
                self._state.current_player,
            )
            return False

        self._state = next_state
        if next_state.is_over:
            logger.info(
                "Game over after %s: %s", next_state.move_history[-1].notation, next_state.status
            )
        return True

    def is_in_check(self) -> bool:
        return is_king_in_check(self._state.board, self._state.current_player)

    def square_highlight(
        self, square: Square, selected: Optional[Square] = None
    ) -> SquareHighlight:
        """
        How to paint a square, given the square the user currently selected (if any)
        ---

        selected square --> SELECTED
        legal destination of the selected piece --> VALID
        king of the player to move, while in check --> CHECK
        """
        square.assert_within_bounds()
        if selected is not None:
            if square == selected:
                return SquareHighlight.SELECTED
            if square in self.legal_moves(selected):
                return SquareHighlight.VALID

        piece = self._state.board.piece(square)
        is_own_king = piece is not None and piece.is_a(
            PieceType.KING, self._state.current_player
        )
        if is_own_king and self.is_in_check():
            return SquareHighlight.CHECK
        return SquareHighlight.NORMAL

    def reset(self) -> None:
        """Back to the starting position, wiping the history."""
        self._state = GameState.initial()
