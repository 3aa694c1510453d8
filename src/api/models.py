"""Requests and Response models"""

from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.game import GameState, MoveRecord
from src.chess.pieces import Piece
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import (
    CastlingSide,
    Color,
    PieceType,
    SquareHighlight,
    Status,
)

SquareName = str


def _validate_square_name(value: str) -> str:
    """Square names are written in algebraic notation: a file letter a-h followed by a rank digit 1-8"""

    def _is_algebraic_notation(value: str) -> bool:
        if len(value) != 2:
            return False

        first_character = value[0]
        second_character = value[1]
        return first_character in "abcdefgh" and second_character in "12345678"

    if not _is_algebraic_notation(value):
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        )
    return value


# --- REQUEST MODELS ---
class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: SquareName
    to_square: SquareName

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class HighlightRequest(BaseModel):
    game_id: UUID
    square: SquareName
    selected: Optional[SquareName] = None

    @field_validator("square", "selected")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _validate_square_name(value)


class ResetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class MoveBody(BaseModel):
    """Body of the HTTP move request (the game id is part of the URL)"""

    from_square: SquareName
    to_square: SquareName


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    type: PieceType
    color: Color
    has_moved: bool

    @classmethod
    def from_piece(cls, piece: Piece) -> Self:
        return cls(type=piece.type, color=piece.color, has_moved=piece.has_moved)


class MoveRecordResponse(BaseModel):
    from_square: SquareName
    to_square: SquareName
    piece: PieceResponse
    captured_piece: Optional[PieceResponse]
    is_capture: bool
    is_check: bool
    is_checkmate: bool
    notation: str
    castling: Optional[CastlingSide]
    en_passant: bool
    promotion: Optional[PieceType]

    @classmethod
    def from_record(cls, record: MoveRecord) -> Self:
        return cls(
            from_square=record.from_square.to_algebraic(),
            to_square=record.to_square.to_algebraic(),
            piece=PieceResponse.from_piece(record.piece),
            captured_piece=(
                PieceResponse.from_piece(record.captured_piece)
                if record.captured_piece is not None
                else None
            ),
            is_capture=record.is_capture,
            is_check=record.is_check,
            is_checkmate=record.is_checkmate,
            notation=record.notation,
            castling=record.castling,
            en_passant=record.en_passant,
            promotion=record.promotion,
        )


class GameResponse(BaseModel):
    game_id: UUID
    board: dict[SquareName, PieceResponse]
    current_player: Color
    status: Status
    move_number: int
    en_passant_square: Optional[SquareName]
    move_history: list[MoveRecordResponse]
    captured_pieces: dict[Color, list[PieceResponse]]

    @classmethod
    def from_state(cls, game_id: UUID, state: GameState) -> Self:
        return cls(
            game_id=game_id,
            board={
                square.to_algebraic(): PieceResponse.from_piece(piece)
                for square, piece in state.board.pieces()
            },
            current_player=state.current_player,
            status=state.status,
            move_number=state.move_number,
            en_passant_square=(
                state.en_passant_square.to_algebraic()
                if state.en_passant_square is not None
                else None
            ),
            move_history=[
                MoveRecordResponse.from_record(record) for record in state.move_history
            ],
            captured_pieces={
                color: [PieceResponse.from_piece(piece) for piece in pieces]
                for color, pieces in state.captured_pieces().items()
            },
        )


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: SquareName
    legal_moves: list[SquareName]


class MoveResponse(BaseModel):
    accepted: bool
    game: GameResponse


class HighlightResponse(BaseModel):
    game_id: UUID
    square: SquareName
    highlight: SquareHighlight
