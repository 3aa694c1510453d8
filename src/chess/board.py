"""
The Board holds the `position` (in chess: the configuration of pieces on the board).

A Board is treated as a value: every modification returns a new Board and leaves the original untouched.
That way move generation and legality checks can simulate moves freely on snapshots.
"""

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Self

from src.chess.pieces import BACK_RANK_ORDER, Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import MissingKingError
from src.core.shared_types import Color, PieceType


@dataclass(frozen=True, eq=False)
class Board:
    # Only occupied squares are stored. An absent square is an empty square.
    # Stored as a read-only view of a private copy: updates go through the copy-on-write methods below.
    position: Mapping[Square, Piece] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", MappingProxyType(dict(self.position)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return dict(self.position) == dict(other.position)

    def __hash__(self) -> int:
        return hash(frozenset(self.position.items()))

    @classmethod
    def empty(cls) -> Self:
        return cls({})

    @classmethod
    def from_pieces(cls, pieces: dict[Square, Piece]) -> Self:
        """Construct a (custom) position from a mapping of squares to pieces."""
        for square in pieces:
            square.assert_within_bounds()
        return cls(dict(pieces))

    @classmethod
    def starting_position(cls) -> Self:
        """
        Standard set-up:
        * black pieces on row 0 (8th rank), black pawns on row 1
        * white pawns on row 6, white pieces on row 7 (1st rank)
        """
        position: dict[Square, Piece] = {}
        last_row = BOARD_DIMENSIONS[0] - 1
        for col, piece_type in enumerate(BACK_RANK_ORDER):
            position[Square(0, col)] = Piece(piece_type, Color.BLACK)
            position[Square(1, col)] = Piece(PieceType.PAWN, Color.BLACK)
            position[Square(last_row - 1, col)] = Piece(PieceType.PAWN, Color.WHITE)
            position[Square(last_row, col)] = Piece(piece_type, Color.WHITE)
        return cls(position)

    # --- QUERIES ---
    def piece(self, square: Square) -> Optional[Piece]:
        square.assert_within_bounds()
        return self.position.get(square)

    def is_occupied(self, square: Square) -> bool:
        return self.piece(square) is not None

    def pieces(self) -> list[tuple[Square, Piece]]:
        return list(self.position.items())

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        return [
            square
            for square, piece in self.position.items()
            if piece.is_a(piece_type, color)
        ]

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square for square, piece in self.position.items() if piece.color == color
        ]

    def locate_king(self, color: Color) -> Optional[Square]:
        """The king's square, or None when (wrongly) there is no king of that color on the board."""
        kings = self.locate_pieces(PieceType.KING, color)
        return kings[0] if kings else None

    def count_kings(self) -> dict[Color, int]:
        counts = Counter(
            piece.color
            for piece in self.position.values()
            if piece.type == PieceType.KING
        )
        return {color: counts.get(color, 0) for color in Color}

    # --- COPY-ON-WRITE UPDATES ---
    def place_piece(self, piece: Piece, square: Square) -> Self:
        """New board with the piece placed on the square (replacing whatever stood there)."""
        square.assert_within_bounds()
        position = dict(self.position)
        position[square] = piece
        return type(self)(position)

    def remove_piece(self, square: Square) -> Self:
        square.assert_within_bounds()
        position = dict(self.position)
        position.pop(square, None)
        return type(self)(position)

    def move_piece(self, from_square: Square, to_square: Square) -> Self:
        """
        Minimal relocation: the piece on `from_square` now stands on `to_square`, the origin is cleared.
        Nothing to relocate (empty origin) leaves the board as it is.
        No special rules are applied here (castling rook, en passant capture, promotion: see execution.py).
        """
        from_square.assert_within_bounds()
        to_square.assert_within_bounds()
        position = dict(self.position)
        piece_that_moved = position.pop(from_square, None)
        if piece_that_moved is None:
            return self
        position[to_square] = piece_that_moved
        return type(self)(position)


def validate_kings(board: Board) -> None:
    """Every valid position has exactly one king per color. Anything else means the state got corrupted."""
    for color, count in board.count_kings().items():
        if count != 1:
            raise MissingKingError(
                f"Expected exactly one {color} king on the board, found {count}."
            )
