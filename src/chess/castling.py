"""Helpers for implementing Castling rules. Need to be imported by both the move generator and the move executor"""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import CastlingSide, Color

# The rook involved in castling starts on the a-file (queenside) or h-file (kingside)
ROOK_STARTING_COLS: dict[CastlingSide, int] = {
    CastlingSide.QUEENSIDE: 0,
    CastlingSide.KINGSIDE: BOARD_DIMENSIONS[1] - 1,
}

# Castling is only possible from the king's starting square: the e-file of its own back row
KING_STARTING_COL = 4
KING_STARTING_ROWS: dict[Color, int] = {
    Color.WHITE: BOARD_DIMENSIONS[0] - 1,
    Color.BLACK: 0,
}

# The king always moves two files towards the rook
KING_CASTLING_DISTANCE = 2


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    All four lie on the king's row.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def for_king(cls, king_square: Square, side: CastlingSide) -> Self:
        """The king moves two files towards the rook, the rook lands on the square the king passed over."""
        direction = castling_direction(side)
        king_to = king_square.offset(0, KING_CASTLING_DISTANCE * direction)
        rook_from = Square(king_square.row, ROOK_STARTING_COLS[side])
        rook_to = king_square.offset(0, direction)
        return cls(king_square, king_to, rook_from, rook_to)

    def squares_between(self) -> list[Square]:
        """Squares strictly between king and rook: must all be empty."""
        return squares_between_on_row(self.king_from, self.rook_from)

    def king_path(self) -> list[Square]:
        """The squares the king transits, incl. its destination: none of them may be under attack."""
        return squares_between_on_row(self.king_from, self.king_to) + [self.king_to]


def is_king_starting_square(square: Square, color: Color) -> bool:
    return square == Square(KING_STARTING_ROWS[color], KING_STARTING_COL)


def castling_direction(side: CastlingSide) -> int:
    return 1 if side == CastlingSide.KINGSIDE else -1


def castling_side(from_square: Square, to_square: Square) -> Optional[CastlingSide]:
    """A king move spanning two files IS a castling move. Which side?"""
    col_difference = to_square.col - from_square.col
    if from_square.row != to_square.row or abs(col_difference) != KING_CASTLING_DISTANCE:
        return None
    return CastlingSide.KINGSIDE if col_difference > 0 else CastlingSide.QUEENSIDE


def squares_between_on_row(from_square: Square, to_square: Square) -> list[Square]:
    """
    Find the squares in between the two squares specified that are on the same row
    """
    if from_square.row != to_square.row:
        raise ValueError(
            f"squares_between_on_row requires both squares to lie on the same row. \n from: {from_square}\n to:{to_square}"
        )

    step = 1 if to_square.col > from_square.col else -1
    return [
        Square(from_square.row, col)
        for col in range(from_square.col + step, to_square.col, step)
    ]
