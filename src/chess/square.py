"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Orientation follows the board as it is drawn: row 0 is the top row (black's back rank, rank 8),
row 7 is the bottom row (white's back rank, rank 1). Column 0 is the a-file.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8. (rows, columns)
BOARD_DIMENSIONS = (8, 8)

FILE_LETTERS = "abcdefgh"
RANK_DIGITS = "12345678"


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)"""
        if len(sq) != 2 or sq[0] not in FILE_LETTERS or sq[1] not in RANK_DIGITS:
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square name.")
        col = FILE_LETTERS.index(sq[0])
        row = BOARD_DIMENSIONS[0] - int(sq[1])
        square = cls(row, col)
        square.assert_within_bounds()
        return square

    def to_algebraic(self) -> str:
        return f"{self.file_letter}{self.rank}"

    @property
    def file_letter(self) -> str:
        return FILE_LETTERS[self.col]

    @property
    def rank(self) -> int:
        return BOARD_DIMENSIONS[0] - self.row

    def offset(self, d_row: int, d_col: int) -> Square:
        """The square reached by stepping along a vector. Might fall off the board: check with `is_within_bounds()`"""
        return Square(self.row + d_row, self.col + d_col)

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def assert_within_bounds(self) -> None:
        if not self.is_within_bounds():
            raise InvalidSquareError(f"Square {self} lies outside of the board.")
