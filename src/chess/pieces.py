"""Defines the chess pieces"""

from dataclasses import dataclass, replace
from typing import Self

from src.core.shared_types import Color, PieceType

# Letter used for the piece in algebraic notation. Pawns have no letter.
PIECE_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}

# Back rank, from the a-file to the h-file
BACK_RANK_ORDER: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# The only piece a pawn promotes into
PROMOTION_PIECE = PieceType.QUEEN


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color
    # Needed for castling: neither the king nor the rook may have moved before.
    has_moved: bool = False

    @property
    def letter(self) -> str:
        return PIECE_LETTERS[self.type]

    def moved(self) -> Self:
        """Copy of this piece, flagged as having occupied a destination square."""
        return replace(self, has_moved=True)

    def promote_to(self, new_type: PieceType) -> Self:
        return replace(self, type=new_type)

    def is_a(self, piece_type: PieceType, color: Color) -> bool:
        return self.type == piece_type and self.color == color
