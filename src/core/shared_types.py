"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    PLAYING = "playing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    # NOTE: reserved. No transition produces it (no repetition / fifty-move / material rules)
    DRAW = "draw"


TERMINAL_STATUSES: frozenset[Status] = frozenset({Status.CHECKMATE, Status.STALEMATE})


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class CastlingSide(StrEnum):
    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"


class SquareHighlight(StrEnum):
    """How a presentation layer should paint a square"""

    NORMAL = "normal"
    SELECTED = "selected"
    VALID = "valid"
    CHECK = "check"
