"""
Applying a move to the board.

Castling, en passant and promotion are never requested explicitly: they follow from the geometry of the move
and the piece that moves.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.chess.board import Board
from src.chess.castling import CastlingSquares, castling_side
from src.chess.moves import is_promotion_square
from src.chess.pieces import PROMOTION_PIECE, Piece
from src.chess.square import Square
from src.core.shared_types import CastlingSide, Color, PieceType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveOutcome:
    """What happened on the board. Used by the Game to build the move record."""

    moved_piece: Piece  # snapshot before the move
    captured_piece: Optional[Piece] = None
    castling: Optional[CastlingSide] = None
    en_passant: bool = False
    promotion: Optional[PieceType] = None
    # en passant square available to the opponent on the next turn
    next_en_passant_square: Optional[Square] = None

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None


def apply_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    mover: Color,
    en_passant_square: Optional[Square] = None,
) -> tuple[Board, MoveOutcome]:
    """
    Update the position with a move (assumed legal) and report what happened
    -----

    1. castling: king moves two files --> also relocate the rook
    2. en passant: pawn lands on the en passant square --> remove the pawn it passes behind
    3. promotion: pawn reaches the final row --> becomes a queen
    4. move the piece itself (flagged as moved), clear the origin
    5. determine the en passant square for the opponent's next turn
    """
    moving_piece = board.piece(from_square)
    if moving_piece is None or moving_piece.color != mover:
        raise ValueError(f"No {mover} piece on {from_square.to_algebraic()} to move.")

    captured_piece = board.piece(to_square)
    new_board = board

    # 1. castling
    side = (
        castling_side(from_square, to_square)
        if moving_piece.type == PieceType.KING
        else None
    )
    if side is not None:
        new_board = _move_castling_rook(new_board, from_square, side)

    # 2. en passant
    is_en_passant = (
        moving_piece.type == PieceType.PAWN
        and en_passant_square is not None
        and to_square == en_passant_square
    )
    if is_en_passant:
        # NOTE the pawn taken stands on the file of the en passant square, on the row the moving pawn started on
        take_square = Square(row=from_square.row, col=to_square.col)
        captured_piece = new_board.piece(take_square)
        new_board = new_board.remove_piece(take_square)

    # 3. promotion
    promotion = (
        PROMOTION_PIECE
        if moving_piece.type == PieceType.PAWN
        and is_promotion_square(to_square, mover)
        else None
    )

    # 4. the move itself
    landed_piece = moving_piece.moved()
    if promotion is not None:
        landed_piece = landed_piece.promote_to(promotion)
    new_board = new_board.remove_piece(from_square).place_piece(landed_piece, to_square)

    # 5. en passant square for the next turn
    next_en_passant_square = _determine_en_passant_square(
        moving_piece, from_square, to_square
    )

    outcome = MoveOutcome(
        moved_piece=moving_piece,
        captured_piece=captured_piece,
        castling=side,
        en_passant=is_en_passant,
        promotion=promotion,
        next_en_passant_square=next_en_passant_square,
    )
    logger.debug(
        "Applied %s %s%s: %s",
        moving_piece.type,
        from_square.to_algebraic(),
        to_square.to_algebraic(),
        outcome,
    )
    return new_board, outcome


def _move_castling_rook(board: Board, king_square: Square, side: CastlingSide) -> Board:
    """The rook jumps over the king to the square right next to the king's destination."""
    squares = CastlingSquares.for_king(king_square, side)
    rook = board.piece(squares.rook_from)
    if rook is None:
        raise ValueError(f"No rook on {squares.rook_from.to_algebraic()} to castle with.")
    return board.remove_piece(squares.rook_from).place_piece(rook.moved(), squares.rook_to)


def _determine_en_passant_square(
    moving_piece: Piece, from_square: Square, to_square: Square
) -> Optional[Square]:
    """A pawn advancing two rows leaves behind the square it passed over. Cleared by any other move."""
    rows_moved = abs(to_square.row - from_square.row)
    if moving_piece.type != PieceType.PAWN or rows_moved != 2:
        return None
    return Square(row=(from_square.row + to_square.row) // 2, col=from_square.col)
