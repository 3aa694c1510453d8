"""Algebraic notation of a move that has been played"""

from typing import Optional

from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import CastlingSide, PieceType

CASTLING_NOTATION: dict[CastlingSide, str] = {
    CastlingSide.KINGSIDE: "O-O",
    CastlingSide.QUEENSIDE: "O-O-O",
}


def algebraic_notation(
    piece: Piece,
    from_square: Square,
    to_square: Square,
    is_capture: bool,
    is_check: bool,
    is_checkmate: bool,
    castling: Optional[CastlingSide] = None,
    promotion: Optional[PieceType] = None,
) -> str:
    """
    <piece letter><x if capture><destination><=Q if promotion><+ or #>

    * pawns have no letter, but a pawn capture is prefixed with the file the pawn came from (ex. exd5)
    * castling is written as O-O / O-O-O.
      NOTE: castling does not get a check / checkmate suffix, even when it gives check.
    """
    if castling is not None:
        return CASTLING_NOTATION[castling]

    if piece.type == PieceType.PAWN:
        prefix = from_square.file_letter if is_capture else ""
    else:
        prefix = piece.letter
    capture = "x" if is_capture else ""
    promotion_suffix = f"={Piece(promotion, piece.color).letter}" if promotion else ""
    check_suffix = "#" if is_checkmate else "+" if is_check else ""
    return f"{prefix}{capture}{to_square.to_algebraic()}{promotion_suffix}{check_suffix}"
