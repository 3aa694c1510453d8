"""
Legal moves: the pseudo-legal moves that do not put (or leave) the mover's own king in check.
"""

from typing import Optional

from src.chess.attacks import is_king_in_check
from src.chess.board import Board
from src.chess.moves import pseudo_legal_moves
from src.chess.square import Square
from src.core.shared_types import Color, PieceType


def simulate_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    en_passant_square: Optional[Square] = None,
) -> Board:
    """
    Placement of the pieces after the move, as far as checks are concerned.

    The moving piece is relocated, and a pawn taken en passant is removed
    (taking en passant clears two squares on the same row, which can expose the king along that row).
    The castling rook is left where it is: the king's path was already checked for attacks when generating the move.
    """
    moving_piece = board.piece(from_square)
    simulated_board = board.move_piece(from_square, to_square)
    is_en_passant = (
        moving_piece is not None
        and moving_piece.type == PieceType.PAWN
        and to_square == en_passant_square
    )
    if is_en_passant:
        simulated_board = simulated_board.remove_piece(
            Square(row=from_square.row, col=to_square.col)
        )
    return simulated_board


def is_putting_yourself_in_check(
    board: Board,
    from_square: Square,
    to_square: Square,
    mover: Color,
    en_passant_square: Optional[Square] = None,
) -> bool:
    """Return True if the move leaves your king in check

    plan:
    1. make the candidate move on a copy of the board (Board is never modified in place)
    2. determine if king is in check on the new board
    """
    simulated_board = simulate_move(board, from_square, to_square, en_passant_square)
    return is_king_in_check(simulated_board, mover)


def legal_moves(
    board: Board,
    from_square: Square,
    mover: Color,
    en_passant_square: Optional[Square] = None,
) -> set[Square]:
    """Destinations of the piece on `from_square` that keep the mover's king safe."""
    return {
        to_square
        for to_square in pseudo_legal_moves(board, from_square, mover, en_passant_square)
        if not is_putting_yourself_in_check(
            board, from_square, to_square, mover, en_passant_square
        )
    }


def all_legal_moves(
    board: Board, color: Color, en_passant_square: Optional[Square] = None
) -> dict[Square, set[Square]]:
    """Legal destinations of every piece of the color that can move at all."""
    moves: dict[Square, set[Square]] = {}
    for from_square in board.locate_color(color):
        destinations = legal_moves(board, from_square, color, en_passant_square)
        if destinations:
            moves[from_square] = destinations
    return moves


def has_any_legal_move(
    board: Board, color: Color, en_passant_square: Optional[Square] = None
) -> bool:
    """Stops at the first piece that has a legal move."""
    return any(
        legal_moves(board, from_square, color, en_passant_square)
        for from_square in board.locate_color(color)
    )
