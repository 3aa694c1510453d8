"""
Capturing rules / attacking rules

Key idea: instead of generating every move of every opponent piece, look outwards from the square in question
and check whether a piece of the right type and color is standing on the other end of a line of sight.
Same strategy pattern as the movement rules in moves.py: one rule per piece type.
"""

from typing import Callable, Protocol

from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color, PieceType

# (d_row, d_col). NOTE rows grow DOWN the board: white moves towards row 0, black towards row 7.
Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(0, 1), (0, -1), (1, 0), (-1, 0)]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


class Board(Protocol):
    """Just the parts the attack rules need"""

    def piece(self, square: Square) -> Piece | None: ...
    def locate_king(self, color: Color) -> Square | None: ...


def pawn_direction(color: Color) -> int:
    """White pawns move UP the board (towards row 0), black pawns move DOWN."""
    return -1 if color == Color.WHITE else 1


def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Determines: _"Is the specified square in the line-of-sight of a piece of the specified color
    that is allowed to move along the given direction?"_

    We move along each direction until we hit a piece or the edge of the board.
    The first piece found blocks the ray: squares behind it are not reached.
    """
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while target_square.is_within_bounds():
            piece_found = board.piece(target_square)
            if piece_found is not None:
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
            target_square = target_square.offset(d_row, d_col)
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    Raycasting is for sliding pieces. This is the equivalent for pawns, kings, and knights that only reach a single
    step along each direction (a knight jumps, so nothing can block it).
    """
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue

        piece_found = board.piece(target_square)
        if piece_found is not None and piece_found.is_a(by_piece_type, by_color):
            return True

    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric. To check IF a white pawn attacks your square -->
    look one row DOWN the board (white pawns move up). Hence the vectors are the inverse of the capture vectors.
    Pawns do not attack the square straight ahead of them.
    """
    d_row = -pawn_direction(by_color)
    inverse_pawn_take_deltas: list[Vector] = [(d_row, 1), (d_row, -1)]
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, inverse_pawn_take_deltas
    )


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    """Knights always move such that |delta_row| + |delta_col| = 3, jumping over anything in between"""
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_bishop(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, (PieceType.BISHOP,), board, DIAGONALS)


def is_attacked_by_rook(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, (PieceType.ROOK,), board, STRAIGHTS)


def is_attacked_by_queen(square: Square, by_color: Color, board: Board) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_attack(
        square, by_color, (PieceType.QUEEN,), board, STRAIGHTS + DIAGONALS
    )


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Square, Color, Board], bool]
ATTACK_RULES: dict[PieceType, IsAttackedFn] = {
    PieceType.PAWN: is_attacked_by_pawn,
    PieceType.KNIGHT: is_attacked_by_knight,
    PieceType.BISHOP: is_attacked_by_bishop,
    PieceType.ROOK: is_attacked_by_rook,
    PieceType.QUEEN: is_attacked_by_queen,
    PieceType.KING: is_attacked_by_king,
}


def is_square_attacked(board: Board, square: Square, by_color: Color) -> bool:
    """Any piece of `by_color` that reaches the square with its attack pattern?"""
    square.assert_within_bounds()
    return any(rule(square, by_color, board) for rule in ATTACK_RULES.values())


def is_any_square_attacked(
    board: Board, squares: list[Square], by_color: Color
) -> bool:
    return any(is_square_attacked(board, square, by_color) for square in squares)


def is_king_in_check(board: Board, color: Color) -> bool:
    """
    Is the king of the given color under attack?

    NOTE: Without a king there is nothing to check, so this returns False.
    A board without a king is corrupt (see `validate_kings()`), but the attack analysis itself does not fail on it.
    """
    king_square = board.locate_king(color)
    if king_square is None:
        return False
    return is_square_attacked(board, king_square, color.opponent)
