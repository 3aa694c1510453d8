"""
Geometry/Base movement rules

Key idea: Use strategy pattern to define the pseudo-legal move sets for each piece type.
Pseudo-legal: obeys the movement pattern and blocking, but ignores whether the mover's own king ends up in check.

Legality is checked later (see legality.py)
"""

from typing import Callable, Optional, Protocol

from src.chess.attacks import (
    DIAGONALS,
    KING_DELTAS,
    KNIGHT_DELTAS,
    STRAIGHTS,
    Vector,
    is_any_square_attacked,
    is_king_in_check,
    pawn_direction,
)
from src.chess.castling import CastlingSquares, is_king_starting_square
from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import CastlingSide, Color, PieceType

# Row the pawns of each color start on (from where they may advance two squares)
PAWN_STARTING_ROWS: dict[Color, int] = {
    Color.WHITE: BOARD_DIMENSIONS[0] - 2,
    Color.BLACK: 1,
}

# Row on which a pawn of each color promotes
PROMOTION_ROWS: dict[Color, int] = {
    Color.WHITE: 0,
    Color.BLACK: BOARD_DIMENSIONS[0] - 1,
}


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Piece | None: ...
    def is_occupied(self, square: Square) -> bool: ...
    def locate_king(self, color: Color) -> Square | None: ...


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Square]:
    """
    Raycasting algorithm
    -----

    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board. The blocking square is only reachable if it holds an opponent's piece (a capture).
    """
    player_color = _color_on(square, board)

    destinations: list[Square] = []
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while target_square.is_within_bounds():
            blocker = board.piece(target_square)
            if blocker is not None:
                if blocker.color != player_color:
                    destinations.append(target_square)
                break

            destinations.append(target_square)
            target_square = target_square.offset(d_row, d_col)
    return destinations


def single_step_move(
    square: Square, board: Board, deltas: list[Vector]
) -> list[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    player_color = _color_on(square, board)

    destinations: list[Square] = []
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue

        occupant = board.piece(target_square)
        if occupant is None or occupant.color != player_color:
            destinations.append(target_square)

    return destinations


def candidate_pawn_moves(square: Square, board: Board) -> list[Square]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting row), if both squares are empty
    - takes diagonally

    NOTE: En passant is added separately, see `en_passant_moves()`
    """
    player_color = _color_on(square, board)
    direction = pawn_direction(player_color)

    destinations: list[Square] = []
    one_forward = square.offset(direction, 0)
    if one_forward.is_within_bounds() and not board.is_occupied(one_forward):
        destinations.append(one_forward)

        two_forward = square.offset(2 * direction, 0)
        on_starting_row = square.row == PAWN_STARTING_ROWS[player_color]
        if (
            on_starting_row
            and two_forward.is_within_bounds()
            and not board.is_occupied(two_forward)
        ):
            destinations.append(two_forward)

    # pawns take diagonally:
    for d_col in (-1, 1):
        target_square = square.offset(direction, d_col)
        if not target_square.is_within_bounds():
            continue
        occupant = board.piece(target_square)
        if occupant is not None and occupant.color != player_color:
            destinations.append(target_square)
    return destinations


def candidate_knight_moves(square: Square, board: Board) -> list[Square]:
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Square]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_rook_moves(square, board) + candidate_bishop_moves(square, board)


def candidate_king_moves(square: Square, board: Board) -> list[Square]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled separately).
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Square]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# -- EN PASSANT MOVES ---
def en_passant_moves(
    square: Square, board: Board, en_passant_square: Optional[Square]
) -> list[Square]:
    """
    The en passant square is the square the opponent's pawn just skipped over.
    A pawn standing diagonally behind it (one step forward, one file aside) can move onto it.
    """
    if en_passant_square is None:
        return []

    player_color = _color_on(square, board)
    direction = pawn_direction(player_color)
    is_one_step_ahead = en_passant_square.row == square.row + direction
    is_adjacent_file = abs(en_passant_square.col - square.col) == 1
    if is_one_step_ahead and is_adjacent_file:
        return [en_passant_square]
    return []


# -- CASTLING MOVES ---
def castling_moves(square: Square, board: Board) -> list[Square]:
    """
    Find the castling destinations for the king standing on the square
    ---

    **you are allowed to castle if**

    * Neither the king nor the rook of choice moved before.
    * The king stands on its starting square (e1 / e8).
    * You are not currently in check (you cannot castle out of check).
    * All squares in between king and rook are empty.
    * None of the squares the king transits (incl. where it lands) is under attack.
    """
    king = board.piece(square)
    if king is None or king.type != PieceType.KING or king.has_moved:
        return []

    if not is_king_starting_square(square, king.color):
        return []

    if is_king_in_check(board, king.color):
        return []

    destinations: list[Square] = []
    for side in (CastlingSide.KINGSIDE, CastlingSide.QUEENSIDE):
        squares = CastlingSquares.for_king(square, side)
        rook = board.piece(squares.rook_from)
        if rook is None or not rook.is_a(PieceType.ROOK, king.color) or rook.has_moved:
            continue

        if any(board.is_occupied(between) for between in squares.squares_between()):
            continue

        if is_any_square_attacked(board, squares.king_path(), king.color.opponent):
            continue

        destinations.append(squares.king_to)
    return destinations


def pseudo_legal_moves(
    board: Board,
    from_square: Square,
    mover: Color,
    en_passant_square: Optional[Square] = None,
) -> set[Square]:
    """
    Every destination the piece on `from_square` can reach by its movement rules (incl. en passant and castling).
    Empty if there is no piece of the mover's color on the square.
    """
    piece = board.piece(from_square)
    if piece is None or piece.color != mover:
        return set()

    movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
    destinations = set(movement_rule(from_square, board))

    if piece.type == PieceType.PAWN:
        destinations.update(en_passant_moves(from_square, board, en_passant_square))
    elif piece.type == PieceType.KING:
        destinations.update(castling_moves(from_square, board))
    return destinations


def is_promotion_square(square: Square, color: Color) -> bool:
    return square.row == PROMOTION_ROWS[color]


def _color_on(square: Square, board: Board) -> Color:
    """Color of the piece the movement rule is asked about. (A rule is only ever applied to an occupied square.)"""
    piece = board.piece(square)
    assert piece is not None, f"No piece on {square} to generate moves for."
    return piece.color
