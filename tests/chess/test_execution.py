"""Unit tests for /src/chess/execution.py"""

from typing import Callable

import pytest

from src.chess.board import Board
from src.chess.execution import (
    CastlingSide,
    Color,
    Piece,
    PieceType,
    Square,
    apply_move,
)

BoardFactory = Callable[[dict[str, str]], Board]


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def test_simple_move() -> None:
    board = Board.starting_position()
    new_board, outcome = apply_move(board, sq("g1"), sq("f3"), Color.WHITE)

    assert new_board.piece(sq("g1")) is None
    assert new_board.piece(sq("f3")) == Piece(PieceType.KNIGHT, Color.WHITE, has_moved=True)
    # snapshot before the move
    assert outcome.moved_piece == Piece(PieceType.KNIGHT, Color.WHITE)
    assert not outcome.is_capture
    assert outcome.castling is None
    assert not outcome.en_passant
    assert outcome.promotion is None
    assert outcome.next_en_passant_square is None
    # the original board is untouched
    assert board == Board.starting_position()


def test_capture(make_board: BoardFactory) -> None:
    board = make_board({"e4": "P", "d5": "p"})
    new_board, outcome = apply_move(board, sq("e4"), sq("d5"), Color.WHITE)
    assert outcome.is_capture
    assert outcome.captured_piece == Piece(PieceType.PAWN, Color.BLACK)
    assert new_board.piece(sq("d5")) == Piece(PieceType.PAWN, Color.WHITE, has_moved=True)
    assert len(new_board.pieces()) == 1


@pytest.mark.parametrize(
    "from_square, to_square, color, en_passant_square",
    [("e2", "e4", Color.WHITE, "e3"), ("d7", "d5", Color.BLACK, "d6")],
)
def test_double_step_sets_en_passant_square(
    from_square: str, to_square: str, color: Color, en_passant_square: str
) -> None:
    board = Board.starting_position()
    _, outcome = apply_move(board, sq(from_square), sq(to_square), color)
    assert outcome.next_en_passant_square == sq(en_passant_square)


def test_single_step_clears_en_passant_square() -> None:
    board = Board.starting_position()
    _, outcome = apply_move(board, sq("e2"), sq("e3"), Color.WHITE, en_passant_square=sq("d6"))
    assert outcome.next_en_passant_square is None


def test_en_passant_capture(make_board: BoardFactory) -> None:
    """The pawn taken is not on the destination square, but next to the pawn that moved"""
    board = make_board({"e5": "P", "d5": "p"})
    new_board, outcome = apply_move(
        board, sq("e5"), sq("d6"), Color.WHITE, en_passant_square=sq("d6")
    )
    assert outcome.en_passant
    assert outcome.is_capture
    assert outcome.captured_piece == Piece(PieceType.PAWN, Color.BLACK)
    assert new_board.piece(sq("d5")) is None
    assert new_board.piece(sq("e5")) is None
    assert new_board.piece(sq("d6")) == Piece(PieceType.PAWN, Color.WHITE, has_moved=True)


def test_diagonal_pawn_capture_is_not_en_passant(make_board: BoardFactory) -> None:
    board = make_board({"e5": "P", "f6": "n", "f5": "p"})
    new_board, outcome = apply_move(
        board, sq("e5"), sq("f6"), Color.WHITE, en_passant_square=sq("d6")
    )
    assert not outcome.en_passant
    assert outcome.captured_piece == Piece(PieceType.KNIGHT, Color.BLACK)
    assert new_board.piece(sq("f5")) == Piece(PieceType.PAWN, Color.BLACK)


@pytest.mark.parametrize(
    "king_to, side, rook_from, rook_to",
    [
        ("g1", CastlingSide.KINGSIDE, "h1", "f1"),
        ("c1", CastlingSide.QUEENSIDE, "a1", "d1"),
    ],
)
def test_castling_moves_the_rook(
    make_board: BoardFactory, king_to: str, side: CastlingSide, rook_from: str, rook_to: str
) -> None:
    board = make_board({"e1": "K", "a1": "R", "h1": "R", "e8": "k"})
    new_board, outcome = apply_move(board, sq("e1"), sq(king_to), Color.WHITE)

    assert outcome.castling == side
    assert not outcome.is_capture
    assert new_board.piece(sq(king_to)) == Piece(PieceType.KING, Color.WHITE, has_moved=True)
    assert new_board.piece(sq(rook_to)) == Piece(PieceType.ROOK, Color.WHITE, has_moved=True)
    assert new_board.piece(sq(rook_from)) is None
    assert new_board.piece(sq("e1")) is None


def test_black_castling(make_board: BoardFactory) -> None:
    board = make_board({"e8": "k", "h8": "r", "e1": "K"})
    new_board, outcome = apply_move(board, sq("e8"), sq("g8"), Color.BLACK)
    assert outcome.castling == CastlingSide.KINGSIDE
    assert new_board.piece(sq("f8")) == Piece(PieceType.ROOK, Color.BLACK, has_moved=True)


def test_king_single_step_is_not_castling(make_board: BoardFactory) -> None:
    board = make_board({"e1": "K", "h1": "R"})
    new_board, outcome = apply_move(board, sq("e1"), sq("f1"), Color.WHITE)
    assert outcome.castling is None
    assert new_board.piece(sq("h1")) == Piece(PieceType.ROOK, Color.WHITE)


@pytest.mark.parametrize(
    "from_square, to_square, color",
    [("b7", "b8", Color.WHITE), ("g2", "g1", Color.BLACK), ("b7", "a8", Color.WHITE)],
)
def test_promotion_to_queen(make_board: BoardFactory, from_square: str, to_square: str, color: Color) -> None:
    pawn_letter = "P" if color == Color.WHITE else "p"
    board = make_board({from_square: pawn_letter, "a8": "r"})
    new_board, outcome = apply_move(board, sq(from_square), sq(to_square), color)
    assert outcome.promotion == PieceType.QUEEN
    assert outcome.moved_piece.type == PieceType.PAWN
    assert new_board.piece(sq(to_square)) == Piece(PieceType.QUEEN, color, has_moved=True)


def test_no_piece_to_move() -> None:
    with pytest.raises(ValueError):
        apply_move(Board.starting_position(), sq("e4"), sq("e5"), Color.WHITE)
