"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Iterator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.chess.board import Board
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color, PieceType
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

# Shorthand for setting up positions in tests: upper case = white, lower case = black
PIECE_LETTERS: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

BoardFactory = Callable[[dict[str, str]], Board]


@pytest.fixture
def make_board() -> BoardFactory:
    """
    Build a board from a layout like {"e1": "K", "e8": "k", "d5": "p"}.
    All pieces start out as not having moved.
    """

    def _make_board(layout: dict[str, str]) -> Board:
        return Board.from_pieces(
            {
                Square.from_algebraic(square): Piece(
                    PIECE_LETTERS[letter.lower()],
                    Color.WHITE if letter.isupper() else Color.BLACK,
                )
                for square, letter in layout.items()
            }
        )

    return _make_board


@pytest.fixture
def db_session_repo() -> Iterator[Session]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()

