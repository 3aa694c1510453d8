"""Unit tests for /src/chess/game.py"""

import random
from typing import Callable

import pytest

from src.chess.attacks import is_king_in_check
from src.chess.board import Board
from src.chess.game import (
    Color,
    Game,
    GameModel,
    GameState,
    MoveRecord,
    Piece,
    PieceType,
    Square,
    SquareHighlight,
    Status,
    parse_uci,
    play_move,
)
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidSquareError,
    MissingKingError,
)
from src.core.shared_types import CastlingSide

BoardFactory = Callable[[dict[str, str]], Board]

FOOLS_MATE = ["f2f3", "e7e5", "g2g4", "d8h4"]


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def squares(*names: str) -> set[Square]:
    return {sq(name) for name in names}


def play(game: Game, *moves: str) -> Game:
    """Play the moves (in coordinate notation), failing the test if any of them is rejected."""
    for move in moves:
        from_square, to_square = parse_uci(move)
        assert game.attempt_move(from_square, to_square), f"{move} was rejected"
    return game


def game_from_layout(make_board: BoardFactory, layout: dict[str, str], to_move: Color = Color.WHITE) -> Game:
    return Game(GameState(board=make_board(layout), current_player=to_move))


# --- SETUP ---
def test_new_game() -> None:
    game = Game()
    state = game.state
    assert state.board == Board.starting_position()
    assert state.current_player == Color.WHITE
    assert state.status == Status.PLAYING
    assert state.move_history == ()
    assert state.en_passant_square is None
    assert state.move_number == 1
    assert not state.is_over
    assert state.winner is None


def test_game_states_are_hashable() -> None:
    after_e4 = play_move(GameState.initial(), *parse_uci("e2e4"))
    assert after_e4 is not None
    assert hash(GameState.initial()) == hash(GameState.initial())
    assert len({GameState.initial(), GameState.initial(), after_e4}) == 2


def test_twenty_legal_moves_in_new_game() -> None:
    moves = Game().all_legal_moves()
    assert sum(len(destinations) for destinations in moves.values()) == 20


@pytest.mark.parametrize(
    "layout", [{"e1": "K"}, {"e8": "k"}, {"e1": "K", "d1": "K", "e8": "k"}, {}]
)
def test_missing_king(make_board: BoardFactory, layout: dict[str, str]) -> None:
    with pytest.raises(MissingKingError):
        game_from_layout(make_board, layout)


# --- LEGAL MOVES ---
def test_legal_moves_of_pawn() -> None:
    assert Game().legal_moves(sq("e2")) == squares("e3", "e4")


@pytest.mark.parametrize("square", ["e4", "e7", "g8"])
def test_no_legal_moves_for_empty_square_or_opponent(square: str) -> None:
    assert Game().legal_moves(sq(square)) == set()


def test_legal_moves_out_of_bounds() -> None:
    with pytest.raises(InvalidSquareError):
        Game().legal_moves(Square(8, 0))


def test_legal_moves_are_idempotent() -> None:
    game = play(Game(), "e2e4", "e7e5")
    before = game.state
    assert game.legal_moves(sq("d1")) == game.legal_moves(sq("d1"))
    assert game.state is before


# --- MAKING MOVES ---
def test_legal_move_updates_state() -> None:
    game = Game()
    assert game.attempt_move(sq("e2"), sq("e4"))

    state = game.state
    assert state.current_player == Color.BLACK
    assert state.board.piece(sq("e2")) is None
    assert state.board.piece(sq("e4")) == Piece(PieceType.PAWN, Color.WHITE, has_moved=True)
    assert state.en_passant_square == sq("e3")
    assert state.status == Status.PLAYING

    (record,) = state.move_history
    assert record == MoveRecord(
        from_square=sq("e2"),
        to_square=sq("e4"),
        piece=Piece(PieceType.PAWN, Color.WHITE),
        captured_piece=None,
        is_capture=False,
        is_check=False,
        is_checkmate=False,
        notation="e4",
    )


@pytest.mark.parametrize(
    "from_square, to_square",
    [
        ("e2", "e5"),  # too far
        ("e7", "e5"),  # black piece, white to move
        ("e4", "e5"),  # empty square
        ("g1", "g3"),  # not how knights move
        ("e1", "e2"),  # own piece on the destination
        ("e2", "e2"),
    ],
)
def test_illegal_move_is_rejected(from_square: str, to_square: str) -> None:
    game = Game()
    before = game.state
    assert not game.attempt_move(sq(from_square), sq(to_square))
    assert game.state is before


def test_move_out_of_bounds() -> None:
    game = Game()
    with pytest.raises(InvalidSquareError):
        game.attempt_move(sq("e2"), Square(-1, 4))


def test_players_alternate() -> None:
    game = play(Game(), "e2e4")
    # white may not move twice in a row
    assert not game.attempt_move(sq("d2"), sq("d4"))
    play(game, "e7e5", "d2d4")
    assert game.state.current_player == Color.BLACK
    assert game.state.move_number == 2


def test_play_move_leaves_state_untouched() -> None:
    state = GameState.initial()
    next_state = play_move(state, sq("g1"), sq("f3"))
    assert next_state is not None
    assert state == GameState.initial()
    assert next_state.board.piece(sq("f3")) == Piece(PieceType.KNIGHT, Color.WHITE, has_moved=True)


def test_play_move_rejects() -> None:
    assert play_move(GameState.initial(), sq("g1"), sq("g3")) is None


# --- NOTATION ---
@pytest.mark.parametrize(
    "moves, expected",
    [
        (["g1f3"], "Nf3"),
        (["e2e4", "d7d5", "e4d5"], "exd5"),
        (["e2e4", "f7f6", "d1h5"], "Qh5+"),
        (FOOLS_MATE, "Qh4#"),
        (["e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6", "e1g1"], "O-O"),
        (["d2d4", "d7d5", "b1c3", "b8c6", "c1f4", "c8f5", "d1d2", "d8d7", "e1c1"], "O-O-O"),
    ],
)
def test_notation(moves: list[str], expected: str) -> None:
    game = play(Game(), *moves)
    assert game.state.move_history[-1].notation == expected


def test_castling_through_the_game() -> None:
    game = play(Game(), "e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6", "e1g1")
    board = game.state.board
    assert board.piece(sq("g1")) == Piece(PieceType.KING, Color.WHITE, has_moved=True)
    assert board.piece(sq("f1")) == Piece(PieceType.ROOK, Color.WHITE, has_moved=True)
    assert board.piece(sq("h1")) is None
    assert game.state.move_history[-1].castling == CastlingSide.KINGSIDE


def test_castling_not_allowed_after_king_returned() -> None:
    game = play(
        Game(), "e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6", "e1e2", "f8c5", "e2e1", "d7d6"
    )
    assert sq("g1") not in game.legal_moves(sq("e1"))


def test_no_castling_in_custom_position_off_the_e_file(make_board: BoardFactory) -> None:
    game = game_from_layout(make_board, {"c1": "K", "a1": "R", "h8": "k"})
    assert game.legal_moves(sq("c1")) == squares("b1", "b2", "c2", "d1", "d2")
    assert not game.attempt_move(sq("c1"), sq("a1"))


# --- CHECK / CHECKMATE / STALEMATE ---
def test_check() -> None:
    game = play(Game(), "e2e4", "f7f6", "d1h5")
    assert game.state.status == Status.CHECK
    assert game.is_in_check()
    assert game.state.move_history[-1].is_check
    assert not game.state.is_over
    # black has to deal with the check
    assert game.legal_moves(sq("a7")) == set()
    assert game.legal_moves(sq("g7")) == squares("g6")


def test_fools_mate() -> None:
    game = play(Game(), *FOOLS_MATE)
    state = game.state

    assert state.status == Status.CHECKMATE
    assert state.is_over
    assert state.winner == Color.BLACK
    assert state.current_player == Color.WHITE
    assert state.move_history[-1].is_checkmate
    assert game.all_legal_moves() == {}

    assert not game.attempt_move(sq("e2"), sq("e4"))
    assert game.state is state


def test_stalemate(make_board: BoardFactory) -> None:
    game = game_from_layout(make_board, {"a8": "k", "c6": "K", "d7": "Q"})
    play(game, "d7c7")

    state = game.state
    assert state.status == Status.STALEMATE
    assert state.is_over
    assert state.winner is None
    assert state.move_history[-1].notation == "Qc7"
    assert not state.move_history[-1].is_check


def test_move_out_of_check_resets_status() -> None:
    game = play(Game(), "e2e4", "f7f6", "d1h5", "g7g6")
    assert game.state.status == Status.PLAYING
    assert not game.is_in_check()


# --- EN PASSANT ---
def test_en_passant_window() -> None:
    game = play(Game(), "e2e4", "a7a6", "e4e5", "d7d5")
    assert game.state.en_passant_square == sq("d6")
    assert game.legal_moves(sq("e5")) == squares("d6", "e6")

    # not taken right away: the chance is gone
    play(game, "h2h3", "h7h6")
    assert game.state.en_passant_square is None
    assert game.legal_moves(sq("e5")) == squares("e6")


def test_en_passant_capture() -> None:
    game = play(Game(), "e2e4", "a7a6", "e4e5", "d7d5", "e5d6")
    state = game.state
    record = state.move_history[-1]

    assert record.en_passant
    assert record.is_capture
    assert record.notation == "exd6"
    assert record.captured_piece == Piece(PieceType.PAWN, Color.BLACK, has_moved=True)
    assert state.board.piece(sq("d5")) is None
    assert state.captured_pieces()[Color.BLACK] == [record.captured_piece]


# --- PROMOTION ---
def test_promotion(make_board: BoardFactory) -> None:
    game = game_from_layout(make_board, {"b7": "P", "e1": "K", "h5": "k"})
    play(game, "b7b8")

    record = game.state.move_history[-1]
    assert record.promotion == PieceType.QUEEN
    assert record.notation == "b8=Q"
    assert record.to_uci() == "b7b8q"
    assert game.state.board.piece(sq("b8")) == Piece(PieceType.QUEEN, Color.WHITE, has_moved=True)


def test_promotion_with_check(make_board: BoardFactory) -> None:
    game = game_from_layout(make_board, {"b7": "P", "e1": "K", "e8": "k"})
    play(game, "b7b8")
    assert game.state.move_history[-1].notation == "b8=Q+"
    assert game.state.status == Status.CHECK


# --- CAPTURED PIECES ---
def test_captured_pieces() -> None:
    game = play(Game(), "e2e4", "d7d5", "e4d5", "d8d5", "b1c3", "d5a2")
    captured = game.state.captured_pieces()
    assert [piece.type for piece in captured[Color.BLACK]] == [PieceType.PAWN]
    assert [piece.type for piece in captured[Color.WHITE]] == [PieceType.PAWN, PieceType.PAWN]


# --- HIGHLIGHTS ---
@pytest.mark.parametrize(
    "square, selected, expected",
    [
        ("e2", "e2", SquareHighlight.SELECTED),
        ("e4", "e2", SquareHighlight.VALID),
        ("e3", "e2", SquareHighlight.VALID),
        ("e5", "e2", SquareHighlight.NORMAL),
        ("e4", None, SquareHighlight.NORMAL),
        ("e1", None, SquareHighlight.NORMAL),
        # black pieces have no valid destinations while white is to move
        ("e5", "e7", SquareHighlight.NORMAL),
    ],
)
def test_square_highlight(square: str, selected: str | None, expected: SquareHighlight) -> None:
    selected_square = sq(selected) if selected else None
    assert Game().square_highlight(sq(square), selected_square) == expected


def test_square_highlight_check() -> None:
    game = play(Game(), "e2e4", "f7f6", "d1h5")
    assert game.square_highlight(sq("e8")) == SquareHighlight.CHECK
    # the king of the player giving check is never highlighted
    assert game.square_highlight(sq("e1")) == SquareHighlight.NORMAL
    # a selected king stays selected
    assert game.square_highlight(sq("e8"), sq("e8")) == SquareHighlight.SELECTED


# --- RESET ---
def test_reset() -> None:
    game = play(Game(), *FOOLS_MATE)
    game.reset()
    assert game.state == GameState.initial()
    assert game.attempt_move(sq("e2"), sq("e4"))


# --- MODELS ---
def test_to_model() -> None:
    game = play(Game(), "e2e4", "e7e5", "g1f3")
    assert game.to_model() == GameModel(
        moves=["e2e4", "e7e5", "g1f3"], notation=["e4", "e5", "Nf3"], status="playing"
    )


def test_from_model_replays_moves() -> None:
    game = play(Game(), "e2e4", "a7a6", "e4e5", "d7d5", "e5d6", "b8c6")
    restored = Game.from_model(game.to_model())
    assert restored.state == game.state


def test_from_model_with_promotion() -> None:
    moves = ["h2h4", "g7g5", "h4g5", "h7h6", "g5h6", "a7a6", "h6h7", "a6a5", "h7g8"]
    game = play(Game(), *moves)
    model = game.to_model()
    assert model.moves[-1] == "h7g8q"
    assert Game.from_model(model).state == game.state


def test_from_model_invalid_status() -> None:
    with pytest.raises(GameStateError):
        Game.from_model(GameModel(moves=[], notation=[], status="won"))


def test_from_model_illegal_move() -> None:
    with pytest.raises(IllegalMoveError):
        Game.from_model(GameModel(moves=["e2e4", "e2e4"], notation=[], status="playing"))


def test_from_model_malformed_move() -> None:
    with pytest.raises(InvalidSquareError):
        Game.from_model(GameModel(moves=["e2-e4"], notation=[], status="playing"))


# --- RANDOM GAMES ---
@pytest.mark.parametrize("seed", [1, 7, 42])
def test_random_games_keep_the_rules(seed: int) -> None:
    """Play random legal moves, checking after every move the properties every position must have"""
    rng = random.Random(seed)
    game = Game()

    for _ in range(150):
        state = game.state
        moves = game.all_legal_moves()
        if not moves:
            assert state.is_over
            break
        assert not state.is_over

        from_square = rng.choice(sorted(moves, key=lambda square: (square.row, square.col)))
        to_square = rng.choice(
            sorted(moves[from_square], key=lambda square: (square.row, square.col))
        )
        mover = state.current_player
        assert game.attempt_move(from_square, to_square)

        new_state = game.state
        assert new_state.current_player == mover.opponent
        assert len(new_state.move_history) == len(state.move_history) + 1
        assert new_state.board.count_kings() == {Color.WHITE: 1, Color.BLACK: 1}
        # the mover never leaves its own king in check
        assert not is_king_in_check(new_state.board, mover)
        in_check = is_king_in_check(new_state.board, new_state.current_player)
        assert new_state.move_history[-1].is_check == in_check
        if new_state.en_passant_square is not None:
            assert not new_state.board.is_occupied(new_state.en_passant_square)
