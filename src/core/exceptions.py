"""
Custom exceptions. Every layer raises (a subclass of) GameError so callers can catch a single top-level type.
"""


class GameError(Exception):
    """Base class for all errors raised by this application."""


class IllegalMoveError(GameError):
    """A stored move could not be replayed. (Interactive move attempts report failure with a boolean instead.)"""


class InvalidSquareError(GameError, ValueError):
    """Square lies outside the board or cannot be parsed. Programming error on the caller's side."""


class MissingKingError(GameError):
    """A color does not have exactly one king: the position is corrupt."""


class GameStateError(GameError):
    """Stored game data cannot be turned back into a Game."""


class RepositoryError(GameError):
    """Persistence layer could not find / store the requested record."""


class InvalidRequestError(GameError):
    """Malformed data coming in through the API layer.

    NOTE: must not subclass ValueError, otherwise pydantic validators wrap it in a ValidationError.
    """
