"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between API, Service, DB, and Game layers.

    A game is fully determined by the ordered list of moves played from the starting position,
    so `moves` (coordinate notation, ex. "e2e4") is the source of truth. `notation` and `status` are derived,
    but stored so that a record can be read without replaying it.
    """

    moves: list[str]
    notation: list[str]
    status: str
