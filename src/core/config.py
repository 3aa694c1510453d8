"""Settings read from the environment (with defaults suitable for local development)."""

import logging
import os

DATABASE_URL = os.getenv("CHESS_DATABASE_URL", "sqlite:///./chess.db")
DB_ECHO = os.getenv("CHESS_DB_ECHO", "0") == "1"
LOG_LEVEL = os.getenv("CHESS_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv("CHESS_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Install a root handler. Called once by the application entrypoint."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
