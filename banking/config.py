"""Configuration read from the environment and an optional .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from banking import logger


@dataclass(frozen=True)
class Config:
    """Settings the server needs to start."""

    database_uri: str
    server_port: str
    server_host: str


def load_env(path: str = ".env") -> bool:
    """Load a .env file without overriding set variables; False if it is missing."""
    if not os.path.isfile(path):
        logger.error("Error loading .env file")
        return False
    load_dotenv(path, override=False)
    return True


@lru_cache(maxsize=None)
def _load_default_env() -> bool:
    return load_env(".env")


def get_config() -> Config:
    """Return the current configuration, loading .env on first use."""
    _load_default_env()
    return Config(
        database_uri=os.environ.get("DB_URI", ""),
        server_port=os.environ.get("SERVER_PORT", ""),
        server_host=os.environ.get("SERVER_HOST", ""),
    )