"""Application errors carrying an HTTP status code."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus


@dataclass(unsafe_hash=True)
class AppError(Exception):
    """An error to report to a client, with a message and an HTTP status code."""

    message: str
    code: int = 0

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def as_dict(self) -> dict:
        """Return the error as a JSON-ready mapping; a zero code is left out."""
        return {"message": self.message, **({"code": self.code} if self.code else {})}


def not_found_error(message: str) -> AppError:
    """An error for a missing resource."""
    return AppError(message, HTTPStatus.NOT_FOUND)


def internal_server_error(message: str) -> AppError:
    """An error for a failure inside the server."""
    return AppError(message, HTTPStatus.INTERNAL_SERVER_ERROR)


def unexpected_error(message: str) -> AppError:
    """An error for an unexpected failure, such as a database fault."""
    return AppError(message, HTTPStatus.INTERNAL_SERVER_ERROR)


def validation_error(message: str) -> AppError:
    """An error for a request that failed validation."""
    return AppError(message, HTTPStatus.UNPROCESSABLE_ENTITY)