"""Application errors and their JSON error bodies."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any


class AppError(Exception):
    """Base class for errors reported to API clients."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    label: str = "Internal server error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.label}: {self.detail}"

    @property
    def code(self) -> int:
        return int(self.status)

    def to_dict(self) -> dict[str, Any]:
        """The JSON body sent to the client for this error."""
        return {"error": str(self), "code": self.code}


class ValidationError(AppError):
    status = HTTPStatus.BAD_REQUEST
    label = "Validation failed"


class UnauthorizedError(AppError):
    status = HTTPStatus.UNAUTHORIZED
    label = "Unauthorized"


class NotFoundError(AppError):
    status = HTTPStatus.NOT_FOUND
    label = "Not found"


class InternalError(AppError):
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    label = "Internal server error"


def json_error(msg: str, code: int) -> tuple[HTTPStatus, dict[str, Any]]:
    """A Bad Request status with an error body carrying ``msg`` and ``code``."""
    return HTTPStatus.BAD_REQUEST, {"error": msg, "code": code}