from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream_error"


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class ServiceError(Exception):
    """Uniform error raised by the service layer.

    Every failure leaving a service carries a kind, a caller-safe message and,
    for validation failures, per-field detail. The HTTP layer maps the kind to
    a status code; nothing below it knows about HTTP.
    """

    kind: ErrorKind = ErrorKind.UPSTREAM

    def __init__(self, message: str, *, fields: list[FieldError] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = list(fields or [])

    def to_payload(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "fields": [{"field": item.field, "message": item.message} for item in self.fields],
        }


class ValidationError(ServiceError):
    kind = ErrorKind.VALIDATION


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND


class UpstreamError(ServiceError):
    kind = ErrorKind.UPSTREAM
