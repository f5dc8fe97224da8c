"""Error Model — error-kind values for expected failures, exceptions for the unexpected.

Invariants:
    - Every failure carries an HTTP status, a short title and a human-readable detail
    - Expected client-input failures travel as ApiError values (never raised)
    - Unexpected failures raise HypermodelError subclasses; the terminal handler renders them
    - to_response() produces the JSON:API `errors` envelope

Design Decisions:
    - ApiError as frozen dataclass: validator and orchestrator return it like any
      other result, keeping the error path identical to the success path
    - Single exception hierarchy with HypermodelError base: one global handler catches all
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from hypermodel.core.domain_types import RelationshipKey, TypeName


class ErrorKind(str, Enum):
    """Failure taxonomy exposed to clients."""
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    NOT_IMPLEMENTED = "not_implemented"
    INTERNAL = "internal"


_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.NOT_IMPLEMENTED: 501,
    ErrorKind.INTERNAL: 500,
}

_TITLE_BY_KIND = {
    ErrorKind.NOT_FOUND: "Not Found",
    ErrorKind.BAD_REQUEST: "Bad Request",
    ErrorKind.NOT_IMPLEMENTED: "Not Implemented",
    ErrorKind.INTERNAL: "Internal Server Error",
}


@dataclass(frozen=True)
class ApiError:
    """An expected failure returned as a value."""
    kind: ErrorKind
    detail: str
    title: str = ""
    meta: dict[str, Any] | None = field(default=None, compare=False)

    @property
    def http_status(self) -> int:
        return _STATUS_BY_KIND[self.kind]

    def to_error_object(self) -> dict:
        error = {
            "status": str(self.http_status),
            "title": self.title or _TITLE_BY_KIND[self.kind],
            "detail": self.detail,
        }
        if self.meta:
            error["meta"] = self.meta
        return error

    def to_response(self) -> dict:
        """Convert to the JSON:API error document."""
        return {"errors": [self.to_error_object()]}


def not_found(detail: str) -> ApiError:
    return ApiError(ErrorKind.NOT_FOUND, detail)


def bad_request(detail: str) -> ApiError:
    return ApiError(ErrorKind.BAD_REQUEST, detail)


def not_implemented(detail: str) -> ApiError:
    return ApiError(ErrorKind.NOT_IMPLEMENTED, detail)


# ─── Exceptions (unexpected failures) ───────────────────────────

class HypermodelError(Exception):
    """Base exception for all failures raised outside the value-returning core."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind = ErrorKind.INTERNAL,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind

    @property
    def http_status(self) -> int:
        return _STATUS_BY_KIND[self.kind]

    def to_api_error(self) -> ApiError:
        return ApiError(self.kind, self.message)

    def to_response(self) -> dict:
        return self.to_api_error().to_response()


class ResourceNotFoundError(HypermodelError):
    """Requested model type is not registered."""
    def __init__(self, type_name: TypeName):
        super().__init__(
            f"No model exists for type {type_name}",
            "RESOURCE_NOT_FOUND", ErrorKind.NOT_FOUND,
        )
        self.type_name = type_name


class RelationshipNotDefinedError(HypermodelError):
    """Relationship key has no well-formed definition on the model."""
    def __init__(self, type_name: TypeName, key: RelationshipKey):
        super().__init__(
            f"No {key} relationship assigned on model {type_name}",
            "RELATIONSHIP_NOT_DEFINED", ErrorKind.INTERNAL,
        )
        self.type_name = type_name
        self.key = key


class DatabaseError(HypermodelError):
    """Document store operation failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorKind.INTERNAL,
        )
        self.operation = operation
