"""
DualStore — Error Model
=========================

What:  Flat enumeration of failure kinds plus the exception type that carries them.
Why:   Every failure, whichever store it comes from, must surface to the client as
       one of a handful of opaque tags with a fixed HTTP status. Store internals
       (SQL text, driver messages, ObjectIds) are logged, never returned.
How:   Services translate driver exceptions into DualStoreError(kind=...).
       The global handler in main.py looks up (status, client tag) from
       STATUS_TABLE and renders {"error": {"type": <tag>}}.
Who:   Raised by services; rendered by main.register_exception_handlers.

Status table:
    LOGIN_FAIL                        → 403 LOGIN_FAIL
    AUTH_* (no token, bad format,
            missing request context)  → 403 NO_AUTH
    INVALID_PARAMS                    → 400 INVALID_PARAMS
    PARSING, CONNECTION, QUERY,
    INVALID_ID, SERIALIZATION,
    NOT_FOUND, DATABASE               → 400 DATABASE_ERROR
    anything else                     → 500 SERVICE_ERROR

    The LOGIN_FAIL and AUTH_* kinds keep their table rows but have no raiser:
    the API has no login surface.

    Store failures deliberately collapse into one 400 tag; the distinction
    between them lives in the server log only.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ErrorKind(str, Enum):
    """Every failure the service knows how to report."""

    LOGIN_FAIL = "LOGIN_FAIL"
    AUTH_NO_TOKEN = "AUTH_NO_TOKEN"
    AUTH_TOKEN_WRONG_FORMAT = "AUTH_TOKEN_WRONG_FORMAT"
    AUTH_CONTEXT_MISSING = "AUTH_CONTEXT_MISSING"

    INVALID_PARAMS = "INVALID_PARAMS"

    PARSING = "PARSING"
    CONNECTION = "CONNECTION"
    QUERY = "QUERY"
    INVALID_ID = "INVALID_ID"
    SERIALIZATION = "SERIALIZATION"
    NOT_FOUND = "NOT_FOUND"
    DATABASE = "DATABASE"

    INTERNAL = "INTERNAL"


class ClientError(str, Enum):
    """Opaque tags returned to API consumers."""

    LOGIN_FAIL = "LOGIN_FAIL"
    NO_AUTH = "NO_AUTH"
    INVALID_PARAMS = "INVALID_PARAMS"
    DATABASE_ERROR = "DATABASE_ERROR"
    SERVICE_ERROR = "SERVICE_ERROR"


STATUS_TABLE: Dict[ErrorKind, Tuple[int, ClientError]] = {
    ErrorKind.LOGIN_FAIL: (403, ClientError.LOGIN_FAIL),
    ErrorKind.AUTH_NO_TOKEN: (403, ClientError.NO_AUTH),
    ErrorKind.AUTH_TOKEN_WRONG_FORMAT: (403, ClientError.NO_AUTH),
    ErrorKind.AUTH_CONTEXT_MISSING: (403, ClientError.NO_AUTH),
    ErrorKind.INVALID_PARAMS: (400, ClientError.INVALID_PARAMS),
    ErrorKind.PARSING: (400, ClientError.DATABASE_ERROR),
    ErrorKind.CONNECTION: (400, ClientError.DATABASE_ERROR),
    ErrorKind.QUERY: (400, ClientError.DATABASE_ERROR),
    ErrorKind.INVALID_ID: (400, ClientError.DATABASE_ERROR),
    ErrorKind.SERIALIZATION: (400, ClientError.DATABASE_ERROR),
    ErrorKind.NOT_FOUND: (400, ClientError.DATABASE_ERROR),
    ErrorKind.DATABASE: (400, ClientError.DATABASE_ERROR),
}

FALLBACK_STATUS: Tuple[int, ClientError] = (500, ClientError.SERVICE_ERROR)

STORE_ERROR_KINDS = frozenset(
    kind for kind, (_, tag) in STATUS_TABLE.items() if tag is ClientError.DATABASE_ERROR
)


def client_status_and_error(kind: ErrorKind) -> Tuple[int, ClientError]:
    """Look up the HTTP status and client tag for an error kind."""
    return STATUS_TABLE.get(kind, FALLBACK_STATUS)


class DualStoreError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        kind:     Which ErrorKind this failure belongs to (selects status + tag)
        message:  Short description for the server log
        context:  Debug details (driver message, ids); logged, never returned
    """

    default_kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        kind: Optional[ErrorKind] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.kind = kind or self.default_kind
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def client_status_and_error(self) -> Tuple[int, ClientError]:
        return client_status_and_error(self.kind)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value}, message={self.message!r})"


class ValidationError(DualStoreError):
    """
    Client input failed validation (body, query string).

    Raised by the RequestValidationError handler in main.py.
    """

    default_kind = ErrorKind.INVALID_PARAMS


class DatabaseError(DualStoreError):
    """
    A store operation failed.

    The kind narrows the cause (PARSING, CONNECTION, QUERY, SERIALIZATION, DATABASE);
    all of them render identically to the client.
    """

    default_kind = ErrorKind.DATABASE


class InvalidIdentifierError(DatabaseError):
    """Path id is not a valid UUID (customers) or ObjectId (orders)."""

    default_kind = ErrorKind.INVALID_ID

    def __init__(self, resource: str, raw_id: str):
        super().__init__(
            message=f"'{raw_id}' is not a valid {resource} id",
            context={"resource": resource, "resource_id": raw_id},
        )


class NotFoundError(DatabaseError):
    """The requested record or document does not exist."""

    default_kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} with ID '{resource_id}' was not found",
            context={"resource": resource, "resource_id": resource_id},
        )
