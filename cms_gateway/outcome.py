"""
Typed results returned by the gateway pipeline and its handlers.

Handlers never raise for expected failures; they return ``Outcome.fail``
with an ``ErrorKind`` and the response builders pick the status code.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_KEY = "invalid_key"
    EXPIRED_KEY = "expired_key"
    ROUTE_NOT_FOUND = "route_not_found"
    FORBIDDEN = "forbidden"
    FORM_NOT_FOUND = "form_not_found"
    RECORD_NOT_FOUND = "record_not_found"
    INTERNAL = "internal"


MESSAGES = {
    ErrorKind.MISSING_CREDENTIALS: "Missing X-API-Key or X-Tenant-ID header",
    ErrorKind.INVALID_KEY: "Invalid API key",
    ErrorKind.EXPIRED_KEY: "API key expired",
    ErrorKind.ROUTE_NOT_FOUND: "Unknown resource or action",
    ErrorKind.FORBIDDEN: "Insufficient permissions",
    ErrorKind.FORM_NOT_FOUND: "Form not found",
    ErrorKind.RECORD_NOT_FOUND: "Record not found",
    ErrorKind.INTERNAL: "Internal server error",
}


@dataclass(frozen=True)
class Outcome:
    body: Optional[Dict[str, Any]] = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, body: Dict[str, Any]) -> "Outcome":
        return cls(body=body)

    @classmethod
    def data(cls, payload: Any) -> "Outcome":
        """Read/write success envelope: ``{"data": payload}``"""
        return cls(body={"data": payload})

    @classmethod
    def fail(cls, kind: ErrorKind, message: Optional[str] = None) -> "Outcome":
        return cls(error=kind, message=message or MESSAGES[kind])

    @property
    def is_ok(self) -> bool:
        return self.error is None
