from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    INVALID_REQUEST = "INVALID_REQUEST"
    SERVER_CONFIG = "SERVER_CONFIG"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_APP = "INVALID_APP"
    TOKEN_REQUIRED = "TOKEN_REQUIRED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"
    NOT_FOUND = "NOT_FOUND"
    INVALID_JSON = "INVALID_JSON"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# HTTP status for each kind, applied only when rendering a response.
STATUS_BY_KIND = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.SERVER_CONFIG: 500,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.INVALID_APP: 400,
    ErrorKind.TOKEN_REQUIRED: 401,
    ErrorKind.TOKEN_EXPIRED: 401,
    ErrorKind.TOKEN_INVALID: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_JSON: 400,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.INTERNAL_ERROR: 500,
}


@dataclass(frozen=True)
class GatewayError:
    """
    A failure returned (not raised) by the issuance and validation paths.
    """
    kind: ErrorKind
    message: str
    details: Any = None

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_body(self) -> dict:
        body = {"error": self.message, "code": self.kind.value}
        if self.details is not None:
            body["details"] = self.details
        return body


def server_config_error(message: str) -> GatewayError:
    return GatewayError(ErrorKind.SERVER_CONFIG, f"Server misconfigured: {message}")


NOT_FOUND = GatewayError(ErrorKind.NOT_FOUND, "Not found")
INVALID_JSON = GatewayError(ErrorKind.INVALID_JSON, "Invalid JSON payload")
INTERNAL_ERROR = GatewayError(ErrorKind.INTERNAL_ERROR, "Internal server error")
RATE_LIMITED = GatewayError(ErrorKind.RATE_LIMITED, "Too many requests, please try again later.")
