from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    BAD_REQUEST = "bad_request"
    INVALID_UPLOAD = "invalid_upload"
    AUTH_EXCHANGE_FAILED = "auth_exchange_failed"
    PROFILE_FETCH_FAILED = "profile_fetch_failed"
    REFRESH_FAILED = "refresh_failed"
    PUBLISH_FAILED = "publish_failed"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_STATUS_CODES = {
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.INVALID_UPLOAD: 400,
    ErrorKind.AUTH_EXCHANGE_FAILED: 500,
    ErrorKind.PROFILE_FETCH_FAILED: 500,
    ErrorKind.REFRESH_FAILED: 500,
    ErrorKind.PUBLISH_FAILED: 500,
}

_MESSAGES = {
    ErrorKind.UNAUTHENTICATED: "No token provided",
    ErrorKind.BAD_REQUEST: "Invalid request",
    ErrorKind.INVALID_UPLOAD: "Invalid upload",
    ErrorKind.AUTH_EXCHANGE_FAILED: "Instagram login failed",
    ErrorKind.PROFILE_FETCH_FAILED: "Could not retrieve Instagram profile",
    ErrorKind.REFRESH_FAILED: "Failed to refresh token",
    ErrorKind.PUBLISH_FAILED: "Failed to post to Threads",
}


class ServiceError(Exception):
    """Raised at the HTTP boundary; rendered as ``{"message": ...}``."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or kind.message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code
