"""Error types shared by the credential and session code.

Every authentication failure carries a kind or reason for server logs; the
HTTP layer maps them to one fixed message per flow.
"""

from __future__ import annotations

import enum


class SquawkError(Exception):
    """Base class for errors raised by squawk."""


class HashingError(SquawkError):
    """bcrypt could not produce a hash (entropy or computation failure)."""


class PasswordMismatchError(SquawkError):
    """Password does not match the stored hash, or the hash is unusable."""


class TokenErrorKind(str, enum.Enum):
    SIGNATURE_INVALID = "signature_invalid"
    EXPIRED = "expired"
    MALFORMED_SUBJECT = "malformed_subject"
    INVALID_CLAIMS = "invalid_claims"


class TokenValidationError(SquawkError):
    def __init__(self, kind: TokenErrorKind, message: str = "") -> None:
        super().__init__(message or kind.value)
        self.kind = kind


class EntropyError(SquawkError):
    """The system random source failed."""


class RefreshTokenNotFound(SquawkError):
    """No refresh token matched (unknown, expired or revoked)."""


class UserNotFound(SquawkError):
    pass


class EmailAlreadyRegistered(SquawkError):
    pass


class AuthenticationDenied(SquawkError):
    """Undifferentiated authentication failure.

    ``reason`` is for logs only and must never reach a response body.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class MalformedCredential(SquawkError):
    """The Authorization header was missing or could not be parsed."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
