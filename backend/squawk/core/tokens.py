"""Access tokens: HS256 JWTs binding a user id to an expiry.

Claims: iss (fixed issuer), sub (user UUID as string), iat, exp as integer
timestamps, and a random jti so no two tokens are equal. Access tokens are
never stored; validity is signature + clock.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError

from squawk.core.errors import TokenErrorKind, TokenValidationError

DEFAULT_ISSUER = "squawk-access"
DEFAULT_ALGORITHM = "HS256"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def make_jwt(
    user_id: uuid.UUID,
    secret: str,
    ttl: timedelta,
    *,
    issuer: str = DEFAULT_ISSUER,
    algorithm: str = DEFAULT_ALGORITHM,
    now: datetime | None = None,
) -> str:
    issued_at = now or _utcnow()
    expires_at = issued_at + ttl
    payload = {
        "iss": issuer,
        "sub": str(user_id),
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": uuid.uuid4().hex,
    }
    result = jwt.encode(payload, secret, algorithm=algorithm)
    return result if isinstance(result, str) else result.decode("utf-8")


def validate_jwt(
    token: str,
    secret: str,
    *,
    issuer: str = DEFAULT_ISSUER,
    algorithm: str = DEFAULT_ALGORITHM,
    now: datetime | None = None,
) -> uuid.UUID:
    """Return the user id bound to ``token`` or raise TokenValidationError.

    Expiry is checked here rather than by jose so that a token is already
    expired at exactly ``exp`` and so the clock can be injected.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            issuer=issuer,
            options={"verify_exp": False, "verify_sub": False},
        )
    except JWTClaimsError as e:
        raise TokenValidationError(TokenErrorKind.INVALID_CLAIMS, str(e)) from e
    except JWTError as e:
        raise TokenValidationError(TokenErrorKind.SIGNATURE_INVALID, str(e)) from e

    exp = payload.get("exp")
    if not isinstance(exp, int):
        raise TokenValidationError(TokenErrorKind.INVALID_CLAIMS, "exp claim missing or not an integer")
    current = now or _utcnow()
    if current.timestamp() >= exp:
        raise TokenValidationError(TokenErrorKind.EXPIRED)

    try:
        return uuid.UUID(payload["sub"])
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise TokenValidationError(TokenErrorKind.MALFORMED_SUBJECT) from e


class AccessTokenCodec:
    """make_jwt / validate_jwt bound to one secret and issuer."""

    def __init__(
        self,
        secret: str,
        *,
        issuer: str = DEFAULT_ISSUER,
        algorithm: str = DEFAULT_ALGORITHM,
        max_ttl: timedelta = timedelta(hours=1),
    ) -> None:
        self._secret = secret
        self.issuer = issuer
        self.algorithm = algorithm
        self.max_ttl = max_ttl

    def clamp_ttl(self, requested_seconds: int | None) -> timedelta:
        """Use the requested lifetime only when it is positive and within max_ttl."""
        if requested_seconds is not None and 0 < requested_seconds <= self.max_ttl.total_seconds():
            return timedelta(seconds=requested_seconds)
        return self.max_ttl

    def issue(self, user_id: uuid.UUID, ttl: timedelta | None = None, now: datetime | None = None) -> str:
        return make_jwt(
            user_id,
            self._secret,
            ttl if ttl is not None else self.max_ttl,
            issuer=self.issuer,
            algorithm=self.algorithm,
            now=now,
        )

    def validate(self, token: str, now: datetime | None = None) -> uuid.UUID:
        return validate_jwt(token, self._secret, issuer=self.issuer, algorithm=self.algorithm, now=now)
