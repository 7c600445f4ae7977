"""Password hashing with bcrypt.

Bytes are truncated to 72 (bcrypt limit) before hashing and checking, so both
sides see the same input. Empty passwords are hashed like any other value.
"""

import bcrypt

from squawk.core.errors import HashingError, PasswordMismatchError

DEFAULT_ROUNDS = 14
_BCRYPT_MAX_BYTES = 72
_DUMMY_PASSWORD = "squawk_timing_dummy"


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def _hashpw(password: str, rounds: int) -> str:
    try:
        hashed = bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds))
    except (ValueError, OSError) as e:
        raise HashingError("bcrypt hashing failed") from e
    return hashed.decode("utf-8")


def _checkpw(password: str, password_hash: str) -> None:
    try:
        ok = bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError as e:
        raise PasswordMismatchError("password does not match") from e
    if not ok:
        raise PasswordMismatchError("password does not match")


class PasswordHasher:
    """bcrypt hasher with a fixed cost factor.

    The timing-equalization hash is computed here, once, so that the first
    unknown-account login costs one checkpw like every later one.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds
        self._dummy_hash = _hashpw(_DUMMY_PASSWORD, rounds)

    def hash(self, password: str) -> str:
        return _hashpw(password, self.rounds)

    def verify(self, password: str, password_hash: str) -> None:
        """Raise PasswordMismatchError unless password matches password_hash.

        A corrupt hash and a wrong password raise the same error.
        """
        _checkpw(password, password_hash)

    def verify_dummy(self, password: str) -> None:
        """Burn one bcrypt check so unknown accounts cost the same as wrong passwords."""
        try:
            _checkpw(password, self._dummy_hash)
        except PasswordMismatchError:
            pass


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    return _hashpw(password, rounds)


def check_password_hash(password: str, password_hash: str) -> None:
    """Raise PasswordMismatchError if password does not match password_hash."""
    _checkpw(password, password_hash)
