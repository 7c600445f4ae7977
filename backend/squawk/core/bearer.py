"""Parse the Authorization header into a scheme-tagged credential.

The parser never raises: callers get either a Credential or a HeaderProblem
and decide how to respond.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass

BEARER = "Bearer"
API_KEY = "ApiKey"


class HeaderErrorKind(str, enum.Enum):
    MISSING = "missing_header"
    MALFORMED = "malformed_header"


@dataclass(frozen=True)
class Credential:
    scheme: str
    value: str


@dataclass(frozen=True)
class HeaderProblem:
    kind: HeaderErrorKind

    @property
    def is_missing(self) -> bool:
        return self.kind is HeaderErrorKind.MISSING


ExtractResult = Credential | HeaderProblem


def _get_authorization(headers: Mapping[str, str]) -> str | None:
    value = headers.get("Authorization")
    if value is None:
        # Plain dicts are case sensitive; Starlette Headers are not.
        value = headers.get("authorization")
    return value


def extract(headers: Mapping[str, str], scheme: str) -> ExtractResult:
    """Return the token carried under ``scheme`` in the Authorization header.

    Missing or empty header -> HeaderProblem(MISSING). Anything other than
    exactly two whitespace-separated parts whose first part equals ``scheme``
    (case sensitive) -> HeaderProblem(MALFORMED).
    """
    raw = _get_authorization(headers)
    if not raw or not raw.strip():
        return HeaderProblem(HeaderErrorKind.MISSING)
    parts = raw.split()
    if len(parts) != 2 or parts[0] != scheme:
        return HeaderProblem(HeaderErrorKind.MALFORMED)
    return Credential(scheme=scheme, value=parts[1])


def get_bearer_token(headers: Mapping[str, str]) -> ExtractResult:
    return extract(headers, BEARER)


def get_api_key(headers: Mapping[str, str]) -> ExtractResult:
    return extract(headers, API_KEY)
