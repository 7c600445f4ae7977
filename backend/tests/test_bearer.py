"""Unit tests for Authorization header parsing."""

import pytest
from starlette.datastructures import Headers

from squawk.core.bearer import (
    API_KEY,
    BEARER,
    Credential,
    HeaderErrorKind,
    HeaderProblem,
    extract,
    get_api_key,
    get_bearer_token,
)


def test_bearer_token_returned_verbatim():
    result = get_bearer_token({"Authorization": "Bearer abc.def.ghi"})
    assert result == Credential(scheme=BEARER, value="abc.def.ghi")


def test_api_key():
    result = get_api_key({"Authorization": "ApiKey f271c81ff7084ee5b99a5091b42d486e"})
    assert result == Credential(scheme=API_KEY, value="f271c81ff7084ee5b99a5091b42d486e")


@pytest.mark.parametrize("headers", [{}, {"Authorization": ""}, {"Authorization": "   "}])
def test_missing_header(headers):
    result = get_bearer_token(headers)
    assert result == HeaderProblem(HeaderErrorKind.MISSING)
    assert result.is_missing


@pytest.mark.parametrize(
    "value",
    ["Bearer", "Token xyz", "Bearer a b", "bearer abc", "ApiKey abc"],
)
def test_malformed_header(value):
    result = get_bearer_token({"Authorization": value})
    assert result == HeaderProblem(HeaderErrorKind.MALFORMED)
    assert not result.is_missing


def test_scheme_must_match_requested():
    assert isinstance(extract({"Authorization": "Bearer abc"}, API_KEY), HeaderProblem)


def test_extra_whitespace_between_parts_is_allowed():
    assert get_bearer_token({"Authorization": "Bearer   abc"}) == Credential(BEARER, "abc")


def test_starlette_headers_are_case_insensitive():
    headers = Headers({"authorization": "Bearer tok"})
    assert get_bearer_token(headers) == Credential(BEARER, "tok")


def test_lowercase_dict_key():
    assert get_bearer_token({"authorization": "Bearer tok"}) == Credential(BEARER, "tok")
