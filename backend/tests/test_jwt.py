"""Unit tests for access token issue/validate: round trip, expiry, signature, subject."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from squawk.core.errors import TokenErrorKind, TokenValidationError
from squawk.core.tokens import DEFAULT_ISSUER, AccessTokenCodec, make_jwt, validate_jwt

SECRET = "test-secret"
T0 = datetime(2026, 10, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_roundtrip_returns_user_id():
    user_id = uuid.uuid4()
    token = make_jwt(user_id, SECRET, timedelta(hours=1))
    assert isinstance(token, str)
    assert token.count(".") == 2
    assert validate_jwt(token, SECRET) == user_id


def test_claims_layout():
    user_id = uuid.uuid4()
    token = make_jwt(user_id, SECRET, timedelta(seconds=3600), now=T0)
    claims = jwt.get_unverified_claims(token)
    assert claims["iss"] == DEFAULT_ISSUER
    assert claims["sub"] == str(user_id)
    assert claims["iat"] == int(T0.timestamp())
    assert claims["exp"] - claims["iat"] == 3600


def test_expiry_boundary_is_inclusive():
    user_id = uuid.uuid4()
    token = make_jwt(user_id, SECRET, timedelta(seconds=60), now=T0)
    assert validate_jwt(token, SECRET, now=T0 + timedelta(seconds=59)) == user_id
    with pytest.raises(TokenValidationError) as exc:
        validate_jwt(token, SECRET, now=T0 + timedelta(seconds=60))
    assert exc.value.kind is TokenErrorKind.EXPIRED


def test_negative_ttl_is_already_expired():
    token = make_jwt(uuid.uuid4(), SECRET, -timedelta(minutes=1))
    with pytest.raises(TokenValidationError) as exc:
        validate_jwt(token, SECRET)
    assert exc.value.kind is TokenErrorKind.EXPIRED


def test_wrong_secret_is_rejected():
    token = make_jwt(uuid.uuid4(), SECRET, timedelta(hours=1))
    with pytest.raises(TokenValidationError) as exc:
        validate_jwt(token, "wrong-secret")
    assert exc.value.kind is TokenErrorKind.SIGNATURE_INVALID


def test_tampered_signature_is_rejected():
    token = make_jwt(uuid.uuid4(), SECRET, timedelta(hours=1))
    header, payload, signature = token.split(".")
    signature = ("A" if signature[0] != "A" else "B") + signature[1:]
    bad_token = ".".join([header, payload, signature])
    with pytest.raises(TokenValidationError) as exc:
        validate_jwt(bad_token, SECRET)
    assert exc.value.kind is TokenErrorKind.SIGNATURE_INVALID


def test_garbage_is_rejected():
    with pytest.raises(TokenValidationError) as exc:
        validate_jwt("not-a-token", SECRET)
    assert exc.value.kind is TokenErrorKind.SIGNATURE_INVALID


def test_malformed_subject():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "iss": DEFAULT_ISSUER,
            "sub": "not-a-uuid",
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(hours=1)).timestamp()),
        },
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenValidationError) as exc:
        validate_jwt(token, SECRET)
    assert exc.value.kind is TokenErrorKind.MALFORMED_SUBJECT


def test_foreign_issuer_is_rejected():
    token = make_jwt(uuid.uuid4(), SECRET, timedelta(hours=1), issuer="someone-else")
    with pytest.raises(TokenValidationError) as exc:
        validate_jwt(token, SECRET)
    assert exc.value.kind is TokenErrorKind.INVALID_CLAIMS


def test_missing_exp_is_rejected():
    token = jwt.encode({"iss": DEFAULT_ISSUER, "sub": str(uuid.uuid4())}, SECRET, algorithm="HS256")
    with pytest.raises(TokenValidationError) as exc:
        validate_jwt(token, SECRET)
    assert exc.value.kind is TokenErrorKind.INVALID_CLAIMS


def test_codec_defaults_to_one_hour():
    codec = AccessTokenCodec(SECRET)
    user_id = uuid.uuid4()
    token = codec.issue(user_id, now=T0)
    claims = jwt.get_unverified_claims(token)
    assert claims["exp"] - claims["iat"] == 3600
    assert codec.validate(token, now=T0 + timedelta(minutes=59)) == user_id


@pytest.mark.parametrize(
    "requested, expected",
    [(None, 3600), (60, 60), (3600, 3600), (3601, 3600), (86400, 3600), (0, 3600), (-5, 3600)],
)
def test_codec_clamps_requested_ttl(requested, expected):
    codec = AccessTokenCodec(SECRET)
    assert codec.clamp_ttl(requested) == timedelta(seconds=expected)


def test_codec_secret_isolation():
    token = AccessTokenCodec("secret-a").issue(uuid.uuid4())
    with pytest.raises(TokenValidationError):
        AccessTokenCodec("secret-b").validate(token)


def test_same_second_tokens_differ():
    user_id = uuid.uuid4()
    a = make_jwt(user_id, SECRET, timedelta(hours=1), now=T0)
    b = make_jwt(user_id, SECRET, timedelta(hours=1), now=T0)
    assert a != b
    assert jwt.get_unverified_claims(a)["jti"] != jwt.get_unverified_claims(b)["jti"]
    assert validate_jwt(a, SECRET, now=T0) == user_id
    assert validate_jwt(b, SECRET, now=T0) == user_id


def test_non_string_subject_is_malformed():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "iss": DEFAULT_ISSUER,
            "sub": 123,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(hours=1)).timestamp()),
        },
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenValidationError) as exc:
        validate_jwt(token, SECRET)
    assert exc.value.kind is TokenErrorKind.MALFORMED_SUBJECT
