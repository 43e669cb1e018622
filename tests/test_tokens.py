from datetime import datetime, timedelta, timezone

import jwt
import pytest

from user_access_platform.config import ConfigurationError
from user_access_platform.errors import AuthError, AuthErrorKind
from user_access_platform.utils.tokens import JWT_ALGORITHM, sign_token, verify_token

SECRET = "unit-test-secret-0123456789abcdef"
CLAIMS = {"sub": 42, "email": "a@x.com", "role": "admin"}


def _assert_invalid(token: str, secret: str = SECRET):
    with pytest.raises(AuthError) as excinfo:
        verify_token(token, secret)
    assert excinfo.value.kind is AuthErrorKind.INVALID_TOKEN


def test_round_trip_claims():
    token = sign_token(CLAIMS, SECRET, timedelta(hours=1))

    claims = verify_token(token, SECRET)

    assert claims.user_id == 42
    assert claims.email == "a@x.com"
    assert claims.role == "admin"
    assert claims.expires_at - claims.issued_at == timedelta(hours=1)
    assert claims.issued_at <= datetime.now(timezone.utc)


def test_subject_is_encoded_as_string():
    token = sign_token(CLAIMS, SECRET, timedelta(minutes=5))

    payload = jwt.decode(token, SECRET, algorithms=[JWT_ALGORITHM])

    assert payload["sub"] == "42"


def test_expired_token_is_invalid():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "sub": "1",
            "email": "a@x.com",
            "role": "user",
            "iat": int((now - timedelta(hours=2)).timestamp()),
            "exp": int((now - timedelta(hours=1)).timestamp()),
        },
        SECRET,
        algorithm=JWT_ALGORITHM,
    )

    _assert_invalid(token)


def test_wrong_secret_is_invalid():
    token = sign_token(CLAIMS, SECRET, timedelta(minutes=5))

    _assert_invalid(token, secret="some-other-secret-0123456789abcdef")


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_tokens_are_invalid(token):
    _assert_invalid(token)


def test_missing_claims_are_invalid():
    token = jwt.encode(
        {"sub": "1", "exp": int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())},
        SECRET,
        algorithm=JWT_ALGORITHM,
    )

    _assert_invalid(token)


def test_non_numeric_subject_is_invalid():
    token = sign_token({**CLAIMS, "sub": "abc"}, SECRET, timedelta(minutes=5))

    _assert_invalid(token)


def test_blank_secret_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        sign_token(CLAIMS, "", timedelta(minutes=5))
    with pytest.raises(ConfigurationError):
        verify_token("anything", "")


def test_non_positive_ttl_is_rejected():
    with pytest.raises(ValueError):
        sign_token(CLAIMS, SECRET, timedelta(0))
