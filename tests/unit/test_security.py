"""Unit tests for password hashing and token handling"""

import pytest
from datetime import datetime, timedelta, timezone
from jodjod_api.domain.exceptions import InvalidTokenError
from jodjod_api.infrastructure.security.passwords import hash_password, verify_password
from jodjod_api.infrastructure.security.tokens import (
    ACCESS_SUBJECT,
    REFRESH_SUBJECT,
    decode_token,
    issue_token_pair,
    user_id_from_token,
)


def test_password_round_trip():
    hashed = hash_password("s3cret")

    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)


def test_token_pair_subjects():
    tokens = issue_token_pair(42)

    assert user_id_from_token(tokens.access_token) == 42
    assert user_id_from_token(tokens.refresh_token, expected_subject=REFRESH_SUBJECT) == 42
    assert decode_token(tokens.access_token, ACCESS_SUBJECT)["user_id"] == "42"


def test_refresh_token_is_not_an_access_token():
    tokens = issue_token_pair(1)

    with pytest.raises(InvalidTokenError, match="token is invalid"):
        user_id_from_token(tokens.refresh_token)


def test_expired_token_rejected():
    issued = datetime.now(timezone.utc) - timedelta(hours=1)
    tokens = issue_token_pair(1, now=issued)

    with pytest.raises(InvalidTokenError, match="token is expired"):
        user_id_from_token(tokens.access_token)


def test_malformed_token_rejected():
    with pytest.raises(InvalidTokenError, match="token is invalid"):
        user_id_from_token("not-a-jwt")
