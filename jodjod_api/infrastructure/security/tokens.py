"""JWT access/refresh token issuance and validation"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from jodjod_api.config import settings
from jodjod_api.domain.models import TokenPair
from jodjod_api.domain.exceptions import InvalidTokenError

ALGORITHM = "HS256"
ACCESS_SUBJECT = "access token"
REFRESH_SUBJECT = "refresh token"


def _issuer() -> str:
    return f"{settings.service_name} v.{settings.service_version}"


def _encode(user_id: int, subject: str, expires_at: datetime) -> str:
    claims = {
        "iss": _issuer(),
        "sub": subject,
        "exp": int(expires_at.timestamp()),
        "user_id": str(user_id),
    }
    return jwt.encode(claims, settings.auth_secret, algorithm=ALGORITHM)


def issue_access_token(user_id: int, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return _encode(user_id, ACCESS_SUBJECT, now + timedelta(minutes=settings.access_token_ttl_minutes))


def issue_token_pair(user_id: int, now: datetime | None = None) -> TokenPair:
    """Issue short-lived access token and day-long refresh token"""
    now = now or datetime.now(timezone.utc)
    return TokenPair(
        access_token=issue_access_token(user_id, now),
        refresh_token=_encode(user_id, REFRESH_SUBJECT, now + timedelta(hours=settings.refresh_token_ttl_hours)),
    )


def decode_token(token: str, expected_subject: str) -> Dict[str, Any]:
    """
    Validate signature, expiry and token kind.

    Raises:
        InvalidTokenError: On expired, malformed, or wrong-kind tokens
    """
    try:
        claims = jwt.decode(token, settings.auth_secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise InvalidTokenError("token is expired") from e
    except JWTError as e:
        raise InvalidTokenError("token is invalid") from e

    if claims.get("sub") != expected_subject or "user_id" not in claims:
        raise InvalidTokenError("token is invalid")
    return claims


def user_id_from_token(token: str, expected_subject: str = ACCESS_SUBJECT) -> int:
    claims = decode_token(token, expected_subject)
    try:
        return int(claims["user_id"])
    except (TypeError, ValueError) as e:
        raise InvalidTokenError("token is invalid") from e
