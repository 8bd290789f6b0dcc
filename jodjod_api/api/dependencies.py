"""Dependency injection for FastAPI endpoints"""

from datetime import datetime, timezone
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jodjod_api.domain.exceptions import InvalidTokenError
from jodjod_api.infrastructure.clients.slip_reader import SlipReader
from jodjod_api.infrastructure.security.tokens import user_id_from_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_now() -> datetime:
    """Current time; overridden in tests for deterministic period queries"""
    return datetime.now(timezone.utc)


def get_slip_reader() -> SlipReader:
    """Provide S3/Textract slip reader instance"""
    return SlipReader()


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> int:
    """Validate bearer access token and return its user ID"""
    if credentials is None:
        raise HTTPException(status_code=401, detail="authorization header is missing")

    try:
        return user_id_from_token(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e))
