"""/v1/users - account management and authentication"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from jodjod_api.api.v1.schemas import (
    CreateUserRequest,
    CreateUserResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegenTokenRequest,
    RegenTokenResponse,
    UpdateInfoRequest,
    UpdatePasswordRequest,
    UserResponse,
)
from jodjod_api.api.dependencies import get_current_user_id, get_request_id
from jodjod_api.config import settings
from jodjod_api.domain.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserNotFoundError,
)
from jodjod_api.infrastructure.database.session import get_db
from jodjod_api.infrastructure.database.repositories import UserRepository
from jodjod_api.infrastructure.observability.metrics import login_counter
from jodjod_api.infrastructure.security.passwords import hash_password, verify_password
from jodjod_api.infrastructure.security.tokens import (
    REFRESH_SUBJECT,
    issue_access_token,
    issue_token_pair,
    user_id_from_token,
)

router = APIRouter()


def _to_user_response(user) -> UserResponse:
    return UserResponse(
        user_id=user.id,
        firstname=user.firstname,
        lastname=user.lastname,
        email=user.email,
    )


def authenticate(user_repo: UserRepository, username: str, password: str):
    """Return the active user matching the credentials"""
    user = user_repo.get_user_for_login(username)
    if user is None or not verify_password(password, user.password):
        raise InvalidCredentialsError("username or password is incorrect")
    return user


@router.post("/create", response_model=CreateUserResponse, status_code=201)
def create_user(request_body: CreateUserRequest, request: Request, db: Session = Depends(get_db)):
    """Register a new user with a bcrypt-hashed password"""
    request_id = get_request_id(request)
    try:
        user = UserRepository(db).create_user(
            firstname=request_body.firstname,
            lastname=request_body.lastname,
            email=request_body.email,
            username=request_body.username,
            password_hash=hash_password(request_body.password),
        )
        db.commit()

    except DuplicateUserError as e:
        db.rollback()
        logging.warning(f"Duplicate user: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("User created", extra={"request_id": request_id, "user_id": user.id})
    return CreateUserResponse(user_id=user.id)


@router.post("/login", response_model=LoginResponse)
def login(request_body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Exchange username/password for access and refresh tokens"""
    request_id = get_request_id(request)
    try:
        user = authenticate(UserRepository(db), request_body.username, request_body.password)
    except InvalidCredentialsError as e:
        login_counter.labels(outcome="failure").inc()
        logging.warning(f"Login failed for {request_body.username}", extra={"request_id": request_id})
        raise HTTPException(status_code=401, detail=str(e))

    tokens = issue_token_pair(user.id)
    login_counter.labels(outcome="success").inc()
    logging.info(f"username: {request_body.username} login success", extra={"request_id": request_id})
    return LoginResponse(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.post("/regen-token", response_model=RegenTokenResponse)
def regen_token(request_body: RegenTokenRequest):
    """Issue a fresh access token from a valid refresh token"""
    try:
        user_id = user_id_from_token(request_body.refresh_token, expected_subject=REFRESH_SUBJECT)
    except InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return RegenTokenResponse(access_token=issue_access_token(user_id))


@router.get("/get", response_model=List[UserResponse])
def get_users(
    page: int = Query(1, ge=1),
    page_item: int = Query(settings.default_page_item, ge=1, alias="page-item"),
    db: Session = Depends(get_db),
    _: int = Depends(get_current_user_id),
):
    users = UserRepository(db).get_users(page=page, page_item=page_item)
    return [_to_user_response(u) for u in users]


@router.get("/get/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db), _: int = Depends(get_current_user_id)):
    try:
        user = UserRepository(db).get_user(user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="user not found")
    return _to_user_response(user)


@router.put("/update/info/{user_id}", response_model=MessageResponse)
def update_info(
    user_id: int,
    request_body: UpdateInfoRequest,
    request: Request,
    db: Session = Depends(get_db),
    _: int = Depends(get_current_user_id),
):
    request_id = get_request_id(request)
    try:
        UserRepository(db).update_info(
            user_id,
            firstname=request_body.firstname,
            lastname=request_body.lastname,
            email=request_body.email,
        )
        db.commit()

    except UserNotFoundError as e:
        db.rollback()
        logging.warning(str(e), extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="user not found")

    except DuplicateUserError as e:
        db.rollback()
        logging.warning(f"Duplicate user: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return MessageResponse(message="update user success")


@router.put("/update/password", response_model=MessageResponse)
def update_password(
    request_body: UpdatePasswordRequest,
    request: Request,
    db: Session = Depends(get_db),
    _: int = Depends(get_current_user_id),
):
    request_id = get_request_id(request)
    try:
        UserRepository(db).update_password(request_body.user_id, hash_password(request_body.password))
        db.commit()

    except UserNotFoundError as e:
        db.rollback()
        logging.warning(str(e), extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="user not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return MessageResponse(message="update password success")


@router.delete("/delete/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    _: int = Depends(get_current_user_id),
):
    request_id = get_request_id(request)
    try:
        UserRepository(db).delete_user(user_id)
        db.commit()

    except UserNotFoundError as e:
        db.rollback()
        logging.warning(str(e), extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="user not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return MessageResponse(message="delete user success")
