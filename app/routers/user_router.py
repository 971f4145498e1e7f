import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database.connection import get_db
from app.models.model import User
from app.repositories import user_crud
from app.schemas import general_schema, user_schema
from app.security.user_security import (
    authenticate_user,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_current_user,
)
from app.utils import api_response
from app.utils.api_errors import (
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

user_Router = APIRouter(prefix="/api/v1/auth")


@user_Router.post(
    "/register",
    response_model=general_schema.ApiResponse[user_schema.AuthData],
    status_code=status.HTTP_201_CREATED,
    tags=["auth"],
)
def register_user(user: user_schema.UserCreate, db: Session = Depends(get_db)):
    try:
        db_user = user_crud.create_user(db=db, user=user)
        access_token = create_access_token(db_user)
        refresh_token = create_refresh_token(db_user)
        db_user = user_crud.record_login(db=db, user=db_user, refresh_token=refresh_token)
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception("Failed to register user")
        raise InternalError("Failed to register user")

    logger.info(f"Registered user {db_user.user_id}")
    return api_response.created(
        "User registered successfully",
        {"user": db_user, "access_token": access_token, "refresh_token": refresh_token},
    )


@user_Router.post(
    "/login",
    response_model=general_schema.ApiResponse[user_schema.AuthData],
    tags=["auth"],
)
def login_user(credentials: user_schema.UserLogin, db: Session = Depends(get_db)):
    if not credentials.email or not credentials.password:
        raise ValidationError("Email and password are required")

    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        logger.info("Rejected login with invalid credentials")
        raise UnauthorizedError("Invalid email or password")

    access_token = create_access_token(user)
    refresh_token = create_refresh_token(user)
    user = user_crud.record_login(db=db, user=user, refresh_token=refresh_token)

    return api_response.success(
        "Login successful",
        {"user": user, "access_token": access_token, "refresh_token": refresh_token},
    )


@user_Router.post(
    "/refresh-token",
    response_model=general_schema.ApiResponse[user_schema.RefreshData],
    tags=["auth"],
)
def refresh_access_token(
    body: user_schema.RefreshTokenRequest, db: Session = Depends(get_db)
):
    if not body.refresh_token:
        raise UnauthorizedError("Refresh token is required")

    user_id = decode_token(body.refresh_token, expected_type="refresh")
    user = user_crud.get_user_by_id(db=db, user_id=user_id)
    if not user or not user.is_active or user.refresh_token != body.refresh_token:
        raise UnauthorizedError("User not found or inactive")

    return api_response.success(
        "Access token refreshed successfully",
        {"user": user, "access_token": create_access_token(user)},
    )


@user_Router.post(
    "/logout",
    response_model=general_schema.ApiResponse[user_schema.LogoutData],
    tags=["auth"],
)
def logout_user(
    user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    user = user_crud.record_logout(db=db, user=user)
    logger.info(f"User {user.user_id} logged out")
    return api_response.success(
        "Logged out successfully",
        {
            "message": "Logged out successfully",
            "logout_time": user.last_logout_at or datetime.now(timezone.utc),
            "user_id": user.user_id,
        },
    )


@user_Router.get(
    "/get-profile",
    response_model=general_schema.ApiResponse[user_schema.User],
    tags=["auth"],
)
def get_profile(user: User = Depends(get_current_user)):
    if not user:
        raise NotFoundError("User not found")
    return api_response.success("User fetched successfully", user)


@user_Router.put(
    "/update-profile",
    response_model=general_schema.ApiResponse[user_schema.User],
    tags=["auth"],
)
def update_profile(
    user_update: user_schema.UserUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        updated_user = user_crud.update_user(db=db, user=user, user_update=user_update)
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to update user {user.user_id}")
        raise InternalError("Failed to update user")

    return api_response.success("User updated successfully", updated_user)
