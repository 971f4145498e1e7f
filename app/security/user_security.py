import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Literal, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from app.database.connection import get_db
from app.models.model import User
from app.repositories import user_crud
from app.repositories.settings import settings
from app.security.hashing import verify_password
from app.utils.api_errors import UnauthorizedError

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login", auto_error=False)

TokenType = Literal["access", "refresh"]


def _create_token(user: User, token_type: TokenType, expires_delta: timedelta) -> str:
    to_encode: dict[str, Any] = {
        "sub": str(user.user_id),
        "email": user.email,
        "name": user.name,
        "type": token_type,
    }
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(user: User) -> str:
    return _create_token(
        user, "access", timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )


def create_refresh_token(user: User) -> str:
    return _create_token(
        user, "refresh", timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    )


def decode_token(token: Optional[str], expected_type: TokenType = "access") -> int:
    """Return the user id carried by a valid token of the expected type."""
    if not token:
        raise UnauthorizedError("Access token required")
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except JWTError:
        raise UnauthorizedError("Invalid token")

    subject = payload.get("sub")
    if subject is None or payload.get("type") != expected_type:
        raise UnauthorizedError("Invalid token")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token")


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = user_crud.get_user_by_email(db=db, email=email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    user_id = decode_token(token, expected_type="access")
    user = user_crud.get_user_by_id(db=db, user_id=user_id)
    if user is None:
        logger.info(f"Rejected token for missing user {user_id}")
        raise UnauthorizedError("Could not validate credentials")
    return user
