from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.models.model import User
from app.schemas.user_schema import UserCreate, UserUpdate
from app.security.hashing import hash_password
from app.utils.api_errors import ConflictError, ValidationError

MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_password(password: str):
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.user_id == user_id).first()


def create_user(db: Session, user: UserCreate) -> User:
    if not user.name or not user.email or not user.password:
        raise ValidationError("All fields are required")
    validate_password(user.password)

    if get_user_by_email(db=db, email=user.email):
        raise ConflictError("User with this email already exists")

    db_user = User(
        name=user.name.strip(),
        email=normalize_email(user.email),
        hashed_password=hash_password(user.password),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def record_login(db: Session, user: User, refresh_token: str) -> User:
    user.last_login_at = datetime.now(timezone.utc)
    user.is_active = True
    user.refresh_token = refresh_token
    db.commit()
    db.refresh(user)
    return user


def record_logout(db: Session, user: User) -> User:
    user.last_logout_at = datetime.now(timezone.utc)
    user.is_active = False
    user.refresh_token = None
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user: User, user_update: UserUpdate) -> User:
    if (
        not user_update.name
        or not user_update.email
        or not user_update.password
        or not user_update.confirm_password
    ):
        raise ValidationError("All fields are required")
    if user_update.password != user_update.confirm_password:
        raise ValidationError("Password and confirm password do not match")
    validate_password(user_update.password)

    email = normalize_email(user_update.email)
    existing = get_user_by_email(db=db, email=email)
    if existing and existing.user_id != user.user_id:
        raise ConflictError("User with this email already exists")

    user.name = user_update.name.strip()
    user.email = email
    user.hashed_password = hash_password(user_update.password)
    user.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return user
