from datetime import datetime
from typing import Optional

from pydantic import EmailStr

from app.schemas.general_schema import CamelModel


class UserCreate(CamelModel):
    name: str
    email: EmailStr
    password: str


class UserLogin(CamelModel):
    email: str
    password: str


class UserUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class User(CamelModel):
    user_id: int
    name: str
    email: str
    is_active: bool
    last_login_at: Optional[datetime] = None
    last_logout_at: Optional[datetime] = None
    created_at: datetime


class RefreshTokenRequest(CamelModel):
    refresh_token: Optional[str] = None


class AuthData(CamelModel):
    user: User
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshData(CamelModel):
    user: User
    access_token: str
    token_type: str = "bearer"


class LogoutData(CamelModel):
    message: str
    logout_time: datetime
    user_id: int
