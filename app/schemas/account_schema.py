from datetime import datetime
from typing import Optional

from app.schemas.general_schema import CamelModel


class AccountCreate(CamelModel):
    name: str
    type: str
    balance: float


class AccountUpdate(CamelModel):
    name: Optional[str] = None
    type: Optional[str] = None
    balance: Optional[float] = None


class Account(CamelModel):
    account_id: int
    user_id: int
    name: str
    type: str
    balance: float
    created_at: datetime
    updated_at: datetime
