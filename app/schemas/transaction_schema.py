from datetime import datetime
from typing import Literal, Optional

from app.schemas.general_schema import CamelModel


class TransactionCreate(CamelModel):
    name: str
    amount: float
    type: Literal["income", "expense"]
    date: Optional[datetime] = None
    description: Optional[str] = None
    account_id: Optional[int] = None
    category_id: Optional[int] = None


class TransactionUpdate(CamelModel):
    name: Optional[str] = None
    amount: Optional[float] = None
    type: Optional[Literal["income", "expense"]] = None
    date: Optional[datetime] = None
    description: Optional[str] = None
    account_id: Optional[int] = None
    category_id: Optional[int] = None


class Transaction(CamelModel):
    transaction_id: int
    user_id: int
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    name: str
    amount: float
    type: str
    date: datetime
    description: Optional[str] = None
    created_at: datetime
