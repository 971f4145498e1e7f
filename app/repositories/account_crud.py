from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.models.model import Account
from app.schemas import account_schema
from app.schemas.account_schema import AccountCreate, AccountUpdate
from app.utils.api_errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    ensure_owner,
)


def create_account(db: Session, user_id: int, account: AccountCreate) -> Account:
    ensure_owner(user_id)
    if not account.name or not account.type:
        raise ValidationError("All fields are required")

    existing_account = (
        db.query(Account)
        .filter(Account.user_id == user_id, Account.name == account.name)
        .first()
    )
    if existing_account:
        raise ConflictError("Account already exists")

    db_account = Account(
        user_id=user_id,
        name=account.name,
        type=account.type,
        balance=Decimal(str(account.balance)),
    )

    db.add(db_account)
    db.commit()
    db.refresh(db_account)
    return db_account


def get_accounts_by_user_id(db: Session, user_id: int, account_type: Optional[str] = None):
    ensure_owner(user_id)
    query = db.query(Account).filter(Account.user_id == user_id)

    if account_type:
        query = query.filter(Account.type == account_type)

    return query.order_by(Account.name.asc()).all()


def get_account_by_id(db: Session, account_id: int, user_id: int) -> Account:
    ensure_owner(user_id)
    account = (
        db.query(Account)
        .filter(Account.account_id == account_id, Account.user_id == user_id)
        .first()
    )
    if not account:
        raise NotFoundError("Account not found")
    return account


def update_account(
    db: Session, account_id: int, user_id: int, account_update: AccountUpdate
) -> Account:
    changes = account_update.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("At least one field is required")

    db_account = get_account_by_id(db=db, account_id=account_id, user_id=user_id)

    if account_update.name is not None and account_update.name != db_account.name:
        duplicate = (
            db.query(Account)
            .filter(
                Account.user_id == user_id,
                Account.name == account_update.name,
                Account.account_id != account_id,
            )
            .first()
        )
        if duplicate:
            raise ConflictError("Account already exists")
        db_account.name = account_update.name
    if account_update.type is not None:
        db_account.type = account_update.type
    if account_update.balance is not None:
        db_account.balance = Decimal(str(account_update.balance))

    db_account.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(db_account)
    return db_account


def delete_account(db: Session, account_id: int, user_id: int) -> account_schema.Account:
    db_account = get_account_by_id(db=db, account_id=account_id, user_id=user_id)
    deleted = account_schema.Account.model_validate(db_account)
    db.delete(db_account)
    db.commit()
    return deleted
