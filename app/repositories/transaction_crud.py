from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from app.models.model import Transaction, utc_now
from app.repositories.account_crud import get_account_by_id
from app.repositories.category_crud import get_category_by_id
from app.schemas import transaction_schema
from app.schemas.transaction_schema import TransactionCreate, TransactionUpdate
from app.utils.api_errors import (
    InvalidRangeError,
    NotFoundError,
    ValidationError,
    ensure_owner,
)


def _ensure_references(
    db: Session, user_id: int, account_id: Optional[int], category_id: Optional[int]
):
    if category_id is not None:
        try:
            get_category_by_id(db=db, category_id=category_id, user_id=user_id)
        except NotFoundError:
            raise NotFoundError("Category not found or does not belong to you")
    if account_id is not None:
        try:
            get_account_by_id(db=db, account_id=account_id, user_id=user_id)
        except NotFoundError:
            raise NotFoundError("Account not found or does not belong to you")


def create_transaction(db: Session, user_id: int, transaction: TransactionCreate) -> Transaction:
    ensure_owner(user_id)
    if not transaction.name or not transaction.amount or not transaction.type:
        raise ValidationError("Name, amount, and type are required")

    _ensure_references(db, user_id, transaction.account_id, transaction.category_id)

    db_transaction = Transaction(
        user_id=user_id,
        account_id=transaction.account_id,
        category_id=transaction.category_id,
        name=transaction.name,
        amount=Decimal(str(transaction.amount)),
        type=transaction.type,
        date=transaction.date or utc_now(),
        description=transaction.description,
    )

    db.add(db_transaction)
    db.commit()
    db.refresh(db_transaction)
    return db_transaction


def get_transactions_by_user_id(
    db: Session,
    user_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category_id: Optional[int] = None,
    transaction_type: Optional[str] = None,
):
    ensure_owner(user_id)
    if start_date and end_date and start_date > end_date:
        raise InvalidRangeError("Start date must be before end date")

    query = (
        db.query(Transaction)
        .options(joinedload(Transaction.category))
        .filter(Transaction.user_id == user_id)
    )

    if start_date:
        query = query.filter(Transaction.date >= datetime.combine(start_date, time.min))
    if end_date:
        query = query.filter(Transaction.date <= datetime.combine(end_date, time.max))
    if category_id is not None:
        query = query.filter(Transaction.category_id == category_id)
    if transaction_type:
        query = query.filter(Transaction.type == transaction_type)

    return query.order_by(Transaction.date.desc()).all()


def get_transaction_by_id(db: Session, transaction_id: int, user_id: int) -> Transaction:
    ensure_owner(user_id)
    transaction = (
        db.query(Transaction)
        .options(joinedload(Transaction.category))
        .filter(
            Transaction.transaction_id == transaction_id,
            Transaction.user_id == user_id,
        )
        .first()
    )
    if not transaction:
        raise NotFoundError("Transaction not found")
    return transaction


def update_transaction(
    db: Session,
    transaction_id: int,
    user_id: int,
    transaction_update: TransactionUpdate,
) -> Transaction:
    changes = transaction_update.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("At least one field is required")

    db_transaction = get_transaction_by_id(
        db=db, transaction_id=transaction_id, user_id=user_id
    )
    _ensure_references(
        db, user_id, transaction_update.account_id, transaction_update.category_id
    )

    if "amount" in changes:
        changes["amount"] = Decimal(str(changes["amount"]))
    for field, value in changes.items():
        setattr(db_transaction, field, value)

    db_transaction.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(db_transaction)
    return db_transaction


def delete_transaction(
    db: Session, transaction_id: int, user_id: int
) -> transaction_schema.Transaction:
    db_transaction = get_transaction_by_id(
        db=db, transaction_id=transaction_id, user_id=user_id
    )
    deleted = transaction_schema.Transaction.model_validate(db_transaction)
    db.delete(db_transaction)
    db.commit()
    return deleted
