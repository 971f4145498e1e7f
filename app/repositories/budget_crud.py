from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from app.models.model import Budget, MonthlyBudget
from app.repositories.category_crud import get_category_by_id
from app.schemas import budget_schema
from app.schemas.budget_schema import (
    BudgetCreate,
    BudgetUpdate,
    MonthlyBudgetCreate,
    MonthlyBudgetUpdate,
)
from app.utils.api_errors import (
    InvalidRangeError,
    NotFoundError,
    ValidationError,
    ensure_owner,
)


def _to_decimal(value: Optional[float]) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def _ensure_range(start_date: date, end_date: date):
    if start_date > end_date:
        raise InvalidRangeError("Start date must be before end date")


def _ensure_category(db: Session, user_id: int, category_id: Optional[int]):
    if category_id is None:
        return
    try:
        get_category_by_id(db=db, category_id=category_id, user_id=user_id)
    except NotFoundError:
        raise NotFoundError("Category not found or does not belong to you")


# Category budgets


def create_budget(db: Session, user_id: int, budget: BudgetCreate) -> Budget:
    ensure_owner(user_id)
    if budget.monthly_amount is None and budget.expense_amount is None:
        raise ValidationError("Monthly amount or expense amount is required")
    _ensure_range(budget.start_date, budget.end_date)
    _ensure_category(db, user_id, budget.category_id)

    db_budget = Budget(
        user_id=user_id,
        category_id=budget.category_id,
        monthly_amount=_to_decimal(budget.monthly_amount),
        expense_amount=_to_decimal(budget.expense_amount),
        start_date=budget.start_date,
        end_date=budget.end_date,
    )

    db.add(db_budget)
    db.commit()
    db.refresh(db_budget)
    return db_budget


def get_budgets_by_user_id(
    db: Session,
    user_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category_id: Optional[int] = None,
):
    ensure_owner(user_id)
    if start_date and end_date:
        _ensure_range(start_date, end_date)

    query = (
        db.query(Budget)
        .options(joinedload(Budget.category))
        .filter(Budget.user_id == user_id)
    )

    # A budget matches when its span overlaps the requested window
    if start_date:
        query = query.filter(Budget.end_date >= start_date)
    if end_date:
        query = query.filter(Budget.start_date <= end_date)
    if category_id is not None:
        query = query.filter(Budget.category_id == category_id)

    return query.order_by(Budget.start_date.desc(), Budget.budget_id.desc()).all()


def get_budget_by_id(db: Session, budget_id: int, user_id: int) -> Budget:
    ensure_owner(user_id)
    budget = (
        db.query(Budget)
        .options(joinedload(Budget.category))
        .filter(Budget.budget_id == budget_id, Budget.user_id == user_id)
        .first()
    )
    if not budget:
        raise NotFoundError("Budget not found")
    return budget


def update_budget(
    db: Session, budget_id: int, user_id: int, budget_update: BudgetUpdate
) -> Budget:
    changes = budget_update.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("At least one field is required")

    db_budget = get_budget_by_id(db=db, budget_id=budget_id, user_id=user_id)
    _ensure_range(
        budget_update.start_date or db_budget.start_date,
        budget_update.end_date or db_budget.end_date,
    )
    _ensure_category(db, user_id, budget_update.category_id)

    for field in ("monthly_amount", "expense_amount"):
        if field in changes:
            changes[field] = _to_decimal(changes[field])
    for field, value in changes.items():
        setattr(db_budget, field, value)

    db_budget.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(db_budget)
    return db_budget


def delete_budget(db: Session, budget_id: int, user_id: int) -> budget_schema.Budget:
    db_budget = get_budget_by_id(db=db, budget_id=budget_id, user_id=user_id)
    deleted = budget_schema.Budget.model_validate(db_budget)
    db.delete(db_budget)
    db.commit()
    return deleted


# Monthly budgets


def create_monthly_budget(
    db: Session, user_id: int, monthly_budget: MonthlyBudgetCreate
) -> MonthlyBudget:
    ensure_owner(user_id)
    if not monthly_budget.amount:
        raise ValidationError("All fields are required")
    _ensure_range(monthly_budget.start_date, monthly_budget.end_date)

    db_monthly_budget = MonthlyBudget(
        user_id=user_id,
        amount=Decimal(str(monthly_budget.amount)),
        start_date=monthly_budget.start_date,
        end_date=monthly_budget.end_date,
    )

    db.add(db_monthly_budget)
    db.commit()
    db.refresh(db_monthly_budget)
    return db_monthly_budget


def get_monthly_budgets_by_user_id(
    db: Session,
    user_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    ensure_owner(user_id)
    if start_date and end_date:
        _ensure_range(start_date, end_date)

    query = db.query(MonthlyBudget).filter(MonthlyBudget.user_id == user_id)
    if start_date:
        query = query.filter(MonthlyBudget.end_date >= start_date)
    if end_date:
        query = query.filter(MonthlyBudget.start_date <= end_date)

    return query.order_by(MonthlyBudget.start_date.desc()).all()


def get_monthly_budget_by_id(
    db: Session, monthly_budget_id: int, user_id: int
) -> MonthlyBudget:
    ensure_owner(user_id)
    monthly_budget = (
        db.query(MonthlyBudget)
        .filter(
            MonthlyBudget.monthly_budget_id == monthly_budget_id,
            MonthlyBudget.user_id == user_id,
        )
        .first()
    )
    if not monthly_budget:
        raise NotFoundError("Monthly budget not found")
    return monthly_budget


def update_monthly_budget(
    db: Session,
    monthly_budget_id: int,
    user_id: int,
    monthly_budget_update: MonthlyBudgetUpdate,
) -> MonthlyBudget:
    changes = monthly_budget_update.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("At least one field is required")

    db_monthly_budget = get_monthly_budget_by_id(
        db=db, monthly_budget_id=monthly_budget_id, user_id=user_id
    )
    _ensure_range(
        monthly_budget_update.start_date or db_monthly_budget.start_date,
        monthly_budget_update.end_date or db_monthly_budget.end_date,
    )

    if "amount" in changes:
        changes["amount"] = Decimal(str(changes["amount"]))
    for field, value in changes.items():
        setattr(db_monthly_budget, field, value)

    db_monthly_budget.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(db_monthly_budget)
    return db_monthly_budget


def delete_monthly_budget(
    db: Session, monthly_budget_id: int, user_id: int
) -> budget_schema.MonthlyBudget:
    db_monthly_budget = get_monthly_budget_by_id(
        db=db, monthly_budget_id=monthly_budget_id, user_id=user_id
    )
    deleted = budget_schema.MonthlyBudget.model_validate(db_monthly_budget)
    db.delete(db_monthly_budget)
    db.commit()
    return deleted
