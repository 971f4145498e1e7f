import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, TypeVar

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.models.model import Budget, Category, MonthlyBudget
from app.repositories.settings import settings
from app.services.budget_summary import (
    BudgetRecord,
    CategoryRef,
    MonthlyBudgetRecord,
    build_budget_summary,
)
from app.services.date_range import DateRange
from app.utils.api_errors import ensure_owner

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class BudgetRecords:
    monthly_budgets: List[MonthlyBudgetRecord]
    budgets: List[BudgetRecord]
    categories: List[CategoryRef]


def _category_ref(category: Optional[Category]) -> Optional[CategoryRef]:
    if category is None:
        return None
    return CategoryRef(
        category_id=category.category_id, name=category.name, type=category.type
    )


def query_monthly_budgets(
    db: Session, user_id: int, date_range: DateRange
) -> List[MonthlyBudgetRecord]:
    rows = (
        db.query(MonthlyBudget)
        .filter(
            MonthlyBudget.user_id == user_id,
            MonthlyBudget.start_date <= date_range.end_date,
            MonthlyBudget.end_date >= date_range.start_date,
        )
        .order_by(MonthlyBudget.start_date.asc(), MonthlyBudget.monthly_budget_id.asc())
        .all()
    )
    return [
        MonthlyBudgetRecord(
            amount=row.amount, start_date=row.start_date, end_date=row.end_date
        )
        for row in rows
    ]


def query_budgets(db: Session, user_id: int, date_range: DateRange) -> List[BudgetRecord]:
    rows = (
        db.query(Budget)
        .options(joinedload(Budget.category))
        .filter(
            Budget.user_id == user_id,
            Budget.start_date <= date_range.end_date,
            Budget.end_date >= date_range.start_date,
            or_(Budget.monthly_amount.isnot(None), Budget.expense_amount.isnot(None)),
        )
        .order_by(Budget.start_date.asc(), Budget.budget_id.asc())
        .all()
    )
    return [
        BudgetRecord(
            start_date=row.start_date,
            end_date=row.end_date,
            monthly_amount=row.monthly_amount,
            expense_amount=row.expense_amount,
            category_id=row.category_id,
            category=_category_ref(row.category),
        )
        for row in rows
    ]


def query_categories(db: Session, user_id: int, date_range: DateRange) -> List[CategoryRef]:
    rows = (
        db.query(Category)
        .filter(Category.user_id == user_id, Category.type == "expense")
        .order_by(Category.category_id.asc())
        .all()
    )
    return [_category_ref(row) for row in rows]


def _run_query(
    session_factory: Callable[[], Session],
    query: Callable[[Session, int, DateRange], T],
    user_id: int,
    date_range: DateRange,
) -> T:
    # Sessions are not thread-safe, every worker gets its own
    with session_factory() as db:
        return query(db, user_id, date_range)


def fetch_budget_records(
    session_factory: Callable[[], Session],
    user_id: Optional[int],
    date_range: DateRange,
) -> BudgetRecords:
    """
    Run the three summary reads side by side and wait for all of them.

    The first failing read propagates out; nothing is aggregated from a
    partial set of results.
    """
    ensure_owner(user_id)

    with ThreadPoolExecutor(max_workers=settings.SUMMARY_FETCH_WORKERS) as executor:
        monthly_future = executor.submit(
            _run_query, session_factory, query_monthly_budgets, user_id, date_range
        )
        budgets_future = executor.submit(
            _run_query, session_factory, query_budgets, user_id, date_range
        )
        categories_future = executor.submit(
            _run_query, session_factory, query_categories, user_id, date_range
        )

        return BudgetRecords(
            monthly_budgets=monthly_future.result(),
            budgets=budgets_future.result(),
            categories=categories_future.result(),
        )


def get_budget_summary(
    session_factory: Callable[[], Session],
    user_id: Optional[int],
    date_range: DateRange,
) -> dict:
    started = time.perf_counter()
    records = fetch_budget_records(session_factory, user_id, date_range)
    summary = build_budget_summary(
        date_range,
        monthly_budgets=records.monthly_budgets,
        budgets=records.budgets,
        categories=records.categories,
    )
    logger.info(
        f"Budget summary for user {user_id} "
        f"({date_range.start_date} to {date_range.end_date}): "
        f"{len(records.budgets)} budgets, {len(records.monthly_budgets)} monthly budgets "
        f"in {(time.perf_counter() - started) * 1000:.1f} ms"
    )
    return summary
