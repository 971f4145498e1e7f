from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_FLOOR, Decimal
from typing import Iterable, Mapping, Optional, Union

from app.services.date_range import DateRange

ZERO = Decimal("0")
HUNDRED = Decimal("100")
HALF = Decimal("0.5")

WITHIN_LIMIT_COLOR = "#10B981"
OVER_LIMIT_COLOR = "#EF4444"

UNCATEGORIZED_ID = "uncategorized"
UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_TYPE = "expense"


@dataclass(frozen=True)
class CategoryRef:
    category_id: int
    name: str
    type: str


@dataclass(frozen=True)
class MonthlyBudgetRecord:
    amount: Decimal
    start_date: date
    end_date: date


@dataclass(frozen=True)
class BudgetRecord:
    start_date: date
    end_date: date
    monthly_amount: Optional[Decimal] = None
    expense_amount: Optional[Decimal] = None
    category_id: Optional[int] = None
    category: Optional[CategoryRef] = None


@dataclass(frozen=True)
class KnownCategory:
    category_id: int


@dataclass(frozen=True)
class Uncategorized:
    pass


CategoryKey = Union[KnownCategory, Uncategorized]


@dataclass
class _CategoryGroup:
    category_id: Union[int, str]
    name: str
    type: str
    total_monthly: Decimal = ZERO
    total_expense: Decimal = ZERO
    budget_count: int = 0


def round2(value: Decimal) -> float:
    """Two-decimal rounding, halves go towards +infinity (-1.005 -> -1.0)."""
    scaled = (value * HUNDRED + HALF).to_integral_value(rounding=ROUND_FLOOR)
    return float(scaled / HUNDRED)


def percentage(numerator: Decimal, denominator: Decimal) -> Decimal:
    if denominator == ZERO:
        return ZERO
    return numerator / denominator * HUNDRED


def _coerce_amount(amount) -> Decimal:
    if amount is None:
        return ZERO
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def category_key(budget: BudgetRecord) -> CategoryKey:
    if budget.category_id is None:
        return Uncategorized()
    return KnownCategory(budget.category_id)


def _new_group(
    key: CategoryKey, budget: BudgetRecord, labels: Mapping[int, CategoryRef]
) -> _CategoryGroup:
    if isinstance(key, Uncategorized):
        return _CategoryGroup(UNCATEGORIZED_ID, UNCATEGORIZED_NAME, UNCATEGORIZED_TYPE)

    ref = labels.get(key.category_id) or budget.category
    if ref is None:
        return _CategoryGroup(key.category_id, UNCATEGORIZED_NAME, UNCATEGORIZED_TYPE)
    return _CategoryGroup(key.category_id, ref.name, ref.type)


def group_budgets_by_category(
    budgets: Iterable[BudgetRecord],
    categories: Iterable[CategoryRef] = (),
) -> list[_CategoryGroup]:
    """Bucket budgets per category, preserving first-seen order."""
    labels = {category.category_id: category for category in categories}
    groups: dict[CategoryKey, _CategoryGroup] = {}

    for budget in budgets:
        key = category_key(budget)
        group = groups.get(key)
        if group is None:
            group = groups[key] = _new_group(key, budget, labels)
        group.total_monthly += _coerce_amount(budget.monthly_amount)
        group.total_expense += _coerce_amount(budget.expense_amount)
        group.budget_count += 1

    return list(groups.values())


def _aggregate(group: _CategoryGroup, total_monthly_budget: Decimal) -> dict:
    return {
        "categoryId": group.category_id,
        "categoryName": group.name,
        "categoryType": group.type,
        "totalMonthlyAmount": float(group.total_monthly),
        "totalExpenseAmount": float(group.total_expense),
        "percentageOfMonthly": round2(percentage(group.total_monthly, total_monthly_budget)),
        "expensePercentageOfMonthly": round2(percentage(group.total_expense, total_monthly_budget)),
        "expenseVsBudgetPercentage": round2(percentage(group.total_expense, group.total_monthly)),
        "remainingBudget": round2(group.total_monthly - group.total_expense),
        # compared against the overall monthly ceiling, not the category's own allotment
        "status": "within_limit" if group.total_monthly <= total_monthly_budget else "over_limit",
        "expenseStatus": "within_budget" if group.total_expense <= group.total_monthly else "over_budget",
        "budgetCount": group.budget_count,
    }


def _status_color(ok: bool) -> str:
    return WITHIN_LIMIT_COLOR if ok else OVER_LIMIT_COLOR


def build_chart_data(
    category_budgets: list[dict],
    total_monthly_budget: Decimal,
    total_budget_monthly: Decimal,
    total_expense: Decimal,
) -> dict:
    return {
        "budgetPieChart": [
            {
                "name": item["categoryName"],
                "value": item["totalMonthlyAmount"],
                "percentage": item["percentageOfMonthly"],
                "color": _status_color(item["status"] == "within_limit"),
            }
            for item in category_budgets
        ],
        "expensePieChart": [
            {
                "name": item["categoryName"],
                "value": item["totalExpenseAmount"],
                "percentage": item["expensePercentageOfMonthly"],
                "color": _status_color(item["expenseStatus"] == "within_budget"),
            }
            for item in category_budgets
        ],
        "budgetBarChart": [
            {
                "category": item["categoryName"],
                "budget": item["totalMonthlyAmount"],
                "expense": item["totalExpenseAmount"],
                "remaining": item["remainingBudget"],
            }
            for item in category_budgets
        ],
        "utilizationBarChart": [
            {
                "category": item["categoryName"],
                "utilization": item["expenseVsBudgetPercentage"],
                "status": item["expenseStatus"],
            }
            for item in category_budgets
        ],
        "comparison": {
            "monthlyBudget": float(total_monthly_budget),
            "totalBudgets": float(total_budget_monthly),
            "totalExpenses": float(total_expense),
            "difference": round2(total_monthly_budget - total_budget_monthly),
            "budgetUtilization": round2(percentage(total_budget_monthly, total_monthly_budget)),
            "expenseUtilization": round2(percentage(total_expense, total_monthly_budget)),
        },
    }


def build_budget_summary(
    date_range: DateRange,
    monthly_budgets: Iterable[MonthlyBudgetRecord],
    budgets: Iterable[BudgetRecord],
    categories: Iterable[CategoryRef] = (),
) -> dict:
    """
    Aggregate already-fetched records into the budget summary payload.

    Pure: no I/O and no clock reads, so identical inputs give identical
    output. Every division is zero-guarded and every percentage or
    remaining figure goes through ``round2``.
    """
    budgets = list(budgets)

    total_monthly_budget = sum((_coerce_amount(m.amount) for m in monthly_budgets), ZERO)
    total_budget_monthly = sum((_coerce_amount(b.monthly_amount) for b in budgets), ZERO)
    total_expense = sum((_coerce_amount(b.expense_amount) for b in budgets), ZERO)

    category_budgets = [
        _aggregate(group, total_monthly_budget)
        for group in group_budgets_by_category(budgets, categories)
    ]

    summary = {
        "totalMonthlyBudget": float(total_monthly_budget),
        "totalBudgetMonthlyAmount": float(total_budget_monthly),
        "totalExpenseAmount": float(total_expense),
        "difference": round2(total_monthly_budget - total_budget_monthly),
        "isWithinLimit": total_budget_monthly <= total_monthly_budget,
        "utilizationPercentage": round2(percentage(total_budget_monthly, total_monthly_budget)),
        "expensePercentageOfMonthly": round2(percentage(total_expense, total_monthly_budget)),
        "expensePercentageOfBudget": round2(percentage(total_expense, total_budget_monthly)),
        "remainingFromMonthly": round2(total_monthly_budget - total_expense),
        "remainingFromBudgets": round2(total_budget_monthly - total_expense),
        "categoryCount": len(category_budgets),
    }

    return {
        "dateRange": {
            "startDate": date_range.start_date.isoformat(),
            "endDate": date_range.end_date.isoformat(),
        },
        "monthlyBudget": float(total_monthly_budget),
        "categoryBudgets": category_budgets,
        "summary": summary,
        "chartData": build_chart_data(
            category_budgets, total_monthly_budget, total_budget_monthly, total_expense
        ),
    }
