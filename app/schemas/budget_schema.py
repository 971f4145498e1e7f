from datetime import date, datetime
from typing import List, Literal, Optional, Union

from app.schemas.general_schema import CamelModel


class BudgetCategory(CamelModel):
    category_id: int
    name: str
    type: str


class BudgetCreate(CamelModel):
    monthly_amount: Optional[float] = None
    expense_amount: Optional[float] = None
    start_date: date
    end_date: date
    category_id: Optional[int] = None


class BudgetUpdate(CamelModel):
    monthly_amount: Optional[float] = None
    expense_amount: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[int] = None


class Budget(CamelModel):
    budget_id: int
    user_id: int
    category_id: Optional[int] = None
    category: Optional[BudgetCategory] = None
    monthly_amount: Optional[float] = None
    expense_amount: Optional[float] = None
    start_date: date
    end_date: date
    created_at: datetime
    updated_at: datetime


class MonthlyBudgetCreate(CamelModel):
    amount: float
    start_date: date
    end_date: date


class MonthlyBudgetUpdate(CamelModel):
    amount: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class MonthlyBudget(CamelModel):
    monthly_budget_id: int
    user_id: int
    amount: float
    start_date: date
    end_date: date
    created_at: datetime
    updated_at: datetime


class BudgetSummaryRequest(CamelModel):
    start_date: Optional[str] = None
    end_date: Optional[str] = None


# Budget summary payload


class DateRangeOut(CamelModel):
    start_date: date
    end_date: date


class CategoryBudgetAggregate(CamelModel):
    category_id: Union[int, str]
    category_name: str
    category_type: str
    total_monthly_amount: float
    total_expense_amount: float
    percentage_of_monthly: float
    expense_percentage_of_monthly: float
    expense_vs_budget_percentage: float
    remaining_budget: float
    status: Literal["within_limit", "over_limit"]
    expense_status: Literal["within_budget", "over_budget"]
    budget_count: int


class SummaryBlock(CamelModel):
    total_monthly_budget: float
    total_budget_monthly_amount: float
    total_expense_amount: float
    difference: float
    is_within_limit: bool
    utilization_percentage: float
    expense_percentage_of_monthly: float
    expense_percentage_of_budget: float
    remaining_from_monthly: float
    remaining_from_budgets: float
    category_count: int


class PieSlice(CamelModel):
    name: str
    value: float
    percentage: float
    color: str


class BudgetBar(CamelModel):
    category: str
    budget: float
    expense: float
    remaining: float


class UtilizationBar(CamelModel):
    category: str
    utilization: float
    status: Literal["within_budget", "over_budget"]


class Comparison(CamelModel):
    monthly_budget: float
    total_budgets: float
    total_expenses: float
    difference: float
    budget_utilization: float
    expense_utilization: float


class ChartData(CamelModel):
    budget_pie_chart: List[PieSlice]
    expense_pie_chart: List[PieSlice]
    budget_bar_chart: List[BudgetBar]
    utilization_bar_chart: List[UtilizationBar]
    comparison: Comparison


class BudgetSummary(CamelModel):
    date_range: DateRangeOut
    monthly_budget: float
    category_budgets: List[CategoryBudgetAggregate]
    summary: SummaryBlock
    chart_data: ChartData
