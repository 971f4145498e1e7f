import logging
from datetime import date
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database.connection import get_db, get_session_factory
from app.models.model import User
from app.repositories import budget_crud, budget_summary_crud
from app.schemas import budget_schema, general_schema
from app.security.user_security import get_current_user
from app.services.date_range import resolve_date_range
from app.utils import api_response
from app.utils.api_errors import InternalError

logger = logging.getLogger(__name__)

budget_Router = APIRouter(prefix="/api/v1/budgets")


@budget_Router.post(
    "/create-budget",
    response_model=general_schema.ApiResponse[budget_schema.Budget],
    status_code=status.HTTP_201_CREATED,
    tags=["budgets"],
)
def create_budget(
    budget: budget_schema.BudgetCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        new_budget = budget_crud.create_budget(db=db, user_id=user.user_id, budget=budget)
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to create budget for user {user.user_id}")
        raise InternalError("Failed to create budget")
    return api_response.created("Budget created successfully", new_budget)


@budget_Router.get(
    "/get-budgets",
    response_model=general_schema.ApiResponse[list[budget_schema.Budget]],
    tags=["budgets"],
)
def get_budgets(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    budgets = budget_crud.get_budgets_by_user_id(
        db=db,
        user_id=user.user_id,
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
    )
    return api_response.success("Budgets fetched successfully", budgets)


@budget_Router.get(
    "/get-one-budget/{budget_id}",
    response_model=general_schema.ApiResponse[budget_schema.Budget],
    tags=["budgets"],
)
def get_one_budget(
    budget_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    budget = budget_crud.get_budget_by_id(db=db, budget_id=budget_id, user_id=user.user_id)
    return api_response.success("Budget fetched successfully", budget)


@budget_Router.put(
    "/update-budget/{budget_id}",
    response_model=general_schema.ApiResponse[budget_schema.Budget],
    tags=["budgets"],
)
def update_budget(
    budget_id: int,
    budget_update: budget_schema.BudgetUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        budget = budget_crud.update_budget(
            db=db, budget_id=budget_id, user_id=user.user_id, budget_update=budget_update
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to update budget {budget_id}")
        raise InternalError("Failed to update budget")
    return api_response.success("Budget updated successfully", budget)


@budget_Router.delete(
    "/delete-budget/{budget_id}",
    response_model=general_schema.ApiResponse[budget_schema.Budget],
    tags=["budgets"],
)
def delete_budget(
    budget_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        budget = budget_crud.delete_budget(db=db, budget_id=budget_id, user_id=user.user_id)
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to delete budget {budget_id}")
        raise InternalError("Failed to delete budget")
    return api_response.success("Budget deleted successfully", budget)


@budget_Router.post(
    "/monthly-budget",
    response_model=general_schema.ApiResponse[budget_schema.MonthlyBudget],
    status_code=status.HTTP_201_CREATED,
    tags=["monthly budgets"],
)
def setup_monthly_budget(
    monthly_budget: budget_schema.MonthlyBudgetCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        new_monthly_budget = budget_crud.create_monthly_budget(
            db=db, user_id=user.user_id, monthly_budget=monthly_budget
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to create monthly budget for user {user.user_id}")
        raise InternalError("Failed to create monthly budget")
    return api_response.created("Monthly budget created successfully", new_monthly_budget)


@budget_Router.get(
    "/monthly-budgets",
    response_model=general_schema.ApiResponse[list[budget_schema.MonthlyBudget]],
    tags=["monthly budgets"],
)
def get_monthly_budgets(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    monthly_budgets = budget_crud.get_monthly_budgets_by_user_id(
        db=db, user_id=user.user_id, start_date=start_date, end_date=end_date
    )
    return api_response.success("Monthly budgets fetched successfully", monthly_budgets)


@budget_Router.get(
    "/monthly-budgets/{monthly_budget_id}",
    response_model=general_schema.ApiResponse[budget_schema.MonthlyBudget],
    tags=["monthly budgets"],
)
def get_one_monthly_budget(
    monthly_budget_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    monthly_budget = budget_crud.get_monthly_budget_by_id(
        db=db, monthly_budget_id=monthly_budget_id, user_id=user.user_id
    )
    return api_response.success("Monthly budget fetched successfully", monthly_budget)


@budget_Router.put(
    "/monthly-budgets/{monthly_budget_id}",
    response_model=general_schema.ApiResponse[budget_schema.MonthlyBudget],
    tags=["monthly budgets"],
)
def update_monthly_budget(
    monthly_budget_id: int,
    monthly_budget_update: budget_schema.MonthlyBudgetUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        monthly_budget = budget_crud.update_monthly_budget(
            db=db,
            monthly_budget_id=monthly_budget_id,
            user_id=user.user_id,
            monthly_budget_update=monthly_budget_update,
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to update monthly budget {monthly_budget_id}")
        raise InternalError("Failed to update monthly budget")
    return api_response.success("Monthly budget updated successfully", monthly_budget)


@budget_Router.delete(
    "/monthly-budgets/{monthly_budget_id}",
    response_model=general_schema.ApiResponse[budget_schema.MonthlyBudget],
    tags=["monthly budgets"],
)
def delete_monthly_budget(
    monthly_budget_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        monthly_budget = budget_crud.delete_monthly_budget(
            db=db, monthly_budget_id=monthly_budget_id, user_id=user.user_id
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to delete monthly budget {monthly_budget_id}")
        raise InternalError("Failed to delete monthly budget")
    return api_response.success("Monthly budget deleted successfully", monthly_budget)


def _budget_summary(
    user: User,
    session_factory: Callable[[], Session],
    start_date: Optional[str],
    end_date: Optional[str],
) -> dict:
    date_range = resolve_date_range(start_date, end_date)
    try:
        summary = budget_summary_crud.get_budget_summary(
            session_factory, user.user_id, date_range
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to build budget summary for user {user.user_id}")
        raise InternalError("Failed to fetch budget summary")
    return api_response.success("Budget summary fetched successfully", summary)


@budget_Router.get(
    "/summary",
    response_model=general_schema.ApiResponse[budget_schema.BudgetSummary],
    tags=["budgets"],
)
def get_budget_summary(
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    user: User = Depends(get_current_user),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
):
    return _budget_summary(user, session_factory, start_date, end_date)


@budget_Router.post(
    "/summary",
    response_model=general_schema.ApiResponse[budget_schema.BudgetSummary],
    tags=["budgets"],
)
def post_budget_summary(
    body: Optional[budget_schema.BudgetSummaryRequest] = None,
    user: User = Depends(get_current_user),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
):
    body = body or budget_schema.BudgetSummaryRequest()
    return _budget_summary(user, session_factory, body.start_date, body.end_date)
