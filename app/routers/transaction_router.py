import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database.connection import get_db
from app.models.model import User
from app.repositories import transaction_crud
from app.schemas import general_schema, transaction_schema
from app.security.user_security import get_current_user
from app.utils import api_response
from app.utils.api_errors import InternalError

logger = logging.getLogger(__name__)

transaction_Router = APIRouter(prefix="/api/v1/transactions")


@transaction_Router.post(
    "/create-transaction",
    response_model=general_schema.ApiResponse[transaction_schema.Transaction],
    status_code=status.HTTP_201_CREATED,
    tags=["transactions"],
)
def create_transaction(
    transaction: transaction_schema.TransactionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        new_transaction = transaction_crud.create_transaction(
            db=db, user_id=user.user_id, transaction=transaction
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to create transaction for user {user.user_id}")
        raise InternalError("Failed to create transaction")
    return api_response.created("Transaction created successfully", new_transaction)


@transaction_Router.get(
    "/get-transactions",
    response_model=general_schema.ApiResponse[list[transaction_schema.Transaction]],
    tags=["transactions"],
)
def get_transactions(
    start_date: Optional[date] = Query(
        default=None, alias="startDate", description="Only transactions on or after this date"
    ),
    end_date: Optional[date] = Query(
        default=None, alias="endDate", description="Only transactions on or before this date"
    ),
    category_id: Optional[int] = Query(
        default=None, alias="categoryId", description="Filter by category ID"
    ),
    type: Optional[Literal["income", "expense"]] = Query(
        default=None, description="Filter by transaction type (income or expense)"
    ),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    transactions = transaction_crud.get_transactions_by_user_id(
        db=db,
        user_id=user.user_id,
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
        transaction_type=type,
    )
    return api_response.success("Transactions fetched successfully", transactions)


@transaction_Router.get(
    "/get-transaction/{transaction_id}",
    response_model=general_schema.ApiResponse[transaction_schema.Transaction],
    tags=["transactions"],
)
def get_one_transaction(
    transaction_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    transaction = transaction_crud.get_transaction_by_id(
        db=db, transaction_id=transaction_id, user_id=user.user_id
    )
    return api_response.success("Transaction fetched successfully", transaction)


@transaction_Router.put(
    "/update-transaction/{transaction_id}",
    response_model=general_schema.ApiResponse[transaction_schema.Transaction],
    tags=["transactions"],
)
def update_transaction(
    transaction_id: int,
    transaction_update: transaction_schema.TransactionUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        transaction = transaction_crud.update_transaction(
            db=db,
            transaction_id=transaction_id,
            user_id=user.user_id,
            transaction_update=transaction_update,
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to update transaction {transaction_id}")
        raise InternalError("Failed to update transaction")
    return api_response.success("Transaction updated successfully", transaction)


@transaction_Router.delete(
    "/delete-transaction/{transaction_id}",
    response_model=general_schema.ApiResponse[transaction_schema.Transaction],
    tags=["transactions"],
)
def delete_transaction(
    transaction_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        transaction = transaction_crud.delete_transaction(
            db=db, transaction_id=transaction_id, user_id=user.user_id
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to delete transaction {transaction_id}")
        raise InternalError("Failed to delete transaction")
    return api_response.success("Transaction deleted successfully", transaction)
