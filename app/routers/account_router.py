import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database.connection import get_db
from app.models.model import User
from app.repositories import account_crud
from app.schemas import account_schema, general_schema
from app.security.user_security import get_current_user
from app.utils import api_response
from app.utils.api_errors import InternalError

logger = logging.getLogger(__name__)

account_Router = APIRouter(prefix="/api/v1/accounts")


@account_Router.post(
    "/create-account",
    response_model=general_schema.ApiResponse[account_schema.Account],
    status_code=status.HTTP_201_CREATED,
    tags=["accounts"],
)
def create_account(
    account: account_schema.AccountCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        new_account = account_crud.create_account(db=db, user_id=user.user_id, account=account)
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to create account for user {user.user_id}")
        raise InternalError("Failed to create account")
    return api_response.created("Account created successfully", new_account)


@account_Router.get(
    "/get-accounts",
    response_model=general_schema.ApiResponse[list[account_schema.Account]],
    tags=["accounts"],
)
def get_accounts(
    type: Optional[str] = Query(default=None, description="Filter by account type"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    accounts = account_crud.get_accounts_by_user_id(
        db=db, user_id=user.user_id, account_type=type
    )
    return api_response.success("Accounts fetched successfully", accounts)


@account_Router.get(
    "/get-account/{account_id}",
    response_model=general_schema.ApiResponse[account_schema.Account],
    tags=["accounts"],
)
def get_one_account(
    account_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    account = account_crud.get_account_by_id(db=db, account_id=account_id, user_id=user.user_id)
    return api_response.success("Account fetched successfully", account)


@account_Router.put(
    "/update-account/{account_id}",
    response_model=general_schema.ApiResponse[account_schema.Account],
    tags=["accounts"],
)
def update_account(
    account_id: int,
    account_update: account_schema.AccountUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        account = account_crud.update_account(
            db=db, account_id=account_id, user_id=user.user_id, account_update=account_update
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to update account {account_id}")
        raise InternalError("Failed to update account")
    return api_response.success("Account updated successfully", account)


@account_Router.delete(
    "/delete-account/{account_id}",
    response_model=general_schema.ApiResponse[account_schema.Account],
    tags=["accounts"],
)
def delete_account(
    account_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        account = account_crud.delete_account(db=db, account_id=account_id, user_id=user.user_id)
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to delete account {account_id}")
        raise InternalError("Failed to delete account")
    return api_response.success("Account deleted successfully", account)
