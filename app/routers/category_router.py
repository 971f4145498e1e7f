import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database.connection import get_db
from app.models.model import User
from app.repositories import category_crud
from app.schemas import category_schema, general_schema
from app.security.user_security import get_current_user
from app.utils import api_response
from app.utils.api_errors import InternalError

logger = logging.getLogger(__name__)

category_Router = APIRouter(prefix="/api/v1/categories")


@category_Router.post(
    "/create-category",
    response_model=general_schema.ApiResponse[category_schema.Category],
    status_code=status.HTTP_201_CREATED,
    tags=["categories"],
)
def create_category(
    category: category_schema.CategoryCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        new_category = category_crud.create_category(
            db=db, user_id=user.user_id, category=category
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to create category for user {user.user_id}")
        raise InternalError("An error occurred while creating the category.")
    return api_response.created("Category created successfully", new_category)


@category_Router.get(
    "/get-categories",
    response_model=general_schema.ApiResponse[list[category_schema.Category]],
    tags=["categories"],
)
def get_categories(
    type: Optional[Literal["income", "expense"]] = Query(
        default=None, description="Filter by category type (income or expense)"
    ),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    categories = category_crud.get_categories_by_user_id(
        db=db, user_id=user.user_id, category_type=type
    )
    return api_response.success("Categories fetched successfully", categories)


@category_Router.get(
    "/get-category/{category_id}",
    response_model=general_schema.ApiResponse[category_schema.Category],
    tags=["categories"],
)
def get_one_category(
    category_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    category = category_crud.get_category_by_id(
        db=db, category_id=category_id, user_id=user.user_id
    )
    return api_response.success("Category fetched successfully", category)


@category_Router.put(
    "/update-category/{category_id}",
    response_model=general_schema.ApiResponse[category_schema.Category],
    tags=["categories"],
)
def update_category(
    category_id: int,
    category_update: category_schema.CategoryUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        category = category_crud.update_category(
            db=db,
            category_id=category_id,
            user_id=user.user_id,
            category_update=category_update,
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to update category {category_id}")
        raise InternalError("An error occurred while updating the category.")
    return api_response.success("Category updated successfully", category)


@category_Router.delete(
    "/delete-category/{category_id}",
    response_model=general_schema.ApiResponse[category_schema.Category],
    tags=["categories"],
)
def delete_category(
    category_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        category = category_crud.delete_category(
            db=db, category_id=category_id, user_id=user.user_id
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Failed to delete category {category_id}")
        raise InternalError("An error occurred while deleting the category.")
    return api_response.success("Category deleted successfully", category)
