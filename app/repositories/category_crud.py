from typing import Optional

from sqlalchemy.orm import Session

from app.models.model import Category
from app.schemas import category_schema
from app.schemas.category_schema import CategoryCreate, CategoryUpdate
from app.utils.api_errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    ensure_owner,
)


def get_categories_by_user_id(
    db: Session,
    user_id: int,
    category_type: Optional[str] = None,
):
    ensure_owner(user_id)
    query = db.query(Category).filter(Category.user_id == user_id)

    # Filter by category type if provided
    if category_type:
        query = query.filter(Category.type == category_type)

    return query.order_by(Category.name.asc()).all()


def get_category_by_id(db: Session, category_id: int, user_id: int) -> Category:
    ensure_owner(user_id)
    category = (
        db.query(Category)
        .filter(Category.category_id == category_id, Category.user_id == user_id)
        .first()
    )
    if not category:
        raise NotFoundError("Category not found")
    return category


def _ensure_unique_name(db: Session, user_id: int, name: str, exclude_id: Optional[int] = None):
    query = db.query(Category).filter(Category.user_id == user_id, Category.name == name)
    if exclude_id is not None:
        query = query.filter(Category.category_id != exclude_id)
    if query.first():
        raise ConflictError("Category already exists")


def create_category(db: Session, user_id: int, category: CategoryCreate) -> Category:
    ensure_owner(user_id)
    if not category.name or not category.type:
        raise ValidationError("Name and type are required")

    _ensure_unique_name(db, user_id, category.name)

    db_category = Category(
        user_id=user_id,
        name=category.name,
        type=category.type,
    )

    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category


def update_category(
    db: Session, category_id: int, user_id: int, category_update: CategoryUpdate
) -> Category:
    if category_update.name is None and category_update.type is None:
        raise ValidationError("Name or type is required")

    db_category = get_category_by_id(db=db, category_id=category_id, user_id=user_id)

    if category_update.name is not None:
        _ensure_unique_name(db, user_id, category_update.name, exclude_id=category_id)
        db_category.name = category_update.name
    if category_update.type is not None:
        db_category.type = category_update.type

    db.commit()
    db.refresh(db_category)
    return db_category


def delete_category(db: Session, category_id: int, user_id: int) -> category_schema.Category:
    db_category = get_category_by_id(db=db, category_id=category_id, user_id=user_id)
    deleted = category_schema.Category.model_validate(db_category)
    db.delete(db_category)
    db.commit()
    return deleted
