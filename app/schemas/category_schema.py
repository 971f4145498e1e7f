from typing import Literal, Optional

from app.schemas.general_schema import CamelModel


class CategoryCreate(CamelModel):
    name: str
    type: Literal["income", "expense"]


class CategoryUpdate(CamelModel):
    name: Optional[str] = None
    type: Optional[Literal["income", "expense"]] = None


class Category(CategoryCreate):
    category_id: int
    user_id: int
