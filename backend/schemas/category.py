# backend/schemas/category.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.product import InputBase, ORMBase


class CategoryBase(InputBase):
    name: str = Field(..., min_length=1, max_length=100, examples=["Electronics"])
    description: Optional[str] = Field("", max_length=500)


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    pass


class CategoryRead(ORMBase):
    id: int
    name: str
    description: str = ""
    created_at: datetime
    updated_at: datetime
