# backend/schemas/product.py
import re
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, Field, ConfigDict, PlainSerializer, field_validator

SKU_PATTERN = re.compile(r"^[A-Z0-9\-]+$")

# DECIMAL(10,2) in the database, plain JSON number on the wire
Price = Annotated[
    Decimal,
    Field(gt=0, max_digits=10, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Inputs are trimmed before length checks run
class InputBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


def _check_sku(value: str) -> str:
    sku = value.upper()
    if not SKU_PATTERN.match(sku):
        raise ValueError("SKU must contain only letters, numbers, and hyphens")
    return sku


# Shared attributes for create/update payloads
class ProductBase(InputBase):
    name: str = Field(..., min_length=1, max_length=200, examples=["Widget"])
    description: str = Field("", max_length=1000)
    price: Price = Field(..., examples=[19.99])
    quantity_in_stock: int = Field(..., ge=0, examples=[100])
    category_id: Optional[int] = Field(None, ge=1)

    @field_validator("description", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v


# Schema for creating a new product
class ProductCreate(ProductBase):
    sku: str = Field(..., min_length=3, max_length=50, examples=["SKU-001"])

    @field_validator("sku")
    @classmethod
    def _normalize_sku(cls, v: str) -> str:
        return _check_sku(v)


# Full update; SKU may be left out to keep the current one
class ProductUpdate(ProductBase):
    sku: Optional[str] = Field(None, min_length=3, max_length=50)

    @field_validator("sku")
    @classmethod
    def _normalize_sku(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_sku(v)


# Full product representation including server-assigned fields
class ProductRead(ORMBase):
    id: int
    name: str
    description: str = ""
    sku: str
    price: Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
    quantity_in_stock: int
    category_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
