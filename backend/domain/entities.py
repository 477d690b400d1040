# backend/domain/entities.py
"""Plain records shared by both storage backends.

The repositories hand these out instead of ORM rows, so services never
see a SQLAlchemy session or a dict from the in-memory store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


def normalize_sku(sku: Optional[str]) -> Optional[str]:
    if sku is None:
        return None
    s = sku.strip().upper()
    return s if s else None


@dataclass
class Product:
    name: str
    sku: str
    price: Decimal
    quantity_in_stock: int
    description: str = ""
    category_id: Optional[int] = None

    # Assigned by the store
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def inventory_value(self) -> Decimal:
        return self.price * self.quantity_in_stock


@dataclass
class Category:
    name: str
    description: str = ""

    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
