"""Test doubles shared across the suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from domain.entities import Category, Product

T0 = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Frozen clock; time only moves when a test calls advance()."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float = 1) -> datetime:
        self.current += timedelta(seconds=seconds)
        return self.current


def make_product(
    name: str = "Widget",
    sku: str = "SKU-001",
    price: str = "9.99",
    quantity: int = 10,
    description: str = "",
    category_id: int | None = None,
) -> Product:
    return Product(
        name=name,
        sku=sku,
        price=Decimal(price),
        quantity_in_stock=quantity,
        description=description,
        category_id=category_id,
    )


def make_category(name: str = "Electronics", description: str = "") -> Category:
    return Category(name=name, description=description)
