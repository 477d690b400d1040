# backend/domain/repository.py
"""Storage-agnostic contracts for products and categories.

Two implementations exist: repositories.memory (dict + lock) and
repositories.sql (SQLAlchemy). bootstrap.py picks one at startup.
Lookups that miss raise NotFoundError instead of returning None.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from domain.entities import Category, Product
from domain.exceptions import InvalidArgumentError


class ProductRepository(ABC):

    @abstractmethod
    def add(self, product: Product) -> Product:
        """Assign an id and timestamps, persist and return the stored product.

        Raises ConflictError if the SKU is taken, NotFoundError for an
        unknown category_id and InvalidArgumentError for a non-positive
        price or negative stock.
        """

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product:
        """Return the product or raise NotFoundError."""

    @abstractmethod
    def get_all(self) -> list[Product]:
        """Every product, ordered by id."""

    @abstractmethod
    def update(self, product: Product) -> Product:
        """Overwrite the mutable fields of an existing product.

        Raises NotFoundError for an unknown id and ConflictError when the
        SKU belongs to another product. Field rules are the same as
        for add(). Refreshes updated_at.
        """

    @abstractmethod
    def delete(self, product_id: int) -> None:
        """Remove the product; NotFoundError if it does not exist."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Product:
        """Exact (normalized) SKU match or NotFoundError."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product:
        """Case-insensitive exact name match or NotFoundError."""

    @abstractmethod
    def search_by_name(self, fragment: str) -> list[Product]:
        """Case-insensitive substring match over the name."""

    @abstractmethod
    def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> list[Product]:
        """Inclusive price filter; InvalidArgumentError if min_price > max_price."""

    @abstractmethod
    def get_by_category(self, category_id: int) -> list[Product]:
        """Products referencing the given category."""


class CategoryRepository(ABC):

    @abstractmethod
    def add(self, category: Category) -> Category:
        """Persist a new category; ConflictError on a duplicate name."""

    @abstractmethod
    def get_by_id(self, category_id: int) -> Category:
        """Return the category or raise NotFoundError."""

    @abstractmethod
    def get_all(self) -> list[Category]:
        """Every category, ordered by id."""

    @abstractmethod
    def update(self, category: Category) -> Category:
        """Overwrite name/description; NotFoundError or ConflictError."""

    @abstractmethod
    def delete(self, category_id: int) -> None:
        """Remove the category and clear category_id on its products."""

    @abstractmethod
    def get_by_name(self, name: str) -> Category:
        """Exact (trimmed) name match or NotFoundError."""


def check_price_range(min_price: Decimal, max_price: Decimal) -> None:
    if min_price > max_price:
        raise InvalidArgumentError(
            f"Minimum price ({min_price}) cannot be greater than maximum price ({max_price})"
        )


def check_product(product: Product) -> None:
    """Field rules both backends enforce before writing."""
    if product.price is None or product.price <= 0:
        raise InvalidArgumentError(f"Price must be greater than 0, got {product.price}")
    if product.quantity_in_stock is None or product.quantity_in_stock < 0:
        raise InvalidArgumentError(
            f"Quantity in stock cannot be negative, got {product.quantity_in_stock}"
        )
