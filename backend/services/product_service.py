# backend/services/product_service.py
"""Product use cases: validate, map, call the repository.

Errors raised by the repositories propagate unchanged; this layer only
adds the up-front checks (unique SKU, existing category) so the caller
gets a precise message before anything is written.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from domain.entities import Product, normalize_sku
from domain.exceptions import ConflictError, NotFoundError
from domain.repository import CategoryRepository, ProductRepository
from schemas.product import ProductCreate, ProductRead, ProductUpdate

logger = logging.getLogger(__name__)


def to_product_read(product: Product) -> ProductRead:
    return ProductRead.model_validate(product)


class ProductService:

    def __init__(self, products: ProductRepository, categories: CategoryRepository) -> None:
        self._products = products
        self._categories = categories

    def create_product(self, payload: ProductCreate) -> ProductRead:
        sku = normalize_sku(payload.sku)
        self._ensure_category(payload.category_id)
        if self._sku_taken(sku):
            logger.warning("Rejected product create: SKU %s already exists", sku)
            raise ConflictError(f"SKU '{sku}' already exists. Each product must have a unique SKU.")

        product = Product(
            name=payload.name,
            description=payload.description,
            sku=sku,
            price=payload.price,
            quantity_in_stock=payload.quantity_in_stock,
            category_id=payload.category_id,
        )
        created = self._products.add(product)
        logger.info("Created product id=%s sku=%s", created.id, created.sku)
        return to_product_read(created)

    def get_product(self, product_id: int) -> ProductRead:
        return to_product_read(self._products.get_by_id(product_id))

    def list_products(self) -> list[ProductRead]:
        return [to_product_read(p) for p in self._products.get_all()]

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductRead:
        existing = self._products.get_by_id(product_id)
        self._ensure_category(payload.category_id)

        sku = normalize_sku(payload.sku) or existing.sku
        if sku != existing.sku and self._sku_taken(sku):
            logger.warning("Rejected product %s update: SKU %s already exists", product_id, sku)
            raise ConflictError(f"SKU '{sku}' already exists. Each product must have a unique SKU.")

        existing.name = payload.name
        existing.description = payload.description
        existing.sku = sku
        existing.price = payload.price
        existing.quantity_in_stock = payload.quantity_in_stock
        existing.category_id = payload.category_id

        updated = self._products.update(existing)
        logger.info("Updated product id=%s", updated.id)
        return to_product_read(updated)

    def delete_product(self, product_id: int) -> None:
        self._products.delete(product_id)
        logger.info("Deleted product id=%s", product_id)

    def get_product_by_sku(self, sku: str) -> ProductRead:
        return to_product_read(self._products.get_by_sku(sku))

    def get_product_by_name(self, name: str) -> ProductRead:
        return to_product_read(self._products.get_by_name(name))

    def search_products(self, term: Optional[str]) -> list[ProductRead]:
        # No term means no filter
        if term is None or not term.strip():
            return self.list_products()
        return [to_product_read(p) for p in self._products.search_by_name(term.strip())]

    def get_products_by_price_range(self, min_price: Decimal, max_price: Decimal) -> list[ProductRead]:
        products = self._products.get_by_price_range(min_price, max_price)
        return [to_product_read(p) for p in products]

    # --- Helpers --------------------------------------------------------------

    def _sku_taken(self, sku: Optional[str]) -> bool:
        try:
            self._products.get_by_sku(sku)
        except NotFoundError:
            return False
        return True

    def _ensure_category(self, category_id: Optional[int]) -> None:
        if category_id is not None:
            # Raises NotFoundError for a dangling reference
            self._categories.get_by_id(category_id)
