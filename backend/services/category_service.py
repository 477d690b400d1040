# backend/services/category_service.py
from __future__ import annotations

import logging

from domain.entities import Category
from domain.repository import CategoryRepository, ProductRepository
from schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from schemas.product import ProductRead
from services.product_service import to_product_read

logger = logging.getLogger(__name__)


class CategoryService:

    def __init__(self, categories: CategoryRepository, products: ProductRepository) -> None:
        self._categories = categories
        self._products = products

    def create_category(self, payload: CategoryCreate) -> CategoryRead:
        created = self._categories.add(
            Category(name=payload.name, description=payload.description or "")
        )
        logger.info("Created category id=%s name=%s", created.id, created.name)
        return CategoryRead.model_validate(created)

    def get_category(self, category_id: int) -> CategoryRead:
        return CategoryRead.model_validate(self._categories.get_by_id(category_id))

    def list_categories(self) -> list[CategoryRead]:
        return [CategoryRead.model_validate(c) for c in self._categories.get_all()]

    def update_category(self, category_id: int, payload: CategoryUpdate) -> CategoryRead:
        updated = self._categories.update(
            Category(id=category_id, name=payload.name, description=payload.description or "")
        )
        logger.info("Updated category id=%s", updated.id)
        return CategoryRead.model_validate(updated)

    def delete_category(self, category_id: int) -> None:
        # Products stay; their category_id is cleared by the repository
        self._categories.delete(category_id)
        logger.info("Deleted category id=%s", category_id)

    def list_category_products(self, category_id: int) -> list[ProductRead]:
        self._categories.get_by_id(category_id)
        return [to_product_read(p) for p in self._products.get_by_category(category_id)]
