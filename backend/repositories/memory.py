# backend/repositories/memory.py
"""In-memory backend.

Both repositories share one InMemoryStore so that deleting a category
can clear product references. FastAPI runs sync endpoints in a thread
pool, so every access to the dicts happens under the store lock.
Entities are copied on the way in and out; callers never hold a
reference to stored state.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from decimal import Decimal
from typing import Dict

from domain.clock import Clock, SystemClock
from domain.entities import Category, Product, normalize_sku
from domain.exceptions import ConflictError, NotFoundError
from domain.repository import CategoryRepository, ProductRepository, check_price_range, check_product


class InMemoryStore:
    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock or SystemClock()
        self.lock = threading.RLock()
        self.products: Dict[int, Product] = {}
        self.categories: Dict[int, Category] = {}
        self._next_product_id = 1
        self._next_category_id = 1

    # Ids only ever grow, so deleted ids are never handed out again
    def next_product_id(self) -> int:
        pid = self._next_product_id
        self._next_product_id += 1
        return pid

    def next_category_id(self) -> int:
        cid = self._next_category_id
        self._next_category_id += 1
        return cid


class InMemoryProductRepository(ProductRepository):

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    # --- ProductRepository interface ------------------------------------------

    def add(self, product: Product) -> Product:
        check_product(product)
        sku = normalize_sku(product.sku)
        with self._store.lock:
            self._check_category(product.category_id)
            if self._find_sku(sku) is not None:
                raise ConflictError(f"SKU '{sku}' already exists")
            now = self._store.clock.now()
            stored = replace(
                product,
                id=self._store.next_product_id(),
                sku=sku,
                created_at=now,
                updated_at=now,
            )
            self._store.products[stored.id] = stored
            return replace(stored)

    def get_by_id(self, product_id: int) -> Product:
        with self._store.lock:
            return replace(self._get(product_id))

    def get_all(self) -> list[Product]:
        with self._store.lock:
            return [replace(p) for _, p in sorted(self._store.products.items())]

    def update(self, product: Product) -> Product:
        sku = normalize_sku(product.sku)
        with self._store.lock:
            existing = self._get(product.id)
            check_product(product)
            self._check_category(product.category_id)
            owner = self._find_sku(sku)
            if owner is not None and owner.id != existing.id:
                raise ConflictError(f"SKU '{sku}' already exists")
            updated = replace(
                existing,
                name=product.name,
                description=product.description,
                sku=sku,
                price=product.price,
                quantity_in_stock=product.quantity_in_stock,
                category_id=product.category_id,
                updated_at=self._store.clock.now(),
            )
            self._store.products[updated.id] = updated
            return replace(updated)

    def delete(self, product_id: int) -> None:
        with self._store.lock:
            self._get(product_id)
            del self._store.products[product_id]

    def get_by_sku(self, sku: str) -> Product:
        norm = normalize_sku(sku)
        with self._store.lock:
            found = self._find_sku(norm)
            if found is None:
                raise NotFoundError(f"Product with SKU '{norm}' not found")
            return replace(found)

    def get_by_name(self, name: str) -> Product:
        wanted = name.strip().lower()
        with self._store.lock:
            for _, p in sorted(self._store.products.items()):
                if p.name.lower() == wanted:
                    return replace(p)
        raise NotFoundError(f"Product with name '{name}' not found")

    def search_by_name(self, fragment: str) -> list[Product]:
        term = fragment.lower()
        with self._store.lock:
            return [
                replace(p) for _, p in sorted(self._store.products.items())
                if term in p.name.lower()
            ]

    def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> list[Product]:
        check_price_range(min_price, max_price)
        with self._store.lock:
            return [
                replace(p) for _, p in sorted(self._store.products.items())
                if min_price <= p.price <= max_price
            ]

    def get_by_category(self, category_id: int) -> list[Product]:
        with self._store.lock:
            return [
                replace(p) for _, p in sorted(self._store.products.items())
                if p.category_id == category_id
            ]

    # --- Helpers (caller holds the lock) --------------------------------------

    def _get(self, product_id: int | None) -> Product:
        product = self._store.products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return product

    def _find_sku(self, sku: str | None) -> Product | None:
        for p in self._store.products.values():
            if p.sku == sku:
                return p
        return None

    def _check_category(self, category_id: int | None) -> None:
        if category_id is not None and category_id not in self._store.categories:
            raise NotFoundError(f"Category with ID {category_id} not found")


class InMemoryCategoryRepository(CategoryRepository):

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def add(self, category: Category) -> Category:
        name = category.name.strip()
        with self._store.lock:
            if self._find_name(name) is not None:
                raise ConflictError(f"Category '{name}' already exists")
            now = self._store.clock.now()
            stored = replace(
                category,
                id=self._store.next_category_id(),
                name=name,
                created_at=now,
                updated_at=now,
            )
            self._store.categories[stored.id] = stored
            return replace(stored)

    def get_by_id(self, category_id: int) -> Category:
        with self._store.lock:
            return replace(self._get(category_id))

    def get_all(self) -> list[Category]:
        with self._store.lock:
            return [replace(c) for _, c in sorted(self._store.categories.items())]

    def update(self, category: Category) -> Category:
        name = category.name.strip()
        with self._store.lock:
            existing = self._get(category.id)
            owner = self._find_name(name)
            if owner is not None and owner.id != existing.id:
                raise ConflictError(f"Category '{name}' already exists")
            updated = replace(
                existing,
                name=name,
                description=category.description,
                updated_at=self._store.clock.now(),
            )
            self._store.categories[updated.id] = updated
            return replace(updated)

    def delete(self, category_id: int) -> None:
        with self._store.lock:
            self._get(category_id)
            now = self._store.clock.now()
            # Products keep living without a category
            for pid, p in list(self._store.products.items()):
                if p.category_id == category_id:
                    self._store.products[pid] = replace(p, category_id=None, updated_at=now)
            del self._store.categories[category_id]

    def get_by_name(self, name: str) -> Category:
        with self._store.lock:
            found = self._find_name(name.strip())
            if found is None:
                raise NotFoundError(f"Category '{name}' not found")
            return replace(found)

    def _get(self, category_id: int | None) -> Category:
        category = self._store.categories.get(category_id)
        if category is None:
            raise NotFoundError(f"Category with ID {category_id} not found")
        return category

    def _find_name(self, name: str) -> Category | None:
        for c in self._store.categories.values():
            if c.name == name:
                return c
        return None
