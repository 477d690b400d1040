# backend/repositories/sql.py
"""Relational backend on SQLAlchemy.

Each public method is one unit of work: its own session, its own
transaction, committed on success and rolled back on any error. Engine
errors are translated into the domain error kinds here and nowhere else.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterator, Optional

from sqlalchemy import func
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from domain.clock import Clock, SystemClock
from domain.entities import Category, Product, normalize_sku
from domain.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    StorageUnavailableError,
)
from domain.repository import CategoryRepository, ProductRepository, check_price_range, check_product
from models.category import Category as CategoryRow
from models.product import Product as ProductRow

logger = logging.getLogger(__name__)


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    try:
        with session_factory() as session, session.begin():
            yield session
    except IntegrityError as e:
        logger.warning("Constraint violation: %s", e.orig)
        if _is_unique_violation(e):
            raise ConflictError("Uniqueness constraint violated") from e
        raise InvalidArgumentError("Data violates a database constraint") from e
    except OperationalError as e:
        logger.exception("Database unavailable: %s", e)
        raise StorageUnavailableError("Database is unavailable") from e
    except DBAPIError as e:
        if not e.connection_invalidated:
            raise
        logger.exception("Database connection lost: %s", e)
        raise StorageUnavailableError("Database is unavailable") from e


def _is_unique_violation(error: IntegrityError) -> bool:
    # 23505 is unique_violation on PostgreSQL; SQLite says "UNIQUE constraint failed"
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    return "unique" in str(error.orig).lower()


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo; everything stored is UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_product(row: ProductRow) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        description=row.description or "",
        sku=row.sku,
        price=Decimal(row.price),
        quantity_in_stock=row.quantity_in_stock,
        category_id=row.category_id,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


def _to_category(row: CategoryRow) -> Category:
    return Category(
        id=row.id,
        name=row.name,
        description=row.description or "",
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SqlProductRepository(ProductRepository):

    def __init__(self, session_factory: sessionmaker, clock: Clock | None = None) -> None:
        self._session_factory = session_factory
        self._clock = clock or SystemClock()

    def add(self, product: Product) -> Product:
        check_product(product)
        sku = normalize_sku(product.sku)
        now = self._clock.now()
        with session_scope(self._session_factory) as db:
            self._check_category(db, product.category_id)
            if db.query(ProductRow.id).filter(ProductRow.sku == sku).first():
                raise ConflictError(f"SKU '{sku}' already exists")
            row = ProductRow(
                name=product.name,
                description=product.description or "",
                sku=sku,
                price=product.price,
                quantity_in_stock=product.quantity_in_stock,
                category_id=product.category_id,
                created_at=now,
                updated_at=now,
            )
            db.add(row)
            db.flush()
            return _to_product(row)

    def get_by_id(self, product_id: int) -> Product:
        with session_scope(self._session_factory) as db:
            return _to_product(self._get(db, product_id))

    def get_all(self) -> list[Product]:
        with session_scope(self._session_factory) as db:
            rows = db.query(ProductRow).order_by(ProductRow.id.asc()).all()
            return [_to_product(r) for r in rows]

    def update(self, product: Product) -> Product:
        sku = normalize_sku(product.sku)
        with session_scope(self._session_factory) as db:
            row = self._get(db, product.id)
            check_product(product)
            self._check_category(db, product.category_id)
            conflict = (
                db.query(ProductRow.id)
                .filter(ProductRow.sku == sku, ProductRow.id != row.id)
                .first()
            )
            if conflict:
                raise ConflictError(f"SKU '{sku}' already exists")

            row.name = product.name
            row.description = product.description or ""
            row.sku = sku
            row.price = product.price
            row.quantity_in_stock = product.quantity_in_stock
            row.category_id = product.category_id
            row.updated_at = self._clock.now()
            db.flush()
            return _to_product(row)

    def delete(self, product_id: int) -> None:
        with session_scope(self._session_factory) as db:
            db.delete(self._get(db, product_id))

    def get_by_sku(self, sku: str) -> Product:
        norm = normalize_sku(sku)
        with session_scope(self._session_factory) as db:
            row = db.query(ProductRow).filter(ProductRow.sku == norm).first()
            if row is None:
                raise NotFoundError(f"Product with SKU '{norm}' not found")
            return _to_product(row)

    def get_by_name(self, name: str) -> Product:
        with session_scope(self._session_factory) as db:
            row = (
                db.query(ProductRow)
                .filter(func.lower(ProductRow.name) == name.strip().lower())
                .order_by(ProductRow.id.asc())
                .first()
            )
            if row is None:
                raise NotFoundError(f"Product with name '{name}' not found")
            return _to_product(row)

    def search_by_name(self, fragment: str) -> list[Product]:
        with session_scope(self._session_factory) as db:
            rows = (
                db.query(ProductRow)
                .filter(func.lower(ProductRow.name).contains(fragment.lower(), autoescape=True))
                .order_by(ProductRow.id.asc())
                .all()
            )
            return [_to_product(r) for r in rows]

    def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> list[Product]:
        check_price_range(min_price, max_price)
        with session_scope(self._session_factory) as db:
            rows = (
                db.query(ProductRow)
                .filter(ProductRow.price >= min_price, ProductRow.price <= max_price)
                .order_by(ProductRow.id.asc())
                .all()
            )
            return [_to_product(r) for r in rows]

    def get_by_category(self, category_id: int) -> list[Product]:
        with session_scope(self._session_factory) as db:
            rows = (
                db.query(ProductRow)
                .filter(ProductRow.category_id == category_id)
                .order_by(ProductRow.id.asc())
                .all()
            )
            return [_to_product(r) for r in rows]

    @staticmethod
    def _get(db: Session, product_id: Optional[int]) -> ProductRow:
        row = db.get(ProductRow, product_id) if product_id is not None else None
        if row is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return row

    @staticmethod
    def _check_category(db: Session, category_id: Optional[int]) -> None:
        if category_id is not None and db.get(CategoryRow, category_id) is None:
            raise NotFoundError(f"Category with ID {category_id} not found")


class SqlCategoryRepository(CategoryRepository):

    def __init__(self, session_factory: sessionmaker, clock: Clock | None = None) -> None:
        self._session_factory = session_factory
        self._clock = clock or SystemClock()

    def add(self, category: Category) -> Category:
        name = category.name.strip()
        now = self._clock.now()
        with session_scope(self._session_factory) as db:
            if db.query(CategoryRow.id).filter(CategoryRow.name == name).first():
                raise ConflictError(f"Category '{name}' already exists")
            row = CategoryRow(
                name=name,
                description=category.description or "",
                created_at=now,
                updated_at=now,
            )
            db.add(row)
            db.flush()
            return _to_category(row)

    def get_by_id(self, category_id: int) -> Category:
        with session_scope(self._session_factory) as db:
            return _to_category(self._get(db, category_id))

    def get_all(self) -> list[Category]:
        with session_scope(self._session_factory) as db:
            rows = db.query(CategoryRow).order_by(CategoryRow.id.asc()).all()
            return [_to_category(r) for r in rows]

    def update(self, category: Category) -> Category:
        name = category.name.strip()
        with session_scope(self._session_factory) as db:
            row = self._get(db, category.id)
            conflict = (
                db.query(CategoryRow.id)
                .filter(CategoryRow.name == name, CategoryRow.id != row.id)
                .first()
            )
            if conflict:
                raise ConflictError(f"Category '{name}' already exists")
            row.name = name
            row.description = category.description or ""
            row.updated_at = self._clock.now()
            db.flush()
            return _to_category(row)

    def delete(self, category_id: int) -> None:
        with session_scope(self._session_factory) as db:
            row = self._get(db, category_id)
            # ON DELETE SET NULL would do this too, but not bump updated_at
            db.query(ProductRow).filter(ProductRow.category_id == category_id).update(
                {ProductRow.category_id: None, ProductRow.updated_at: self._clock.now()},
                synchronize_session=False,
            )
            db.delete(row)

    def get_by_name(self, name: str) -> Category:
        with session_scope(self._session_factory) as db:
            row = db.query(CategoryRow).filter(CategoryRow.name == name.strip()).first()
            if row is None:
                raise NotFoundError(f"Category '{name}' not found")
            return _to_category(row)

    @staticmethod
    def _get(db: Session, category_id: Optional[int]) -> CategoryRow:
        row = db.get(CategoryRow, category_id) if category_id is not None else None
        if row is None:
            raise NotFoundError(f"Category with ID {category_id} not found")
        return row
