# backend/services/analytics_service.py
"""Category analytics computed over the repository contracts.

Works the same on both backends: it only reads get_all() snapshots and
aggregates in Python, which is fine at demo scale.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional

from domain.clock import Clock, SystemClock
from domain.entities import Category, Product
from domain.exceptions import InvalidArgumentError
from domain.repository import CategoryRepository, ProductRepository
from schemas.analytics import (
    AnalyticsSummary,
    CategoryAnalytics,
    CategoryDistribution,
    CategoryMetrics,
    CategoryValue,
)

logger = logging.getLogger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 10
CENT = Decimal("0.01")

SORT_KEYS = {
    "product_count": lambda a: a.total_products,
    "inventory_value": lambda a: a.total_inventory_value,
    "average_price": lambda a: a.average_price,
}


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _percent(part, whole) -> float:
    if not whole:
        return 0.0
    return round(float(Decimal(part) / Decimal(whole) * 100), 2)


class CategoryAnalyticsService:

    def __init__(
        self,
        categories: CategoryRepository,
        products: ProductRepository,
        clock: Clock | None = None,
    ) -> None:
        self._categories = categories
        self._products = products
        self._clock = clock or SystemClock()

    def get_metrics(
        self,
        include_empty: bool = False,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> CategoryMetrics:
        start_date, end_date = _utc(start_date), _utc(end_date)
        _check_threshold(low_stock_threshold, minimum=0)
        _check_dates(start_date, end_date)

        categories = self._categories.get_all()
        products = self._products.get_all()
        total_value = sum((p.inventory_value for p in products), Decimal("0"))

        grouped = _group_by_category(_created_between(products, start_date, end_date))
        analytics = [
            _analyze(c, grouped.get(c.id, []), total_value, low_stock_threshold)
            for c in categories
        ]
        if not include_empty:
            analytics = [a for a in analytics if a.total_products > 0]

        with_products = len({p.category_id for p in products if p.category_id is not None})
        metrics = CategoryMetrics(
            total_categories=len(categories),
            total_products=len(products),
            total_inventory_value=_money(total_value),
            average_products_per_category=(
                round(len(products) / len(categories), 2) if categories else 0.0
            ),
            categories_with_products=with_products,
            empty_categories=len(categories) - with_products,
            category_analytics=analytics,
        )
        logger.info(
            "Computed metrics for %s categories with %s products",
            metrics.total_categories, metrics.total_products,
        )
        return metrics

    def get_category_analytics(
        self,
        category_id: int,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> CategoryAnalytics:
        start_date, end_date = _utc(start_date), _utc(end_date)
        _check_threshold(low_stock_threshold, minimum=0)
        _check_dates(start_date, end_date)

        category = self._categories.get_by_id(category_id)
        products = self._products.get_all()
        total_value = sum((p.inventory_value for p in products), Decimal("0"))
        own = [p for p in _created_between(products, start_date, end_date) if p.category_id == category_id]
        return _analyze(category, own, total_value, low_stock_threshold)

    def get_top_categories(self, count: int = 10, sort_by: str = "product_count") -> List[CategoryAnalytics]:
        if count < 1 or count > 50:
            raise InvalidArgumentError("Count must be between 1 and 50")
        key = SORT_KEYS.get(sort_by.lower())
        if key is None:
            raise InvalidArgumentError(
                f"Invalid sort_by parameter. Valid options: {', '.join(SORT_KEYS)}"
            )

        analytics = self._all_analytics(DEFAULT_LOW_STOCK_THRESHOLD)
        # Stable sort keeps id order among ties
        ranked = sorted(
            (a for a in analytics if a.total_products > 0), key=key, reverse=True
        )
        return ranked[:count]

    def get_stock_issues(self, low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> List[CategoryAnalytics]:
        _check_threshold(low_stock_threshold, minimum=1, maximum=100)
        issues = [
            a for a in self._all_analytics(low_stock_threshold)
            if a.low_stock_products > 0 or a.out_of_stock_products > 0
        ]
        logger.info("Found %s categories with stock issues", len(issues))
        return issues

    def get_distribution(self) -> List[CategoryDistribution]:
        products = self._products.get_all()
        total_value = sum((p.inventory_value for p in products), Decimal("0"))
        total_stock = sum(p.quantity_in_stock for p in products)
        grouped = _group_by_category(products)

        result = []
        for category in self._categories.get_all():
            own = grouped.get(category.id)
            if not own:
                continue
            result.append(
                CategoryDistribution(
                    category_id=category.id,
                    category_name=category.name,
                    product_percentage=_percent(len(own), len(products)),
                    value_percentage=_percent(sum((p.inventory_value for p in own), Decimal("0")), total_value),
                    stock_percentage=_percent(sum(p.quantity_in_stock for p in own), total_stock),
                )
            )
        return result

    def get_summary(self) -> AnalyticsSummary:
        metrics = self.get_metrics(include_empty=True)
        by_value = sorted(
            (a for a in metrics.category_analytics if a.total_products > 0),
            key=SORT_KEYS["inventory_value"],
            reverse=True,
        )
        return AnalyticsSummary(
            total_categories=metrics.total_categories,
            total_products=metrics.total_products,
            total_inventory_value=metrics.total_inventory_value,
            categories_with_products=metrics.categories_with_products,
            empty_categories=metrics.empty_categories,
            average_products_per_category=metrics.average_products_per_category,
            top_categories_by_value=[
                CategoryValue(category_name=a.category_name, total_inventory_value=a.total_inventory_value)
                for a in by_value[:3]
            ],
            categories_with_stock_issues=sum(
                1 for a in metrics.category_analytics
                if a.low_stock_products > 0 or a.out_of_stock_products > 0
            ),
            last_updated=self._clock.now(),
        )

    def _all_analytics(self, low_stock_threshold: int) -> List[CategoryAnalytics]:
        products = self._products.get_all()
        total_value = sum((p.inventory_value for p in products), Decimal("0"))
        grouped = _group_by_category(products)
        return [
            _analyze(c, grouped.get(c.id, []), total_value, low_stock_threshold)
            for c in self._categories.get_all()
        ]


def _group_by_category(products: Iterable[Product]) -> Dict[int, List[Product]]:
    grouped: Dict[int, List[Product]] = defaultdict(list)
    for p in products:
        if p.category_id is not None:
            grouped[p.category_id].append(p)
    return grouped


def _created_between(
    products: List[Product], start_date: Optional[datetime], end_date: Optional[datetime]
) -> List[Product]:
    return [
        p for p in products
        if (start_date is None or p.created_at >= start_date)
        and (end_date is None or p.created_at <= end_date)
    ]


def _analyze(
    category: Category, products: List[Product], total_value: Decimal, low_stock_threshold: int
) -> CategoryAnalytics:
    prices = [p.price for p in products]
    value = sum((p.inventory_value for p in products), Decimal("0"))
    return CategoryAnalytics(
        category_id=category.id,
        category_name=category.name,
        category_description=category.description,
        total_products=len(products),
        total_stock_quantity=sum(p.quantity_in_stock for p in products),
        average_price=_money(sum(prices, Decimal("0")) / len(prices)) if prices else Decimal("0.00"),
        min_price=_money(min(prices)) if prices else Decimal("0.00"),
        max_price=_money(max(prices)) if prices else Decimal("0.00"),
        total_inventory_value=_money(value),
        inventory_value_percentage=_percent(value, total_value),
        low_stock_products=sum(1 for p in products if 0 < p.quantity_in_stock < low_stock_threshold),
        out_of_stock_products=sum(1 for p in products if p.quantity_in_stock == 0),
        last_product_added=max((p.created_at for p in products), default=None),
    )


def _check_threshold(value: int, minimum: int, maximum: Optional[int] = None) -> None:
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f"between {minimum} and {maximum}" if maximum is not None else f"at least {minimum}"
        raise InvalidArgumentError(f"Low stock threshold must be {bounds}")


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    # Query strings usually come without an offset
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _check_dates(start_date: Optional[datetime], end_date: Optional[datetime]) -> None:
    if start_date and end_date and start_date > end_date:
        raise InvalidArgumentError("Start date cannot be greater than end date")
