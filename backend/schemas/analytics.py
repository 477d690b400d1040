# backend/schemas/analytics.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, PlainSerializer

Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# Per-category inventory figures
class CategoryAnalytics(BaseModel):
    category_id: int
    category_name: str
    category_description: str = ""
    total_products: int
    total_stock_quantity: int
    average_price: Amount
    min_price: Amount
    max_price: Amount
    total_inventory_value: Amount
    # Share of the whole inventory value, 0-100
    inventory_value_percentage: float
    low_stock_products: int
    out_of_stock_products: int
    last_product_added: Optional[datetime] = None


class CategoryMetrics(BaseModel):
    total_categories: int
    total_products: int
    total_inventory_value: Amount
    average_products_per_category: float
    categories_with_products: int
    empty_categories: int
    category_analytics: List[CategoryAnalytics]


class CategoryDistribution(BaseModel):
    category_id: int
    category_name: str
    product_percentage: float
    value_percentage: float
    stock_percentage: float


class CategoryValue(BaseModel):
    category_name: str
    total_inventory_value: Amount


# Dashboard summary
class AnalyticsSummary(BaseModel):
    total_categories: int
    total_products: int
    total_inventory_value: Amount
    categories_with_products: int
    empty_categories: int
    average_products_per_category: float
    top_categories_by_value: List[CategoryValue]
    categories_with_stock_issues: int
    last_updated: datetime
