# backend/routes/analytics.py
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Path, Query

from routes.deps import get_analytics_service
from services.analytics_service import DEFAULT_LOW_STOCK_THRESHOLD, CategoryAnalyticsService
import schemas.analytics as analytics_schemas

# Registered before the categories router so "/analytics" never hits "/{category_id}"
router = APIRouter(prefix="/api/categories/analytics", tags=["Category Analytics"])

SortBy = Literal["product_count", "inventory_value", "average_price"]


@router.get("", response_model=analytics_schemas.CategoryMetrics)
def get_category_metrics(
    start_date: Optional[datetime] = Query(None, description="Only products created on/after"),
    end_date: Optional[datetime] = Query(None, description="Only products created on/before"),
    include_empty: bool = Query(False, description="Include categories without products"),
    low_stock_threshold: int = Query(DEFAULT_LOW_STOCK_THRESHOLD, ge=0),
    service: CategoryAnalyticsService = Depends(get_analytics_service),
):
    """Totals across all categories plus per-category figures."""
    return service.get_metrics(
        include_empty=include_empty,
        low_stock_threshold=low_stock_threshold,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/top", response_model=List[analytics_schemas.CategoryAnalytics])
def get_top_categories(
    count: int = Query(10, ge=1, le=50),
    sort_by: SortBy = Query("product_count"),
    service: CategoryAnalyticsService = Depends(get_analytics_service),
):
    return service.get_top_categories(count=count, sort_by=sort_by)


@router.get("/stock-issues", response_model=List[analytics_schemas.CategoryAnalytics])
def get_stock_issues(
    low_stock_threshold: int = Query(DEFAULT_LOW_STOCK_THRESHOLD, ge=1, le=100),
    service: CategoryAnalyticsService = Depends(get_analytics_service),
):
    """Categories with at least one low-stock or out-of-stock product."""
    return service.get_stock_issues(low_stock_threshold)


@router.get("/distribution", response_model=List[analytics_schemas.CategoryDistribution])
def get_distribution(service: CategoryAnalyticsService = Depends(get_analytics_service)):
    return service.get_distribution()


@router.get("/summary", response_model=analytics_schemas.AnalyticsSummary)
def get_summary(service: CategoryAnalyticsService = Depends(get_analytics_service)):
    return service.get_summary()


@router.get("/{category_id}", response_model=analytics_schemas.CategoryAnalytics)
def get_category_analytics(
    category_id: int = Path(..., ge=1),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    low_stock_threshold: int = Query(DEFAULT_LOW_STOCK_THRESHOLD, ge=0),
    service: CategoryAnalyticsService = Depends(get_analytics_service),
):
    return service.get_category_analytics(
        category_id,
        low_stock_threshold=low_stock_threshold,
        start_date=start_date,
        end_date=end_date,
    )
