# backend/routes/deps.py
from fastapi import Request

from bootstrap import Repositories
from services.analytics_service import CategoryAnalyticsService
from services.category_service import CategoryService
from services.product_service import ProductService


def get_repositories(request: Request) -> Repositories:
    return request.app.state.repositories


def get_product_service(request: Request) -> ProductService:
    repos = get_repositories(request)
    return ProductService(repos.products, repos.categories)


def get_category_service(request: Request) -> CategoryService:
    repos = get_repositories(request)
    return CategoryService(repos.categories, repos.products)


def get_analytics_service(request: Request) -> CategoryAnalyticsService:
    repos = get_repositories(request)
    return CategoryAnalyticsService(repos.categories, repos.products, request.app.state.clock)
