import logging
import os
import random
import sys
from decimal import Decimal

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from bootstrap import Repositories, build_repositories
from config import settings
from domain.exceptions import ConflictError
from schemas.category import CategoryCreate
from schemas.product import ProductCreate
from services.category_service import CategoryService
from services.product_service import ProductService
from utils.log_setup import configure_logging

logger = logging.getLogger("populate_db")

# Configuration
CATEGORIES = {
    "Electronics": "Devices, components and accessories",
    "Tools": "Hand and power tools",
    "Office": "Stationery and office supplies",
    "Garden": "Outdoor and garden equipment",
}
PRODUCTS_PER_CATEGORY = 5
SEED = 42
# End Configuration


def populate(repos: Repositories, products_per_category: int = PRODUCTS_PER_CATEGORY, seed: int = SEED) -> dict:
    """Insert demo categories and products. Existing SKUs/names are skipped."""
    rng = random.Random(seed)
    categories = CategoryService(repos.categories, repos.products)
    products = ProductService(repos.products, repos.categories)
    created = {"categories": 0, "products": 0, "skipped": 0}

    for name, description in CATEGORIES.items():
        try:
            category = categories.create_category(CategoryCreate(name=name, description=description))
            created["categories"] += 1
        except ConflictError:
            category = repos.categories.get_by_name(name)
            created["skipped"] += 1

        prefix = name[:3].upper()
        for i in range(1, products_per_category + 1):
            payload = ProductCreate(
                name=f"{name} item {i}",
                description=f"Demo product from {name.lower()}",
                sku=f"{prefix}-{i:03d}",
                price=Decimal(str(round(rng.uniform(5.0, 500.0), 2))),
                # Every category gets a few low-stock and sold-out items
                quantity_in_stock=rng.choice([0, 3, 8, 25, 120, 400]),
                category_id=category.id,
            )
            try:
                products.create_product(payload)
                created["products"] += 1
            except ConflictError:
                created["skipped"] += 1

    return created


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    repos = build_repositories(settings)
    try:
        result = populate(repos)
        logger.info(
            "Seeded %s categories and %s products (%s skipped)",
            result["categories"], result["products"], result["skipped"],
        )
    finally:
        repos.close()
