# backend/routes/products.py
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from routes.deps import get_product_service
from services.product_service import ProductService
import schemas.product as product_schemas

router = APIRouter(prefix="/api/products", tags=["Products"])


# =========================
# PRODUCT LIST
# =========================
@router.get("", response_model=List[product_schemas.ProductRead])
def list_products(service: ProductService = Depends(get_product_service)):
    """Return every product in the inventory."""
    return service.list_products()


# =========================
# SEARCH & FILTERS
# =========================
@router.get("/search", response_model=List[product_schemas.ProductRead])
def search_products(
    q: Optional[str] = Query(None, max_length=200, description="Case-insensitive name fragment"),
    service: ProductService = Depends(get_product_service),
):
    """Products whose name contains the term. No term returns everything."""
    return service.search_products(q)


@router.get("/price-range", response_model=List[product_schemas.ProductRead])
def products_by_price_range(
    min_price: Decimal = Query(..., ge=0),
    max_price: Decimal = Query(..., ge=0),
    service: ProductService = Depends(get_product_service),
):
    """Products priced within [min_price, max_price]."""
    return service.get_products_by_price_range(min_price, max_price)


@router.get("/sku/{sku}", response_model=product_schemas.ProductRead)
def get_product_by_sku(
    sku: str = Path(..., min_length=1, max_length=50),
    service: ProductService = Depends(get_product_service),
):
    return service.get_product_by_sku(sku)


@router.get("/name/{name}", response_model=product_schemas.ProductRead)
def get_product_by_name(
    name: str = Path(..., min_length=1, max_length=200),
    service: ProductService = Depends(get_product_service),
):
    return service.get_product_by_name(name)


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductRead)
def get_product(
    product_id: int = Path(..., ge=1),
    service: ProductService = Depends(get_product_service),
):
    return service.get_product(product_id)


# =========================
# ADD PRODUCT
# =========================
@router.post("", response_model=product_schemas.ProductRead, status_code=status.HTTP_201_CREATED)
def add_product(
    payload: product_schemas.ProductCreate,
    response: Response,
    service: ProductService = Depends(get_product_service),
):
    created = service.create_product(payload)
    response.headers["Location"] = f"{router.prefix}/{created.id}"
    return created


# =========================
# UPDATE PRODUCT (PUT - full)
# =========================
@router.put("/{product_id}", response_model=product_schemas.ProductRead)
def update_product(
    payload: product_schemas.ProductUpdate,
    product_id: int = Path(..., ge=1),
    service: ProductService = Depends(get_product_service),
):
    return service.update_product(product_id, payload)


# =========================
# DELETE
# =========================
@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int = Path(..., ge=1),
    service: ProductService = Depends(get_product_service),
):
    service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
