# backend/routes/categories.py
from typing import List

from fastapi import APIRouter, Depends, Path, Response, status

from routes.deps import get_category_service
from services.category_service import CategoryService
import schemas.category as category_schemas
import schemas.product as product_schemas

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get("", response_model=List[category_schemas.CategoryRead])
def list_categories(service: CategoryService = Depends(get_category_service)):
    return service.list_categories()


@router.get("/{category_id}", response_model=category_schemas.CategoryRead)
def get_category(
    category_id: int = Path(..., ge=1),
    service: CategoryService = Depends(get_category_service),
):
    return service.get_category(category_id)


@router.get("/{category_id}/products", response_model=List[product_schemas.ProductRead])
def list_category_products(
    category_id: int = Path(..., ge=1),
    service: CategoryService = Depends(get_category_service),
):
    return service.list_category_products(category_id)


@router.post("", response_model=category_schemas.CategoryRead, status_code=status.HTTP_201_CREATED)
def add_category(
    payload: category_schemas.CategoryCreate,
    response: Response,
    service: CategoryService = Depends(get_category_service),
):
    created = service.create_category(payload)
    response.headers["Location"] = f"{router.prefix}/{created.id}"
    return created


@router.put("/{category_id}", response_model=category_schemas.CategoryRead)
def update_category(
    payload: category_schemas.CategoryUpdate,
    category_id: int = Path(..., ge=1),
    service: CategoryService = Depends(get_category_service),
):
    return service.update_category(category_id, payload)


# Products in the category are kept, only their category_id is cleared
@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int = Path(..., ge=1),
    service: CategoryService = Depends(get_category_service),
):
    service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
