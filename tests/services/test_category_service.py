import pytest
from pydantic import ValidationError

from domain.exceptions import ConflictError, NotFoundError
from schemas.category import CategoryCreate, CategoryUpdate
from services.category_service import CategoryService
from tests.fakes import make_product


@pytest.fixture
def service(repos):
    return CategoryService(repos.categories, repos.products)


class TestCategoryService:

    def test_create_and_get(self, service):
        created = service.create_category(CategoryCreate(name="Tools", description="Hand tools"))
        fetched = service.get_category(created.id)
        assert fetched.name == "Tools"
        assert fetched.description == "Hand tools"

    def test_none_description_stored_empty(self, service):
        created = service.create_category(CategoryCreate(name="Tools", description=None))
        assert created.description == ""

    def test_duplicate_name(self, service):
        service.create_category(CategoryCreate(name="Tools"))
        with pytest.raises(ConflictError):
            service.create_category(CategoryCreate(name="Tools"))

    def test_update(self, service, clock):
        created = service.create_category(CategoryCreate(name="Tools"))
        clock.advance(2)
        updated = service.update_category(created.id, CategoryUpdate(name="Power Tools", description="Drills"))
        assert updated.name == "Power Tools"
        assert updated.updated_at > updated.created_at

    def test_update_missing(self, service):
        with pytest.raises(NotFoundError):
            service.update_category(9, CategoryUpdate(name="Ghost"))

    def test_list_category_products(self, service, repos):
        tools = service.create_category(CategoryCreate(name="Tools"))
        repos.products.add(make_product(sku="T-1", category_id=tools.id))
        repos.products.add(make_product(sku="X-1"))
        assert [p.sku for p in service.list_category_products(tools.id)] == ["T-1"]

    def test_list_products_of_missing_category(self, service):
        with pytest.raises(NotFoundError):
            service.list_category_products(4)

    def test_delete_keeps_products(self, service, repos):
        tools = service.create_category(CategoryCreate(name="Tools"))
        hammer = repos.products.add(make_product(sku="T-1", category_id=tools.id))
        service.delete_category(tools.id)
        assert repos.products.get_by_id(hammer.id).category_id is None
        assert service.list_categories() == []

    @pytest.mark.parametrize("kwargs", [
        {"name": ""},
        {"name": "n" * 101},
        {"name": "Tools", "description": "d" * 501},
    ])
    def test_payload_limits(self, kwargs):
        with pytest.raises(ValidationError):
            CategoryCreate(**kwargs)
