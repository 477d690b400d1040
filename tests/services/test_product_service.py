"""ProductService on both backends: validation, mapping and the SKU rule."""

from datetime import timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from domain.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from schemas.category import CategoryCreate
from schemas.product import ProductCreate, ProductUpdate
from services.category_service import CategoryService
from services.product_service import ProductService
from tests.fakes import T0


@pytest.fixture
def service(repos):
    return ProductService(repos.products, repos.categories)


def _create(name="Widget", sku="SKU-001", price="9.99", quantity=10, **extra):
    return ProductCreate(name=name, sku=sku, price=Decimal(price), quantity_in_stock=quantity, **extra)


def _update(name="Widget", price="9.99", quantity=10, **extra):
    return ProductUpdate(name=name, price=Decimal(price), quantity_in_stock=quantity, **extra)


class TestWidgetScenario:

    def test_create_update_and_duplicate(self, service, clock):
        created = service.create_product(_create())
        assert created.id == 1
        assert created.created_at == created.updated_at == T0

        clock.advance(1)
        updated = service.update_product(created.id, _update(price="12.50"))
        assert updated.price == Decimal("12.50")
        assert updated.updated_at > created.updated_at
        assert updated.updated_at == T0 + timedelta(seconds=1)
        assert updated.sku == "SKU-001"

        with pytest.raises(ConflictError, match="SKU-001"):
            service.create_product(_create(name="Another", price="1.00"))


class TestCreate:

    def test_maps_to_read_dto(self, service):
        created = service.create_product(_create(description="Steel"))
        assert created.name == "Widget"
        assert created.description == "Steel"
        assert created.quantity_in_stock == 10
        assert created.category_id is None

    def test_lowercase_sku_collides_with_uppercase(self, service):
        service.create_product(_create(sku="SKU-001"))
        with pytest.raises(ConflictError):
            service.create_product(_create(sku="sku-001"))

    def test_unknown_category_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.create_product(_create(category_id=5))
        assert service.list_products() == []

    def test_with_category(self, service, repos):
        category = CategoryService(repos.categories, repos.products).create_category(
            CategoryCreate(name="Tools")
        )
        created = service.create_product(_create(category_id=category.id))
        assert created.category_id == category.id


class TestCreatePayloadValidation:

    @pytest.mark.parametrize("kwargs", [
        {"name": ""},
        {"name": "   "},
        {"name": "x" * 201},
        {"sku": "AB"},
        {"sku": "S" * 51},
        {"sku": "SKU 001"},
        {"price": "0"},
        {"price": "-1.00"},
        {"price": "1.999"},
        {"quantity": -1},
    ])
    def test_rejected(self, kwargs):
        with pytest.raises(ValidationError):
            _create(**kwargs)

    def test_description_limit(self):
        with pytest.raises(ValidationError):
            _create(description="d" * 1001)

    def test_sku_upper_cased(self):
        assert _create(sku=" abc-12 ").sku == "ABC-12"

    def test_boundaries_accepted(self):
        payload = _create(name="x" * 200, sku="ABC", price="0.01", quantity=0, description="d" * 1000)
        assert payload.quantity_in_stock == 0


class TestUpdate:

    def test_missing_product_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.update_product(3, _update())

    def test_change_sku(self, service):
        created = service.create_product(_create())
        updated = service.update_product(created.id, _update(sku="new-sku"))
        assert updated.sku == "NEW-SKU"
        assert service.get_product_by_sku("NEW-SKU").id == created.id

    def test_sku_of_other_product_conflicts(self, service):
        service.create_product(_create(sku="A-001"))
        second = service.create_product(_create(name="Gadget", sku="B-002"))
        with pytest.raises(ConflictError):
            service.update_product(second.id, _update(sku="A-001"))


class TestQueries:

    @pytest.fixture
    def seeded(self, service):
        service.create_product(_create(name="Widget", sku="W-1", price="9.99"))
        service.create_product(_create(name="Mini Widget", sku="W-2", price="4.50"))
        service.create_product(_create(name="Gadget", sku="G-1", price="25.00"))
        return service

    def test_search_case_insensitive(self, seeded):
        assert [p.name for p in seeded.search_products("wid")] == ["Widget", "Mini Widget"]

    def test_blank_search_returns_all(self, seeded):
        assert len(seeded.search_products("  ")) == 3
        assert len(seeded.search_products(None)) == 3

    def test_price_range(self, seeded):
        result = seeded.get_products_by_price_range(Decimal("4.50"), Decimal("9.99"))
        assert {p.sku for p in result} == {"W-1", "W-2"}

    def test_inverted_price_range(self, seeded):
        with pytest.raises(InvalidArgumentError):
            seeded.get_products_by_price_range(Decimal("10"), Decimal("1"))

    def test_by_name(self, seeded):
        assert seeded.get_product_by_name("gadget").sku == "G-1"

    def test_by_sku_missing(self, seeded):
        with pytest.raises(NotFoundError):
            seeded.get_product_by_sku("NOPE")


class TestDelete:

    def test_delete_then_get(self, service):
        created = service.create_product(_create())
        service.delete_product(created.id)
        with pytest.raises(NotFoundError):
            service.get_product(created.id)

    def test_delete_missing(self, service):
        with pytest.raises(NotFoundError):
            service.delete_product(1)
