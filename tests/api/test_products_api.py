"""HTTP surface for /api/products, exercised through TestClient."""

import pytest

WIDGET = {"name": "Widget", "sku": "SKU-001", "price": 9.99, "quantity_in_stock": 10}


def _post(client, **overrides):
    return client.post("/api/products", json={**WIDGET, **overrides})


class TestCreate:

    def test_created_with_location(self, client):
        response = _post(client)
        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 1
        assert body["price"] == 9.99
        assert body["description"] == ""
        assert body["created_at"] == body["updated_at"]
        assert response.headers["location"] == "/api/products/1"

    def test_duplicate_sku_conflict(self, client):
        _post(client)
        response = _post(client, name="Another", sku="sku-001")
        assert response.status_code == 409
        assert "SKU-001" in response.json()["detail"]

    def test_unknown_category(self, client):
        response = _post(client, category_id=42)
        assert response.status_code == 404

    @pytest.mark.parametrize("overrides", [
        {"name": ""},
        {"sku": "no spaces"},
        {"price": 0},
        {"quantity_in_stock": -1},
    ])
    def test_invalid_payload(self, client, overrides):
        assert _post(client, **overrides).status_code == 422

    def test_missing_field(self, client):
        response = client.post("/api/products", json={"name": "Widget", "price": 1})
        assert response.status_code == 422


class TestRead:

    def test_get_by_id(self, client):
        _post(client)
        response = client.get("/api/products/1")
        assert response.status_code == 200
        assert response.json()["sku"] == "SKU-001"

    def test_get_missing(self, client):
        response = client.get("/api/products/99")
        assert response.status_code == 404
        assert "99" in response.json()["detail"]

    def test_list(self, client):
        _post(client)
        _post(client, name="Gadget", sku="GAD-1")
        assert [p["name"] for p in client.get("/api/products").json()] == ["Widget", "Gadget"]

    def test_by_sku_and_name(self, client):
        _post(client)
        assert client.get("/api/products/sku/sku-001").json()["name"] == "Widget"
        assert client.get("/api/products/name/WIDGET").json()["sku"] == "SKU-001"
        assert client.get("/api/products/name/Nothing").status_code == 404

    def test_search(self, client):
        _post(client)
        _post(client, name="Gadget", sku="GAD-1")
        found = client.get("/api/products/search", params={"q": "wid"}).json()
        assert [p["name"] for p in found] == ["Widget"]
        assert len(client.get("/api/products/search").json()) == 2

    def test_price_range(self, client):
        _post(client)
        _post(client, name="Gadget", sku="GAD-1", price=25)
        found = client.get("/api/products/price-range", params={"min_price": 5, "max_price": 10}).json()
        assert [p["sku"] for p in found] == ["SKU-001"]

    def test_inverted_price_range(self, client):
        response = client.get("/api/products/price-range", params={"min_price": 10, "max_price": 1})
        assert response.status_code == 400


class TestUpdateDelete:

    def test_update(self, client, clock):
        _post(client)
        clock.advance(1)
        response = client.put("/api/products/1", json={**WIDGET, "price": 12.5})
        assert response.status_code == 200
        body = response.json()
        assert body["price"] == 12.5
        assert body["updated_at"] > body["created_at"]

    def test_update_missing(self, client):
        assert client.put("/api/products/5", json=WIDGET).status_code == 404

    def test_delete(self, client):
        _post(client)
        response = client.delete("/api/products/1")
        assert response.status_code == 204
        assert response.content == b""
        assert client.get("/api/products/1").status_code == 404
        assert client.delete("/api/products/1").status_code == 404


class TestMeta:

    def test_root(self, client):
        assert client.get("/").status_code == 200

    def test_openapi_document(self, client):
        paths = client.get("/openapi.json").json()["paths"]
        assert "/api/products" in paths
        assert "/api/categories/analytics/top" in paths
