"""
HTTP tests for the carts, wishlists and orders routers.

The registry is overridden with MemoryStorage and FakeCatalog, the order
store runs on the in-memory SQLite engine. Celery runs tasks eagerly.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from aquashop.api.deps import StoreRegistry, get_registry
from aquashop.data.database import get_db
from aquashop.domain.schemas import WishlistItem
from aquashop.main import app
from aquashop.repos.order_repo import OrderRepo
from aquashop.repos.state_repo import MemoryStorage
from tests.conftest import FakeCatalog


@pytest.fixture
def registry():
    return StoreRegistry(FakeCatalog(), lambda owner_id: MemoryStorage())


@pytest.fixture
def test_client(registry, db_session):
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_db] = lambda: db_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health(test_client):
    assert test_client.get("/health").json() == {"status": "ok"}


class TestCartEndpoints:

    def test_add_merges_and_totals(self, test_client):
        test_client.post("/carts/u1/items", json={"product_ref": "fish_1", "product_type": "fish"})
        response = test_client.post("/carts/u1/items", json={"product_ref": "1", "product_type": "fish"})

        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 1
        assert data["items"][0]["quantity"] == 2
        assert data["items"][0]["productType"] == "fish"
        assert float(data["subtotal"]) == 20.0
        assert data["item_count"] == 2

    def test_carts_are_per_owner(self, test_client):
        test_client.post("/carts/u1/items", json={"product_ref": "1", "product_type": "food"})

        assert test_client.get("/carts/u2").json()["items"] == []

    @pytest.mark.parametrize(
        "payload,status",
        [
            ({"product_ref": "2", "product_type": "fish"}, 409),
            ({"product_ref": "999", "product_type": "fish"}, 404),
            ({"product_ref": "1", "product_type": "plants"}, 400),
        ],
    )
    def test_add_errors(self, test_client, payload, status):
        response = test_client.post("/carts/u1/items", json=payload)

        assert response.status_code == status
        assert test_client.get("/carts/u1").json()["items"] == []

    def test_update_remove_clear(self, test_client):
        test_client.post("/carts/u1/items", json={"product_ref": "1", "product_type": "fish"})
        test_client.post("/carts/u1/items", json={"product_ref": "1", "product_type": "food"})

        data = test_client.patch("/carts/u1/items/1", json={"quantity": 0}).json()
        assert [i["quantity"] for i in data["items"]] == [1, 1]

        data = test_client.patch("/carts/u1/items/1", json={"quantity": 3}).json()
        assert [i["quantity"] for i in data["items"]] == [3, 3]

        data = test_client.delete("/carts/u1/items/1").json()
        assert data["items"] == []

        test_client.post("/carts/u1/items", json={"product_ref": "1", "product_type": "food"})
        assert test_client.delete("/carts/u1").json()["items"] == []

    def test_checkout_creates_order_and_clears_cart(self, test_client):
        test_client.post("/carts/u1/items", json={"product_ref": "1", "product_type": "fish"})
        test_client.post("/carts/u1/items", json={"product_ref": "1", "product_type": "food"})

        response = test_client.post(
            "/carts/u1/checkout",
            json={"customer_id": "user-1", "customer_name": "Anna", "customer_email": "anna@example.com"},
        )

        assert response.status_code == 201
        order = response.json()
        assert float(order["total_amount"]) == 15.0
        assert len(order["items"]) == 2
        assert test_client.get("/carts/u1").json()["items"] == []

        orders = test_client.get("/orders/", params={"customer_id": "user-1"}).json()
        assert [o["id"] for o in orders] == [order["id"]]

    def test_checkout_of_empty_cart(self, test_client):
        response = test_client.post("/carts/u1/checkout", json={"customer_id": "user-1"})

        assert response.status_code == 400


class TestWishlistEndpoints:

    def test_toggle_and_list(self, test_client):
        product = {"id": "fish_1", "name": "Super Red Arowana", "price": 1200, "category": "fish"}

        response = test_client.post("/wishlists/u1/toggle/fish_1", json=product)
        assert response.json() == {"item_id": "fish_1", "in_wishlist": True}

        items = test_client.get("/wishlists/u1").json()["items"]
        assert [i["id"] for i in items] == ["fish_1"]

        response = test_client.post("/wishlists/u1/toggle/fish_1")
        assert response.json() == {"item_id": "fish_1", "in_wishlist": False}

    def test_toggle_without_body_cannot_add(self, test_client):
        response = test_client.post("/wishlists/u1/toggle/fish_1")

        assert response.status_code == 422
        assert test_client.get("/wishlists/u1").json()["items"] == []

    def test_toggle_without_body_uses_product_lookup(self, registry, test_client):
        products = {"fish_1": WishlistItem(id="fish_1", name="Super Red Arowana", price=1200)}
        registry.product_lookup = products.get

        response = test_client.post("/wishlists/u2/toggle/fish_1")

        assert response.json() == {"item_id": "fish_1", "in_wishlist": True}
        items = test_client.get("/wishlists/u2").json()["items"]
        assert [i["name"] for i in items] == ["Super Red Arowana"]

    def test_add_remove_clear(self, test_client):
        product = {"id": "food_1", "name": "Pellets", "price": 18.5}

        test_client.post("/wishlists/u1/items", json=product)
        data = test_client.post("/wishlists/u1/items", json=product).json()
        assert len(data["items"]) == 1

        assert test_client.delete("/wishlists/u1/items/food_1").json()["items"] == []

        test_client.post("/wishlists/u1/items", json=product)
        assert test_client.delete("/wishlists/u1").json()["items"] == []


class TestOrderEndpoints:

    payload = {
        "customer_name": "Jan",
        "customer_email": "jan@example.com",
        "shipping_address": "ul. Rybna 1",
        "payment_method": "Cash on Delivery",
        "items": [
            {"product_id": "1", "product_name": "Arowana", "product_type": "fish", "quantity": 2, "price": 10},
            {"product_id": "1", "product_name": "Pellets", "product_type": "food", "quantity": 1, "price": 5},
        ],
    }

    def test_create_and_get(self, test_client):
        response = test_client.post("/orders/", params={"customer_id": "user-1"}, json=self.payload)

        assert response.status_code == 201
        order = response.json()
        assert float(order["total_amount"]) == 25.0
        assert order["status"] == "pending"

        fetched = test_client.get(f"/orders/{order['id']}").json()
        assert len(fetched["items"]) == 2

    def test_missing_order(self, test_client):
        assert test_client.get("/orders/999").status_code == 404

    def test_compensation_failure_exposes_order_id(self, test_client, monkeypatch):
        def broken(self, *args):
            raise OperationalError("SQL", {}, Exception("connection lost"))

        monkeypatch.setattr(OrderRepo, "insert_items", broken)
        monkeypatch.setattr(OrderRepo, "delete_order", broken)

        response = test_client.post("/orders/", params={"customer_id": "user-1"}, json=self.payload)

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["error"] == "CompensationFailed"
        assert isinstance(detail["order_id"], int)

    def test_items_failure_is_rolled_back(self, test_client, monkeypatch):
        def broken(self, *args):
            raise OperationalError("SQL", {}, Exception("connection lost"))

        monkeypatch.setattr(OrderRepo, "insert_items", broken)

        response = test_client.post("/orders/", params={"customer_id": "user-1"}, json=self.payload)

        assert response.status_code == 502
        order_id = response.json()["detail"]["order_id"]
        assert test_client.get(f"/orders/{order_id}").status_code == 404
