"""
HTTP tests for the product and cart routes.

Tests verify:
- Status codes and plain-text error bodies
- The images -> pictures rename on inbound bodies
- End-to-end flow: create -> add to cart -> increase -> decrease -> remove
"""

import pytest
from pymongo.errors import PyMongoError

import catalog
import database

MISSING_ID = "64b7f0f0f0f0f0f0f0f0f0f0"


def _product_body(**overrides):
    body = {
        "name": "Runner",
        "description": "Light road shoe",
        "price": 10,
        "category": "Shoes",
        "images": ["runner.png"],
        "stocks": 5,
    }
    body.update(overrides)
    return body


class TestProductRoutes:

    def test_create_returns_full_list(self, client, make_product):
        make_product(name="Existing")

        response = client.post("/products", json=_product_body())

        assert response.status_code == 201
        data = response.json()
        assert len(data) == 2
        assert data[0]["name"] == "Runner"
        assert data[0]["pictures"] == ["runner.png"]
        assert isinstance(data[0]["id"], str)
        assert "_id" not in data[0]

    def test_create_missing_field_is_400(self, client):
        body = _product_body()
        del body["price"]

        response = client.post("/products", json=body)

        assert response.status_code == 400
        assert "price" in response.text

    def test_create_negative_stocks_is_400(self, client):
        response = client.post("/products", json=_product_body(stocks=-1))
        assert response.status_code == 400

    def test_list_newest_first(self, client, make_product):
        older = make_product(name="Older")
        newer = make_product(name="Newer")

        response = client.get("/products")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [newer, older]

    def test_patch(self, client, make_product):
        product_id = make_product()

        response = client.patch(f"/products/{product_id}", json={"stocks": 9, "images": ["x.png"]})

        assert response.status_code == 200
        updated = next(p for p in response.json() if p["id"] == product_id)
        assert updated["stocks"] == 9
        assert updated["pictures"] == ["x.png"]
        assert updated["name"] == "Runner"

    def test_patch_unknown_is_400(self, client):
        response = client.patch(f"/products/{MISSING_ID}", json={"stocks": 9})
        assert response.status_code == 400
        assert response.text == "Product not found"

    def test_delete_by_admin(self, client, make_user, make_product):
        admin_id = make_user(email="boss@shop.io", is_admin=True)
        product_id = make_product()

        response = client.request("DELETE", f"/products/{product_id}", json={"user_id": admin_id})

        assert response.status_code == 200
        assert response.json() == []

    def test_delete_by_non_admin_is_401(self, client, make_user, make_product):
        user_id = make_user()
        product_id = make_product()

        response = client.request("DELETE", f"/products/{product_id}", json={"user_id": user_id})

        assert response.status_code == 401
        assert response.text == "You don't have permission"
        assert [p["id"] for p in client.get("/products").json()] == [product_id]

    def test_delete_by_unknown_user_is_400(self, client, make_product):
        product_id = make_product()

        response = client.request("DELETE", f"/products/{product_id}", json={"user_id": MISSING_ID})

        assert response.status_code == 400
        assert response.text == "User not found"

    def test_get_one_with_similar(self, client, make_product):
        product_id = make_product(category="Shoes")
        sibling = make_product(name="Trail", category="Shoes")
        make_product(name="Cap", category="Hats")

        response = client.get(f"/products/{product_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["product"]["id"] == product_id
        assert [p["id"] for p in data["similar"]] == [sibling]

    def test_get_one_unknown_is_400(self, client):
        response = client.get(f"/products/{MISSING_ID}")
        assert response.status_code == 400

    def test_category(self, client, make_product):
        make_product(category="Hats")
        shoe = make_product(category="Shoes")

        assert [p["id"] for p in client.get("/products/category/Shoes").json()] == [shoe]
        assert client.get("/products/category/all").json() == client.get("/products").json()

    def test_search(self, client, make_product):
        shoe = make_product(name="Runner", description="Light", category="Shoes")
        make_product(name="Cap", description="Cotton", category="Hats")

        response = client.get("/products/search/shoe")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [shoe]


class TestCartRoutes:

    def test_add_to_cart(self, client, make_user, make_product):
        user_id = make_user()
        product_id = make_product(stocks=5)

        response = client.post("/products/add-to-cart", json={
            "userId": user_id, "productId": product_id, "price": 10, "quantity": 3,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == user_id
        assert "password_hash" not in data
        assert data["cart"] == {"items": {product_id: 3}, "count": 3, "total": 30}
        assert database.get_document("product", product_id)["stocks"] == 2

    def test_add_to_cart_missing_product_is_404(self, client, make_user):
        response = client.post("/products/add-to-cart", json={
            "userId": make_user(), "productId": MISSING_ID, "price": 10, "quantity": 1,
        })

        assert response.status_code == 404
        assert response.text == "Product not found"

    def test_add_to_cart_insufficient_stock_is_400(self, client, make_user, make_product):
        response = client.post("/products/add-to-cart", json={
            "userId": make_user(), "productId": make_product(stocks=1), "price": 10, "quantity": 2,
        })

        assert response.status_code == 400
        assert response.text == "Insufficient stock"

    def test_add_to_cart_zero_quantity_is_400(self, client, make_user, make_product):
        response = client.post("/products/add-to-cart", json={
            "userId": make_user(), "productId": make_product(), "price": 10, "quantity": 0,
        })
        assert response.status_code == 400

    def test_increase_without_stock_is_400(self, client, make_user, make_product):
        user_id = make_user()
        product_id = make_product(stocks=1)
        client.post("/products/add-to-cart", json={
            "userId": user_id, "productId": product_id, "price": 10, "quantity": 1,
        })

        response = client.post("/products/increase-cart", json={
            "userId": user_id, "productId": product_id, "price": 10,
        })

        assert response.status_code == 400
        assert response.text == "No stock available"

    def test_remove_not_in_cart_is_400(self, client, make_user, make_product):
        response = client.post("/products/remove-from-cart", json={
            "userId": make_user(), "productId": make_product(), "price": 10,
        })

        assert response.status_code == 400
        assert response.text == "Product not found in cart"

    def test_full_flow(self, client, make_user, make_product):
        user_id = make_user()
        product_id = make_product(stocks=5)
        ids = {"userId": user_id, "productId": product_id, "price": 10}

        client.post("/products/add-to-cart", json={**ids, "quantity": 2})
        client.post("/products/increase-cart", json=ids)
        response = client.post("/products/decrease-cart", json=ids)
        assert response.json()["cart"]["items"][product_id] == 2
        assert database.get_document("product", product_id)["stocks"] == 3

        response = client.post("/products/remove-from-cart", json=ids)

        assert response.status_code == 200
        assert response.json()["cart"] == {"items": {}, "count": 0, "total": 0}
        assert database.get_document("product", product_id)["stocks"] == 5


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["backend"] == "ok"


def test_cart_total_is_rounded_when_rendered(client, make_user, make_product):
    user_id = make_user()
    product_id = make_product(stocks=5)
    ids = {"userId": user_id, "productId": product_id, "price": 0.004}

    client.post("/products/add-to-cart", json={**ids, "quantity": 2})
    response = client.post("/products/increase-cart", json=ids)

    assert response.json()["cart"]["total"] == 0.01
    assert database.get_document("user", user_id)["cart"]["total"] == pytest.approx(0.012)


class TestStoreFailures:

    def test_unconfigured_database(self, client, monkeypatch):
        monkeypatch.setattr(database, "db", None)

        response = client.get("/products")

        assert response.status_code == 400
        assert response.text == "Database not configured"
        assert client.get("/health").json()["db"] == "not_configured"

    def test_database_error_is_400(self, client, monkeypatch):
        def boom():
            raise PyMongoError("server selection timed out")

        monkeypatch.setattr(catalog, "list_products", boom)

        response = client.get("/products")

        assert response.status_code == 400
        assert response.text == "server selection timed out"
