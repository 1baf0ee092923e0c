"""HTTP surface: status codes and payload shapes."""

from decimal import Decimal

import pytest


def _create_user(client, user_id=1):
    resp = client.post("/users/", json={"id": user_id, "name": f"user-{user_id}"})
    assert resp.status_code == 200
    return resp.json()


def _create_product(client, name="Keyboard", price="10.00", stock=10, **extra):
    resp = client.post(
        "/products/",
        json={
            "name": name,
            "description": f"{name} description",
            "price": price,
            "stock": stock,
            "category": extra.pop("category", "electronics"),
            **extra,
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def _add(client, product_id, quantity, user_id=1):
    resp = client.post(f"/cart/items?user_id={user_id}", json={"product_id": product_id, "quantity": quantity})
    assert resp.status_code == 200, resp.text
    return resp.json()


def _set_stock(client, product_id, stock):
    resp = client.put(f"/products/{product_id}", json={"stock": stock})
    assert resp.status_code == 200


class TestHealthAndUsers:
    def test_health(self, client):
        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "database": "ok"}

    def test_user_roundtrip(self, client):
        _create_user(client, 7)

        resp = client.get("/users/7")

        assert resp.json() == {"id": 7, "name": "user-7", "email": None}
        assert client.get("/users/8").status_code == 404


class TestProductEndpoints:
    def test_create_validation_errors_are_structured(self, client):
        resp = client.post(
            "/products/",
            json={"name": "", "description": "d", "price": "0", "category": "nope"},
        )

        assert resp.status_code == 400
        fields = [e["field"] for e in resp.json()["detail"]["errors"]]
        assert fields == ["name", "price", "category"]

    def test_get_update_delete(self, client):
        p = _create_product(client)

        assert client.get(f"/products/{p['id']}").json()["name"] == "Keyboard"

        resp = client.put(f"/products/{p['id']}", json={"price": "15.00", "is_featured": True})
        assert Decimal(resp.json()["price"]) == Decimal("15.00")
        assert resp.json()["is_featured"] is True

        assert client.delete(f"/products/{p['id']}").status_code == 200
        assert client.get(f"/products/{p['id']}").status_code == 404
        assert client.delete(f"/products/{p['id']}").status_code == 404

    def test_listing_routes(self, client):
        _create_product(client, "Mouse", category="electronics", is_featured=True)
        _create_product(client, "Ball", category="sports")

        assert client.get("/products/").json()["count"] == 2
        assert [p["name"] for p in client.get("/products/featured").json()["products"]] == ["Mouse"]
        assert [p["name"] for p in client.get("/products/search?q=bal").json()["products"]] == ["Ball"]

        by_category = client.get("/products/category/sports").json()
        assert by_category["category"] == "sports"
        assert [p["name"] for p in by_category["products"]] == ["Ball"]

        assert client.get("/products/category/spaceships").status_code == 400
        assert client.get("/products/?sort_by=secret").status_code == 400

    def test_stock_adjustment(self, client):
        p = _create_product(client, stock=1)

        assert client.patch(f"/products/{p['id']}/stock", json={"quantity": 4}).json()["stock"] == 5
        assert client.patch(f"/products/{p['id']}/stock", json={"quantity": -6}).status_code == 400
        assert client.patch("/products/999/stock", json={"quantity": 1}).status_code == 404


class TestCartEndpoints:
    def test_cart_lifecycle(self, client):
        _create_user(client)
        p = _create_product(client, price="4.00")

        cart = client.get("/cart?user_id=1").json()
        assert cart["status"] == "active"
        assert cart["items"] == []

        cart = _add(client, p["id"], 2)
        assert Decimal(cart["total"]) == Decimal("8.00")

        cart = client.put(f"/cart/items/{p['id']}?user_id=1", json={"quantity": 3}).json()
        assert cart["items"][0]["quantity"] == 3

        cart = client.delete(f"/cart/items/{p['id']}?user_id=1").json()
        assert cart["items"] == []

        _add(client, p["id"], 1)
        cart = client.delete("/cart?user_id=1").json()
        assert cart["items"] == []
        assert cart["status"] == "active"

    def test_error_statuses(self, client):
        _create_user(client)
        p = _create_product(client, stock=1)

        assert client.get("/cart?user_id=99").status_code == 404
        assert client.post("/cart/items?user_id=1", json={"product_id": 999}).status_code == 404
        assert client.post("/cart/items?user_id=1", json={"product_id": p["id"], "quantity": 2}).status_code == 400
        assert client.post("/cart/items?user_id=1", json={"product_id": p["id"], "quantity": 0}).status_code == 422
        assert client.delete(f"/cart/items/{p['id']}?user_id=1").status_code == 404
        assert client.get("/cart").status_code == 422


class TestCheckoutEndpoint:
    @pytest.fixture(autouse=True)
    def user(self, client):
        _create_user(client)

    def test_full_success_is_200(self, client):
        a = _create_product(client, "A", stock=5)
        b = _create_product(client, "B", stock=5)
        _add(client, a["id"], 2)
        _add(client, b["id"], 1)

        resp = client.post("/cart/checkout?user_id=1")

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Checkout successful"
        result = body["result"]
        assert result["success"] is True
        assert len(result["successItems"]) == 2
        assert result["failedItems"] == []
        assert result["completedAt"] is not None
        assert client.get(f"/products/{a['id']}").json()["stock"] == 3

        history = client.get("/cart/history?user_id=1").json()
        assert [c["cart_id"] for c in history] == [result["cartId"]]

    def test_partial_success_is_207(self, client):
        a = _create_product(client, "A", stock=5)
        b = _create_product(client, "B", stock=5)
        _add(client, a["id"], 1)
        _add(client, b["id"], 5)
        _set_stock(client, b["id"], 2)

        resp = client.post("/cart/checkout?user_id=1")

        assert resp.status_code == 207
        body = resp.json()
        assert body["success"] is True
        assert [i["productId"] for i in body["result"]["successItems"]] == [a["id"]]
        failed = body["result"]["failedItems"]
        assert failed[0]["productId"] == b["id"]
        assert failed[0]["reason"] == "insufficient stock"
        assert body["result"]["completedAt"] is None

        cart = client.get("/cart?user_id=1").json()
        assert [i["product_id"] for i in cart["items"]] == [b["id"]]

    def test_all_failed_is_400(self, client):
        p = _create_product(client, stock=3)
        _add(client, p["id"], 3)
        _set_stock(client, p["id"], 0)

        resp = client.post("/cart/checkout?user_id=1")

        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["result"]["success"] is False
        assert len(body["result"]["failedItems"]) == 1

    def test_empty_cart_is_400(self, client):
        resp = client.post("/cart/checkout?user_id=1")

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "Cart is empty", "result": None}

    def test_price_in_result_is_cart_snapshot(self, client):
        p = _create_product(client, price="10.00", stock=2)
        _add(client, p["id"], 1)
        client.put(f"/products/{p['id']}", json={"price": "99.00"})

        item = client.post("/cart/checkout?user_id=1").json()["result"]["successItems"][0]

        assert Decimal(item["price"]) == Decimal("10.00")

    def test_result_keys_are_camel_case(self, client):
        p = _create_product(client, stock=2)
        _add(client, p["id"], 1)

        result = client.post("/cart/checkout?user_id=1").json()["result"]

        assert set(result) == {"success", "cartId", "successItems", "failedItems", "completedAt"}
        assert {"productId", "product", "quantity", "price"} <= set(result["successItems"][0])


class TestFeedbackEndpoints:
    def test_submit_and_manage(self, client):
        created = client.post(
            "/feedback/",
            json={"title": "Great", "description": "Really", "type": "feedback", "rating": 4},
        )
        assert created.status_code == 201
        fid = created.json()["id"]

        one_click = client.post("/feedback/one-click", json={"rating": 5, "page_url": "https://shop.example/"})
        assert one_click.status_code == 201
        assert one_click.json()["feedback"]["title"] == "Rating Feedback: 5/5"

        bug = client.post("/feedback/bug-report", json={"title": "Crash", "description": "On pay"})
        assert bug.status_code == 201
        assert bug.json()["feedback"]["type"] == "bug"

        listing = client.get("/feedback/?type=feedback").json()
        assert listing["pagination"]["total"] == 2

        resolved = client.post(f"/feedback/{fid}/resolve", json={"admin_response": "Thanks!"})
        assert resolved.json()["status"] == "resolved"

        stats = client.get("/feedback/stats/overview").json()
        assert stats["total"] == 3
        assert stats["by_type"]["bug"] == 1

        assert client.put(f"/feedback/{fid}", json={"title": "Updated"}).json()["title"] == "Updated"
        assert client.delete(f"/feedback/{fid}").status_code == 200
        assert client.get(f"/feedback/{fid}").status_code == 404

    def test_invalid_feedback(self, client):
        resp = client.post("/feedback/", json={"title": "No rating", "description": "x"})

        assert resp.status_code == 400
        assert resp.json()["detail"]["errors"][0]["field"] == "rating"

    def test_unknown_user_is_404(self, client):
        feedback = client.post(
            "/feedback/?user_id=999",
            json={"title": "Hi", "description": "There", "rating": 3},
        )
        bug = client.post("/feedback/bug-report?user_id=999", json={"title": "Crash", "description": "On pay"})

        assert feedback.status_code == 404
        assert bug.status_code == 404
        assert client.get("/feedback/").json()["pagination"]["total"] == 0

    def test_known_user_is_stored(self, client):
        _create_user(client, 3)

        resp = client.post("/feedback/?user_id=3", json={"title": "Hi", "description": "There", "rating": 3})

        assert resp.status_code == 201
        assert resp.json()["user_id"] == 3

    def test_user_email_is_checked(self, client):
        resp = client.post("/users/", json={"id": 4, "name": "Dora", "email": "nope"})

        assert resp.status_code == 422
