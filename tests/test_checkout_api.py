from decimal import Decimal

from tests.helpers import add_to_cart, auth_header, register


class TestCheckoutEndpoint:
    def test_checkout_creates_order(self, client, user_headers, user_account, make_product):
        product_a = make_product("A", price="10.00", inventory=10)
        product_b = make_product("B", price="5.50", inventory=4)
        add_to_cart(client, user_headers, product_a["id"], 2)
        add_to_cart(client, user_headers, product_b["id"], 1)

        response = client.post(
            "/api/v1/checkout",
            json={"shippingAddress": "  1 Infinite Loop  "},
            headers=user_headers,
        )

        assert response.status_code == 201, response.text
        order = response.json()
        assert order["status"] == "processing"
        assert Decimal(order["total"]) == Decimal("25.50")
        assert order["shippingAddress"] == "1 Infinite Loop"
        assert order["userId"] == user_account["user"]["id"]
        for field in ("id", "createdAt", "updatedAt"):
            assert field in order

        items = client.get(f"/api/v1/orders/{order['id']}/items", headers=user_headers).json()
        assert len(items) == 2
        assert sum(Decimal(item["price"]) * item["quantity"] for item in items) == Decimal("25.50")

        assert client.get(f"/api/v1/products/{product_a['id']}").json()["inventory"] == 8
        assert client.get(f"/api/v1/products/{product_b['id']}").json()["inventory"] == 3

        cart = client.get("/api/v1/cart", headers=user_headers).json()
        assert cart["items"] == []
        assert cart["totalItems"] == 0

    def test_inventory_floor_and_stock_flag(self, client, user_headers, make_product):
        product = make_product(inventory=1)
        add_to_cart(client, user_headers, product["id"], 5)

        response = client.post("/api/v1/checkout", json={"shippingAddress": "Main St 1"}, headers=user_headers)

        assert response.status_code == 201
        product = client.get(f"/api/v1/products/{product['id']}").json()
        assert product["inventory"] == 0
        assert product["inStock"] is False

    def test_requires_authentication(self, client, make_product):
        product = make_product()
        # Guest cart via the session cookie
        add_to_cart(client, {}, product["id"], 1)

        response = client.post("/api/v1/checkout", json={"shippingAddress": "Main St 1"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"
        assert client.get(f"/api/v1/products/{product['id']}").json()["inventory"] == 10

    def test_invalid_token_is_unauthenticated(self, client):
        response = client.post(
            "/api/v1/checkout",
            json={"shippingAddress": "Main St 1"},
            headers=auth_header("not-a-token"),
        )
        assert response.status_code == 401

    def test_blank_address(self, client, user_headers, make_product):
        product = make_product()
        add_to_cart(client, user_headers, product["id"], 1)

        for body in ({"shippingAddress": "   "}, {}):
            response = client.post("/api/v1/checkout", json=body, headers=user_headers)
            assert response.status_code == 400
            assert response.json()["error"]["code"] == "INVALID_INPUT"
            assert response.json()["error"]["message"] == "Shipping address is required"

        cart = client.get("/api/v1/cart", headers=user_headers).json()
        assert cart["totalItems"] == 1
        assert client.get("/api/v1/orders/mine", headers=user_headers).json() == []

    def test_empty_cart(self, client, user_headers):
        response = client.post("/api/v1/checkout", json={"shippingAddress": "Main St 1"}, headers=user_headers)

        assert response.status_code == 400
        assert response.json()["error"] == {
            "code": "EMPTY_CART",
            "message": "Cart is empty",
            "request_id": response.headers["X-Request-ID"],
        }

    def test_second_checkout_is_empty_cart(self, client, user_headers, make_product):
        product = make_product()
        add_to_cart(client, user_headers, product["id"], 1)

        first = client.post("/api/v1/checkout", json={"shippingAddress": "Main St 1"}, headers=user_headers)
        second = client.post("/api/v1/checkout", json={"shippingAddress": "Main St 1"}, headers=user_headers)

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json()["error"]["code"] == "EMPTY_CART"

    def test_idempotency_key_replays_order(self, client, user_headers, make_product):
        product = make_product(inventory=10)
        add_to_cart(client, user_headers, product["id"], 1)
        headers = {**user_headers, "Idempotency-Key": "checkout-123"}

        first = client.post("/api/v1/checkout", json={"shippingAddress": "Main St 1"}, headers=headers)
        second = client.post("/api/v1/checkout", json={"shippingAddress": "Main St 1"}, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert len(client.get("/api/v1/orders/mine", headers=user_headers).json()) == 1
        assert client.get(f"/api/v1/products/{product['id']}").json()["inventory"] == 9

    def test_checkout_uses_only_the_callers_cart(self, client, user_headers, make_product):
        product = make_product()
        bob = register(client, "bob")
        bob_headers = auth_header(bob["accessToken"])
        add_to_cart(client, bob_headers, product["id"], 3)

        response = client.post("/api/v1/checkout", json={"shippingAddress": "Main St 1"}, headers=user_headers)

        assert response.status_code == 400
        assert client.get("/api/v1/cart", headers=bob_headers).json()["totalItems"] == 3

    def test_verified_review_after_purchase(self, client, user_headers, make_product):
        product = make_product()
        add_to_cart(client, user_headers, product["id"], 1)
        client.post("/api/v1/checkout", json={"shippingAddress": "Main St 1"}, headers=user_headers)

        response = client.post(
            f"/api/v1/products/{product['id']}/reviews",
            json={"rating": 5, "title": "Great"},
            headers=user_headers,
        )

        assert response.status_code == 201
        assert response.json()["verified"] is True

    def test_untracked_inventory_survives_checkout(self, client, user_headers, make_product):
        product = make_product(inventory=None)
        assert product["inventory"] is None
        add_to_cart(client, user_headers, product["id"], 2)

        response = client.post("/api/v1/checkout", json={"shippingAddress": "Main St 1"}, headers=user_headers)

        assert response.status_code == 201
        product = client.get(f"/api/v1/products/{product['id']}").json()
        assert product["inventory"] is None
        assert product["inStock"] is True
