from decimal import Decimal

from tests.helpers import add_to_cart, auth_header, register


class TestAuthenticatedCart:
    def test_empty_cart(self, client, user_headers):
        response = client.get("/api/v1/cart", headers=user_headers)

        assert response.status_code == 200
        assert response.json() == {"items": [], "totalItems": 0, "subtotal": "0"}

    def test_add_and_list(self, client, user_headers, make_product):
        shirt = make_product("Shirt", price="10.00")
        socks = make_product("Socks", price="2.50")
        add_to_cart(client, user_headers, shirt["id"], 2)
        add_to_cart(client, user_headers, socks["id"], 3)

        cart = client.get("/api/v1/cart", headers=user_headers).json()

        assert cart["totalItems"] == 5
        assert Decimal(cart["subtotal"]) == Decimal("27.50")
        assert {line["product"]["name"] for line in cart["items"]} == {"Shirt", "Socks"}

    def test_adding_same_product_increments_line(self, client, user_headers, make_product):
        product = make_product()
        add_to_cart(client, user_headers, product["id"], 1)
        line = add_to_cart(client, user_headers, product["id"], 2)

        assert line["quantity"] == 3
        cart = client.get("/api/v1/cart", headers=user_headers).json()
        assert len(cart["items"]) == 1

    def test_add_unknown_product(self, client, user_headers):
        response = client.post(
            "/api/v1/cart",
            json={"productId": "00000000-0000-0000-0000-000000000000", "quantity": 1},
            headers=user_headers,
        )
        assert response.status_code == 404

    def test_add_rejects_non_positive_quantity(self, client, user_headers, make_product):
        product = make_product()
        response = client.post(
            "/api/v1/cart", json={"productId": product["id"], "quantity": 0}, headers=user_headers
        )
        assert response.status_code == 422

    def test_update_quantity(self, client, user_headers, make_product):
        product = make_product(price="4.00")
        line = add_to_cart(client, user_headers, product["id"], 1)

        response = client.put(f"/api/v1/cart/{line['id']}", json={"quantity": 4}, headers=user_headers)

        assert response.status_code == 200
        assert response.json()["quantity"] == 4
        assert Decimal(response.json()["lineTotal"]) == Decimal("16.00")

    def test_update_requires_positive_quantity(self, client, user_headers, make_product):
        line = add_to_cart(client, user_headers, make_product()["id"], 1)

        response = client.put(f"/api/v1/cart/{line['id']}", json={"quantity": 0}, headers=user_headers)

        assert response.status_code == 422

    def test_cannot_touch_another_users_line(self, client, user_headers, make_product):
        line = add_to_cart(client, user_headers, make_product()["id"], 1)
        bob_headers = auth_header(register(client, "bob")["accessToken"])

        update = client.put(f"/api/v1/cart/{line['id']}", json={"quantity": 5}, headers=bob_headers)
        delete = client.delete(f"/api/v1/cart/{line['id']}", headers=bob_headers)

        assert update.status_code == 404
        assert delete.status_code == 404
        assert client.get("/api/v1/cart", headers=user_headers).json()["totalItems"] == 1

    def test_remove_line(self, client, user_headers, make_product):
        line = add_to_cart(client, user_headers, make_product()["id"], 1)

        assert client.delete(f"/api/v1/cart/{line['id']}", headers=user_headers).status_code == 204
        assert client.delete(f"/api/v1/cart/{line['id']}", headers=user_headers).status_code == 404

    def test_clear(self, client, user_headers, make_product):
        add_to_cart(client, user_headers, make_product("A")["id"], 1)
        add_to_cart(client, user_headers, make_product("B")["id"], 1)

        response = client.delete("/api/v1/cart", headers=user_headers)

        assert response.status_code == 204
        assert client.get("/api/v1/cart", headers=user_headers).json()["items"] == []

    def test_deleted_product_lines_are_hidden(self, client, admin_headers, user_headers, make_product):
        kept = make_product("Kept", price="3.00")
        add_to_cart(client, user_headers, kept["id"], 1)
        gone = make_product("Gone", price="9.00")
        add_to_cart(client, user_headers, gone["id"], 1)

        assert client.delete(f"/api/v1/products/{gone['id']}", headers=admin_headers).status_code == 204

        cart = client.get("/api/v1/cart", headers=user_headers).json()
        assert [line["product"]["name"] for line in cart["items"]] == ["Kept"]
        assert Decimal(cart["subtotal"]) == Decimal("3.00")


class TestGuestCart:
    def test_guest_cart_uses_session_cookie(self, client, make_product):
        product = make_product()

        add_to_cart(client, {}, product["id"], 2)
        cart = client.get("/api/v1/cart").json()

        assert cart["totalItems"] == 2

    def test_guest_and_user_carts_are_separate(self, client, user_headers, make_product):
        product = make_product()
        add_to_cart(client, {}, product["id"], 2)

        cart = client.get("/api/v1/cart", headers=user_headers).json()

        assert cart["totalItems"] == 0

    def test_guest_without_session_has_empty_cart(self, client):
        assert client.get("/api/v1/cart").json()["items"] == []
