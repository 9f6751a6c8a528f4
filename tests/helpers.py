def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, username, password="password123"):
    response = client.post(
        "/api/v1/auth/register",
        json={"username": username, "password": password, "email": f"{username}@example.com"},
    )
    assert response.status_code == 201, response.text
    return response.json()


def add_to_cart(client, headers, product_id, quantity=1):
    response = client.post(
        "/api/v1/cart",
        json={"productId": product_id, "quantity": quantity},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def checkout(client, headers, address="Main St 1", **extra_headers):
    return client.post(
        "/api/v1/checkout",
        json={"shippingAddress": address},
        headers={**headers, **extra_headers},
    )
