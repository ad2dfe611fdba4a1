def test_create_requires_images(client, seller, categories):
    headers, _ = seller
    response = client.post("/api/seller/products", json={
        "name": "Shirt", "description": "d", "price": 500, "category_id": categories["Men"], "images": [],
    }, headers=headers)
    assert response.status_code == 400


def test_discount_must_be_below_price(client, seller, categories):
    headers, _ = seller
    response = client.post("/api/seller/products", json={
        "name": "Shirt", "description": "d", "price": 500, "discounted_price": 500,
        "category_id": categories["Men"], "images": ["https://img.example.com/1.jpg"],
    }, headers=headers)
    assert response.status_code == 400


def test_unknown_category(client, seller):
    headers, _ = seller
    response = client.post("/api/seller/products", json={
        "name": "Shirt", "description": "d", "price": 500, "category_id": 999,
        "images": ["https://img.example.com/1.jpg"],
    }, headers=headers)
    assert response.status_code == 400


def test_seller_lists_own_products(client, seller, make_product):
    headers, user = seller
    make_product("One")
    make_product("Two")

    body = client.get("/api/seller/products", headers=headers).get_json()
    assert body["count"] == 2
    assert all(p["seller_id"] == user["id"] for p in body["products"])


def test_edit_product(client, seller, make_product):
    headers, _ = seller
    product = make_product("Jacket", price=2000, discounted_price=1800)

    # lowering the price below the old discount is fine when the discount moves too
    response = client.put(f"/api/seller/products/{product['id']}", json={
        "price": 1500, "discounted_price": 1200, "new_images": ["https://img.example.com/2.jpg"],
    }, headers=headers)
    assert response.status_code == 200
    updated = response.get_json()["product"]
    assert updated["price"] == 1500
    assert updated["discounted_price"] == 1200
    assert len(updated["images"]) == 2

    response = client.put(f"/api/seller/products/{product['id']}", json={"discounted_price": 1600}, headers=headers)
    assert response.status_code == 400

    response = client.put(f"/api/seller/products/{product['id']}", json={"discounted_price": None}, headers=headers)
    assert response.get_json()["product"]["discounted_price"] is None


def test_cannot_touch_other_sellers_products(client, make_product):
    from conftest import signup

    product = make_product("Mine")
    other_headers, _ = signup(client, "seller")

    response = client.put(f"/api/seller/products/{product['id']}", json={"name": "Stolen"}, headers=other_headers)
    assert response.status_code == 403
    assert client.delete(f"/api/seller/products/{product['id']}", headers=other_headers).status_code == 403


def test_delete_product(client, seller, make_product):
    headers, _ = seller
    product = make_product("Gone")

    assert client.delete(f"/api/seller/products/{product['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/marketplace/products/{product['id']}").status_code == 404
    assert client.delete(f"/api/seller/products/{product['id']}", headers=headers).status_code == 404


def test_seller_sees_orders_for_their_products(client, seller, customer, make_product):
    seller_headers, _ = seller
    customer_headers, _ = customer
    product = make_product("Sold", price=1200)

    cart = {"X-Cart-Id": "seller-test"}
    client.post("/api/cart/add", json={"product_id": product["id"], "quantity": 2}, headers=cart)
    assert client.post("/api/orders/checkout", headers=dict(customer_headers, **cart)).status_code == 201

    orders = client.get("/api/seller/orders", headers=seller_headers).get_json()["orders"]
    assert len(orders) == 1
    assert orders[0]["items"] == [{"product_id": product["id"], "product_name": "Sold", "quantity": 2, "price": 1200}]
