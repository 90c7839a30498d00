from decimal import Decimal

import pytest

from restaurant.db import SessionLocal
from restaurant.services.cart_service import CartService
from restaurant.services.exceptions import NotFoundError, ValidationError

from conftest import CUSTOMER_HEADERS, CUSTOMER_ID


def _assert_total_matches(cart):
    assert cart.total == sum(
        (Decimal(it.quantity) * it.price for it in cart.items), Decimal("0")
    )


def test_get_cart_creates_empty_cart(client):
    res = client.get("/api/customer/cart", headers=CUSTOMER_HEADERS)
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["data"]["items"] == []
    assert body["data"]["total"] == 0
    assert body["data"]["items_count"] == 0


def test_add_item_to_cart(client, menu):
    res = client.post(
        "/api/customer/cart/add",
        json={"product_id": menu["Burger"], "quantity": 2},
        headers=CUSTOMER_HEADERS,
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["total"] == 50.0
    assert data["items_count"] == 2
    assert data["items"][0]["menu_item_name"] == "Burger"
    assert data["items"][0]["price"] == 25.0
    assert data["items"][0]["subtotal"] == 50.0

    count = client.get("/api/customer/cart/count", headers=CUSTOMER_HEADERS).json()
    assert count["data"] == 2


def test_add_unavailable_or_unknown_product(client, menu):
    for product_id in (menu["Old Stew"], 9999):
        res = client.post(
            "/api/customer/cart/add",
            json={"product_id": product_id, "quantity": 1},
            headers=CUSTOMER_HEADERS,
        )
        assert res.status_code == 400
        assert res.json()["message"] == "Product not available"


def test_add_quantity_out_of_range_is_400(client, menu):
    res = client.post(
        "/api/customer/cart/add",
        json={"product_id": menu["Burger"], "quantity": 0},
        headers=CUSTOMER_HEADERS,
    )
    assert res.status_code == 400
    assert res.json()["success"] is False


def test_cart_requires_identity(client):
    assert client.get("/api/customer/cart").status_code == 401


def test_adding_same_item_accumulates_and_resnapshots_price(db, menu):
    svc = CartService(db)
    svc.add_item(CUSTOMER_ID, menu["Soda"], 2)
    cart = svc.add_item(CUSTOMER_ID, menu["Soda"], 3)
    assert len(cart.items) == 1
    assert cart.items[0].quantity == 5
    assert cart.total == Decimal("25.00")
    _assert_total_matches(cart)


def test_quantity_is_capped_at_100(db, menu):
    svc = CartService(db)
    svc.add_item(CUSTOMER_ID, menu["Soda"], 99)
    with pytest.raises(ValidationError):
        svc.add_item(CUSTOMER_ID, menu["Soda"], 2)
    with pytest.raises(ValidationError):
        svc.add_item(CUSTOMER_ID, menu["Burger"], 101)


def test_update_remove_and_clear_keep_total_in_sync(db, menu):
    svc = CartService(db)
    svc.add_item(CUSTOMER_ID, menu["Burger"], 1)
    cart = svc.add_item(CUSTOMER_ID, menu["Salad"], 1)
    _assert_total_matches(cart)
    salad_line = next(it for it in cart.items if it.menu_item_id == menu["Salad"])

    cart = svc.update_quantity(CUSTOMER_ID, salad_line.id, 3)
    assert cart.total == Decimal("175.00")
    _assert_total_matches(cart)

    with pytest.raises(ValidationError):
        svc.update_quantity(CUSTOMER_ID, salad_line.id, 0)

    cart = svc.remove_item(CUSTOMER_ID, salad_line.id)
    assert [it.menu_item_id for it in cart.items] == [menu["Burger"]]
    assert cart.total == Decimal("25.00")

    cart = svc.clear(CUSTOMER_ID)
    assert cart.items == []
    assert cart.total == 0


def test_cannot_touch_another_customers_line(db, menu):
    svc = CartService(db)
    cart = svc.add_item("someone-else", menu["Burger"], 1)
    line_id = cart.items[0].id
    with pytest.raises(NotFoundError):
        svc.update_quantity(CUSTOMER_ID, line_id, 2)
    with pytest.raises(NotFoundError):
        svc.remove_item(CUSTOMER_ID, line_id)

    with SessionLocal() as s:
        other = CartService(s).get_cart("someone-else")
        assert other.items[0].quantity == 1


def test_update_and_remove_over_http(client, menu):
    client.post(
        "/api/customer/cart/add",
        json={"product_id": menu["Burger"], "quantity": 1},
        headers=CUSTOMER_HEADERS,
    )
    line_id = client.get("/api/customer/cart", headers=CUSTOMER_HEADERS).json()["data"]["items"][0]["id"]

    res = client.put(
        f"/api/customer/cart/update/{line_id}", json={"quantity": 4}, headers=CUSTOMER_HEADERS
    )
    assert res.status_code == 200
    assert res.json()["data"]["total"] == 100.0

    res = client.put(
        f"/api/customer/cart/update/{line_id}", json={"quantity": 101}, headers=CUSTOMER_HEADERS
    )
    assert res.status_code == 400

    res = client.delete(f"/api/customer/cart/remove/{line_id}", headers=CUSTOMER_HEADERS)
    assert res.status_code == 200
    assert res.json()["data"]["items"] == []

    res = client.delete(f"/api/customer/cart/remove/{line_id}", headers=CUSTOMER_HEADERS)
    assert res.status_code == 404
    assert res.json()["message"] == "Cart item not found"

    res = client.delete("/api/customer/cart/clear", headers=CUSTOMER_HEADERS)
    assert res.status_code == 200
    assert res.json()["data"]["total"] == 0
