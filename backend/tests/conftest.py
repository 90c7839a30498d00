import os
import tempfile
from datetime import datetime
from decimal import Decimal

# must be set before anything imports restaurant.config
_DB_DIR = tempfile.mkdtemp(prefix="restaurant-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"

import pytest
from fastapi.testclient import TestClient

from restaurant.api.deps import get_clock
from restaurant.db import SessionLocal, init_db
from restaurant.main import app
from restaurant.models.category import Category
from restaurant.models.menu_item import MenuItem
from restaurant.services.cart_service import CartService

CUSTOMER_ID = "cust-1"
CUSTOMER_HEADERS = {"X-User-Id": CUSTOMER_ID, "X-User-Roles": "Customer"}
ADMIN_HEADERS = {"X-User-Id": "admin-1", "X-User-Roles": "Admin"}


def clock_at(hour: int, minute: int = 0):
    fixed = datetime(2025, 3, 10, hour, minute)
    return lambda: fixed


@pytest.fixture(autouse=True)
def reset_db():
    init_db(reset=True)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client():
    # noon: outside happy hour
    app.dependency_overrides[get_clock] = lambda: clock_at(12)
    return TestClient(app)


@pytest.fixture
def menu():
    """Seed one active category with a few dishes; returns {name: menu_item_id}."""
    s = SessionLocal()
    try:
        mains = Category(name="Mains", description="Main dishes")
        hidden = Category(name="Seasonal", is_active=False)
        s.add_all([mains, hidden])
        s.flush()
        items = [
            MenuItem(name="Burger", price=Decimal("25.00"), preparation_time=20, category_id=mains.id),
            MenuItem(name="Family Pizza", price=Decimal("150.00"), preparation_time=40, category_id=mains.id),
            MenuItem(name="Salad", description="Fresh greens", price=Decimal("50.00"), preparation_time=None, category_id=mains.id),
            MenuItem(name="Soda", price=Decimal("5.00"), preparation_time=5, category_id=mains.id),
            MenuItem(name="Old Stew", price=Decimal("12.00"), is_available=False, category_id=mains.id),
        ]
        s.add_all(items)
        s.commit()
        ids = {it.name: it.id for it in items}
        ids["_category"] = mains.id
        ids["_hidden_category"] = hidden.id
        return ids
    finally:
        s.close()


@pytest.fixture
def fill_cart():
    """fill_cart(customer_id, [(menu_item_id, qty), ...]) adds lines through CartService in its own session."""

    def _fill(customer_id, lines):
        s = SessionLocal()
        try:
            svc = CartService(s)
            for item_id, qty in lines:
                svc.add_item(customer_id, item_id, qty)
        finally:
            s.close()

    return _fill
