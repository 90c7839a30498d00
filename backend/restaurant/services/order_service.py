import hashlib
import logging
import os
import tempfile
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Union

import pydantic
from filelock import FileLock, Timeout
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from restaurant.config import settings
from restaurant.models.order import Order, OrderStatus, OrderType
from restaurant.repositories.cart_repo import CartRepository
from restaurant.repositories.order_repo import OrderRepository
from restaurant.schemas.order_schema import PlaceOrderIn
from restaurant.services.exceptions import (
    EmptyCartError,
    NotAuthenticatedError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from restaurant.services.pricing import (
    PricingRules,
    estimate_ready_time,
    line_subtotal,
    price_order,
    to_cents,
)
from restaurant.utils.transactions import smart_transaction

log = logging.getLogger(__name__)


def _format_validation_error(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return "; ".join(parts)


def _status_label(status: OrderStatus) -> str:
    return status.name.title().replace("_", "")


class OrderService:
    """
    Checkout and order reads.

    clock: zero-argument callable returning the current local datetime. Its
    hour drives the happy-hour rule and its value anchors the estimated time.
    """

    def __init__(
        self,
        db: Session,
        clock: Optional[Callable[[], datetime]] = None,
        rules: Optional[PricingRules] = None,
    ):
        self.db = db
        self.clock = clock or datetime.now
        self.rules = rules or PricingRules()
        self.cart_repo = CartRepository(db)
        self.order_repo = OrderRepository(db)

    def _checkout_lock(self, customer_id: str) -> FileLock:
        locks_dir = os.path.join(tempfile.gettempdir(), "restaurant_locks")
        os.makedirs(locks_dir, exist_ok=True)
        digest = hashlib.sha1(customer_id.encode("utf-8")).hexdigest()[:16]
        return FileLock(os.path.join(locks_dir, f"checkout_{digest}.lock"))

    def _parse_checkout(self, checkout: Union[PlaceOrderIn, Dict]) -> PlaceOrderIn:
        if isinstance(checkout, PlaceOrderIn):
            return checkout
        try:
            return PlaceOrderIn.model_validate(checkout)
        except pydantic.ValidationError as e:
            raise ValidationError(_format_validation_error(e))

    def place_order(
        self, customer_id: Optional[str], checkout: Union[PlaceOrderIn, Dict]
    ) -> Order:
        """
        Turn the customer's cart into a priced Pending order.

        Creating the order and its item snapshots, deleting the cart lines and
        zeroing the cart total happen in one transaction: either all of it is
        committed or none of it is. Returns the created order with its items.
        """
        if not customer_id:
            raise NotAuthenticatedError()
        checkout = self._parse_checkout(checkout)

        lock = self._checkout_lock(customer_id)
        try:
            with lock.acquire(timeout=settings.CHECKOUT_LOCK_TIMEOUT_SECONDS):
                order_id = self._place_locked(customer_id, checkout)
        except Timeout:
            log.warning("checkout lock timeout for customer=%s", customer_id)
            raise PersistenceError("Error placing order")

        return self.order_repo.get(order_id)

    def _place_locked(self, customer_id: str, checkout: PlaceOrderIn) -> int:
        try:
            with smart_transaction(self.db):
                cart = self.cart_repo.get_by_customer(customer_id, for_update=True)
                if cart is None or not cart.items:
                    log.info("checkout rejected, empty cart: customer=%s", customer_id)
                    raise EmptyCartError()

                is_delivery = checkout.order_type == OrderType.DELIVERY
                if is_delivery and not (checkout.delivery_address or "").strip():
                    raise ValidationError(
                        "Delivery address is required for delivery orders"
                    )

                now = self.clock()
                quote = price_order(
                    [(it.quantity, it.price) for it in cart.items], now.hour, self.rules
                )
                eta = estimate_ready_time(
                    now,
                    [
                        it.menu_item.preparation_time if it.menu_item else None
                        for it in cart.items
                    ],
                    is_delivery,
                    self.rules,
                )

                order = self.order_repo.create_order(
                    customer_id=customer_id,
                    customer_name=checkout.customer_name,
                    phone_number=checkout.phone_number,
                    order_type=checkout.order_type,
                    delivery_address=checkout.delivery_address,
                    payment_method=checkout.payment_method,
                    notes=checkout.notes,
                    subtotal=quote.subtotal,
                    tax=quote.tax,
                    discount=quote.discount,
                    total=quote.charged_total,
                    status=OrderStatus.PENDING,
                    estimated_delivery_time=eta,
                    created_at=now,
                )
                self.order_repo.add_items(
                    order,
                    [
                        {
                            "menu_item_id": it.menu_item_id,
                            "menu_item_name": it.menu_item.name if it.menu_item else None,
                            "quantity": it.quantity,
                            "price": it.price,
                            "subtotal": to_cents(line_subtotal(it.quantity, it.price)),
                        }
                        for it in cart.items
                    ],
                )
                self.cart_repo.clear_items(cart)
                self.cart_repo.reset_total(cart)
                order_id = order.id
            self.db.commit()
        except (EmptyCartError, ValidationError):
            raise
        except SQLAlchemyError:
            self.db.rollback()
            log.exception("checkout failed for customer=%s, rolled back", customer_id)
            raise PersistenceError("Error placing order")

        log.info(
            "order placed id=%s customer=%s subtotal=%s tax=%s discount=%s(%s) total=%s",
            order_id,
            customer_id,
            quote.subtotal,
            quote.tax,
            quote.discount,
            quote.discount_reason or "none",
            quote.charged_total,
        )
        return order_id

    # --- customer reads ---

    def list_orders(self, customer_id: str) -> List[Order]:
        return self.order_repo.list_for_customer(customer_id)

    def get_order(self, customer_id: str, order_id: int) -> Order:
        order = self.order_repo.get_for_customer(order_id, customer_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    # --- admin workflow ---

    def list_all(self, status: Optional[OrderStatus] = None) -> List[Order]:
        return self.order_repo.list_all(status)

    def get_any(self, order_id: int) -> Order:
        order = self.order_repo.get(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def update_status(
        self, order_id: int, new_status: OrderStatus, notes: Optional[str] = None
    ) -> Order:
        """Change status and append a timestamped history line to notes. Priced fields are never touched."""
        with smart_transaction(self.db):
            order = (
                self.db.query(Order)
                .filter(Order.id == order_id)
                .with_for_update()
                .first()
            )
            if not order:
                raise NotFoundError("Order not found")
            old_status = order.status
            now = self.clock()
            line = (
                f"\n[{now:%Y-%m-%d %H:%M}] Status changed from "
                f"{_status_label(old_status)} to {_status_label(new_status)}"
            )
            if notes:
                line += f": {notes}"
            order.status = new_status
            order.notes = (order.notes or "") + line
            order.updated_at = now
            self.db.flush()
        self.db.commit()
        log.info("order %s status %s -> %s", order_id, old_status.name, new_status.name)
        return self.get_any(order_id)

    def count_by_status(self, status: OrderStatus) -> int:
        return self.order_repo.count_by_status(status)

    def total_revenue(self) -> Decimal:
        return self.order_repo.total_revenue()
