from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from restaurant.models.cart import Cart
from restaurant.models.cart_item import CartItem


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_customer(self, customer_id: str, for_update: bool = False) -> Optional[Cart]:
        """
        Return the customer's cart with its items and their menu items loaded.

        for_update=True locks the cart row (SELECT ... FOR UPDATE) where the
        backend supports it. The items are loaded in a second SELECT issued
        after the lock is held, so they cannot be stale.
        """
        qry = self.db.query(Cart).filter(Cart.customer_id == customer_id)
        if for_update:
            qry = qry.with_for_update().populate_existing()
        cart = qry.options(
            selectinload(Cart.items).selectinload(CartItem.menu_item)
        ).first()
        return cart

    def get_or_create(self, customer_id: str) -> Cart:
        cart = self.get_by_customer(customer_id)
        if cart:
            return cart
        cart = Cart(customer_id=customer_id, total=Decimal("0"))
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_item(self, customer_id: str, item_id: int) -> Optional[CartItem]:
        return (
            self.db.query(CartItem)
            .join(Cart, Cart.id == CartItem.cart_id)
            .filter(CartItem.id == item_id, Cart.customer_id == customer_id)
            .first()
        )

    def add_or_update_item(
        self, cart: Cart, menu_item_id: int, qty: int, price: Decimal
    ) -> CartItem:
        item = next((it for it in cart.items if it.menu_item_id == menu_item_id), None)
        if item:
            item.quantity = qty
            item.price = price
        else:
            item = CartItem(
                cart_id=cart.id, menu_item_id=menu_item_id, quantity=qty, price=price
            )
            cart.items.append(item)
        self.db.flush()
        return item

    def remove_item(self, cart: Cart, item: CartItem):
        cart.items.remove(item)
        self.db.flush()

    def clear_items(self, cart: Cart):
        """Hard-delete every line of the cart. The cart row itself is kept."""
        for item in list(cart.items):
            self.db.delete(item)
        cart.items = []
        self.db.flush()

    def recompute_total(self, cart: Cart) -> Decimal:
        cart.total = sum(
            (Decimal(it.quantity) * Decimal(it.price) for it in cart.items),
            Decimal("0"),
        )
        cart.updated_at = datetime.now(timezone.utc)
        self.db.flush()
        return cart.total

    def reset_total(self, cart: Cart):
        cart.total = Decimal("0")
        cart.updated_at = datetime.now(timezone.utc)
        self.db.flush()
