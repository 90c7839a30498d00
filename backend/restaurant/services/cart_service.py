import logging

from sqlalchemy.orm import Session

from restaurant.models.cart import Cart
from restaurant.repositories.cart_repo import CartRepository
from restaurant.repositories.menu_repo import MenuRepository
from restaurant.services.exceptions import NotFoundError, ValidationError
from restaurant.utils.transactions import smart_transaction

log = logging.getLogger(__name__)

MAX_QUANTITY = 100


class CartService:
    """
    Customer cart mutations. Each public method is its own unit of work and
    leaves cart.total equal to the sum of its lines when it commits.
    """

    def __init__(self, db: Session):
        self.db = db
        self.cart_repo = CartRepository(db)
        self.menu_repo = MenuRepository(db)

    def get_cart(self, customer_id: str) -> Cart:
        with smart_transaction(self.db):
            self.cart_repo.get_or_create(customer_id)
        self.db.commit()
        return self._reload(customer_id)

    def count_items(self, customer_id: str) -> int:
        cart = self.cart_repo.get_by_customer(customer_id)
        if not cart:
            return 0
        return sum(it.quantity for it in cart.items)

    def add_item(self, customer_id: str, product_id: int, qty: int = 1) -> Cart:
        if qty < 1 or qty > MAX_QUANTITY:
            raise ValidationError("Quantity must be between 1 and 100")
        with smart_transaction(self.db):
            product = self.menu_repo.get_item(product_id, available_only=True)
            if not product:
                raise ValidationError("Product not available")
            cart = self.cart_repo.get_or_create(customer_id)
            existing = next(
                (it for it in cart.items if it.menu_item_id == product_id), None
            )
            new_qty = qty + (existing.quantity if existing else 0)
            if new_qty > MAX_QUANTITY:
                raise ValidationError("Quantity must be between 1 and 100")
            # price is snapshotted now; checkout charges this value
            self.cart_repo.add_or_update_item(cart, product_id, new_qty, product.price)
            self.cart_repo.recompute_total(cart)
        self.db.commit()
        log.debug("customer=%s added menu_item=%s qty=%s", customer_id, product_id, qty)
        return self._reload(customer_id)

    def update_quantity(self, customer_id: str, cart_item_id: int, qty: int) -> Cart:
        if qty < 1 or qty > MAX_QUANTITY:
            raise ValidationError("Invalid quantity")
        with smart_transaction(self.db):
            item = self.cart_repo.get_item(customer_id, cart_item_id)
            if not item:
                raise NotFoundError("Cart item not found")
            item.quantity = qty
            self.cart_repo.recompute_total(item.cart)
        self.db.commit()
        return self._reload(customer_id)

    def remove_item(self, customer_id: str, cart_item_id: int) -> Cart:
        with smart_transaction(self.db):
            item = self.cart_repo.get_item(customer_id, cart_item_id)
            if not item:
                raise NotFoundError("Cart item not found")
            cart = item.cart
            self.cart_repo.remove_item(cart, item)
            self.cart_repo.recompute_total(cart)
        self.db.commit()
        return self._reload(customer_id)

    def clear(self, customer_id: str) -> Cart:
        with smart_transaction(self.db):
            cart = self.cart_repo.get_or_create(customer_id)
            self.cart_repo.clear_items(cart)
            self.cart_repo.reset_total(cart)
        self.db.commit()
        return self._reload(customer_id)

    def _reload(self, customer_id: str) -> Cart:
        self.db.expire_all()
        return self.cart_repo.get_by_customer(customer_id)
