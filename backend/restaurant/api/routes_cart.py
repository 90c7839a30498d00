from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant.api.deps import require_customer
from restaurant.api.errors import ok
from restaurant.db import get_db
from restaurant.schemas.cart_schema import AddToCartIn, CartOut, UpdateCartQuantityIn
from restaurant.services.cart_service import CartService

router = APIRouter(prefix="/api/customer/cart", tags=["cart"])


def _cart(cart) -> dict:
    return CartOut.from_cart(cart).model_dump(mode="json")


@router.get("", summary="Get cart")
def get_cart(customer_id: str = Depends(require_customer), db: Session = Depends(get_db)):
    cart = CartService(db).get_cart(customer_id)
    return ok(_cart(cart), "Cart retrieved successfully")


@router.get("/count", summary="Number of units in the cart")
def get_cart_count(
    customer_id: str = Depends(require_customer), db: Session = Depends(get_db)
):
    return ok(CartService(db).count_items(customer_id), "Cart count retrieved successfully")


@router.post("/add", summary="Add product to cart")
def add_to_cart(
    payload: AddToCartIn,
    customer_id: str = Depends(require_customer),
    db: Session = Depends(get_db),
):
    cart = CartService(db).add_item(customer_id, payload.product_id, payload.quantity)
    return ok(_cart(cart), "Product added to cart successfully")


@router.put("/update/{cart_item_id}", summary="Update cart item quantity")
def update_quantity(
    cart_item_id: int,
    payload: UpdateCartQuantityIn,
    customer_id: str = Depends(require_customer),
    db: Session = Depends(get_db),
):
    cart = CartService(db).update_quantity(customer_id, cart_item_id, payload.quantity)
    return ok(_cart(cart), "Cart updated successfully")


@router.delete("/remove/{cart_item_id}", summary="Remove item from cart")
def remove_from_cart(
    cart_item_id: int,
    customer_id: str = Depends(require_customer),
    db: Session = Depends(get_db),
):
    cart = CartService(db).remove_item(customer_id, cart_item_id)
    return ok(_cart(cart), "Item removed from cart successfully")


@router.delete("/clear", summary="Remove every item from the cart")
def clear_cart(customer_id: str = Depends(require_customer), db: Session = Depends(get_db)):
    cart = CartService(db).clear(customer_id)
    return ok(_cart(cart), "Cart cleared successfully")
