from typing import List, Optional

from pydantic import BaseModel, Field

from restaurant.schemas.common import Money


class AddToCartIn(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1, le=100)


class UpdateCartQuantityIn(BaseModel):
    quantity: int = Field(..., ge=1, le=100)


class CartItemOut(BaseModel):
    id: int
    menu_item_id: int
    menu_item_name: Optional[str] = None
    menu_item_image_url: Optional[str] = None
    quantity: int
    price: Money
    subtotal: Money


class CartOut(BaseModel):
    id: int
    total: Money
    items_count: int
    items: List[CartItemOut]

    @classmethod
    def from_cart(cls, cart) -> "CartOut":
        items = [
            CartItemOut(
                id=it.id,
                menu_item_id=it.menu_item_id,
                menu_item_name=it.menu_item.name if it.menu_item else None,
                menu_item_image_url=it.menu_item.image_url if it.menu_item else None,
                quantity=it.quantity,
                price=it.price,
                subtotal=it.subtotal,
            )
            for it in cart.items
        ]
        return cls(
            id=cart.id,
            total=cart.total,
            items_count=sum(it.quantity for it in cart.items),
            items=items,
        )
