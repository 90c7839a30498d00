from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from restaurant.models.order import OrderStatus, OrderType, PaymentMethod
from restaurant.schemas.common import Money

# digits with optional leading +, separated by spaces, dashes, dots or parentheses
PHONE_PATTERN = r"^\+?[0-9][0-9\s\-\.\(\)]*[0-9]$"


class PlaceOrderIn(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str = Field(..., min_length=1, max_length=15, pattern=PHONE_PATTERN)
    order_type: OrderType
    delivery_address: Optional[str] = Field(None, max_length=500)
    payment_method: PaymentMethod
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("customer_name")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Customer name is required")
        return v


class OrderItemOut(BaseModel):
    menu_item_id: int
    menu_item_name: Optional[str] = None
    menu_item_image_url: Optional[str] = None
    quantity: int
    price: Money
    subtotal: Money
    special_instructions: Optional[str] = None


class OrderOut(BaseModel):
    id: int
    customer_id: str
    customer_name: str
    phone_number: Optional[str] = None
    order_type: OrderType
    delivery_address: Optional[str] = None
    subtotal: Money
    tax: Money
    discount: Money
    total: Money
    status: OrderStatus
    payment_method: PaymentMethod
    estimated_delivery_time: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    order_items: List[OrderItemOut]

    @classmethod
    def from_order(cls, order) -> "OrderOut":
        items = [
            OrderItemOut(
                menu_item_id=oi.menu_item_id,
                menu_item_name=oi.menu_item_name,
                menu_item_image_url=oi.menu_item.image_url if oi.menu_item else None,
                quantity=oi.quantity,
                price=oi.price,
                subtotal=oi.subtotal,
                special_instructions=oi.special_instructions,
            )
            for oi in order.items
        ]
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            customer_name=order.customer_name,
            phone_number=order.phone_number,
            order_type=order.order_type,
            delivery_address=order.delivery_address,
            subtotal=order.subtotal,
            tax=order.tax,
            discount=order.discount,
            total=order.total,
            status=order.status,
            payment_method=order.payment_method,
            estimated_delivery_time=order.estimated_delivery_time,
            notes=order.notes,
            created_at=order.created_at,
            order_items=items,
        )


class OrderStatusUpdateIn(BaseModel):
    new_status: OrderStatus
    notes: Optional[str] = Field(None, max_length=500)
