import enum
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from restaurant.db import Base


class OrderType(enum.IntEnum):
    DINE_IN = 1
    TAKEAWAY = 2
    DELIVERY = 3


class PaymentMethod(enum.IntEnum):
    CASH = 1
    CREDIT_CARD = 2
    DEBIT_CARD = 3
    ONLINE_PAYMENT = 4


class OrderStatus(enum.IntEnum):
    PENDING = 1
    PREPARING = 2
    READY = 3
    DELIVERED = 4
    CANCELED = 5


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (CheckConstraint("total >= 0", name="ck_order_total"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(String(64), nullable=False, index=True)
    customer_name = Column(String(100), nullable=False)
    phone_number = Column(String(15), nullable=False)
    order_type = Column(Enum(OrderType), nullable=False, default=OrderType.DINE_IN)
    delivery_address = Column(String(500), nullable=True)
    payment_method = Column(
        Enum(PaymentMethod), nullable=False, default=PaymentMethod.CASH
    )  # label only, nothing is charged

    # priced once at placement, never recomputed
    subtotal = Column(Numeric(10, 2), nullable=False)
    # tax and discount keep the exact product of subtotal and rate; total is billed in cents
    tax = Column(Numeric(12, 4), nullable=False)
    discount = Column(Numeric(12, 4), nullable=False, default=Decimal("0"))
    total = Column(Numeric(10, 2), nullable=False)

    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    estimated_delivery_time = Column(DateTime, nullable=True)
    notes = Column(String(2000), nullable=True)
    created_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )
    updated_at = Column(DateTime, nullable=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1 AND quantity <= 100", name="ck_order_item_qty"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False)
    menu_item_name = Column(String(200), nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    special_instructions = Column(String(500), nullable=True)

    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem")
