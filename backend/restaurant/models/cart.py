from decimal import Decimal

from sqlalchemy import Column, DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from restaurant.db import Base


class Cart(Base):
    __tablename__ = "carts"
    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(
        String(64), unique=True, index=True, nullable=False
    )  # one cart per customer, reused across checkouts
    total = Column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )  # cached sum(quantity * price), recomputed on every mutation
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)

    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )
