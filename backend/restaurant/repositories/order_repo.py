from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from restaurant.models.order import Order, OrderItem, OrderStatus


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Order).options(
            selectinload(Order.items).selectinload(OrderItem.menu_item)
        )

    def create_order(self, **fields) -> Order:
        order = Order(**fields)
        self.db.add(order)
        self.db.flush()
        return order

    def add_items(self, order: Order, lines: List[Dict]) -> List[OrderItem]:
        """
        lines: list of {menu_item_id, menu_item_name, quantity, price, subtotal}
        """
        items = []
        for line in lines:
            oi = OrderItem(order_id=order.id, **line)
            order.items.append(oi)
            items.append(oi)
        self.db.flush()
        return items

    def get(self, order_id: int) -> Optional[Order]:
        return self._query().filter(Order.id == order_id).first()

    def get_for_customer(self, order_id: int, customer_id: str) -> Optional[Order]:
        return (
            self._query()
            .filter(Order.id == order_id, Order.customer_id == customer_id)
            .first()
        )

    def list_for_customer(self, customer_id: str) -> List[Order]:
        return (
            self._query()
            .filter(Order.customer_id == customer_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    def list_all(self, status: Optional[OrderStatus] = None) -> List[Order]:
        query = self._query()
        if status is not None:
            query = query.filter(Order.status == status)
        return query.order_by(Order.created_at.desc(), Order.id.desc()).all()

    def total_revenue(self) -> Decimal:
        total = (
            self.db.query(func.coalesce(func.sum(Order.total), 0))
            .filter(Order.status == OrderStatus.DELIVERED)
            .scalar()
        )
        return Decimal(str(total or 0))

    def count_by_status(self, status: OrderStatus) -> int:
        return self.db.query(func.count(Order.id)).filter(Order.status == status).scalar()
