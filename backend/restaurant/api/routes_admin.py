from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant.api.deps import get_clock, require_admin
from restaurant.api.errors import ok
from restaurant.db import get_db
from restaurant.models.order import OrderStatus
from restaurant.schemas.order_schema import OrderOut, OrderStatusUpdateIn
from restaurant.services.exceptions import ValidationError
from restaurant.services.order_service import OrderService

router = APIRouter(
    prefix="/api/admin/orders", tags=["admin"], dependencies=[Depends(require_admin)]
)


def _orders(orders):
    return [OrderOut.from_order(o).model_dump(mode="json") for o in orders]


def _parse_status(status: int) -> OrderStatus:
    try:
        return OrderStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown order status: {status}")


@router.get("", summary="List all orders")
def list_orders(db: Session = Depends(get_db)):
    return ok(_orders(OrderService(db).list_all()), "Orders retrieved successfully")


@router.get("/statistics/revenue", summary="Revenue of delivered orders")
def total_revenue(db: Session = Depends(get_db)):
    revenue = OrderService(db).total_revenue()
    return ok(float(revenue), "Total revenue retrieved successfully")


@router.get("/statistics/count/{status}", summary="Number of orders with a given status")
def count_by_status(status: int, db: Session = Depends(get_db)):
    status = _parse_status(status)
    count = OrderService(db).count_by_status(status)
    return ok(count, f"Count of '{status.name.title()}' orders retrieved successfully")


@router.get("/status/{status}", summary="Orders with a given status")
def list_by_status(status: int, db: Session = Depends(get_db)):
    status = _parse_status(status)
    orders = OrderService(db).list_all(status)
    return ok(_orders(orders), f"Orders with status '{status.name.title()}' retrieved successfully")


@router.get("/user/{user_id}", summary="Orders of one customer")
def list_for_user(user_id: str, db: Session = Depends(get_db)):
    orders = OrderService(db).list_orders(user_id)
    return ok(_orders(orders), "User orders retrieved successfully")


@router.get("/{order_id}", summary="Order details")
def get_order(order_id: int, db: Session = Depends(get_db)):
    order = OrderService(db).get_any(order_id)
    return ok(OrderOut.from_order(order).model_dump(mode="json"), "Order retrieved successfully")


@router.put("/{order_id}/status", summary="Update order status")
def update_status(
    order_id: int,
    payload: OrderStatusUpdateIn,
    db: Session = Depends(get_db),
    clock=Depends(get_clock),
):
    order = OrderService(db, clock=clock).update_status(order_id, payload.new_status, payload.notes)
    return ok(OrderOut.from_order(order).model_dump(mode="json"), "Order status updated successfully")
