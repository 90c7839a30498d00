import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from restaurant.api.deps import get_clock, require_customer
from restaurant.api.errors import fail, ok
from restaurant.db import get_db
from restaurant.schemas.order_schema import OrderOut, PlaceOrderIn
from restaurant.services.exceptions import ServiceException
from restaurant.services.order_service import OrderService

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/customer/orders", tags=["orders"])


@router.get("", summary="List the caller's orders")
def list_orders(customer_id: str = Depends(require_customer), db: Session = Depends(get_db)):
    orders = OrderService(db).list_orders(customer_id)
    return ok(
        [OrderOut.from_order(o).model_dump(mode="json") for o in orders],
        "Orders retrieved successfully",
    )


@router.get("/{order_id}", summary="Order details")
def get_order(
    order_id: int,
    customer_id: str = Depends(require_customer),
    db: Session = Depends(get_db),
):
    order = OrderService(db).get_order(customer_id, order_id)
    return ok(
        OrderOut.from_order(order).model_dump(mode="json"),
        "Order details retrieved successfully",
    )


@router.post("/place-order", summary="Place order from cart (checkout)")
def place_order(
    payload: PlaceOrderIn,
    customer_id: str = Depends(require_customer),
    db: Session = Depends(get_db),
    clock=Depends(get_clock),
):
    svc = OrderService(db, clock=clock)
    try:
        order = svc.place_order(customer_id, payload)
    except ServiceException:
        raise
    except Exception as e:
        log.exception("unexpected checkout error: %s", type(e).__name__)
        return fail(500, "Error placing order")
    return ok(OrderOut.from_order(order).model_dump(mode="json"), "Order placed successfully!")
