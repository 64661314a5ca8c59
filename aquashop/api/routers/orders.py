# aquashop/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from aquashop.api.errors import to_http
from aquashop.data.database import get_db
from aquashop.domain.errors import StorefrontError
from aquashop.domain.schemas import OrderCreate, OrderOut
from aquashop.services.notification_service import NotificationService
from aquashop.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db, NotificationService())


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    customer_id: str = Query(...),
    db: Session = Depends(get_db),
):
    """
    Zapisuje naglowek i pozycje zamowienia, przy bledzie pozycji naglowek jest usuwany.
    """
    svc = get_service(db)
    try:
        return svc.create_order(payload, customer_id)
    except StorefrontError as e:
        raise to_http(e)


@router.get("/", response_model=List[OrderOut])
def list_orders(customer_id: str = Query(...), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_orders_by_user(customer_id)
    except StorefrontError as e:
        raise to_http(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_order_by_id(order_id)
    except StorefrontError as e:
        raise to_http(e)
