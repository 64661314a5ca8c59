# aquashop/services/order_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from aquashop.data.models.order import OrderModel
from aquashop.data.models.order_item import OrderItemModel
from aquashop.domain.errors import (
    CompensationFailed,
    InvalidInput,
    NotFound,
    OrderCreationFailed,
    OrderItemsFailed,
    RemoteFailure,
)
from aquashop.domain.schemas import OrderCreate, OrderItemOut, OrderOut
from aquashop.repos.order_repo import OrderRepo
from aquashop.services.notification_service import NotificationService
from aquashop.utils.logging import get_logger

logger = get_logger(__name__)

_HEADER_FIELDS = [name for name in OrderOut.model_fields if name != "items"]


def _order_out(order: OrderModel, items: List[OrderItemModel]) -> OrderOut:
    return OrderOut(
        **{name: getattr(order, name) for name in _HEADER_FIELDS},
        items=[OrderItemOut.model_validate(i) for i in items],
    )


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.

    create_order writes the header and its items as two separate commits.
    When the items fail, the header is deleted again; when that delete fails
    as well, CompensationFailed carries the id of the orphaned header.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.repo = OrderRepo(db)
        self.notification_service = notification_service

    def create_order(self, payload: OrderCreate, customer_id: str) -> OrderOut:
        if not customer_id:
            raise InvalidInput("customer_id is required")

        if not payload.items:
            raise InvalidInput("Order must contain at least one item")

        if any(i.quantity < 1 for i in payload.items):
            raise InvalidInput("Item quantity must be at least 1")

        total = sum((i.price * i.quantity for i in payload.items), Decimal("0.00"))
        now = datetime.now(timezone.utc)

        # 1. header
        try:
            order = self.repo.insert_order(
                OrderModel(
                    customer_id=customer_id,
                    customer_name=payload.customer_name,
                    customer_email=payload.customer_email,
                    shipping_address=payload.shipping_address,
                    total_amount=total,
                    status="pending",
                    payment_method=payload.payment_method,
                    payment_status="pending",
                    created_at=now,
                    updated_at=now,
                )
            )
        except SQLAlchemyError as e:
            logger.error(f"Order header insert failed for customer {customer_id}: {e}")
            raise OrderCreationFailed(f"Could not create order for customer {customer_id}") from e

        order_id = order.id
        logger.info(f"Order {order_id} created for customer {customer_id}, total {total}")

        # 2. items
        rows = [
            OrderItemModel(
                order_id=order_id,
                product_id=i.product_id,
                product_name=i.product_name,
                product_type=i.product_type,
                quantity=i.quantity,
                price=i.price,
                size=i.size,
                created_at=now,
            )
            for i in payload.items
        ]

        try:
            items = self.repo.insert_items(rows)
        except SQLAlchemyError as e:
            logger.error(f"Order {order_id} items insert failed: {e}")
            raise self._compensate(order_id) from e

        logger.info(f"Order {order_id}: {len(items)} items stored")

        if self.notification_service is not None:
            try:
                self.notification_service.send_order_notification(customer_id, order_id)
            except Exception as e:
                logger.warning(f"Failed to enqueue notification for order {order_id}: {e}")

        return _order_out(order, items)

    def _compensate(self, order_id: int) -> OrderItemsFailed:
        """Delete the header written by create_order, the error to raise is returned."""
        try:
            deleted = self.repo.delete_order(order_id)
        except SQLAlchemyError as e:
            logger.critical(f"Rollback of order {order_id} failed, header orphaned: {e}")
            raise CompensationFailed(order_id) from e

        logger.warning(f"Order {order_id} rolled back ({deleted} header rows deleted)")
        return OrderItemsFailed(order_id)

    def get_orders_by_user(self, customer_id: str) -> List[OrderOut]:
        if not customer_id:
            raise InvalidInput("customer_id is required")

        try:
            orders = self.repo.list_by_customer(customer_id)
        except SQLAlchemyError as e:
            raise RemoteFailure(f"Could not load orders for customer {customer_id}") from e

        return [_order_out(o, o.items) for o in orders]

    def get_order_by_id(self, order_id: int) -> OrderOut:
        try:
            order = self.repo.get_order(order_id)
        except SQLAlchemyError as e:
            raise RemoteFailure(f"Could not load order {order_id}") from e

        if not order:
            raise NotFound(f"Order {order_id} not found")

        return _order_out(order, order.items)
