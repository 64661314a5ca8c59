from sqlalchemy import Column, Integer, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from aquashop.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    customer_id = Column(String, nullable=False, index=True)
    customer_name = Column(String, nullable=False, default="")
    customer_email = Column(String, nullable=False, default="")
    shipping_address = Column(String, nullable=False)

    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String, nullable=False, default="pending")  # pending, processing, completed, cancelled
    payment_method = Column(String, nullable=False)
    payment_status = Column(String, nullable=False, default="pending")  # pending, paid, failed

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        order_by="OrderItemModel.id",
        passive_deletes=True,
    )
