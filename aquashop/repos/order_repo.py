# aquashop/repos/order_repo.py
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from aquashop.data.models.order import OrderModel
from aquashop.data.models.order_item import OrderItemModel


class OrderRepo:
    """
    Remote order store. Every write is committed on its own, the store gives
    no atomicity across the orders and order_items tables.
    The session must use expire_on_commit=False, nothing is read back after a commit.
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def insert_order(self, order: OrderModel) -> OrderModel:
        # no refresh after commit, id is set on flush and every column is passed in
        self.db.add(order)
        self._commit()
        return order

    def insert_items(self, items: List[OrderItemModel]) -> List[OrderItemModel]:
        self.db.add_all(items)
        self._commit()
        return items

    def delete_order(self, order_id: int) -> int:
        try:
            result = self.db.execute(delete(OrderModel).where(OrderModel.id == order_id))
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self._commit()
        return result.rowcount

    def get_order(self, order_id: int) -> OrderModel | None:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_by_customer(self, customer_id: str) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.customer_id == customer_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars().all())
