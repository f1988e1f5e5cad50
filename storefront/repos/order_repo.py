# storefront/repos/order_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.checkout_session import CheckoutSessionModel
from storefront.data.models.order import OrderModel, OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def get_order(self, order_id: int, lock: bool = False) -> OrderModel | None:
        stmt = select(OrderModel).where(OrderModel.id == order_id).options(selectinload(OrderModel.items))
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_orders(self, user_id: int, status: str | None, limit: int, offset: int) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .options(selectinload(OrderModel.items))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        if status:
            stmt = stmt.where(OrderModel.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def create_checkout_session(self, session: CheckoutSessionModel) -> CheckoutSessionModel:
        self.db.add(session)
        self.db.flush()
        return session

    def get_checkout_session(self, session_id: int) -> CheckoutSessionModel | None:
        return self.db.get(CheckoutSessionModel, session_id)
