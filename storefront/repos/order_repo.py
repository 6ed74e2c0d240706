# storefront/repos/order_repo.py
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_by_buyer(self, buyer_id: str) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.buyer_id == buyer_id)
                .order_by(OrderModel.created_at.desc())
            ).scalars()
        )

    def list_by_seller(self, seller_id: str) -> list[OrderModel]:
        order_ids = (
            select(OrderItemModel.order_id)
            .where(OrderItemModel.seller_id == seller_id)
            .distinct()
        )
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.id.in_(order_ids))
                .order_by(OrderModel.created_at.desc())
            ).scalars()
        )

    def mark_paid(self, order_id: str, payment_id: str) -> int:
        #warunek na status - zamowienie oplacone tylko raz
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == "pending")
            .values(
                status="paid",
                payment_id=payment_id,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount

    def refresh(self, order: OrderModel) -> OrderModel:
        self.db.refresh(order)
        return order
