# storefront/repos/payment_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.payment import PaymentModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        return payment

    def get_payment(self, payment_id: str) -> PaymentModel | None:
        return self.db.get(PaymentModel, payment_id)

    def list_for_order(self, order_id: str) -> list[PaymentModel]:
        return list(
            self.db.execute(
                select(PaymentModel)
                .where(PaymentModel.order_id == order_id)
                .order_by(PaymentModel.processed_at)
            ).scalars()
        )

    def find_orphaned(self) -> list[PaymentModel]:
        """Platnosci completed, ktorych zamowienie wciaz jest pending."""
        return list(
            self.db.execute(
                select(PaymentModel)
                .join(OrderModel, OrderModel.id == PaymentModel.order_id)
                .where(
                    PaymentModel.status == "completed",
                    OrderModel.status == "pending",
                )
                .order_by(PaymentModel.processed_at)
            ).scalars()
        )

    def find_completed_for_order(self, order_id: str) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel)
            .where(PaymentModel.order_id == order_id, PaymentModel.status == "completed")
            .order_by(PaymentModel.processed_at)
            .limit(1)
        ).scalar_one_or_none()
