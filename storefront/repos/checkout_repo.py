# storefront/repos/checkout_repo.py
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.checkout import CheckoutModel


class CheckoutRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_checkout(self, checkout: CheckoutModel) -> CheckoutModel:
        self.db.add(checkout)
        self.db.commit()
        self.db.refresh(checkout)
        return checkout

    def get_checkout(self, checkout_id: str) -> CheckoutModel | None:
        return self.db.get(CheckoutModel, checkout_id)

    def list_uncleared_complete(self) -> list[CheckoutModel]:
        return list(
            self.db.execute(
                select(CheckoutModel)
                .where(CheckoutModel.state == "complete", CheckoutModel.cart_cleared.is_(False))
                .order_by(CheckoutModel.updated_at)
            ).scalars()
        )

    def update_checkout_version(self, checkout_id: str, old_version: int, new_data: dict, from_states=None) -> int:
        """
        Optimistic locking: update ... set version = old + 1 where id = ? and version = old.
        0 zmienionych wierszy = ktos inny zmienil checkout w miedzyczasie.
        """
        stmt = update(CheckoutModel).where(
            CheckoutModel.id == checkout_id,
            CheckoutModel.version == old_version,
        )
        if from_states:
            stmt = stmt.where(CheckoutModel.state.in_(tuple(from_states)))

        values = dict(new_data)
        values["version"] = old_version + 1
        values["updated_at"] = datetime.now(timezone.utc)

        result = self.db.execute(stmt.values(**values).execution_options(synchronize_session=False))
        return result.rowcount

    def refresh(self, checkout: CheckoutModel) -> CheckoutModel:
        self.db.refresh(checkout)
        return checkout

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
