from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Numeric, JSON
from sqlalchemy.orm import relationship

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)
    buyer_id = Column(String(64), nullable=False, index=True)
    session_id = Column(String(64), nullable=True)

    status = Column(String(16), nullable=False, default="pending")  # pending, paid, failed
    total = Column(Numeric(10, 2), nullable=False)
    shipping_info = Column(JSON, nullable=False, default=dict)
    payment_id = Column(String(36), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
