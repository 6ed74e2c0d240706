from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Numeric, ForeignKey

from storefront.data.database import Base


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    buyer_id = Column(String(64), nullable=False)

    amount = Column(Numeric(10, 2), nullable=False)
    method = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False)  # completed, failed
    processed_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
