from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Integer, String, DateTime, JSON, Text

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class CheckoutModel(Base):
    __tablename__ = "checkouts"

    id = Column(String(36), primary_key=True)
    session_id = Column(String(64), nullable=False, index=True)
    buyer_id = Column(String(64), nullable=False)

    state = Column(String(16), nullable=False, default="shipping")  # shipping, payment, complete, failed, abandoned
    shipping_info = Column(JSON, nullable=True)
    order_id = Column(String(36), nullable=True)
    last_error = Column(Text, nullable=True)
    #koszyk wyczyszczony po complete
    cart_cleared = Column(Boolean, nullable=False, default=False)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now)
