from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(
        String(64),
        ForeignKey("carts.session_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_id = Column(String(64), nullable=False)

    title = Column(String(255), nullable=False, default="")
    seller_id = Column(String(64), nullable=True)
    quantity = Column(Integer, nullable=False)
    #cena z momentu dodania, nie odswiezana
    unit_price = Column(Numeric(10, 2), nullable=False)
    added_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (UniqueConstraint("session_id", "item_id", name="u_cart_item"),)
