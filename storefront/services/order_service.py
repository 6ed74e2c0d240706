# storefront/services/order_service.py
import uuid

from sqlalchemy.orm import Session

from storefront.data.database import db_guard
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import EmptyCart, OrderNotFound, Unauthorized
from storefront.domain.snapshot import CartSnapshot
from storefront.domain.validation import parse_shipping
from storefront.repos.order_repo import OrderRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Skladanie zamowien z migawki koszyka.
    Zamowienie nie jest nigdy usuwane - zmienia sie tylko jego status.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)

    def create_order(self, buyer_id: str, cart_snapshot: CartSnapshot, shipping_info) -> OrderModel:
        """
        Use Case: Tworzenie zamowienia z migawki koszyka.

        1. Pusta migawka -> EmptyCart, nic nie jest zapisywane
        2. Total liczony z migawki, bez ponownego pytania katalogu
        3. Nowe id, status pending
        """
        if cart_snapshot.is_empty:
            raise EmptyCart()

        shipping = parse_shipping(shipping_info)

        order = OrderModel(
            id=str(uuid.uuid4()),
            buyer_id=buyer_id,
            session_id=cart_snapshot.session_id,
            status="pending",
            total=cart_snapshot.total,
            shipping_info=shipping.model_dump(),
            items=[
                OrderItemModel(
                    item_id=line.item_id,
                    title=line.title,
                    seller_id=line.seller_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                )
                for line in cart_snapshot.items
            ],
        )

        with db_guard(self.db, "order create"):
            created = self.repo.create_order(order)

        logger.info(
            f"Order {created.id} created for buyer {buyer_id} from cart "
            f"{cart_snapshot.session_id}, total {created.total}"
        )
        return created

    def get_order(self, order_id: str, buyer_id: str) -> OrderModel:
        with db_guard(self.db, "order read"):
            order = self.repo.get_order(order_id)

        if not order:
            raise OrderNotFound()

        if order.buyer_id != buyer_id:
            raise Unauthorized("You do not have access to this order")

        return order

    def list_orders(self, buyer_id: str) -> list[OrderModel]:
        with db_guard(self.db, "order list"):
            return self.repo.list_by_buyer(buyer_id)

    def list_seller_orders(self, seller_id: str) -> list[OrderModel]:
        """Zamowienia zawierajace co najmniej jedna pozycje sprzedawcy."""
        with db_guard(self.db, "seller order list"):
            return self.repo.list_by_seller(seller_id)
