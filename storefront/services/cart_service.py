# storefront/services/cart_service.py
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from storefront.data.database import db_guard
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import ValidationError
from storefront.domain.snapshot import CartLine, CartSnapshot
from storefront.repos.cart_repo import CartRepo
from storefront.services.catalog_client import CatalogClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Koszyk sesji anonimowej.
    commands (add, remove, clear) modyfikuja stan, query (get, snapshot) tylko odczyt.
    Rownolegle zmiany tej samej sesji - wygrywa ostatni zapis.
    """

    def __init__(self, db: Session, catalog_client: CatalogClient):
        self.db = db
        self.repo = CartRepo(db)
        self.catalog_client = catalog_client

    #query - odczyt
    def get_cart(self, session_id: str) -> CartSnapshot:
        return self.snapshot(session_id)

    def snapshot(self, session_id: str) -> CartSnapshot:
        """Kopia koszyka odcieta od bazy - brak koszyka to pusty koszyk."""
        _require_session(session_id)

        with db_guard(self.db, "cart read"):
            items = self.repo.get_cart_items(session_id)

        return CartSnapshot(
            session_id=session_id,
            items=tuple(
                CartLine(
                    item_id=i.item_id,
                    quantity=i.quantity,
                    unit_price=i.unit_price,
                    title=i.title,
                    seller_id=i.seller_id,
                    added_at=i.added_at,
                )
                for i in items
            ),
        )

    #commands
    def add_item(self, session_id: str, item_id: str, quantity: int = 1) -> CartSnapshot:
        _require_session(session_id)

        if not item_id:
            raise ValidationError("Item id is required")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        #walidacja + cena z katalogu (NotFound jesli brak)
        catalog_item = self.catalog_client.resolve(item_id)

        with db_guard(self.db, "cart add"):
            cart = self.repo.get_or_create_cart(session_id)
            existing_item = self.repo.get_cart_item(session_id, item_id)

            if existing_item:
                logger.info(
                    f"Item {item_id} already in cart {session_id}, quantity "
                    f"{existing_item.quantity} -> {existing_item.quantity + quantity}"
                )
                #cena zostaje z pierwszego dodania
                existing_item.quantity += quantity
            else:
                logger.info(f"Adding item {item_id} x{quantity} to cart {session_id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        session_id=session_id,
                        item_id=item_id,
                        title=catalog_item.title,
                        seller_id=catalog_item.owner_id,
                        quantity=quantity,
                        unit_price=catalog_item.price,
                    )
                )

            cart.updated_at = datetime.now(timezone.utc)
            self.repo.commit()

        return self.snapshot(session_id)

    def remove_item(self, session_id: str, item_id: str) -> CartSnapshot:
        _require_session(session_id)

        with db_guard(self.db, "cart remove"):
            item = self.repo.get_cart_item(session_id, item_id)
            if item is None:
                return self.snapshot(session_id)

            logger.info(f"Removing item {item_id} from cart {session_id}")
            self.repo.delete_cart_item(item)
            self.repo.commit()

        return self.snapshot(session_id)

    def clear(self, session_id: str) -> None:
        _require_session(session_id)

        with db_guard(self.db, "cart clear"):
            cart = self.repo.get_cart(session_id)
            if cart is None:
                return
            self.repo.delete_cart(cart)
            self.repo.commit()

        logger.info(f"Cart {session_id} cleared")


def _require_session(session_id: str) -> None:
    if not session_id or not str(session_id).strip():
        raise ValidationError("Session id is required")
