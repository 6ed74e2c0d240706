# storefront/repos/cart_repo.py
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, session_id: str) -> CartModel | None:
        return self.db.get(CartModel, session_id)

    def get_or_create_cart(self, session_id: str) -> CartModel:
        cart = self.get_cart(session_id)
        if cart is None:
            cart = CartModel(session_id=session_id)
            self.db.add(cart)
            self.db.flush()
        return cart

    def get_cart_items(self, session_id: str) -> list[CartItemModel]:
        return (
            self.db.query(CartItemModel)
            .filter(CartItemModel.session_id == session_id)
            .order_by(CartItemModel.id)
            .all()
        )

    def get_cart_item(self, session_id: str, item_id: str) -> CartItemModel | None:
        return (
            self.db.query(CartItemModel)
            .filter(
                CartItemModel.session_id == session_id,
                CartItemModel.item_id == item_id,
            )
            .one_or_none()
        )

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def delete_cart(self, cart: CartModel) -> None:
        #cascade delete-orphan usuwa pozycje
        self.db.delete(cart)
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
