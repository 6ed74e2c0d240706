"""
Order assembly tests: empty carts, totals from snapshots, ownership and seller index.
"""
from decimal import Decimal

import pytest

from conftest import BUYER, OTHER_BUYER, SHIPPING
from storefront.data.models.order import OrderModel
from storefront.domain.errors import EmptyCart, OrderNotFound, Unauthorized, ValidationError
from storefront.domain.snapshot import CartLine, CartSnapshot


class TestCreateOrder:
    def test_empty_snapshot_raises_and_writes_nothing(self, order_service, cart_service, db):
        with pytest.raises(EmptyCart):
            order_service.create_order(BUYER, cart_service.snapshot("s1"), SHIPPING)

        assert db.query(OrderModel).count() == 0

    def test_total_from_snapshot(self, order_service, cart_service):
        """A x1 @10 + B x2 @5 = 20."""
        cart_service.add_item("s1", "A", 1)
        cart_service.add_item("s1", "B", 2)

        order = order_service.create_order(BUYER, cart_service.snapshot("s1"), SHIPPING)

        assert order.total == Decimal("20")
        assert order.status == "pending"
        assert order.buyer_id == BUYER
        assert len(order.items) == 2

    def test_total_ignores_current_catalog_prices(self, order_service, cart_service, catalog):
        cart_service.add_item("s1", "A", 3)
        catalog.set_price("A", "1000")

        order = order_service.create_order(BUYER, cart_service.snapshot("s1"), SHIPPING)

        assert order.total == Decimal("30")

    def test_total_exact_for_arbitrary_snapshot(self, order_service):
        lines = (
            CartLine(item_id="p1", quantity=3, unit_price=Decimal("19.99")),
            CartLine(item_id="p2", quantity=1, unit_price=Decimal("0.01")),
            CartLine(item_id="p3", quantity=7, unit_price=Decimal("145.50")),
        )
        snapshot = CartSnapshot(session_id="s9", items=lines)

        order = order_service.create_order(BUYER, snapshot, SHIPPING)

        assert order.total == Decimal("59.97") + Decimal("0.01") + Decimal("1018.50")

    def test_later_cart_changes_do_not_affect_order(self, order_service, cart_service):
        cart_service.add_item("s1", "A", 1)
        order = order_service.create_order(BUYER, cart_service.snapshot("s1"), SHIPPING)

        cart_service.add_item("s1", "A", 4)
        cart_service.remove_item("s1", "A")

        stored = order_service.get_order(order.id, BUYER)
        assert stored.total == Decimal("10")
        assert [(i.item_id, i.quantity) for i in stored.items] == [("A", 1)]

    def test_each_order_gets_fresh_id(self, order_service, cart_service):
        cart_service.add_item("s1", "A", 1)
        snapshot = cart_service.snapshot("s1")

        first = order_service.create_order(BUYER, snapshot, SHIPPING)
        second = order_service.create_order(BUYER, snapshot, SHIPPING)

        assert first.id != second.id

    def test_shipping_fields_required(self, order_service, cart_service):
        cart_service.add_item("s1", "A", 1)
        shipping = dict(SHIPPING, city="   ")

        with pytest.raises(ValidationError) as exc:
            order_service.create_order(BUYER, cart_service.snapshot("s1"), shipping)

        assert "city" in exc.value.message

    def test_shipping_stored(self, order_service, cart_service):
        cart_service.add_item("s1", "A", 1)
        order = order_service.create_order(BUYER, cart_service.snapshot("s1"), SHIPPING)

        assert order.shipping_info["full_name"] == "Ada Lovelace"
        assert order.shipping_info["zip"] == "SW1Y 4JH"


class TestOrderQueries:
    def test_get_missing_order(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.get_order("nope", BUYER)

    def test_get_other_buyers_order(self, order_service, cart_service):
        cart_service.add_item("s1", "A", 1)
        order = order_service.create_order(BUYER, cart_service.snapshot("s1"), SHIPPING)

        with pytest.raises(Unauthorized):
            order_service.get_order(order.id, OTHER_BUYER)

    def test_list_orders_only_own(self, order_service, cart_service):
        cart_service.add_item("s1", "A", 1)
        cart_service.add_item("s2", "B", 1)
        mine = order_service.create_order(BUYER, cart_service.snapshot("s1"), SHIPPING)
        order_service.create_order(OTHER_BUYER, cart_service.snapshot("s2"), SHIPPING)

        assert [o.id for o in order_service.list_orders(BUYER)] == [mine.id]

    def test_seller_orders_through_item_index(self, order_service, cart_service):
        cart_service.add_item("s1", "A", 1)  # artisan-1
        cart_service.add_item("s1", "B", 1)  # artisan-2
        cart_service.add_item("s2", "B", 2)  # artisan-2
        mixed = order_service.create_order(BUYER, cart_service.snapshot("s1"), SHIPPING)
        only_b = order_service.create_order(OTHER_BUYER, cart_service.snapshot("s2"), SHIPPING)

        artisan_1 = {o.id for o in order_service.list_seller_orders("artisan-1")}
        artisan_2 = {o.id for o in order_service.list_seller_orders("artisan-2")}

        assert artisan_1 == {mixed.id}
        assert artisan_2 == {mixed.id, only_b.id}
        assert order_service.list_seller_orders("artisan-404") == []
