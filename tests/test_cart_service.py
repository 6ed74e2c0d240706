"""
Cart store tests: accumulation, removal, clearing and price snapshots.
"""
from decimal import Decimal

import pytest

from storefront.domain.errors import NotFound, ValidationError


class TestGetCart:
    def test_unknown_session_is_empty_cart(self, cart_service):
        """A session that never added anything gets an empty cart, not an error."""
        cart = cart_service.get_cart("never-seen-session")

        assert cart.session_id == "never-seen-session"
        assert cart.items == ()
        assert cart.total == Decimal("0.00")
        assert cart.is_empty

    def test_blank_session_rejected(self, cart_service):
        with pytest.raises(ValidationError):
            cart_service.get_cart("  ")


class TestAddItem:
    def test_repeated_adds_accumulate_into_one_line(self, cart_service):
        """add X x1 then X x2 yields a single line with quantity 3."""
        cart_service.add_item("s1", "X", 1)
        cart = cart_service.add_item("s1", "X", 2)

        lines = [i for i in cart.items if i.item_id == "X"]
        assert len(lines) == 1
        assert lines[0].quantity == 3

    def test_quantity_is_sum_of_all_adds(self, cart_service):
        quantities = [1, 4, 2, 7]
        for q in quantities:
            cart = cart_service.add_item("s1", "A", q)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == sum(quantities)

    def test_default_quantity_is_one(self, cart_service):
        cart = cart_service.add_item("s1", "B")
        assert cart.items[0].quantity == 1

    def test_line_copies_catalog_data(self, cart_service):
        cart = cart_service.add_item("s1", "A", 2)
        line = cart.items[0]

        assert line.title == "Stoneware Mug"
        assert line.seller_id == "artisan-1"
        assert line.unit_price == Decimal("10")
        assert cart.total == Decimal("20")

    def test_unknown_item_raises_not_found(self, cart_service):
        with pytest.raises(NotFound):
            cart_service.add_item("s1", "missing", 1)

        assert cart_service.get_cart("s1").is_empty

    def test_catalog_checked_even_for_existing_line(self, cart_service, catalog):
        cart_service.add_item("s1", "A", 1)
        del catalog.items["A"]

        with pytest.raises(NotFound):
            cart_service.add_item("s1", "A", 1)

        assert cart_service.get_cart("s1").items[0].quantity == 1

    @pytest.mark.parametrize("quantity", [0, -1, True, 1.5])
    def test_invalid_quantity_rejected(self, cart_service, quantity):
        with pytest.raises(ValidationError):
            cart_service.add_item("s1", "A", quantity)

    def test_price_snapshot_not_refreshed(self, cart_service, catalog):
        """The unit price captured at first add survives later catalog changes."""
        cart_service.add_item("s1", "A", 1)
        catalog.set_price("A", "99.99")

        cart = cart_service.add_item("s1", "A", 1)

        assert cart.items[0].unit_price == Decimal("10")
        assert cart.total == Decimal("20")

    def test_sessions_are_independent(self, cart_service):
        cart_service.add_item("s1", "A", 1)
        cart_service.add_item("s2", "B", 3)

        assert [i.item_id for i in cart_service.get_cart("s1").items] == ["A"]
        assert [i.item_id for i in cart_service.get_cart("s2").items] == ["B"]

    def test_display_order_follows_insertion(self, cart_service):
        for item_id in ("B", "X", "A"):
            cart_service.add_item("s1", item_id, 1)

        assert [i.item_id for i in cart_service.get_cart("s1").items] == ["B", "X", "A"]


class TestRemoveAndClear:
    def test_remove_existing_item(self, cart_service):
        cart_service.add_item("s1", "A", 1)
        cart_service.add_item("s1", "B", 1)

        cart = cart_service.remove_item("s1", "A")

        assert [i.item_id for i in cart.items] == ["B"]

    def test_remove_absent_item_is_noop(self, cart_service):
        cart_service.add_item("s1", "A", 2)
        before = cart_service.get_cart("s1")

        after = cart_service.remove_item("s1", "B")

        assert after == before

    def test_remove_on_missing_cart_is_noop(self, cart_service):
        assert cart_service.remove_item("nobody", "A").is_empty

    def test_clear_then_get_is_empty(self, cart_service):
        cart_service.add_item("s1", "A", 1)
        cart_service.add_item("s1", "B", 2)

        cart_service.clear("s1")

        assert cart_service.get_cart("s1").is_empty

    def test_clear_is_idempotent(self, cart_service):
        cart_service.add_item("s1", "A", 1)
        cart_service.clear("s1")
        cart_service.clear("s1")
        cart_service.clear("never-existed")

        assert cart_service.get_cart("s1").is_empty

    def test_cart_usable_after_clear(self, cart_service):
        cart_service.add_item("s1", "A", 1)
        cart_service.clear("s1")

        cart = cart_service.add_item("s1", "A", 2)

        assert cart.items[0].quantity == 2


class TestSnapshot:
    def test_snapshot_is_decoupled_from_store(self, cart_service):
        cart_service.add_item("s1", "A", 1)
        snapshot = cart_service.snapshot("s1")

        cart_service.add_item("s1", "A", 5)
        cart_service.add_item("s1", "B", 1)

        assert len(snapshot.items) == 1
        assert snapshot.items[0].quantity == 1
        assert snapshot.total == Decimal("10")

    def test_snapshot_lines_are_frozen(self, cart_service):
        cart_service.add_item("s1", "A", 1)
        snapshot = cart_service.snapshot("s1")

        with pytest.raises(AttributeError):
            snapshot.items[0].quantity = 10
