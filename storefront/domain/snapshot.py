# storefront/domain/snapshot.py
"""
Niemutowalne kopie koszyka.

Zamowienie jest skladane z migawki, nie z zywego koszyka - pozniejsze
zmiany w koszyku nie moga zmienic juz zlozonego zamowienia.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Tuple


@dataclass(frozen=True)
class CartLine:
    item_id: str
    quantity: int
    unit_price: Decimal
    title: str = ""
    seller_id: str | None = None
    added_at: datetime | None = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CartSnapshot:
    session_id: str
    items: Tuple[CartLine, ...] = ()

    @property
    def total(self) -> Decimal:
        return sum((i.line_total for i in self.items), Decimal("0.00"))

    @property
    def item_count(self) -> int:
        return sum(i.quantity for i in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def same_lines(self, other_lines) -> bool:
        """Porownanie pozycji (id, ilosc, cena) niezaleznie od kolejnosci."""
        mine = sorted((i.item_id, i.quantity, Decimal(i.unit_price)) for i in self.items)
        theirs = sorted((i.item_id, i.quantity, Decimal(i.unit_price)) for i in other_lines)
        return mine == theirs
