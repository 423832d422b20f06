from __future__ import annotations
from decimal import Decimal
from typing import Any, Dict, List

from canteen.constants.storage import cart_key
from canteen.errors import CartItemNotFound, ValidationFailed
from canteen.models.cart import CartLine
from canteen.utils.validation import parse_quantity, quantize_money


class CartService:
    """One customer's cart. Lines copy name and price from the menu when added
    and are checked against the menu again at checkout."""

    def __init__(self, store, catalog, user_id: str, tax_rate: Decimal = Decimal('0')):
        self.store = store
        self.catalog = catalog
        self.key = cart_key(user_id)
        self.tax_rate = Decimal(str(tax_rate))

    def get(self) -> List[CartLine]:
        return [CartLine.coerce(line) for line in self.store.get(self.key) or []]

    def _save(self, lines: List[CartLine]) -> None:
        self.store.set(self.key, [line.to_dict() for line in lines])

    def add(self, item_id: str, quantity: Any = 1) -> CartLine:
        qty = parse_quantity(quantity)
        item = self.catalog.require(item_id)
        if not item.available:
            raise ValidationFailed('Item is not available', item_id=item_id)
        with self.store.lock:
            lines = self.get()
            for line in lines:
                if line.item_id == item_id:
                    line.quantity += qty
                    self._save(lines)
                    return line
            line = CartLine(item_id=item.id, name=item.name, price=item.price, quantity=qty, image=item.image)
            lines.append(line)
            self._save(lines)
            return line

    def remove(self, item_id: str) -> None:
        with self.store.lock:
            lines = self.get()
            kept = [line for line in lines if line.item_id != item_id]
            if len(kept) == len(lines):
                raise CartItemNotFound(item_id=item_id)
            self._save(kept)

    def update_quantity(self, item_id: str, quantity: Any) -> None:
        try:
            qty = int(quantity)
        except (TypeError, ValueError):
            raise ValidationFailed('quantity must be an integer', field='quantity')
        if qty < 1:
            self.remove(item_id)
            return
        with self.store.lock:
            lines = self.get()
            for line in lines:
                if line.item_id == item_id:
                    line.quantity = qty
                    self._save(lines)
                    return
        raise CartItemNotFound(item_id=item_id)

    def increase(self, item_id: str) -> None:
        with self.store.lock:
            lines = self.get()
            for line in lines:
                if line.item_id == item_id:
                    line.quantity += 1
                    self._save(lines)
                    return
        raise CartItemNotFound(item_id=item_id)

    def decrease(self, item_id: str) -> None:
        with self.store.lock:
            lines = self.get()
            for line in lines:
                if line.item_id == item_id:
                    if line.quantity > 1:
                        line.quantity -= 1
                        self._save(lines)
                    else:
                        self.remove(item_id)
                    return
        raise CartItemNotFound(item_id=item_id)

    def clear(self) -> None:
        self.store.set(self.key, [])

    def checkout_lines(self) -> List[CartLine]:
        """Cart lines re-read against the menu, as ordered right now.

        A line whose item left the menu raises ``MenuItemNotFound``; one whose
        item is switched off raises ``ValidationFailed``. Name and price come
        from the current menu entry. The stored cart is left untouched.
        """
        lines = []
        for line in self.get():
            item = self.catalog.require(line.item_id)
            if not item.available:
                raise ValidationFailed('Item is not available', item_id=item.id)
            lines.append(CartLine(item_id=item.id, name=item.name, price=item.price,
                                  quantity=line.quantity, image=line.image))
        return lines

    def item_count(self) -> int:
        return sum(line.quantity for line in self.get())

    def totals(self) -> Dict[str, str]:
        subtotal = quantize_money(sum((line.line_total for line in self.get()), Decimal('0')))
        tax = quantize_money(subtotal * self.tax_rate)
        service_fee = Decimal('0.00')
        return {
            'subtotal': str(subtotal),
            'tax': str(tax),
            'service_fee': str(service_fee),
            'total': str(subtotal + tax + service_fee),
        }


__all__ = ['CartService']
