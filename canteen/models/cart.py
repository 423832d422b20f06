from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Union

from canteen.errors import ValidationFailed
from canteen.utils.validation import is_blank, parse_money, parse_quantity


@dataclass
class CartLine:
    item_id: str
    name: str
    price: Decimal
    quantity: int
    image: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            'item_id': self.item_id,
            'name': self.name,
            'price': str(self.price),
            'quantity': self.quantity,
            'image': self.image,
        }

    @classmethod
    def coerce(cls, line: Union['CartLine', Mapping[str, Any]]) -> 'CartLine':
        """Validate a line coming from storage or a caller; raises ValidationFailed."""
        if isinstance(line, CartLine):
            data: Mapping[str, Any] = line.to_dict()
        elif isinstance(line, Mapping):
            data = line
        else:
            raise ValidationFailed('cart line must be an object')
        if is_blank(data.get('item_id')) or is_blank(data.get('name')):
            raise ValidationFailed('cart line requires item_id and name')
        price = data.get('price', data.get('unit_price'))
        return cls(
            item_id=str(data['item_id']),
            name=str(data['name']).strip(),
            price=parse_money(price, 'price'),
            quantity=parse_quantity(data.get('quantity')),
            image=data.get('image'),
        )
