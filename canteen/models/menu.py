from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass
class MenuItem:
    id: str
    name: str
    description: str
    price: Decimal
    category: str
    image: str
    available: bool = True
    preparation_time: int = 15
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def matches(self, term: str) -> bool:
        term = term.lower()
        return term in self.name.lower() or term in self.description.lower() or term in self.category.lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': str(self.price),
            'category': self.category,
            'image': self.image,
            'available': self.available,
            'preparation_time': self.preparation_time,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MenuItem':
        return cls(
            id=data['id'],
            name=data['name'],
            description=data.get('description') or '',
            price=Decimal(str(data['price'])),
            category=data.get('category') or '',
            image=data.get('image') or '',
            available=bool(data.get('available', True)),
            preparation_time=int(data.get('preparation_time') or 15),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
        )
