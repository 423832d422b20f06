from __future__ import annotations
import logging
from typing import Any, Dict, List, Mapping, Optional

from canteen.constants.sample_data import PLACEHOLDER_IMAGE
from canteen.constants.storage import MENU_ITEMS
from canteen.errors import MenuItemNotFound, ValidationFailed
from canteen.models.menu import MenuItem
from canteen.services.tokens import new_id
from canteen.utils.clock import Clock, to_iso, utcnow
from canteen.utils.validation import is_blank, parse_money, parse_quantity, require_fields

logger = logging.getLogger(__name__)

DEFAULT_PREPARATION_MINUTES = 15
EDITABLE_FIELDS = ('name', 'description', 'price', 'category', 'image', 'available', 'preparation_time')


class MenuCatalog:
    """Menu items kept as a single JSON array."""

    def __init__(self, store, clock: Clock = utcnow):
        self.store = store
        self.clock = clock

    def _load(self) -> List[Dict[str, Any]]:
        return self.store.get(MENU_ITEMS) or []

    def list(self, only_available: bool = False) -> List[MenuItem]:
        items = [MenuItem.from_dict(i) for i in self._load()]
        if only_available:
            return [i for i in items if i.available]
        return items

    def get(self, item_id: str) -> Optional[MenuItem]:
        for raw in self._load():
            if raw['id'] == item_id:
                return MenuItem.from_dict(raw)
        return None

    def require(self, item_id: str) -> MenuItem:
        item = self.get(item_id)
        if item is None:
            raise MenuItemNotFound(item_id=item_id)
        return item

    def categories(self) -> List[str]:
        return sorted({i.category for i in self.list()})

    def filter_by_category(self, category: str) -> List[MenuItem]:
        items = self.list(only_available=True)
        if category == 'all':
            return items
        return [i for i in items if i.category == category]

    def search(self, query: str) -> List[MenuItem]:
        items = self.list(only_available=True)
        term = (query or '').strip().lower()
        if not term:
            return items
        return [i for i in items if i.matches(term)]

    def add(self, data: Mapping[str, Any]) -> MenuItem:
        require_fields(data, ('name', 'price', 'category'), 'Name, price, and category are required')
        price = parse_money(data['price'])
        prep = data.get('preparation_time')
        item = MenuItem(
            id=new_id(),
            name=str(data['name']).strip(),
            description=str(data.get('description') or '').strip(),
            price=price,
            category=str(data['category']).strip(),
            image=data.get('image') or PLACEHOLDER_IMAGE,
            available=True,
            preparation_time=parse_quantity(prep, 'preparation_time') if not is_blank(prep) else DEFAULT_PREPARATION_MINUTES,
            created_at=to_iso(self.clock()),
        )
        with self.store.lock:
            items = self._load()
            items.append(item.to_dict())
            self.store.set(MENU_ITEMS, items)
        logger.info('menu item %s added (%s)', item.id, item.name)
        return item

    def update(self, item_id: str, data: Mapping[str, Any]) -> MenuItem:
        changes: Dict[str, Any] = {}
        for key in EDITABLE_FIELDS:
            if key not in data:
                continue
            value = data[key]
            if key in ('name', 'category') and is_blank(value):
                raise ValidationFailed(f'{key} must not be empty', field=key)
            if key == 'price':
                value = str(parse_money(value))
            elif key == 'preparation_time':
                value = parse_quantity(value, key)
            elif key == 'available':
                value = bool(value)
            elif isinstance(value, str):
                value = value.strip()
            changes[key] = value
        with self.store.lock:
            items = self._load()
            for idx, raw in enumerate(items):
                if raw['id'] == item_id:
                    raw.update(changes)
                    raw['updated_at'] = to_iso(self.clock())
                    items[idx] = raw
                    self.store.set(MENU_ITEMS, items)
                    return MenuItem.from_dict(raw)
        raise MenuItemNotFound(item_id=item_id)

    def delete(self, item_id: str) -> None:
        with self.store.lock:
            items = self._load()
            kept = [i for i in items if i['id'] != item_id]
            if len(kept) == len(items):
                raise MenuItemNotFound(item_id=item_id)
            self.store.set(MENU_ITEMS, kept)
        logger.info('menu item %s deleted', item_id)

    def toggle(self, item_id: str) -> MenuItem:
        item = self.require(item_id)
        return self.update(item_id, {'available': not item.available})


__all__ = ['MenuCatalog', 'DEFAULT_PREPARATION_MINUTES']
