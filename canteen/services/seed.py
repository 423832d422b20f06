"""Idempotent sample data for a fresh canteen.

Each key is only written when it is missing, so re-running never duplicates
menu items or accounts and never touches existing orders.
"""
from __future__ import annotations
import logging
from typing import Dict

from canteen.constants import sample_data
from canteen.constants.roles import ROLE_ADMIN
from canteen.constants.storage import MENU_ITEMS, ORDERS, SHOP_LOCATION, STAFF_MEMBERS, USERS
from canteen.services.staff import StaffRoster
from canteen.services.tokens import new_id
from canteen.services.users import UserDirectory
from canteen.utils.clock import Clock, to_iso, utcnow

logger = logging.getLogger(__name__)


def _menu_items(stamp: str):
    for name, description, price, category, prep, image in sample_data.MENU_ITEMS:
        yield {
            'id': new_id(),
            'name': name,
            'description': description,
            'price': price,
            'category': category,
            'image': image or sample_data.PLACEHOLDER_IMAGE,
            'available': True,
            'preparation_time': prep,
            'created_at': stamp,
            'updated_at': None,
        }


def ensure_sample_data(store, clock: Clock = utcnow) -> Dict[str, int]:
    """Return how many records were written per key (0 when already present)."""
    written = {MENU_ITEMS: 0, USERS: 0, STAFF_MEMBERS: 0, SHOP_LOCATION: 0, ORDERS: 0}
    users = UserDirectory(store, clock)
    roster = StaffRoster(store, users)
    with store.lock:
        if store.get(MENU_ITEMS) is None:
            items = list(_menu_items(to_iso(clock())))
            store.set(MENU_ITEMS, items)
            written[MENU_ITEMS] = len(items)
        if users.find_by_email(sample_data.ADMIN_ACCOUNT['email']) is None:
            users.register(sample_data.ADMIN_ACCOUNT, role=ROLE_ADMIN)
            written[USERS] += 1
        for account in sample_data.STAFF_ACCOUNTS:
            if users.find_by_email(account['email']) is None:
                roster.add(
                    account,
                    orders_completed=account.get('orders_completed', 0),
                    rating=account.get('rating', 0),
                )
                written[USERS] += 1
                written[STAFF_MEMBERS] += 1
        if store.get(SHOP_LOCATION) is None:
            store.set(SHOP_LOCATION, dict(sample_data.SHOP_LOCATION))
            written[SHOP_LOCATION] = 1
        if store.get(ORDERS) is None:
            store.set(ORDERS, [])
    logger.info('sample data ensured: %s', written)
    return written


__all__ = ['ensure_sample_data']
