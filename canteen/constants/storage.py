"""Logical key names for the values kept in the key-value store.

Each key holds one JSON value (array or object). No relational constraints are
enforced across keys.
"""
from __future__ import annotations

USERS = 'canteen_users'
MENU_ITEMS = 'canteen_menu_items'
ORDERS = 'canteen_orders'
SHOP_LOCATION = 'canteen_shop_location'
STAFF_MEMBERS = 'canteen_staff_members'
TOKEN_SEQUENCE = 'canteen_token_sequence'
CART_PREFIX = 'canteen_cart:'

ALL_KEYS = (USERS, MENU_ITEMS, ORDERS, SHOP_LOCATION, STAFF_MEMBERS, TOKEN_SEQUENCE)


def cart_key(user_id: str) -> str:
    return f'{CART_PREFIX}{user_id}'
