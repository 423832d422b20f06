"""Per-request wiring of services from the app config."""
from __future__ import annotations
from flask import current_app

from canteen import get_store
from canteen.services.cart import CartService
from canteen.services.lifecycle import OrderLifecycle
from canteen.services.menu import MenuCatalog
from canteen.services.orders import OrderRepository
from canteen.services.staff import StaffRoster
from canteen.services.users import UserDirectory


def clock():
    return current_app.config['CLOCK']


def now():
    return clock()()


def timezone():
    return current_app.config['TIMEZONE']


def order_repository() -> OrderRepository:
    cfg = current_app.config
    return OrderRepository(
        get_store(),
        clock=cfg['CLOCK'],
        tz=cfg['TIMEZONE'],
        tax_rate=cfg['TAX_RATE'],
        token_prefix=cfg['TOKEN_PREFIX'],
    )


def user_directory() -> UserDirectory:
    return UserDirectory(get_store(), clock())


def staff_roster() -> StaffRoster:
    return StaffRoster(get_store(), user_directory())


def order_lifecycle() -> OrderLifecycle:
    return OrderLifecycle(
        order_repository(),
        strict=current_app.config['STRICT_ORDER_TRANSITIONS'],
        clock=clock(),
        roster=staff_roster(),
    )


def menu_catalog() -> MenuCatalog:
    return MenuCatalog(get_store(), clock())


def cart_for(user_id: str) -> CartService:
    return CartService(get_store(), menu_catalog(), user_id, current_app.config['TAX_RATE'])
