from __future__ import annotations
from flask import Blueprint, request

from canteen.decorators.auth import require_roles
from canteen.errors import ValidationFailed
from canteen.services.context import cart_for
from canteen.services.policy import current_identity

cart_bp = Blueprint('cart', __name__)


def _cart():
    return cart_for(current_identity().id)


def _cart_json(cart, message=None):
    body = {
        'success': True,
        'items': [line.to_dict() for line in cart.get()],
        'count': cart.item_count(),
        'totals': cart.totals(),
    }
    if message:
        body['message'] = message
    return body


@cart_bp.get('')
@require_roles()
def get_cart():
    return _cart_json(_cart())


@cart_bp.post('/items')
@require_roles()
def add_item():
    data = request.get_json(silent=True) or {}
    if not data.get('item_id'):
        raise ValidationFailed('item_id required', field='item_id')
    cart = _cart()
    line = cart.add(data['item_id'], data.get('quantity', 1))
    return _cart_json(cart, f'{line.name} added to cart!'), 201


@cart_bp.put('/items/<item_id>')
@require_roles()
def update_item(item_id: str):
    data = request.get_json(silent=True) or {}
    cart = _cart()
    cart.update_quantity(item_id, data.get('quantity'))
    return _cart_json(cart, 'Cart updated')


@cart_bp.post('/items/<item_id>/increase')
@require_roles()
def increase(item_id: str):
    cart = _cart()
    cart.increase(item_id)
    return _cart_json(cart)


@cart_bp.post('/items/<item_id>/decrease')
@require_roles()
def decrease(item_id: str):
    cart = _cart()
    cart.decrease(item_id)
    return _cart_json(cart)


@cart_bp.delete('/items/<item_id>')
@require_roles()
def remove_item(item_id: str):
    cart = _cart()
    cart.remove(item_id)
    return _cart_json(cart, 'Item removed from cart')


@cart_bp.delete('')
@require_roles()
def clear():
    cart = _cart()
    cart.clear()
    return _cart_json(cart, 'Cart cleared')
