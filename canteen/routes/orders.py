from __future__ import annotations
from flask import Blueprint, current_app, request

from canteen.constants.roles import KITCHEN_ROLES
from canteen.decorators.auth import require_roles
from canteen.errors import OrderNotFound
from canteen.models.order import ALL_STATUSES, Order, status_info
from canteen.services.context import cart_for, order_lifecycle, order_repository
from canteen.services.lifecycle import ACTIONS, ORDER_FSM, allowed_actions
from canteen.services.policy import assert_owns_order, current_identity
from canteen.utils.listing import list_response
from canteen.utils.sorting import apply_multi_sort
from canteen.utils.validation import validate_status

orders_bp = Blueprint('orders', __name__)

SORT_FIELDS = {
    'created_at': lambda o: o.created,
    'updated_at': lambda o: o.updated_at,
    'total': lambda o: o.total,
    'status': lambda o: ALL_STATUSES.index(o.status) if o.status in ALL_STATUSES else len(ALL_STATUSES),
    'token': lambda o: o.token,
}


def _order_json(o: Order):
    data = o.to_dict()
    data['status_info'] = status_info(o.status)
    data['allowed_actions'] = allowed_actions(o.status)
    return data


def _sorted(orders, default_key=None):
    sort_expr = request.args.get('sort') or default_key
    return apply_multi_sort(orders, sort_expr, SORT_FIELDS, lambda o: o.id)


def _listing(orders):
    return list_response([_order_json(o) for o in orders], (o.updated_at for o in orders))


@orders_bp.post('')
@require_roles()
def place_order():
    identity = current_identity()
    cart = cart_for(identity.id)
    order = order_repository().create(cart.checkout_lines(), identity, clear_cart=cart.clear)
    return {'success': True, 'message': 'Order placed successfully!', 'order': _order_json(order)}, 201


@orders_bp.get('/mine')
@require_roles()
def my_orders():
    orders = order_repository().get_by_user(current_identity().id)
    if request.args.get('sort'):
        orders = _sorted(orders)
    return _listing(orders)


@orders_bp.get('/token/<token>')
@require_roles()
def order_by_token(token: str):
    order = order_repository().get_by_token(token)
    if order is None:
        raise OrderNotFound(f'We could not find an order with token: {token}', token=token)
    assert_owns_order(order, current_identity())
    return {'success': True, 'order': _order_json(order)}


@orders_bp.get('/lifecycle')
def lifecycle():
    return {
        'success': True,
        'strict': current_app.config['STRICT_ORDER_TRANSITIONS'],
        'transitions': ORDER_FSM.describe(),
        'actions': {name: target for name, (target, _label) in ACTIONS.items()},
        'statuses': {s: status_info(s) for s in ALL_STATUSES},
    }


@orders_bp.get('/active')
@require_roles(*KITCHEN_ROLES)
def active_orders():
    orders = order_repository().get_active()
    if request.args.get('sort'):
        orders = _sorted(orders)
    return _listing(orders)


@orders_bp.get('')
@require_roles(*KITCHEN_ROLES)
def list_orders():
    repo = order_repository()
    status = request.args.get('status')
    if status and status != 'all':
        orders = repo.get_by_status(status)
    else:
        orders = _sorted(repo.get_all(), '-created_at')
    if request.args.get('sort'):
        orders = _sorted(orders)
    return _listing(orders)


@orders_bp.get('/<order_id>')
@require_roles()
def get_order(order_id: str):
    order = order_repository().get_by_id(order_id)
    if order is None:
        raise OrderNotFound(order_id=order_id)
    assert_owns_order(order, current_identity())
    return {'success': True, 'order': _order_json(order)}


@orders_bp.post('/<order_id>/status')
@require_roles(*KITCHEN_ROLES)
def change_status(order_id: str):
    data = request.get_json(silent=True) or {}
    status = validate_status(data.get('status'), ALL_STATUSES)
    order = order_lifecycle().transition(order_id, status, data.get('note'), current_identity())
    return {'success': True, 'message': f'Order status updated to {status}', 'order': _order_json(order)}


@orders_bp.post('/<order_id>/<action>')
@require_roles(*KITCHEN_ROLES)
def run_action(order_id: str, action: str):
    order = order_lifecycle().apply_action(order_id, action, current_identity())
    return {'success': True, 'message': f'Order status updated to {order.status}', 'order': _order_json(order)}
