from __future__ import annotations
from flask import Blueprint, request

from canteen.config.settings import as_bool
from canteen.constants.roles import KITCHEN_ROLES
from canteen.decorators.auth import require_roles
from canteen.services.context import menu_catalog

menu_bp = Blueprint('menu', __name__)


@menu_bp.get('/items')
def list_items():
    catalog = menu_catalog()
    q = request.args.get('q')
    category = request.args.get('category')
    if q is not None:
        items = catalog.search(q)
    elif category:
        items = catalog.filter_by_category(category)
    else:
        items = catalog.list(only_available=as_bool(request.args.get('available', 'false')))
    return {'success': True, 'data': [i.to_dict() for i in items]}


@menu_bp.get('/items/<item_id>')
def get_item(item_id: str):
    return {'success': True, 'item': menu_catalog().require(item_id).to_dict()}


@menu_bp.get('/categories')
def categories():
    return {'success': True, 'data': menu_catalog().categories()}


@menu_bp.post('/items')
@require_roles(*KITCHEN_ROLES)
def add_item():
    item = menu_catalog().add(request.get_json(silent=True) or {})
    return {'success': True, 'message': 'Menu item added successfully!', 'item': item.to_dict()}, 201


@menu_bp.put('/items/<item_id>')
@require_roles(*KITCHEN_ROLES)
def update_item(item_id: str):
    item = menu_catalog().update(item_id, request.get_json(silent=True) or {})
    return {'success': True, 'message': 'Menu item updated successfully!', 'item': item.to_dict()}


@menu_bp.delete('/items/<item_id>')
@require_roles(*KITCHEN_ROLES)
def delete_item(item_id: str):
    menu_catalog().delete(item_id)
    return {'success': True, 'message': 'Menu item deleted successfully!'}


@menu_bp.post('/items/<item_id>/toggle')
@require_roles(*KITCHEN_ROLES)
def toggle_item(item_id: str):
    item = menu_catalog().toggle(item_id)
    state = 'available' if item.available else 'unavailable'
    return {'success': True, 'message': f'Item is now {state}', 'item': item.to_dict()}
