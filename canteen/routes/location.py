from __future__ import annotations
from flask import Blueprint, request

from canteen import get_store
from canteen.constants.roles import ROLE_ADMIN
from canteen.decorators.auth import require_roles
from canteen.errors import RecordNotFound
from canteen.services.location import get_location, map_link, save_location

location_bp = Blueprint('location', __name__)


@location_bp.get('')
def show():
    location = get_location(get_store())
    if location is None:
        raise RecordNotFound('Shop location not set')
    return {'success': True, 'location': location, 'map_url': map_link(location)}


@location_bp.put('')
@require_roles(ROLE_ADMIN)
def update():
    location = save_location(get_store(), request.get_json(silent=True) or {})
    return {'success': True, 'message': 'Shop location saved successfully!', 'location': location}
