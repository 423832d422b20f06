from __future__ import annotations
from flask import Blueprint, request

from canteen.constants.roles import ROLE_ADMIN, ROLE_STAFF
from canteen.decorators.auth import require_roles
from canteen.services.context import now, order_repository, staff_roster, timezone
from canteen.services.policy import current_identity

staff_bp = Blueprint('staff', __name__)


@staff_bp.get('')
@require_roles(ROLE_ADMIN)
def list_staff():
    return {'success': True, 'data': staff_roster().list()}


@staff_bp.post('')
@require_roles(ROLE_ADMIN)
def add_staff():
    member = staff_roster().add(request.get_json(silent=True) or {})
    return {'success': True, 'message': 'Staff member added successfully!', 'staff': member}, 201


@staff_bp.delete('/<staff_id>')
@require_roles(ROLE_ADMIN)
def remove_staff(staff_id: str):
    staff_roster().remove(staff_id)
    return {'success': True, 'message': 'Staff member removed successfully!'}


@staff_bp.get('/<staff_id>/performance')
@require_roles(ROLE_ADMIN)
def staff_performance(staff_id: str):
    perf = staff_roster().performance(staff_id, order_repository().get_all(), now(), timezone())
    return {'success': True, 'performance': perf}


@staff_bp.get('/me/performance')
@require_roles(ROLE_STAFF)
def my_performance():
    perf = staff_roster().performance(current_identity().id, order_repository().get_all(), now(), timezone())
    return {'success': True, 'performance': perf}
