from __future__ import annotations
from flask import Blueprint, request

from canteen.constants.roles import KITCHEN_ROLES, ROLE_ADMIN
from canteen.decorators.auth import require_roles
from canteen.errors import ValidationFailed
from canteen.services.context import now, order_repository, staff_roster, timezone
from canteen.services.reports import admin_overview, daily_report, dashboard_stats
from canteen.utils.clock import calendar_day, parse_day

rpt_bp = Blueprint('reports', __name__)


@rpt_bp.get('/daily')
@require_roles(ROLE_ADMIN)
def daily():
    tz = timezone()
    raw = request.args.get('date')
    day = parse_day(raw) if raw else calendar_day(now(), tz)
    if day is None:
        raise ValidationFailed('date must be YYYY-MM-DD', field='date')
    report = daily_report(order_repository().get_all(), day, tz)
    return {'success': True, 'report': report.to_dict()}


@rpt_bp.get('/dashboard')
@require_roles(*KITCHEN_ROLES)
def dashboard():
    stats = dashboard_stats(order_repository().get_all(), now(), timezone())
    return {'success': True, 'stats': stats.to_dict()}


@rpt_bp.get('/overview')
@require_roles(ROLE_ADMIN)
def overview():
    stats = admin_overview(order_repository().get_all(), now(), timezone(), staff_roster().count())
    return {'success': True, 'stats': stats}
