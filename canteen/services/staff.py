from __future__ import annotations
import logging
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Mapping, Optional

from canteen.constants.roles import ROLE_STAFF
from canteen.constants.storage import STAFF_MEMBERS
from canteen.errors import StaffNotFound
from canteen.models.order import STATUS_COMPLETED
from canteen.services.reports import orders_on
from canteen.services.users import UserDirectory
from canteen.utils.clock import calendar_day

logger = logging.getLogger(__name__)


class StaffRoster:
    def __init__(self, store, users: UserDirectory):
        self.store = store
        self.users = users

    def list(self) -> List[Dict[str, Any]]:
        return self.store.get(STAFF_MEMBERS) or []

    def get(self, staff_id: str) -> Optional[Dict[str, Any]]:
        return next((s for s in self.list() if s['id'] == staff_id), None)

    def count(self) -> int:
        return len(self.list())

    def add(self, data: Mapping[str, Any], **extra) -> Dict[str, Any]:
        user = self.users.register(data, role=ROLE_STAFF, **extra)
        return self.get(user['id'])

    def remove(self, staff_id: str) -> None:
        """Drop the roster entry and the login. Orders they handled are left as they are."""
        with self.store.lock:
            staff = self.list()
            kept = [s for s in staff if s['id'] != staff_id]
            if len(kept) == len(staff):
                raise StaffNotFound(staff_id=staff_id)
            self.store.set(STAFF_MEMBERS, kept)
            self.users.remove(staff_id)
        logger.info('staff member %s removed', staff_id)

    def record_completion(self, staff_id: str) -> Optional[Dict[str, Any]]:
        with self.store.lock:
            staff = self.list()
            for entry in staff:
                if entry['id'] == staff_id:
                    entry['orders_completed'] = int(entry.get('orders_completed') or 0) + 1
                    self.store.set(STAFF_MEMBERS, staff)
                    return entry
        return None

    def performance(self, staff_id: str, orders, reference_moment: datetime, tz: tzinfo = timezone.utc) -> Dict[str, Any]:
        """Roster entry plus today's share of completed orders.

        Orders do not record who completed them, so today's completions are split
        evenly across the roster.
        """
        staff = self.list()
        entry = next((s for s in staff if s['id'] == staff_id), None)
        if entry is None:
            raise StaffNotFound(staff_id=staff_id)
        day = calendar_day(reference_moment, tz)
        completed_today = [o for o in orders_on(orders, day, tz) if o.status == STATUS_COMPLETED]
        data = dict(entry)
        data['today_orders'] = len(completed_today) // (len(staff) or 1)
        data['total_orders'] = int(entry.get('orders_completed') or 0)
        return data


__all__ = ['StaffRoster']
