"""Read-side aggregates over the order collection.

Nothing is cached: every call scans the snapshot it is given. Orders are bucketed
by the calendar day they were *created* on, so revenue of an order placed late
yesterday and collected this morning belongs to yesterday.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from canteen.models.order import (
    ALL_STATUSES,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    Order,
)
from canteen.utils.clock import calendar_day
from canteen.utils.validation import quantize_money

TOP_ITEMS = 5
ZERO = Decimal('0.00')


@dataclass
class PopularItem:
    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'count': self.count}


@dataclass
class DailyReport:
    date: date
    total_orders: int
    completed_orders: int
    cancelled_orders: int
    revenue: Decimal
    average_order_value: Decimal
    popular_items: List[PopularItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'total_orders': self.total_orders,
            'completed_orders': self.completed_orders,
            'cancelled_orders': self.cancelled_orders,
            'revenue': str(self.revenue),
            'average_order_value': str(self.average_order_value),
            'popular_items': [p.to_dict() for p in self.popular_items],
        }


@dataclass
class DashboardStats:
    date: date
    total: int
    counts: Dict[str, int]
    revenue: Decimal

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'date': self.date.isoformat(), 'total': self.total, 'revenue': str(self.revenue)}
        data.update(self.counts)
        return data


def orders_on(orders: Iterable[Order], day: date, tz: tzinfo = timezone.utc) -> List[Order]:
    return [o for o in orders if calendar_day(o.created_at, tz) == day]


def _revenue(orders: Iterable[Order]) -> Decimal:
    return quantize_money(sum((o.total for o in orders if o.status == STATUS_COMPLETED), ZERO))


def popular_items(orders: Iterable[Order], limit: int = TOP_ITEMS) -> List[PopularItem]:
    """Quantities sold per item name; ties keep the order names were first seen in."""
    counts: Dict[str, int] = {}
    for order in orders:
        for item in order.items:
            counts[item.name] = counts.get(item.name, 0) + item.quantity
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [PopularItem(name, count) for name, count in ranked[:limit]]


def daily_report(orders: Iterable[Order], day: date, tz: tzinfo = timezone.utc) -> DailyReport:
    day_orders = orders_on(orders, day, tz)
    completed = [o for o in day_orders if o.status == STATUS_COMPLETED]
    revenue = _revenue(completed)
    average = quantize_money(revenue / len(completed)) if completed else ZERO
    return DailyReport(
        date=day,
        total_orders=len(day_orders),
        completed_orders=len(completed),
        cancelled_orders=sum(1 for o in day_orders if o.status == STATUS_CANCELLED),
        revenue=revenue,
        average_order_value=average,
        popular_items=popular_items(completed),
    )


def dashboard_stats(orders: Iterable[Order], reference_moment: datetime, tz: tzinfo = timezone.utc) -> DashboardStats:
    day = calendar_day(reference_moment, tz)
    today = orders_on(orders, day, tz)
    counts = {status: 0 for status in ALL_STATUSES}
    for o in today:
        counts[o.status] = counts.get(o.status, 0) + 1
    return DashboardStats(date=day, total=len(today), counts=counts, revenue=_revenue(today))


def admin_overview(orders: Iterable[Order], reference_moment: datetime, tz: tzinfo = timezone.utc, staff_count: int = 0) -> Dict[str, Any]:
    day = calendar_day(reference_moment, tz)
    today = orders_on(orders, day, tz)
    return {
        'date': day.isoformat(),
        'total_orders': len(today),
        'completed_orders': sum(1 for o in today if o.status == STATUS_COMPLETED),
        'in_progress_orders': sum(1 for o in today if o.is_active),
        'total_revenue': str(_revenue(today)),
        'staff_count': staff_count,
    }


__all__ = [
    'PopularItem', 'DailyReport', 'DashboardStats', 'orders_on', 'popular_items',
    'daily_report', 'dashboard_stats', 'admin_overview',
]
