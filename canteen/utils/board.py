"""Plain-text rendering of the order queue for terminals."""
from __future__ import annotations
from datetime import datetime
from typing import Iterable, List

from canteen.models.order import Order, status_info
from canteen.services.lifecycle import allowed_actions, elapsed_minutes


def format_table(headers: List[str], rows: List[List[str]]) -> str:
    widths = [len(h) for h in headers]
    for r in rows:
        for i, cell in enumerate(r):
            widths[i] = max(widths[i], len(cell))

    def fmt_row(cols: List[str]) -> str:
        return ' | '.join(col.ljust(widths[i]) for i, col in enumerate(cols)).rstrip()

    sep = '-+-'.join('-' * w for w in widths)
    return '\n'.join([fmt_row(headers), sep] + [fmt_row(r) for r in rows])


def render_order_board(orders: Iterable[Order], now: datetime) -> str:
    rows = []
    for o in orders:
        items = ', '.join(f'{i.quantity}x {i.name}' for i in o.items)
        rows.append([
            o.token,
            status_info(o.status)['label'],
            o.user_name,
            items,
            str(o.total),
            f'{elapsed_minutes(o, now)}m',
            '/'.join(allowed_actions(o.status)),
        ])
    if not rows:
        return '<no active orders>'
    return format_table(['Token', 'Status', 'Customer', 'Items', 'Total', 'Waiting', 'Actions'], rows)


__all__ = ['format_table', 'render_order_board']
