"""Order lifecycle.

    pending -> preparing -> ready -> completed
    pending -> cancelled

Strict mode (the default, STRICT_ORDER_TRANSITIONS) rejects any move outside the
table with InvalidTransition. Permissive mode accepts any known status and relies
on the action table below to keep staff on the happy path.
"""
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from canteen.constants.roles import ROLE_STAFF
from canteen.models.identity import Identity
from canteen.models.order import (
    ALL_STATUSES,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PENDING,
    STATUS_PREPARING,
    STATUS_READY,
    Order,
    StatusEntry,
)
from canteen.utils.clock import Clock, parse_iso, to_iso, utcnow
from canteen.utils.fsm import TransitionValidator
from canteen.utils.validation import is_blank, validate_status

logger = logging.getLogger(__name__)

ORDER_GRAPH = {
    STATUS_PENDING: {STATUS_PREPARING, STATUS_CANCELLED},
    STATUS_PREPARING: {STATUS_READY},
    STATUS_READY: {STATUS_COMPLETED},
    STATUS_COMPLETED: set(),
    STATUS_CANCELLED: set(),
}

ORDER_FSM = TransitionValidator(ORDER_GRAPH)

DEFAULT_NOTES = {
    STATUS_PREPARING: 'Started preparing',
    STATUS_READY: 'Food is ready for pickup',
    STATUS_COMPLETED: 'Order collected by customer',
    STATUS_CANCELLED: 'Order cancelled',
}

# action name -> (target status, label shown on the kitchen screen)
ACTIONS: Dict[str, tuple] = {
    'start': (STATUS_PREPARING, 'Start Preparing'),
    'ready': (STATUS_READY, 'Mark Ready'),
    'complete': (STATUS_COMPLETED, 'Complete'),
    'cancel': (STATUS_CANCELLED, 'Cancel'),
}

_ACTIONS_BY_STATUS: Dict[str, List[str]] = {
    STATUS_PENDING: ['start', 'cancel'],
    STATUS_PREPARING: ['ready'],
    STATUS_READY: ['complete'],
    STATUS_COMPLETED: [],
    STATUS_CANCELLED: [],
}


def default_note(status: str) -> str:
    return f'Status changed to {status}'


def allowed_actions(status: str) -> List[str]:
    """Actions the kitchen screen offers for an order in ``status``."""
    if ORDER_FSM.is_terminal(status):
        return []
    return list(_ACTIONS_BY_STATUS.get(status, []))


class OrderLifecycle:
    def __init__(self, repository, strict: bool = True, clock: Optional[Clock] = None, roster=None):
        self.repository = repository
        self.validator = ORDER_FSM.with_strictness(strict)
        self.clock = clock or getattr(repository, 'clock', utcnow)
        self.roster = roster

    @property
    def strict(self) -> bool:
        return self.validator.strict

    def transition(self, order_id: str, new_status: str, note: Optional[str] = None, actor: Optional[Identity] = None) -> Order:
        validate_status(new_status, ALL_STATUSES)

        def apply(order: Order) -> None:
            self.validator.assert_can_transition(order.status, new_status)
            now = self.clock()
            stamp = to_iso(now)
            order.status_history.append(
                StatusEntry(new_status, stamp, default_note(new_status) if is_blank(note) else note)
            )
            order.status = new_status
            order.updated_at = stamp
            if new_status == STATUS_COMPLETED and order.completed_at is None:
                # never earlier than creation even with a skewed clock
                order.completed_at = stamp if now >= order.created else order.created_at

        order = self.repository.update(order_id, apply)
        logger.info('order %s -> %s (%s)', order.token, new_status, actor.id if actor else 'system')
        if new_status == STATUS_COMPLETED and actor is not None and actor.role == ROLE_STAFF and self.roster is not None:
            self.roster.record_completion(actor.id)
        return order

    def start_preparing(self, order_id: str, actor: Optional[Identity] = None) -> Order:
        return self.transition(order_id, STATUS_PREPARING, DEFAULT_NOTES[STATUS_PREPARING], actor)

    def mark_ready(self, order_id: str, actor: Optional[Identity] = None) -> Order:
        return self.transition(order_id, STATUS_READY, DEFAULT_NOTES[STATUS_READY], actor)

    def complete(self, order_id: str, actor: Optional[Identity] = None) -> Order:
        return self.transition(order_id, STATUS_COMPLETED, DEFAULT_NOTES[STATUS_COMPLETED], actor)

    def cancel(self, order_id: str, actor: Optional[Identity] = None) -> Order:
        return self.transition(order_id, STATUS_CANCELLED, DEFAULT_NOTES[STATUS_CANCELLED], actor)

    def apply_action(self, order_id: str, action: str, actor: Optional[Identity] = None) -> Order:
        validate_status(action, ACTIONS, 'action')
        target = ACTIONS[action][0]
        return self.transition(order_id, target, DEFAULT_NOTES[target], actor)


def elapsed_minutes(order: Order, now) -> int:
    """Minutes since the order was placed, for queue displays."""
    return max(0, int((now - parse_iso(order.created_at)).total_seconds() // 60))


__all__ = [
    'ORDER_GRAPH', 'ORDER_FSM', 'DEFAULT_NOTES', 'ACTIONS', 'default_note', 'allowed_actions',
    'OrderLifecycle', 'elapsed_minutes',
]
