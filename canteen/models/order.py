from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from canteen.utils.clock import parse_iso

STATUS_PENDING = 'pending'
STATUS_PREPARING = 'preparing'
STATUS_READY = 'ready'
STATUS_COMPLETED = 'completed'
STATUS_CANCELLED = 'cancelled'

ALL_STATUSES: Tuple[str, ...] = (
    STATUS_PENDING,
    STATUS_PREPARING,
    STATUS_READY,
    STATUS_COMPLETED,
    STATUS_CANCELLED,
)
ACTIVE_STATUSES: Tuple[str, ...] = (STATUS_PENDING, STATUS_PREPARING, STATUS_READY)

# Display metadata used by order boards and status pages
STATUS_INFO: Dict[str, Dict[str, str]] = {
    STATUS_PENDING: {'label': 'Pending', 'color': 'warning', 'badge': 'badge-pending'},
    STATUS_PREPARING: {'label': 'Preparing', 'color': 'info', 'badge': 'badge-preparing'},
    STATUS_READY: {'label': 'Ready', 'color': 'success', 'badge': 'badge-ready'},
    STATUS_COMPLETED: {'label': 'Completed', 'color': 'gray', 'badge': 'badge-completed'},
    STATUS_CANCELLED: {'label': 'Cancelled', 'color': 'danger', 'badge': 'badge-cancelled'},
}


def status_info(status: str) -> Dict[str, str]:
    return STATUS_INFO.get(status, STATUS_INFO[STATUS_PENDING])


@dataclass(frozen=True)
class OrderItem:
    """Immutable snapshot of a cart line taken when the order is placed."""
    item_id: str
    name: str
    unit_price: Decimal
    quantity: int
    line_subtotal: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            'item_id': self.item_id,
            'name': self.name,
            'unit_price': str(self.unit_price),
            'quantity': self.quantity,
            'line_subtotal': str(self.line_subtotal),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderItem':
        return cls(
            item_id=data['item_id'],
            name=data['name'],
            unit_price=Decimal(str(data['unit_price'])),
            quantity=int(data['quantity']),
            line_subtotal=Decimal(str(data['line_subtotal'])),
        )


@dataclass(frozen=True)
class StatusEntry:
    status: str
    timestamp: str
    note: str

    def to_dict(self) -> Dict[str, Any]:
        return {'status': self.status, 'timestamp': self.timestamp, 'note': self.note}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StatusEntry':
        return cls(status=data['status'], timestamp=data['timestamp'], note=data.get('note') or '')


@dataclass
class Order:
    STATUS_PENDING: ClassVar[str] = STATUS_PENDING
    STATUS_PREPARING: ClassVar[str] = STATUS_PREPARING
    STATUS_READY: ClassVar[str] = STATUS_READY
    STATUS_COMPLETED: ClassVar[str] = STATUS_COMPLETED
    STATUS_CANCELLED: ClassVar[str] = STATUS_CANCELLED
    ALL_STATUSES: ClassVar[Tuple[str, ...]] = ALL_STATUSES

    id: str
    token: str
    user_id: str
    user_name: str
    user_email: str
    items: Tuple[OrderItem, ...]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: str
    status_history: List[StatusEntry]
    created_at: str
    updated_at: str
    completed_at: Optional[str] = None
    # Free-form extras written by older clients are carried through untouched
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def created(self):
        return parse_iso(self.created_at)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def item_count(self) -> int:
        return sum(i.quantity for i in self.items)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            'id': self.id,
            'token': self.token,
            'user_id': self.user_id,
            'user_name': self.user_name,
            'user_email': self.user_email,
            'items': [i.to_dict() for i in self.items],
            'subtotal': str(self.subtotal),
            'tax': str(self.tax),
            'total': str(self.total),
            'status': self.status,
            'status_history': [h.to_dict() for h in self.status_history],
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            'completed_at': self.completed_at,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        known = {
            'id', 'token', 'user_id', 'user_name', 'user_email', 'items', 'subtotal', 'tax', 'total',
            'status', 'status_history', 'created_at', 'updated_at', 'completed_at',
        }
        return cls(
            id=data['id'],
            token=data['token'],
            user_id=data['user_id'],
            user_name=data.get('user_name') or '',
            user_email=data.get('user_email') or '',
            items=tuple(OrderItem.from_dict(i) for i in data.get('items') or []),
            subtotal=Decimal(str(data.get('subtotal', '0'))),
            tax=Decimal(str(data.get('tax', '0'))),
            total=Decimal(str(data.get('total', '0'))),
            status=data['status'],
            status_history=[StatusEntry.from_dict(h) for h in data.get('status_history') or []],
            created_at=data['created_at'],
            updated_at=data.get('updated_at') or data['created_at'],
            completed_at=data.get('completed_at'),
            extra={k: v for k, v in data.items() if k not in known},
        )
