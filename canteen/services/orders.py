from __future__ import annotations
import logging
from datetime import date, timezone, tzinfo
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence

from canteen.constants.storage import ORDERS
from canteen.errors import EmptyCart, NotAuthenticated, OrderNotFound, StorageUnavailable
from canteen.models.cart import CartLine
from canteen.models.identity import Identity
from canteen.models.order import (
    ALL_STATUSES,
    STATUS_PENDING,
    Order,
    OrderItem,
    StatusEntry,
)
from canteen.services.tokens import TokenSequence, new_id
from canteen.utils.clock import Clock, calendar_day, parse_iso, to_iso, utcnow
from canteen.utils.validation import quantize_money, validate_status

logger = logging.getLogger(__name__)

PLACED_NOTE = 'Order placed'


def _created_key(order: Order):
    return parse_iso(order.created_at)


class OrderRepository:
    """Create and query orders kept as one JSON array in the store.

    Every mutation re-reads the full collection under ``store.lock`` and writes it
    back in one ``set`` so a failed write leaves the previous collection intact.
    """

    def __init__(
        self,
        store,
        clock: Clock = utcnow,
        tz: tzinfo = timezone.utc,
        tax_rate: Decimal = Decimal('0'),
        token_prefix: str = 'TKN',
    ):
        self.store = store
        self.clock = clock
        self.tz = tz
        self.tax_rate = Decimal(str(tax_rate))
        self.tokens = TokenSequence(store, token_prefix)

    # -------- storage -------- #
    def _load(self) -> List[Dict]:
        return self.store.get(ORDERS) or []

    def _save(self, raw: List[Dict]) -> None:
        self.store.set(ORDERS, raw)

    # -------- create -------- #
    def create(self, cart: Sequence, customer: Optional[Identity], clear_cart: Optional[Callable[[], None]] = None) -> Order:
        if not cart:
            raise EmptyCart()
        if customer is None:
            raise NotAuthenticated()
        lines = [CartLine.coerce(line) for line in cart]
        items = tuple(
            OrderItem(
                item_id=line.item_id,
                name=line.name,
                unit_price=line.price,
                quantity=line.quantity,
                line_subtotal=quantize_money(line.price * line.quantity),
            )
            for line in lines
        )
        subtotal = quantize_money(sum((i.line_subtotal for i in items), Decimal('0')))
        tax = quantize_money(subtotal * self.tax_rate)
        total = subtotal + tax

        with self.store.lock:
            now = self.clock()
            stamp = to_iso(now)
            day = calendar_day(now, self.tz)
            raw = self._load()
            today = sum(1 for o in raw if calendar_day(o['created_at'], self.tz) == day)
            seq, token = self.tokens.issue(day, today)
            order = Order(
                id=new_id(),
                token=token,
                user_id=customer.id,
                user_name=customer.name,
                user_email=customer.email,
                items=items,
                subtotal=subtotal,
                tax=tax,
                total=total,
                status=STATUS_PENDING,
                status_history=[StatusEntry(STATUS_PENDING, stamp, PLACED_NOTE)],
                created_at=stamp,
                updated_at=stamp,
            )
            raw.append(order.to_dict())
            # the orders write goes last: if it fails nothing of this order remains
            previous = self.tokens.commit(day, seq)
            try:
                self._save(raw)
            except StorageUnavailable:
                try:
                    self.tokens.restore(previous)
                except StorageUnavailable:
                    logger.warning('token counter left at %s after failed order write', seq)
                raise
        logger.info('order %s placed by %s token=%s total=%s', order.id, customer.id, token, total)
        if clear_cart is not None:
            try:
                clear_cart()
            except StorageUnavailable:
                logger.warning('order %s placed but the cart could not be cleared', order.id)
        return order

    # -------- queries -------- #
    def get_all(self) -> List[Order]:
        return [Order.from_dict(o) for o in self._load()]

    def get_by_id(self, order_id: str) -> Optional[Order]:
        for o in self._load():
            if o['id'] == order_id:
                return Order.from_dict(o)
        return None

    def get_by_token(self, token: str) -> Optional[Order]:
        matches = [o for o in self.get_all() if o.token == token]
        if not matches:
            return None
        # tokens restart daily, prefer the newest order carrying it
        return max(matches, key=_created_key)

    def get_by_user(self, user_id: str) -> List[Order]:
        return sorted((o for o in self.get_all() if o.user_id == user_id), key=_created_key, reverse=True)

    def get_by_status(self, status: str) -> List[Order]:
        validate_status(status, ALL_STATUSES)
        return sorted((o for o in self.get_all() if o.status == status), key=_created_key)

    def get_active(self) -> List[Order]:
        return sorted((o for o in self.get_all() if o.is_active), key=_created_key)

    def get_for_day(self, day: date) -> List[Order]:
        return [o for o in self.get_all() if calendar_day(o.created_at, self.tz) == day]

    # -------- update -------- #
    def update(self, order_id: str, mutator: Callable[[Order], None]) -> Order:
        """Apply ``mutator`` to one order and persist the collection.

        Raises OrderNotFound (nothing written) for an unknown id. Anything the
        mutator raises propagates before the write.
        """
        with self.store.lock:
            raw = self._load()
            for idx, data in enumerate(raw):
                if data['id'] == order_id:
                    order = Order.from_dict(data)
                    mutator(order)
                    raw[idx] = order.to_dict()
                    self._save(raw)
                    return order
        raise OrderNotFound(order_id=order_id)


__all__ = ['OrderRepository', 'PLACED_NOTE']
