"""Identifiers and pickup tokens.

Tokens look like ``TKN-20240115-0007``: a fixed prefix, the local calendar day and
a four digit sequence that restarts every day. The sequence is kept in the store
by ``TokenSequence`` so it keeps increasing even if two orders are placed in the
same instant; the count of orders already placed today is the floor.
"""
from __future__ import annotations
import re
import uuid
from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Sequence

from canteen.constants.storage import TOKEN_SEQUENCE
from canteen.utils.clock import utcnow

TOKEN_PATTERN = re.compile(r'^(?P<prefix>[A-Z]+)-(?P<day>\d{8})-(?P<seq>\d{4,})$')


def new_id() -> str:
    return uuid.uuid4().hex


def format_token(day: date, seq: int, prefix: str = 'TKN') -> str:
    return f"{prefix}-{day.strftime('%Y%m%d')}-{seq:04d}"


def new_token(existing_orders_today: Sequence, now: Optional[datetime] = None, prefix: str = 'TKN', tz: tzinfo = timezone.utc) -> str:
    """Count-based token: number of orders already placed today plus one."""
    now = now or utcnow()
    return format_token(now.astimezone(tz).date(), len(existing_orders_today) + 1, prefix)


def token_sequence(token: str) -> Optional[int]:
    m = TOKEN_PATTERN.match(token or '')
    return int(m.group('seq')) if m else None


class TokenSequence:
    """Per-day monotonic counter persisted under a single store key.

    Callers must hold ``store.lock`` across ``peek``, ``commit`` and the write of
    the order carrying the token; ``restore`` undoes a commit whose order was not
    stored.
    """

    def __init__(self, store, prefix: str = 'TKN'):
        self.store = store
        self.prefix = prefix

    def _last_for(self, day: date) -> int:
        state = self.store.get(TOKEN_SEQUENCE) or {}
        if state.get('day') != day.isoformat():
            return 0
        return int(state.get('last') or 0)

    def peek(self, day: date, orders_today: int = 0) -> int:
        return max(self._last_for(day), orders_today) + 1

    def issue(self, day: date, orders_today: int = 0):
        seq = self.peek(day, orders_today)
        return seq, format_token(day, seq, self.prefix)

    def commit(self, day: date, seq: int):
        """Record ``seq`` as issued; returns the previous state for ``restore``."""
        previous = self.store.get(TOKEN_SEQUENCE)
        if seq > self._last_for(day):
            self.store.set(TOKEN_SEQUENCE, {'day': day.isoformat(), 'last': seq})
        return previous

    def restore(self, previous) -> None:
        if previous is None:
            self.store.remove(TOKEN_SEQUENCE)
        else:
            self.store.set(TOKEN_SEQUENCE, previous)


__all__ = ['new_id', 'new_token', 'format_token', 'token_sequence', 'TokenSequence', 'TOKEN_PATTERN']
