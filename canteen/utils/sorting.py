from __future__ import annotations
from typing import Any, Callable, Dict, List, Sequence

from canteen.errors import ValidationFailed


def apply_multi_sort(rows: Sequence, sort_expr: str | None, allowed: Dict[str, Callable[[Any], Any]], tie_breaker: Callable[[Any], Any]) -> List:
    """Sort rows by a comma separated field list.

    sort_expr: tokens optionally prefixed with '-' for descending, e.g. ``-total,created_at``.
    allowed: field key -> key function.
    tie_breaker: key function applied last (ascending) for deterministic order.
    """
    out = sorted(rows, key=tie_breaker)
    if not sort_expr:
        return out
    keys = []
    for raw in sort_expr.split(','):
        token = raw.strip()
        if not token:
            continue
        desc = token.startswith('-')
        key = token[1:] if desc else token
        fn = allowed.get(key)
        if fn is None:
            raise ValidationFailed(f'Invalid sort field {key}', field='sort')
        keys.append((fn, desc))
    # stable sorts applied from the least significant key
    for fn, desc in reversed(keys):
        out.sort(key=fn, reverse=desc)
    return out
