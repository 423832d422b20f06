"""List responses with pagination metadata and conditional GET support.

Staff screens poll the order lists every few seconds; an unchanged list answers
``304 Not Modified`` via ETag / Last-Modified.

The ETag is a digest of the page body, so any edit to a listed row changes it
no matter how close in time the edits are. ``Last-Modified`` is an HTTP date and
only carries whole seconds; ``X-Last-Modified-ISO`` carries the full stamp and
is accepted back in ``If-Modified-Since``.
"""
from __future__ import annotations
import hashlib
import json
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from flask import make_response, request

from canteen.errors import ValidationFailed
from canteen.utils.clock import parse_iso

DEFAULT_LIMIT = 50
MAX_LIMIT = 200


def normalize_pagination(limit_raw, offset_raw) -> Tuple[int, int]:
    try:
        limit = int(limit_raw) if limit_raw is not None else DEFAULT_LIMIT
        offset = int(offset_raw) if offset_raw is not None else 0
    except ValueError:
        raise ValidationFailed('limit/offset must be int')
    limit = max(1, min(limit, MAX_LIMIT))
    offset = max(0, offset)
    return limit, offset


def paginate(rows: Sequence) -> Tuple[list, int, int, int]:
    limit, offset = normalize_pagination(request.args.get('limit'), request.args.get('offset'))
    return list(rows[offset:offset + limit]), len(rows), limit, offset


def canonicalize_timestamp(dt: datetime) -> datetime:
    """UTC, full precision."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def latest_timestamp(values: Iterable[Optional[str]]) -> Optional[datetime]:
    stamps = [parse_iso(v) for v in values if v]
    return max(stamps) if stamps else None


def compute_etag(rows: List[dict], total: int, limit: int, offset: int) -> str:
    body = json.dumps(rows, sort_keys=True, default=str, separators=(',', ':'))
    seed = f"{body}|{total}|{limit}|{offset}"
    return hashlib.sha256(seed.encode()).hexdigest()[:32]


def build_list_payload(rows: list, total: int, limit: int, offset: int):
    return {
        'success': True,
        'data': rows,
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'returned': len(rows),
        },
    }


def _http_date(dt: datetime) -> str:
    return format_datetime(dt.replace(microsecond=0), usegmt=True)


def _iso(dt: datetime) -> str:
    return dt.isoformat().replace('+00:00', 'Z')


def _set_validators(resp, etag_value: str, latest_c: Optional[datetime]):
    resp.headers['ETag'] = etag_value
    if latest_c:
        resp.headers['Last-Modified'] = _http_date(latest_c)
        resp.headers['X-Last-Modified-ISO'] = _iso(latest_c)
    return resp


def make_cached_list_response(rows: List[dict], total: int, limit: int, offset: int, latest_ts: Optional[datetime] = None):
    latest_c = canonicalize_timestamp(latest_ts) if latest_ts else None
    etag = compute_etag(rows, total, limit, offset)
    resp = make_response(build_list_payload(rows, total, limit, offset))
    return _set_validators(resp, etag, latest_c), etag


def _parse_if_modified_since(header_val: str) -> Optional[datetime]:
    if not header_val:
        return None
    try:
        return canonicalize_timestamp(parse_iso(header_val))
    except ValueError:
        pass
    try:
        dt = parsedate_to_datetime(header_val)
    except (TypeError, ValueError):
        return None
    return canonicalize_timestamp(dt)


def handle_conditional(etag_value: str, latest_ts: Optional[datetime]):
    """Return a 304 response when the client copy is current, else None.

    If-None-Match wins over If-Modified-Since. The date comparison is exact, so
    a list touched later within the same second as an HTTP date is sent again.
    """
    latest_c = canonicalize_timestamp(latest_ts) if latest_ts else None
    inm = request.headers.get('If-None-Match')
    if inm:
        if inm.strip('"') == etag_value:
            return _set_validators(make_response('', 304), etag_value, latest_c)
        return None
    ims_dt = _parse_if_modified_since(request.headers.get('If-Modified-Since'))
    if ims_dt and latest_c and latest_c <= ims_dt:
        return _set_validators(make_response('', 304), etag_value, latest_c)
    return None


def list_response(rows_json: List[dict], timestamps: Iterable[Optional[str]]):
    """Paginate already sorted rows and answer conditionally."""
    page, total, limit, offset = paginate(rows_json)
    latest_ts = latest_timestamp(timestamps)
    resp, etag = make_cached_list_response(page, total, limit, offset, latest_ts)
    cond = handle_conditional(etag, latest_ts)
    if cond is not None:
        return cond
    return resp


__all__ = [
    'normalize_pagination', 'paginate', 'compute_etag', 'make_cached_list_response',
    'handle_conditional', 'list_response', 'latest_timestamp', 'canonicalize_timestamp',
]
