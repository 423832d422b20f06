"""Application settings read from the environment (``.env`` is loaded by ``canteen``)."""
from __future__ import annotations
import os
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

DEFAULTS: Dict[str, Any] = {
    'CANTEEN_STORE_URL': 'sqlite:///canteen.db',
    'JWT_SECRET_KEY': 'dev-secret',
    'CANTEEN_TIMEZONE': 'UTC',
    'TAX_RATE': '0',
    'TOKEN_PREFIX': 'TKN',
    'STRICT_ORDER_TRANSITIONS': True,
    'ORDER_REFRESH_SECONDS': 15,
    'SEED_SAMPLE_DATA': False,
    'LOG_LEVEL': 'INFO',
}

_TRUE = {'1', 'true', 'yes', 'on'}


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE


def as_decimal(value: Any, name: str) -> Decimal:
    try:
        rate = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f'{name} must be a decimal number')
    if rate < 0:
        raise ValueError(f'{name} must not be negative')
    return rate


def load_settings() -> Dict[str, Any]:
    settings = dict(DEFAULTS)
    for key in DEFAULTS:
        raw = os.getenv(key)
        if raw is not None:
            settings[key] = raw
    return settings


def normalize(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce env strings into the types the services expect."""
    out = dict(settings)
    out['TAX_RATE'] = as_decimal(out['TAX_RATE'], 'TAX_RATE')
    out['STRICT_ORDER_TRANSITIONS'] = as_bool(out['STRICT_ORDER_TRANSITIONS'])
    out['SEED_SAMPLE_DATA'] = as_bool(out['SEED_SAMPLE_DATA'])
    out['ORDER_REFRESH_SECONDS'] = float(out['ORDER_REFRESH_SECONDS'])
    out['LOG_LEVEL'] = str(out['LOG_LEVEL']).upper()
    return out
