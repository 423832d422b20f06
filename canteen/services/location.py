from __future__ import annotations
from typing import Any, Dict, Mapping, Optional

from canteen.constants.storage import SHOP_LOCATION
from canteen.errors import ValidationFailed
from canteen.utils.validation import is_blank, is_valid_phone, parse_float


def get_location(store) -> Optional[Dict[str, Any]]:
    return store.get(SHOP_LOCATION)


def save_location(store, data: Mapping[str, Any]) -> Dict[str, Any]:
    if is_blank(data.get('name')) or is_blank(data.get('address')):
        raise ValidationFailed('Name and address are required')
    phone = str(data.get('phone') or '').strip()
    if phone and not is_valid_phone(phone):
        raise ValidationFailed('Please enter a valid phone number', field='phone')
    location = {
        'name': str(data['name']).strip(),
        'address': str(data['address']).strip(),
        'lat': parse_float(data.get('lat')),
        'lng': parse_float(data.get('lng')),
        'phone': phone,
        'open_hours': str(data.get('open_hours') or '').strip(),
    }
    store.set(SHOP_LOCATION, location)
    return location


def map_link(location: Mapping[str, Any]) -> str:
    return f"https://www.google.com/maps?q={location.get('lat', 0)},{location.get('lng', 0)}"


__all__ = ['get_location', 'save_location', 'map_link']
