from __future__ import annotations
import time
from typing import Dict, Optional

from flask_jwt_extended import get_jwt, get_jwt_identity
from canteen.constants.roles import KITCHEN_ROLES
from canteen.errors import Forbidden
from canteen.models.identity import Identity
from canteen.models.order import Order


def current_identity() -> Identity:
    """Identity snapshot from the verified access token claims."""
    claims = get_jwt()
    return Identity(
        id=str(get_jwt_identity()),
        name=claims.get('name', ''),
        email=claims.get('email', ''),
        role=claims.get('role', ''),
    )


def has_role(*roles: str) -> bool:
    return get_jwt().get('role') in roles


def assert_owns_order(order: Order, identity: Identity) -> None:
    """Customers only see their own orders; kitchen roles see every order."""
    if identity.role in KITCHEN_ROLES:
        return
    if order.user_id != identity.id:
        raise Forbidden('Order belongs to another customer')


def revoke_token(revoked: Dict[str, Optional[int]], payload: dict, now: Optional[float] = None) -> None:
    """Blocklist the token's jti until its ``exp``.

    Entries whose token has already expired are dropped on the way; JWT
    verification rejects those tokens without the blocklist.
    """
    now = time.time() if now is None else now
    for jti, exp in list(revoked.items()):
        if exp is not None and exp <= now:
            revoked.pop(jti, None)
    revoked[payload['jti']] = payload.get('exp')
