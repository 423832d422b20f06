"""Role tags carried in the session token.

Authorization is a plain role-tag check; there are no finer grained permissions.
Never rename a tag silently, stored user records reference them.
"""
from __future__ import annotations
from typing import Dict

ROLE_CUSTOMER = 'customer'
ROLE_STAFF = 'staff'
ROLE_ADMIN = 'admin'

ALL_ROLES = (ROLE_CUSTOMER, ROLE_STAFF, ROLE_ADMIN)

# Roles allowed to work the order queue and manage the menu
KITCHEN_ROLES = (ROLE_STAFF, ROLE_ADMIN)

# Landing area per role, mirrors the dashboards each role is sent to after login
ROLE_HOME: Dict[str, str] = {
    ROLE_CUSTOMER: '/menu/items',
    ROLE_STAFF: '/orders/active',
    ROLE_ADMIN: '/reports/overview',
}

