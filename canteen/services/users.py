from __future__ import annotations
import logging
from typing import Any, Dict, List, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from canteen.constants.roles import ALL_ROLES, ROLE_CUSTOMER, ROLE_STAFF
from canteen.constants.storage import STAFF_MEMBERS, USERS
from canteen.errors import Forbidden, InvalidCredentials, ValidationFailed
from canteen.models.identity import Identity
from canteen.services.tokens import new_id
from canteen.utils.clock import Clock, to_iso, utcnow
from canteen.utils.validation import MIN_PASSWORD_LENGTH, is_blank, is_valid_email, validate_status

logger = logging.getLogger(__name__)

PUBLIC_FIELDS = ('id', 'name', 'email', 'role', 'created_at')


def public_user(user: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: user.get(k) for k in PUBLIC_FIELDS}


def roster_entry(user: Mapping[str, Any], orders_completed: int = 0, rating: float = 0) -> Dict[str, Any]:
    return {
        'id': user['id'],
        'name': user['name'],
        'email': user['email'],
        'role': ROLE_STAFF,
        'orders_completed': orders_completed,
        'rating': rating,
        'joined_at': user['created_at'],
    }


class UserDirectory:
    def __init__(self, store, clock: Clock = utcnow):
        self.store = store
        self.clock = clock

    def _load(self) -> List[Dict[str, Any]]:
        return self.store.get(USERS) or []

    def list(self) -> List[Dict[str, Any]]:
        return self._load()

    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        return next((u for u in self._load() if u['id'] == user_id), None)

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        needle = (email or '').strip().lower()
        return next((u for u in self._load() if u['email'].lower() == needle), None)

    def register(self, data: Mapping[str, Any], role: Optional[str] = None, **extra) -> Dict[str, Any]:
        """Create an account; staff accounts also join the roster.

        ``extra`` seeds roster counters (orders_completed, rating) for staff.
        """
        name, email, password = data.get('name'), data.get('email'), data.get('password')
        if is_blank(name) or is_blank(email) or is_blank(password):
            raise ValidationFailed('All fields are required')
        if not is_valid_email(str(email).strip()):
            raise ValidationFailed('Please enter a valid email address', field='email')
        if len(str(password)) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed(f'Password must be at least {MIN_PASSWORD_LENGTH} characters', field='password')
        role = validate_status(role or data.get('role') or ROLE_CUSTOMER, ALL_ROLES, 'role')
        with self.store.lock:
            if self.find_by_email(email) is not None:
                raise ValidationFailed('Email already registered', field='email')
            user = {
                'id': new_id(),
                'name': str(name).strip(),
                'email': str(email).strip().lower(),
                'password_hash': generate_password_hash(str(password)),
                'role': role,
                'created_at': to_iso(self.clock()),
            }
            users = self._load()
            users.append(user)
            if role == ROLE_STAFF:
                staff = self.store.get(STAFF_MEMBERS) or []
                staff.append(roster_entry(user, **extra))
                self.store.set(STAFF_MEMBERS, staff)
            self.store.set(USERS, users)
        logger.info('registered %s account %s', role, user['id'])
        return user

    def authenticate(self, email: Optional[str], password: Optional[str], expected_role: Optional[str] = None) -> Identity:
        if is_blank(email) or is_blank(password):
            raise ValidationFailed('Email and password are required')
        user = self.find_by_email(email)
        if user is None or not check_password_hash(user['password_hash'], password):
            raise InvalidCredentials()
        if expected_role and user['role'] != expected_role:
            raise Forbidden(f'This login is for {expected_role}s only. Please use the correct login page.')
        return Identity.from_user(user)

    def remove(self, user_id: str) -> bool:
        with self.store.lock:
            users = self._load()
            kept = [u for u in users if u['id'] != user_id]
            if len(kept) == len(users):
                return False
            self.store.set(USERS, kept)
            return True


__all__ = ['UserDirectory', 'public_user', 'roster_entry']
