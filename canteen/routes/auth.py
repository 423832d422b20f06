from __future__ import annotations
from flask import Blueprint, current_app, request
from flask_jwt_extended import create_access_token, get_jwt

from canteen.constants.roles import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_HOME
from canteen.decorators.auth import require_roles
from canteen.errors import RecordNotFound, ValidationFailed
from canteen.services.context import user_directory
from canteen.services.policy import current_identity, revoke_token
from canteen.services.users import public_user

auth_bp = Blueprint('auth', __name__)


@auth_bp.post('/register')
def register():
    data = request.get_json(silent=True) or {}
    confirm = data.get('confirm_password')
    if confirm is not None and confirm != data.get('password'):
        raise ValidationFailed('Passwords do not match', field='confirm_password')
    role = data.get('role') or ROLE_CUSTOMER
    if role == ROLE_ADMIN:
        raise ValidationFailed('Admin accounts cannot self-register', field='role')
    user = user_directory().register(data, role=role)
    return {'success': True, 'message': 'Registration successful!', 'user': public_user(user)}, 201


@auth_bp.post('/login')
def login():
    data = request.get_json(silent=True) or {}
    identity = user_directory().authenticate(data.get('email'), data.get('password'), data.get('role'))
    token = create_access_token(identity=identity.id, additional_claims=identity.claims())
    current_app.logger.info('login %s (%s)', identity.id, identity.role)
    return {
        'success': True,
        'message': 'Login successful!',
        'access_token': token,
        'user': {'id': identity.id, 'name': identity.name, 'email': identity.email, 'role': identity.role},
        'home': ROLE_HOME.get(identity.role),
    }


@auth_bp.post('/logout')
@require_roles()
def logout():
    revoke_token(current_app.extensions['canteen_revoked_tokens'], get_jwt())
    return {'success': True, 'message': 'Logged out'}


@auth_bp.get('/me')
@require_roles()
def me():
    identity = current_identity()
    user = user_directory().get(identity.id)
    if user is None:
        raise RecordNotFound('Account no longer exists')
    return {'success': True, 'user': public_user(user), 'home': ROLE_HOME.get(identity.role)}
