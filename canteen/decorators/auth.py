from functools import wraps
from flask_jwt_extended import verify_jwt_in_request
from canteen.errors import Forbidden
from canteen.services.policy import has_role


def require_roles(*roles: str):
    """Require a valid access token; with roles given, the token's role must be one of them."""
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if roles and not has_role(*roles):
                raise Forbidden(required=list(roles))
            return fn(*args, **kwargs)
        return wrapper
    return outer
