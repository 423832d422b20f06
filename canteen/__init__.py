from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import logging

from canteen.config.settings import load_settings, normalize
from canteen.errors import CanteenError, NotAuthenticated
from canteen.utils.clock import resolve_timezone, utcnow

load_dotenv()

store = None
jwt = JWTManager()


def create_app(config: Optional[Dict[str, Any]] = None):
    global store
    app = Flask(__name__)

    settings = load_settings()
    if config:
        # allow tests or callers to override default config values
        settings.update(config)
    app.config.update(normalize(settings))
    app.config.setdefault('CLOCK', utcnow)
    app.config['TIMEZONE'] = resolve_timezone(app.config['CANTEEN_TIMEZONE'])

    level = getattr(logging, app.config['LOG_LEVEL'], logging.INFO)
    app.logger.setLevel(level)
    logging.getLogger('canteen').setLevel(level)

    from .services.store import open_store
    store = open_store(app.config['CANTEEN_STORE_URL'])
    app.extensions['canteen_store'] = store
    app.extensions['canteen_revoked_tokens'] = {}

    jwt.init_app(app)

    from .routes.auth import auth_bp
    from .routes.menu import menu_bp
    from .routes.cart import cart_bp
    from .routes.orders import orders_bp
    from .routes.staff import staff_bp
    from .routes.reports import rpt_bp
    from .routes.location import location_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(menu_bp, url_prefix='/menu')
    app.register_blueprint(cart_bp, url_prefix='/cart')
    app.register_blueprint(orders_bp, url_prefix='/orders')
    app.register_blueprint(staff_bp, url_prefix='/staff')
    app.register_blueprint(rpt_bp, url_prefix='/reports')
    app.register_blueprint(location_bp, url_prefix='/location')

    if app.config['SEED_SAMPLE_DATA']:
        from .services.seed import ensure_sample_data
        ensure_sample_data(store, app.config['CLOCK'])

    @app.route('/healthz')
    def health():
        return {'status': 'ok', 'store': type(store).__name__}

    # Unified error handler producing the {success, error, message} shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, CanteenError):
            if e.http_status >= 500:
                app.logger.error('%s: %s', e.code, e.message)
            return e.to_dict(), e.http_status
        if isinstance(e, HTTPException):
            return {'success': False, 'error': e.name, 'message': e.description}, e.code
        app.logger.exception('Unhandled exception')
        return {'success': False, 'error': 'InternalServerError', 'message': 'Unexpected error'}, 500

    return app


def _auth_failure(reason: str):
    err = NotAuthenticated(reason)
    return err.to_dict(), err.http_status


@jwt.unauthorized_loader
def _missing_token(reason):
    return _auth_failure(reason)


@jwt.invalid_token_loader
def _invalid_token(reason):
    return _auth_failure(reason)


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return _auth_failure('Session expired, please login again')


@jwt.revoked_token_loader
def _revoked_token(jwt_header, jwt_payload):
    return _auth_failure('Session ended, please login again')


@jwt.token_in_blocklist_loader
def _is_revoked(jwt_header, jwt_payload):
    from flask import current_app
    return jwt_payload.get('jti') in current_app.extensions['canteen_revoked_tokens']


def get_store():
    from flask import current_app, has_app_context
    if has_app_context():
        return current_app.extensions['canteen_store']
    return store
