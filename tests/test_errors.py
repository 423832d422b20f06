from canteen.errors import StorageUnavailable
from tests.test_utils_seed import account_headers


def test_unknown_path_returns_error_json(client):
    resp = client.get('/non-existent-path')
    # Flask default 404 should be wrapped by error handler
    assert resp.status_code == 404
    body = resp.get_json()
    assert body['success'] is False
    assert body['error'] == 'Not Found'


def test_domain_not_found_shape(client):
    resp = client.get('/menu/items/missing')
    assert resp.status_code == 404
    assert resp.get_json() == {
        'success': False, 'error': 'MenuItemNotFound', 'message': 'Item not found', 'details': {'item_id': 'missing'},
    }
    resp = client.get('/location')
    assert resp.status_code == 404
    assert resp.get_json()['error'] == 'RecordNotFound'


def test_internal_error_shape(app_instance, client, monkeypatch):
    headers = account_headers(app_instance, client, 'nimal@example.com')
    import canteen.routes.cart as cart_mod

    def boom(user_id):
        raise RuntimeError('explode')

    # patch after login so auth works; only break the cart lookup
    monkeypatch.setattr(cart_mod, 'cart_for', boom)
    resp = client.get('/cart', headers=headers)
    assert resp.status_code == 500
    assert resp.get_json() == {'success': False, 'error': 'InternalServerError', 'message': 'Unexpected error'}


def test_storage_failure_maps_to_503(app_instance, client, monkeypatch):
    headers = account_headers(app_instance, client, 'nimal@example.com')
    store = app_instance.extensions['canteen_store']

    def offline(key):
        raise StorageUnavailable()

    monkeypatch.setattr(store, 'get', offline)
    resp = client.get('/cart', headers=headers)
    assert resp.status_code == 503
    assert resp.get_json()['error'] == 'StorageUnavailable'


def test_health(client):
    resp = client.get('/healthz')
    assert resp.status_code == 200
    assert resp.get_json() == {'status': 'ok', 'store': 'MemoryStore'}
