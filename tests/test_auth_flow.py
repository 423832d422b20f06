from canteen.services.policy import revoke_token
from tests.test_utils_seed import account_headers, ensure_account, login


def test_register_login_and_me(client):
    resp = client.post('/auth/register', json={
        'name': 'Nimal', 'email': 'nimal@example.com', 'password': 'secret1', 'confirm_password': 'secret1',
    })
    assert resp.status_code == 201, resp.get_json()
    assert resp.get_json()['user']['role'] == 'customer'
    assert 'password_hash' not in resp.get_json()['user']

    resp = client.post('/auth/login', json={'email': 'nimal@example.com', 'password': 'secret1'})
    assert resp.status_code == 200, resp.get_json()
    body = resp.get_json()
    assert body['home'] == '/menu/items'
    token = body['access_token']

    me = client.get('/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert me.status_code == 200
    assert me.get_json()['user']['email'] == 'nimal@example.com'


def test_register_rejects_mismatch_and_admin(client):
    resp = client.post('/auth/register', json={
        'name': 'A', 'email': 'a@example.com', 'password': 'secret1', 'confirm_password': 'secret2',
    })
    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Passwords do not match'
    resp = client.post('/auth/register', json={'name': 'A', 'email': 'a@example.com', 'password': 'secret1', 'role': 'admin'})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'ValidationFailed'


def test_staff_can_self_register(client):
    resp = client.post('/auth/register', json={'name': 'Cook', 'email': 'cook@canteen.com', 'password': 'staff123', 'role': 'staff'})
    assert resp.status_code == 201
    headers = login(client, 'cook@canteen.com', 'staff123')
    assert client.get('/orders/active', headers=headers).status_code == 200


def test_login_failures(app_instance, client):
    ensure_account(app_instance, 'nimal@example.com')
    resp = client.post('/auth/login', json={'email': 'nimal@example.com', 'password': 'nope123'})
    assert resp.status_code == 401
    assert resp.get_json() == {'success': False, 'error': 'InvalidCredentials', 'message': 'Invalid email or password'}
    resp = client.post('/auth/login', json={'email': 'nimal@example.com', 'password': 'secret1', 'role': 'staff'})
    assert resp.status_code == 403
    resp = client.post('/auth/login', json={'email': '', 'password': ''})
    assert resp.status_code == 400


def test_logout_revokes_token(app_instance, client):
    headers = account_headers(app_instance, client, 'nimal@example.com')
    assert client.post('/auth/logout', headers=headers).status_code == 200
    me = client.get('/auth/me', headers=headers)
    assert me.status_code == 401
    assert me.get_json()['error'] == 'NotAuthenticated'


def test_revoke_token_prunes_expired_entries():
    revoked = {'old': 100, 'forever': None}
    revoke_token(revoked, {'jti': 'live', 'exp': 500}, now=200)
    assert revoked == {'forever': None, 'live': 500}
    revoke_token(revoked, {'jti': 'next', 'exp': 900}, now=500)
    assert revoked == {'forever': None, 'next': 900}


def test_logout_drops_expired_blocklist_entries(app_instance, client):
    revoked = app_instance.extensions['canteen_revoked_tokens']
    revoked['long-gone'] = 1
    headers = account_headers(app_instance, client, 'nimal@example.com')
    assert client.post('/auth/logout', headers=headers).status_code == 200
    assert 'long-gone' not in revoked
    assert len(revoked) == 1
    assert client.get('/auth/me', headers=headers).status_code == 401


def test_missing_or_bad_token(client):
    resp = client.get('/cart')
    assert resp.status_code == 401
    body = resp.get_json()
    assert body['success'] is False and body['error'] == 'NotAuthenticated'
    resp = client.get('/cart', headers={'Authorization': 'Bearer not-a-jwt'})
    assert resp.status_code == 401
