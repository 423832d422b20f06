import pytest

from canteen.constants.storage import SHOP_LOCATION, STAFF_MEMBERS, USERS
from canteen.errors import Forbidden, InvalidCredentials, StaffNotFound, ValidationFailed
from canteen.services.lifecycle import OrderLifecycle
from canteen.services.location import get_location, map_link, save_location
from canteen.services.orders import OrderRepository
from canteen.services.staff import StaffRoster
from canteen.services.users import UserDirectory, public_user
from tests.test_utils_seed import place_order


@pytest.fixture()
def users(store, clock):
    return UserDirectory(store, clock)


@pytest.fixture()
def roster(store, users):
    return StaffRoster(store, users)


def test_register_and_authenticate(users, store):
    user = users.register({'name': ' Amaya ', 'email': 'Amaya@Example.com', 'password': 'secret1'})
    assert user['name'] == 'Amaya'
    assert user['email'] == 'amaya@example.com'
    assert user['role'] == 'customer'
    assert user['password_hash'] != 'secret1'
    assert 'password_hash' not in public_user(user)
    identity = users.authenticate('AMAYA@example.com ', 'secret1')
    assert identity.id == user['id'] and identity.role == 'customer'
    assert store.get(STAFF_MEMBERS) is None


@pytest.mark.parametrize('data,message', [
    ({'name': 'A', 'email': '', 'password': 'secret1'}, 'All fields are required'),
    ({'name': 'A', 'email': 'not-an-email', 'password': 'secret1'}, 'Please enter a valid email address'),
    ({'name': 'A', 'email': 'a@b.co', 'password': '123'}, 'Password must be at least 6 characters'),
])
def test_register_validation(users, store, data, message):
    with pytest.raises(ValidationFailed) as exc:
        users.register(data)
    assert exc.value.message == message
    assert store.get(USERS) is None


def test_register_duplicate_email_case_insensitive(users):
    users.register({'name': 'A', 'email': 'dup@example.com', 'password': 'secret1'})
    with pytest.raises(ValidationFailed) as exc:
        users.register({'name': 'B', 'email': 'DUP@example.com', 'password': 'secret2'})
    assert exc.value.message == 'Email already registered'


def test_authenticate_failures(users):
    users.register({'name': 'A', 'email': 'a@example.com', 'password': 'secret1'})
    with pytest.raises(ValidationFailed):
        users.authenticate('', 'x')
    with pytest.raises(InvalidCredentials):
        users.authenticate('a@example.com', 'wrong!')
    with pytest.raises(InvalidCredentials):
        users.authenticate('ghost@example.com', 'secret1')
    with pytest.raises(Forbidden) as exc:
        users.authenticate('a@example.com', 'secret1', expected_role='staff')
    assert 'staffs only' in exc.value.message


def test_register_staff_joins_roster(users, roster):
    user = users.register({'name': 'Cook', 'email': 'cook@canteen.com', 'password': 'staff123'}, role='staff')
    entry = roster.get(user['id'])
    assert entry['orders_completed'] == 0
    assert entry['joined_at'] == user['created_at']
    assert roster.count() == 1


def test_register_rejects_unknown_role(users):
    with pytest.raises(ValidationFailed):
        users.register({'name': 'X', 'email': 'x@example.com', 'password': 'secret1'}, role='chef')


def test_remove_staff_also_removes_account_but_not_orders(store, clock, users, roster):
    member = roster.add({'name': 'Cook', 'email': 'cook@canteen.com', 'password': 'staff123'})
    repo = OrderRepository(store, clock=clock)
    order = place_order(repo)
    roster.remove(member['id'])
    assert roster.get(member['id']) is None
    assert users.get(member['id']) is None
    assert repo.get_by_id(order.id) is not None
    with pytest.raises(StaffNotFound):
        roster.remove(member['id'])


def test_staff_performance_splits_today_evenly(store, clock, roster):
    a = roster.add({'name': 'A', 'email': 'a@canteen.com', 'password': 'staff123'}, orders_completed=45)
    roster.add({'name': 'B', 'email': 'b@canteen.com', 'password': 'staff123'})
    repo = OrderRepository(store, clock=clock)
    lifecycle = OrderLifecycle(repo, clock=clock)
    for _ in range(5):
        order = place_order(repo)
        for step in ('start', 'ready', 'complete'):
            lifecycle.apply_action(order.id, step)
    perf = roster.performance(a['id'], repo.get_all(), clock())
    assert perf['today_orders'] == 2
    assert perf['total_orders'] == 45
    assert perf['name'] == 'A'
    with pytest.raises(StaffNotFound):
        roster.performance('nobody', [], clock())


def test_save_location_defaults_and_validation(store):
    assert get_location(store) is None
    with pytest.raises(ValidationFailed) as exc:
        save_location(store, {'name': 'Main', 'address': ''})
    assert exc.value.message == 'Name and address are required'
    with pytest.raises(ValidationFailed):
        save_location(store, {'name': 'Main', 'address': 'Campus', 'phone': 'abc'})
    loc = save_location(store, {'name': ' Main ', 'address': 'Campus', 'lat': 'x', 'lng': '80.5'})
    assert loc == {'name': 'Main', 'address': 'Campus', 'lat': 0.0, 'lng': 80.5, 'phone': '', 'open_hours': ''}
    assert store.get(SHOP_LOCATION) == loc
    assert map_link(loc) == 'https://www.google.com/maps?q=0.0,80.5'
