from decimal import Decimal

import pytest

from canteen.constants.storage import ORDERS, TOKEN_SEQUENCE
from canteen.errors import EmptyCart, NotAuthenticated, StorageUnavailable, ValidationFailed
from canteen.models.cart import CartLine
from canteen.services.lifecycle import OrderLifecycle
from canteen.services.orders import PLACED_NOTE, OrderRepository
from canteen.services.store import MemoryStore
from tests.test_utils_seed import cart_lines, customer, place_order


@pytest.fixture()
def repo(store, clock):
    return OrderRepository(store, clock=clock)


def test_create_scenario_totals_and_history(repo, clock):
    order = repo.create(cart_lines(('Chicken Rice', '350', 2), ('Vegetable Fried Rice', '280', 1)), customer())
    assert order.subtotal == Decimal('980.00')
    assert order.total == Decimal('980.00')
    assert order.tax == Decimal('0.00')
    assert [i.line_subtotal for i in order.items] == [Decimal('700.00'), Decimal('280.00')]
    assert len(order.status_history) == 1
    first = order.status_history[0]
    assert first.status == 'pending' and first.note == PLACED_NOTE
    assert first.timestamp == order.created_at == order.updated_at
    assert order.status == 'pending'
    assert order.completed_at is None
    assert order.user_name == 'Nimal Perera' and order.user_email == 'nimal@example.com'


def test_create_accepts_cart_line_objects(repo):
    lines = [CartLine(item_id='a', name='Tea', price=Decimal('50'), quantity=3)]
    order = repo.create(lines, customer())
    assert order.total == Decimal('150.00')


def test_total_is_sum_of_line_subtotals(repo):
    lines = (('A', '12.35', 3), ('B', '0.10', 7), ('C', '99.99', 1))
    order = place_order(repo, lines)
    expected = sum(Decimal(p) * q for _, p, q in lines)
    assert order.total == expected
    assert order.total == sum(i.unit_price * i.quantity for i in order.items)


def test_tax_rate_applied(store, clock):
    repo = OrderRepository(store, clock=clock, tax_rate=Decimal('0.10'))
    order = place_order(repo, (('A', '350', 2),))
    assert order.subtotal == Decimal('700.00')
    assert order.tax == Decimal('70.00')
    assert order.total == Decimal('770.00')


def test_empty_cart_checked_before_authentication(repo, store):
    with pytest.raises(EmptyCart):
        repo.create([], None)
    with pytest.raises(NotAuthenticated):
        repo.create(cart_lines(('A', '1', 1)), None)
    assert store.get(ORDERS) is None


@pytest.mark.parametrize('bad', [
    {'item_id': 'a', 'name': '', 'price': '10', 'quantity': 1},
    {'item_id': 'a', 'name': 'A', 'price': '10', 'quantity': 0},
    {'item_id': 'a', 'name': 'A', 'price': '10', 'quantity': 1.5},
    {'item_id': 'a', 'name': 'A', 'price': '-1', 'quantity': 1},
    {'item_id': 'a', 'name': 'A', 'price': 'abc', 'quantity': 1},
])
def test_malformed_lines_write_nothing(repo, store, bad):
    place_order(repo)
    before = store.get(ORDERS)
    cleared = []
    with pytest.raises(ValidationFailed):
        repo.create([bad], customer(), clear_cart=lambda: cleared.append(True))
    assert store.get(ORDERS) == before
    assert cleared == []


def test_clear_cart_called_after_persist(repo, store):
    seen = []
    repo.create(cart_lines(('A', '10', 1)), customer(), clear_cart=lambda: seen.append(len(store.get(ORDERS))))
    assert seen == [1]


def test_storage_failure_leaves_collection_and_cart(clock):
    store = MemoryStore(quota_bytes=1500)
    repo = OrderRepository(store, clock=clock)
    place_order(repo)
    before = store.get(ORDERS)
    cleared = []
    big = [('Item %d' % i, '10', 1) for i in range(40)]
    with pytest.raises(StorageUnavailable):
        repo.create(cart_lines(*big), customer(), clear_cart=lambda: cleared.append(True))
    assert store.get(ORDERS) == before
    assert cleared == []
    assert store.get(TOKEN_SEQUENCE) == {'day': '2026-01-10', 'last': 1}


class FailingStore(MemoryStore):
    """MemoryStore that refuses writes to the given keys."""

    def __init__(self, *keys):
        super().__init__()
        self.failing = set(keys)

    def set(self, key, value):
        if key in self.failing:
            raise StorageUnavailable(key=key)
        super().set(key, value)


def test_token_counter_failure_writes_no_order(clock):
    store = FailingStore(TOKEN_SEQUENCE)
    repo = OrderRepository(store, clock=clock)
    cleared = []
    with pytest.raises(StorageUnavailable):
        repo.create(cart_lines(('A', '350', 2)), customer(), clear_cart=lambda: cleared.append(True))
    assert store.get(ORDERS) is None
    assert cleared == []


def test_orders_write_failure_rolls_back_token_counter(clock):
    store = FailingStore()
    repo = OrderRepository(store, clock=clock)
    first = place_order(repo)
    store.failing.add(ORDERS)
    with pytest.raises(StorageUnavailable):
        place_order(repo)
    assert store.get(TOKEN_SEQUENCE) == {'day': '2026-01-10', 'last': 1}
    store.failing.clear()
    assert place_order(repo).token == first.token[:-4] + '0002'


def test_orders_write_failure_on_fresh_store_removes_counter(clock):
    store = FailingStore(ORDERS)
    with pytest.raises(StorageUnavailable):
        place_order(OrderRepository(store, clock=clock))
    assert store.get(TOKEN_SEQUENCE) is None


def test_cart_clear_failure_keeps_placed_order(repo, store, caplog):
    def broken_clear():
        raise StorageUnavailable(key='canteen_cart:u1')

    order = repo.create(cart_lines(('A', '10', 1)), customer(), clear_cart=broken_clear)
    assert [o['id'] for o in store.get(ORDERS)] == [order.id]
    assert 'cart could not be cleared' in caplog.text


def test_lookups(repo):
    o1 = place_order(repo)
    assert repo.get_by_id(o1.id).token == o1.token
    assert repo.get_by_token(o1.token).id == o1.id
    assert repo.get_by_id('nope') is None
    assert repo.get_by_token('TKN-19990101-0001') is None
    assert len(repo.get_all()) == 1


def test_get_by_user_newest_first(repo, clock):
    a = place_order(repo, who=customer('u1'))
    clock.advance(minutes=5)
    place_order(repo, who=customer('u2', 'Other', 'o@example.com'))
    clock.advance(minutes=5)
    b = place_order(repo, who=customer('u1'))
    assert [o.id for o in repo.get_by_user('u1')] == [b.id, a.id]
    assert repo.get_by_user('ghost') == []


def test_get_by_status_oldest_first_and_validated(repo, clock):
    a = place_order(repo)
    clock.advance(minutes=1)
    b = place_order(repo)
    assert [o.id for o in repo.get_by_status('pending')] == [a.id, b.id]
    assert repo.get_by_status('ready') == []
    with pytest.raises(ValidationFailed):
        repo.get_by_status('bogus')


def test_get_active_scenario(repo, clock):
    lifecycle = OrderLifecycle(repo, clock=clock)
    completed = place_order(repo)
    clock.advance(minutes=1)
    preparing = place_order(repo)
    clock.advance(minutes=1)
    pending = place_order(repo)
    clock.advance(minutes=1)
    cancelled = place_order(repo)
    clock.advance(minutes=1)
    lifecycle.start_preparing(completed.id)
    lifecycle.mark_ready(completed.id)
    lifecycle.complete(completed.id)
    lifecycle.start_preparing(preparing.id)
    lifecycle.cancel(cancelled.id)
    active = repo.get_active()
    assert [o.id for o in active] == [preparing.id, pending.id]


def test_get_by_token_prefers_newest_when_repeated(repo, clock, store):
    old = place_order(repo)
    clock.advance(days=1)
    new = place_order(repo)
    raw = store.get(ORDERS)
    # force a repeat, as happens when sequences restart on a later day
    raw[0]['token'] = new.token
    store.set(ORDERS, raw)
    assert repo.get_by_token(new.token).id == new.id
    assert old.id != new.id


def test_get_for_day(repo, clock):
    place_order(repo)
    clock.advance(days=1)
    today = place_order(repo)
    assert [o.id for o in repo.get_for_day(clock().date())] == [today.id]


def test_unknown_fields_survive_updates(repo, store, clock):
    order = place_order(repo)
    raw = store.get(ORDERS)
    raw[0]['legacy_flag'] = 'keep-me'
    store.set(ORDERS, raw)
    OrderLifecycle(repo, clock=clock).start_preparing(order.id)
    assert store.get(ORDERS)[0]['legacy_flag'] == 'keep-me'
