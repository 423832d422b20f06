from canteen.services.lifecycle import OrderLifecycle
from canteen.services.orders import OrderRepository
from canteen.utils.board import format_table, render_order_board
from tests.test_utils_seed import place_order


def test_format_table_pads_columns():
    out = format_table(['Key', 'Records'], [['canteen_orders', '3'], ['x', '-']])
    lines = out.splitlines()
    assert lines[0] == 'Key            | Records'
    assert lines[1] == '---------------+--------'
    assert lines[2] == 'canteen_orders | 3'
    assert lines[3] == 'x              | -'


def test_board_lists_active_orders_with_actions(store, clock):
    repo = OrderRepository(store, clock=clock)
    lifecycle = OrderLifecycle(repo, clock=clock)
    first = place_order(repo, (('Chicken Rice', '350', 2),))
    clock.advance(minutes=7)
    second = place_order(repo, (('Tea', '50', 1),))
    lifecycle.start_preparing(second.id)
    clock.advance(minutes=3)
    board = render_order_board(repo.get_active(), clock())
    lines = board.splitlines()
    assert lines[0].startswith('Token')
    assert first.token in lines[2] and '2x Chicken Rice' in lines[2]
    assert '10m' in lines[2] and 'start/cancel' in lines[2]
    assert second.token in lines[3] and 'Preparing' in lines[3] and lines[3].endswith('ready')


def test_board_without_orders(store, clock):
    assert render_order_board(OrderRepository(store, clock=clock).get_active(), clock()) == '<no active orders>'


def test_order_board_script_renders_header_and_queue(store, clock):
    import importlib.util, os
    path = os.path.join(os.path.dirname(__file__), '..', 'scripts', 'order_board.py')
    spec = importlib.util.spec_from_file_location('order_board', path)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    repo = OrderRepository(store, clock=clock)
    order = place_order(repo)
    out = mod.render(repo)
    assert out.startswith('Today ')
    assert 'pending' in out.splitlines()[0]
    assert order.token in out
