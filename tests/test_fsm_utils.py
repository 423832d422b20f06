from canteen.errors import InvalidTransition, ValidationFailed
from canteen.services.lifecycle import ORDER_FSM
from canteen.utils.fsm import TransitionValidator
import pytest


def test_transition_validator_allows_valid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    assert fsm.assert_can_transition('A', 'B') is True


def test_transition_validator_blocks_invalid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    with pytest.raises(InvalidTransition):
        fsm.assert_can_transition('B', 'A')
    with pytest.raises(ValidationFailed):
        fsm.assert_can_transition('A', 'C')


def test_permissive_validator_only_checks_known_states():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()}, strict=False)
    assert fsm.can_transition('B', 'A')
    assert not fsm.can_transition('B', 'Z')
    assert fsm.with_strictness(True).can_transition('B', 'A') is False


def test_order_graph_shape():
    assert ORDER_FSM.states == {'pending', 'preparing', 'ready', 'completed', 'cancelled'}
    assert ORDER_FSM.targets('pending') == {'preparing', 'cancelled'}
    assert ORDER_FSM.is_terminal('completed') and ORDER_FSM.is_terminal('cancelled')
    assert not ORDER_FSM.is_terminal('ready')
    assert ORDER_FSM.describe()['pending'] == ['cancelled', 'preparing']


def test_lifecycle_endpoint_publishes_graph(client):
    resp = client.get('/orders/lifecycle')
    body = resp.get_json()
    assert resp.status_code == 200
    assert body['strict'] is True
    assert body['transitions']['ready'] == ['completed']
    assert body['actions']['start'] == 'preparing'
    assert body['statuses']['ready']['label'] == 'Ready'
