"""Simple finite state machine utility for status transitions.

Usage:
    from canteen.utils.fsm import TransitionValidator
    ORDER_FSM = TransitionValidator({
        'pending': {'preparing', 'cancelled'},
        'preparing': {'ready'},
        'ready': {'completed'},
        'completed': set(),
        'cancelled': set(),
    })
    ORDER_FSM.assert_can_transition(current_status, target_status)

Raises InvalidTransition if the move is not in the graph. A permissive validator
(strict=False) only checks that the target is a known state.
"""
from __future__ import annotations
from typing import Dict, List, Set

from canteen.errors import InvalidTransition, ValidationFailed


class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'status', strict: bool = True):
        self.graph = graph
        self.field_name = field_name
        self.strict = strict

    @property
    def states(self) -> Set[str]:
        return set(self.graph)

    def targets(self, current: str) -> Set[str]:
        return set(self.graph.get(current, set()))

    def is_terminal(self, state: str) -> bool:
        return not self.graph.get(state)

    def can_transition(self, current: str, target: str) -> bool:
        if target not in self.graph:
            return False
        if not self.strict:
            return True
        return target in self.graph.get(current, set())

    def assert_can_transition(self, current: str, target: str):
        if target not in self.graph:
            raise ValidationFailed(f'{self.field_name} invalid', field=self.field_name, value=target)
        if self.strict and target not in self.graph.get(current, set()):
            raise InvalidTransition(
                f'Invalid {self.field_name} transition {current} -> {target}',
                current=current, target=target,
            )
        return True

    def with_strictness(self, strict: bool) -> 'TransitionValidator':
        return TransitionValidator(self.graph, self.field_name, strict)

    def describe(self) -> Dict[str, List[str]]:
        """Graph as sorted lists, suitable for JSON."""
        return {state: sorted(targets) for state, targets in self.graph.items()}


__all__ = ['TransitionValidator']
