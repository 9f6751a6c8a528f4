"""
Order state machine for order status transitions
"""

from typing import Dict, List, Set

from storefront.models.order import OrderStatus

class OrderStateMachine:
    """
    Nominal order lifecycle

    pending -> processing -> shipped -> delivered, with cancelled
    reachable from any non-terminal state. The admin status endpoint
    accepts any status; off-path transitions are only reported.
    """

    def __init__(self):
        self.transitions: Dict[OrderStatus, Set[OrderStatus]] = {
            OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
            OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
            OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
            OrderStatus.DELIVERED: set(),
            OrderStatus.CANCELLED: set(),
        }

    def can_transition(self, current_status: OrderStatus, new_status: OrderStatus) -> bool:
        return new_status in self.transitions.get(current_status, set())

    def get_valid_transitions(self, current_status: OrderStatus) -> List[OrderStatus]:
        return sorted(self.transitions.get(current_status, set()), key=lambda s: s.value)

    def is_terminal(self, status: OrderStatus) -> bool:
        return not self.transitions.get(status)

order_state_machine = OrderStateMachine()
