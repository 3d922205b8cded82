"""
Order status rules.

1. State machine validation for fulfillment transitions
2. Derivation of the aggregate order status from its line items

The transition into 'returned' is never requested directly; it is derived by
the return processor after line-item quantities change.
"""

from typing import Dict, Iterable, List

from core.exceptions import StatusTransitionError
from .models import OrderStatus


# ==============================================================================
# STATE MACHINE FOR STATUS TRANSITIONS
# ==============================================================================

ORDER_STATUS_TRANSITIONS: Dict[str, List[str]] = {
    OrderStatus.PROCESSING: [OrderStatus.SHIPPED],
    OrderStatus.SHIPPED: [OrderStatus.DELIVERED],
    OrderStatus.DELIVERED: [OrderStatus.RETURNED],
    OrderStatus.RETURNED: [],  # Terminal state
}

# Orders in these states accept return requests
RETURN_ELIGIBLE_STATUSES = (OrderStatus.DELIVERED, OrderStatus.RETURNED)

# Orders in these states hold reserved inventory
ALLOCATED_STATUSES = (OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED)


def validate_status_transition(current_status: str, new_status: str) -> bool:
    """
    Validate that an order status transition is allowed.

    Returns:
        True if transition is valid

    Raises:
        StatusTransitionError if transition is invalid
    """
    if current_status == new_status:
        return True  # No change is always valid

    valid_transitions = ORDER_STATUS_TRANSITIONS.get(current_status, [])

    if new_status not in valid_transitions:
        raise StatusTransitionError(
            f"Invalid order status transition: {current_status} -> {new_status}. "
            f"Valid transitions from '{current_status}': {[str(s) for s in valid_transitions]}",
            current_status=current_status,
            new_status=new_status,
        )

    return True


# ==============================================================================
# STATUS DERIVATION
# ==============================================================================

def derive_order_status(current_status: str, line_items: Iterable) -> str:
    """
    Aggregate order status from its line items.

    Any line with a returned quantity collapses the order to 'returned',
    whether the return was full or partial. Without returns the status is
    left as it was.
    """
    if any(item.returned_quantity > 0 for item in line_items):
        return OrderStatus.RETURNED
    return current_status
