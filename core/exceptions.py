"""
Error taxonomy for the fulfillment core.

Caller errors (NotFound, NotEligible, InvalidQuantity) are surfaced directly
and never retried. InsufficientStock / InsufficientReservedStock report ledger
exhaustion. PersistenceConflict is the only kind eligible for automatic retry.
"""


class FulfillmentError(Exception):
    """Base class for all errors raised by the core."""
    code = 'fulfillment_error'
    status_code = 400

    def __init__(self, message='', **context):
        super().__init__(message)
        self.context = context


# ==============================================================================
# CALLER ERRORS
# ==============================================================================

class NotFound(FulfillmentError):
    code = 'not_found'
    status_code = 404


class OrderNotFound(NotFound):
    code = 'order_not_found'

    def __init__(self, order_id):
        super().__init__(f"Order {order_id} not found", order_id=order_id)
        self.order_id = order_id


class LineItemNotFound(NotFound):
    code = 'line_item_not_found'

    def __init__(self, order_id, line_item_id):
        super().__init__(
            f"Line item {line_item_id} not found in order {order_id}",
            order_id=order_id,
            line_item_id=line_item_id,
        )
        self.order_id = order_id
        self.line_item_id = line_item_id


class NotEligible(FulfillmentError):
    code = 'not_eligible'
    status_code = 409


class OrderNotEligible(NotEligible):
    code = 'order_not_eligible'

    def __init__(self, order_id, status, allowed):
        super().__init__(
            f"Order {order_id} is {status}; operation requires one of {sorted(allowed)}",
            order_id=order_id,
            status=status,
        )
        self.order_id = order_id
        self.status = status


class StatusTransitionError(NotEligible):
    """Raised when an invalid order status transition is attempted."""
    code = 'invalid_status_transition'


class InvalidQuantity(FulfillmentError):
    code = 'invalid_quantity'


class InvalidReturnQuantity(InvalidQuantity):
    code = 'invalid_return_quantity'

    def __init__(self, line_item_id, requested, available, message=None):
        super().__init__(
            message or f"Invalid return quantity {requested} for line item {line_item_id}. "
                       f"Available: {available}",
            line_item_id=line_item_id,
            requested=requested,
            available=available,
        )
        self.line_item_id = line_item_id
        self.requested = requested
        self.available = available


class InvalidReturnReason(FulfillmentError):
    code = 'invalid_return_reason'


# ==============================================================================
# LEDGER EXHAUSTION
# ==============================================================================

class InsufficientStock(FulfillmentError):
    code = 'insufficient_stock'
    status_code = 409

    def __init__(self, product_id, requested, available):
        super().__init__(
            f"Insufficient inventory for product {product_id}: "
            f"requested {requested}, available {available}",
            product_id=product_id,
            requested=requested,
            available=available,
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InsufficientReservedStock(FulfillmentError):
    code = 'insufficient_reserved_stock'
    status_code = 409

    def __init__(self, product_id, requested, reserved):
        super().__init__(
            f"Insufficient reserved inventory to release for product {product_id}: "
            f"requested {requested}, reserved {reserved}",
            product_id=product_id,
            requested=requested,
            reserved=reserved,
        )
        self.product_id = product_id
        self.requested = requested
        self.reserved = reserved


# ==============================================================================
# CONCURRENCY
# ==============================================================================

class PersistenceConflict(FulfillmentError):
    """Transient concurrent-write collision; safe to retry."""
    code = 'persistence_conflict'
    status_code = 409
