"""
Order creation and inventory allocation.

Allocation hands every line item with a product link to the inventory
ledger, which reserves the oldest in-stock units first. An order's whole
allocation is one transaction: if any product is short, the reservations
already made for the order's other products are rolled back and the
InsufficientStock error reaches the caller unchanged.
"""

from decimal import Decimal
import logging

from django.db import transaction
from django.utils import timezone

from core.audit import audit
from core.exceptions import InsufficientStock, InvalidQuantity, OrderNotEligible, OrderNotFound
from core.safety import retry_on_conflict
from .models import Order, OrderLineItem, OrderStatus

logger = logging.getLogger(__name__)


@retry_on_conflict()
@transaction.atomic
def create_order(user, lines, status=OrderStatus.PROCESSING, order_date=None,
                 ship_date=None, delivery_date=None):
    """
    Create an order from (product, quantity) pairs.

    Product name and unit price are snapshotted into the line items and the
    order total is computed once here. No inventory is touched.

    Raises:
        InvalidQuantity: the order has no lines or a line quantity is not positive
    """
    lines = list(lines)
    if not lines:
        raise InvalidQuantity("An order needs at least one line item")
    for product, quantity in lines:
        if quantity <= 0:
            raise InvalidQuantity(
                f"Line quantity must be positive, got {quantity} for {product.item_number}",
                product_id=product.pk,
                quantity=quantity,
            )

    order = Order.objects.create(
        user=user,
        order_date=order_date or timezone.now(),
        status=status,
        ship_date=ship_date,
        delivery_date=delivery_date,
        total_amount=sum((product.price * quantity for product, quantity in lines), Decimal('0.00')),
    )
    OrderLineItem.objects.bulk_create([
        OrderLineItem(
            order=order,
            product=product,
            product_name=product.name,
            quantity=quantity,
            price=product.price,
        )
        for product, quantity in lines
    ])

    logger.info(
        f"Created order {order.pk} with {len(lines)} line(s), total {order.total_amount}",
        extra={'event': 'orders.created', 'order_id': order.pk, 'user_id': user.pk},
    )
    return order


class OrderAllocator:
    """
    Reserve inventory for orders.

    Args:
        ledger: InventoryLedger used for reservations
        clock: Callable returning the current aware datetime
    """

    def __init__(self, ledger, clock=None):
        self.ledger = ledger
        self.clock = clock or timezone.now

    @retry_on_conflict()
    @transaction.atomic
    def allocate(self, order_id, eligible_statuses=(OrderStatus.PROCESSING,)):
        """
        Reserve units for every line item of an order.

        Allocating an order that already holds its units is a no-op.

        Raises:
            OrderNotFound: no order has this id
            OrderNotEligible: order status is not in eligible_statuses
            InsufficientStock: a product does not have enough units in stock
        """
        try:
            order = Order.objects.select_for_update().get(pk=order_id)
        except Order.DoesNotExist:
            raise OrderNotFound(order_id)

        if order.status not in eligible_statuses:
            raise OrderNotEligible(order_id, order.status, eligible_statuses)

        if order.is_allocated:
            logger.debug(f"Order {order_id} already allocated at {order.allocated_at}")
            return order

        reserved = 0
        for item in order.line_items.order_by('id'):
            if not item.has_inventory_link:
                logger.info(
                    f"Line item {item.pk} of order {order_id} has no product link; skipping allocation",
                    extra={'event': 'orders.allocation_skipped', 'order_id': order_id, 'line_item_id': item.pk},
                )
                continue

            try:
                self.ledger.reserve(item.product_id, item.quantity)
            except InsufficientStock as e:
                logger.warning(
                    f"Allocation failed for order {order_id}: {e}",
                    extra={
                        'event': 'orders.allocation_failed',
                        'order_id': order_id,
                        'product_id': item.product_id,
                        'quantity': item.quantity,
                    },
                )
                raise
            reserved += item.quantity

        order.allocated_at = self.clock()
        order.save(update_fields=['allocated_at', 'updated_at'])

        audit(
            'orders.allocated',
            f"Order {order_id} allocated {reserved} unit(s)",
            order_id=order_id,
            quantity=reserved,
        )
        return order

    @retry_on_conflict()
    @transaction.atomic
    def place_order(self, user, lines):
        """Create a processing order and allocate it in one transaction."""
        order = create_order(user, lines)
        return self.allocate(order.pk)
