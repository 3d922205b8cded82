"""
Order Models

Orders, their line items and the append-only return ledger.

Business Logic:
1. An order is created with frozen line-item prices and a total computed once
2. Allocation reserves inventory units for every line with a product link
3. Fulfillment events move the order to shipped, then delivered
4. Returns append ReturnRecord rows, bump returned_quantity and release stock
5. Order status is re-derived from line items after every return

ATOMICITY:
- All mutating operations use @transaction.atomic
- Rows are locked with select_for_update() before any read-then-write
- State machine validation guards fulfillment transitions
- ReturnRecord rows are immutable once written
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.db.models import F, Q
from django.utils import timezone
from decimal import Decimal
import logging

from core.safety import retry_on_conflict

logger = logging.getLogger(__name__)

DEFAULT_RETURN_REASON = 'Customer has chosen to return item'


class OrderStatus(models.TextChoices):
    """Order lifecycle: processing → shipped → delivered → returned"""
    PROCESSING = 'processing', 'Processing'
    SHIPPED = 'shipped', 'Shipped'
    DELIVERED = 'delivered', 'Delivered'
    RETURNED = 'returned', 'Returned'


class Order(models.Model):
    """
    Customer order.

    Owned by exactly one user; ownership never changes. The user model has
    no reverse accessor to orders, lookups go through orders.queries.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='+'
    )
    order_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PROCESSING
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text='Sum of line subtotals at creation; not adjusted by returns'
    )

    # Fulfillment
    ship_date = models.DateTimeField(null=True, blank=True)
    delivery_date = models.DateTimeField(null=True, blank=True)
    allocated_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text='When inventory units were reserved for this order'
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-order_date']
        indexes = [
            models.Index(fields=['user', '-order_date'], name='order_user_date_idx'),
        ]

    def __str__(self):
        return f"Order {self.pk} ({self.get_status_display()})"

    @property
    def is_allocated(self):
        return self.allocated_at is not None

    def _advance(self, new_status, timestamp_field, at):
        from .status import validate_status_transition

        locked_self = Order.objects.select_for_update().get(pk=self.pk)
        validate_status_transition(locked_self.status, new_status)

        previous_status = locked_self.status
        locked_self.status = new_status
        setattr(locked_self, timestamp_field, at or timezone.now())
        locked_self.save(update_fields=['status', timestamp_field, 'updated_at'])

        # Update self with new values
        self.status = locked_self.status
        setattr(self, timestamp_field, getattr(locked_self, timestamp_field))
        self.updated_at = locked_self.updated_at

        logger.info(
            f"Order {self.pk} moved from {previous_status} to {new_status}",
            extra={
                'event': 'orders.status_changed',
                'order_id': self.pk,
                'previous_status': previous_status,
                'status': new_status,
            },
        )

    @retry_on_conflict()
    @transaction.atomic
    def mark_shipped(self, at=None):
        """Record the shipping event (processing → shipped)."""
        self._advance(OrderStatus.SHIPPED, 'ship_date', at)

    @retry_on_conflict()
    @transaction.atomic
    def mark_delivered(self, at=None):
        """Record the delivery event (shipped → delivered)."""
        self._advance(OrderStatus.DELIVERED, 'delivery_date', at)


class OrderLineItem(models.Model):
    """
    One product/quantity/price entry within an order.

    product_name and price are snapshots taken at purchase time. The product
    link is optional so legacy lines survive catalog clean-ups; lines without
    it never touch inventory.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='line_items'
    )
    product = models.ForeignKey(
        'inventory.Product',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text='Unit price frozen at purchase time'
    )
    returned_quantity = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'order_line_items'
        ordering = ['id']
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=1),
                name='line_item_quantity_positive',
            ),
            models.CheckConstraint(
                condition=Q(returned_quantity__lte=F('quantity')),
                name='line_item_returned_within_quantity',
            ),
        ]

    def __str__(self):
        return f"{self.product_name} x{self.quantity} (order {self.order_id})"

    @property
    def subtotal(self):
        return self.price * self.quantity

    @property
    def remaining_quantity(self):
        return self.quantity - self.returned_quantity

    @property
    def is_fully_returned(self):
        return self.returned_quantity >= self.quantity

    @property
    def is_partially_returned(self):
        return 0 < self.returned_quantity < self.quantity

    @property
    def has_inventory_link(self):
        return self.product_id is not None


class ReturnRecordQuerySet(models.QuerySet):
    """Bulk mutation is refused; records are append-only."""

    def update(self, **kwargs):
        raise ValidationError("Return records are immutable and cannot be updated.")

    def delete(self):
        raise ValidationError("Return records are immutable and cannot be deleted.")


class ReturnRecord(models.Model):
    """
    Immutable ledger entry for one return transaction against one line item.

    The quantities of a line item's records always sum to its
    returned_quantity. Records disappear only when their order is deleted.
    """

    line_item = models.ForeignKey(
        OrderLineItem,
        on_delete=models.CASCADE,
        related_name='return_records'
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    reason = models.CharField(
        max_length=500,
        default=DEFAULT_RETURN_REASON
    )
    returned_at = models.DateTimeField(default=timezone.now)
    refund_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text='quantity x line item unit price'
    )

    objects = ReturnRecordQuerySet.as_manager()

    class Meta:
        db_table = 'return_records'
        ordering = ['returned_at', 'id']
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=1),
                name='return_record_quantity_positive',
            ),
        ]

    def __str__(self):
        return f"Return of {self.quantity} on line item {self.line_item_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Return records are immutable and cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Return records are immutable and cannot be deleted.")
