"""
Return processing.

Validates a batch of return lines against an order, then appends return
records, bumps line-item returned quantities, releases inventory and
re-derives the order status, all in one transaction.

Validation order (first failure wins):
1. Order exists
2. Order is delivered or returned
3. Each line, in request order: belongs to the order, and the quantity
   (accumulated over repeated lines) fits the remaining returnable quantity

Stock release is best effort: a ledger shortfall is logged and skipped,
the financial ledger (ReturnRecord, returned_quantity) stays authoritative.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List
import logging

from django.db import transaction
from django.utils import timezone

from core.audit import audit
from core.exceptions import (
    InsufficientReservedStock, InvalidReturnQuantity, InvalidReturnReason,
    LineItemNotFound, OrderNotEligible, OrderNotFound,
)
from core.safety import retry_on_conflict
from .models import DEFAULT_RETURN_REASON, Order, OrderLineItem, ReturnRecord
from .status import RETURN_ELIGIBLE_STATUSES, derive_order_status, validate_status_transition

logger = logging.getLogger(__name__)

MAX_REASON_LENGTH = 500


@dataclass(frozen=True)
class ReturnLine:
    line_item_id: int
    quantity: int
    reason: str = DEFAULT_RETURN_REASON


@dataclass(frozen=True)
class ReturnResult:
    order_id: int
    refund_total: Decimal
    status: str
    records: List[ReturnRecord] = field(default_factory=list)


class ReturnProcessor:
    """
    Apply customer returns to orders.

    Args:
        ledger: InventoryLedger used to put returned units back in stock
        notifier: RefundNotifier told about every committed return
        clock: Callable returning the current aware datetime
    """

    def __init__(self, ledger, notifier, clock=None):
        self.ledger = ledger
        self.notifier = notifier
        self.clock = clock or timezone.now

    @retry_on_conflict()
    @transaction.atomic
    def process_return(self, order_id, items) -> ReturnResult:
        """
        Validate and apply a batch of return lines.

        Either every line is applied or none is. The notifier runs after the
        transaction commits.

        Raises:
            OrderNotFound, OrderNotEligible, LineItemNotFound,
            InvalidReturnQuantity, InvalidReturnReason
        """
        items = list(items)

        try:
            order = Order.objects.select_for_update().get(pk=order_id)
        except Order.DoesNotExist:
            raise OrderNotFound(order_id)

        if order.status not in RETURN_ELIGIBLE_STATUSES:
            raise OrderNotEligible(order_id, order.status, RETURN_ELIGIBLE_STATUSES)

        line_items = {
            item.pk: item
            for item in OrderLineItem.objects.select_for_update().filter(order_id=order.pk).order_by('id')
        }
        self._validate(order_id, line_items, items)

        now = self.clock()
        records = []
        refund_total = Decimal('0.00')

        for line in items:
            item = line_items[line.line_item_id]
            record = ReturnRecord.objects.create(
                line_item=item,
                quantity=line.quantity,
                reason=line.reason or DEFAULT_RETURN_REASON,
                returned_at=now,
                refund_amount=item.price * line.quantity,
            )
            records.append(record)
            refund_total += record.refund_amount

            item.returned_quantity += line.quantity
            item.save(update_fields=['returned_quantity'])

            if item.has_inventory_link:
                self._release_stock(order_id, item, line.quantity)
            else:
                logger.info(
                    f"Line item {item.pk} of order {order_id} has no product link; "
                    f"no inventory effect",
                    extra={'event': 'returns.no_inventory_link', 'order_id': order_id, 'line_item_id': item.pk},
                )

        new_status = derive_order_status(order.status, line_items.values())
        validate_status_transition(order.status, new_status)
        previous_status = order.status
        order.status = new_status
        order.save(update_fields=['status', 'updated_at'])

        audit(
            'returns.processed',
            f"Processed return for order {order_id}: {len(items)} line(s), refund {refund_total}",
            order_id=order_id,
            item_count=len(items),
            line_item_ids=[line.line_item_id for line in items],
            refund_total=str(refund_total),
            previous_status=previous_status,
            status=new_status,
        )

        transaction.on_commit(
            lambda: self.notifier.refund_processed(order_id, refund_total),
            robust=True,
        )

        return ReturnResult(
            order_id=order.pk,
            refund_total=refund_total,
            status=new_status,
            records=records,
        )

    def _validate(self, order_id, line_items, items):
        if not items:
            raise InvalidReturnQuantity(
                None, 0, 0, message=f"Return request for order {order_id} contains no items"
            )

        requested = {}
        for line in items:
            item = line_items.get(line.line_item_id)
            if item is None:
                raise LineItemNotFound(order_id, line.line_item_id)

            already_requested = requested.get(item.pk, 0)
            available = item.remaining_quantity - already_requested
            if line.quantity <= 0 or line.quantity > available:
                raise InvalidReturnQuantity(item.pk, line.quantity, available)

            if line.reason and len(line.reason) > MAX_REASON_LENGTH:
                raise InvalidReturnReason(
                    f"Return reason for line item {item.pk} exceeds {MAX_REASON_LENGTH} characters",
                    line_item_id=item.pk,
                )

            requested[item.pk] = already_requested + line.quantity

    def _release_stock(self, order_id, item, quantity):
        try:
            with transaction.atomic():
                self.ledger.release(item.product_id, quantity)
        except InsufficientReservedStock as e:
            logger.warning(
                f"Skipped stock release for line item {item.pk} of order {order_id}: {e}",
                extra={
                    'event': 'returns.release_skipped',
                    'order_id': order_id,
                    'line_item_id': item.pk,
                    'product_id': item.product_id,
                    'quantity': quantity,
                },
            )
