"""
Inventory Ledger

Owns the pool of serialized units per product and moves them between
IN_STOCK and RESERVED.

ATOMICITY:
- reserve/release each run in their own transaction (joining the caller's
  when one is open, so an order's whole allocation commits or rolls back
  together)
- Units are selected with select_for_update(skip_locked=True) so two
  concurrent reservations never pick overlapping unit sets
- Both operations are all-or-nothing per product: if fewer units than
  requested can be selected, nothing changes status
"""

from dataclasses import dataclass
from decimal import Decimal
import logging

from django.db import transaction
from django.utils import timezone

from core.exceptions import InsufficientReservedStock, InsufficientStock, InvalidQuantity
from core.safety import retry_on_conflict
from .models import InventoryUnit, Product, UnitStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InventorySummary:
    """Stock counts for one product."""
    product_id: int
    item_number: str
    name: str
    price: Decimal
    weight: Decimal
    size_class: str
    total: int
    available: int
    reserved: int
    returned_items: int


class InventoryLedger:
    """
    Reserve and release physical units.

    Args:
        clock: Callable returning the current aware datetime, used to stamp
               last_status_change (defaults to django.utils.timezone.now)
    """

    def __init__(self, clock=None):
        self.clock = clock or timezone.now

    def _lock_units(self, product_id, status, ordering, quantity):
        return list(
            InventoryUnit.objects.select_for_update(skip_locked=True)
            .filter(product_id=product_id, status=status)
            .order_by(*ordering)[:quantity]
        )

    def _transition(self, units, status, **extra_fields):
        now = self.clock()
        InventoryUnit.objects.filter(pk__in=[unit.pk for unit in units]).update(
            status=status, last_status_change=now, **extra_fields
        )
        for unit in units:
            unit.status = status
            unit.last_status_change = now
            for field, value in extra_fields.items():
                setattr(unit, field, value)
        return units

    @retry_on_conflict()
    @transaction.atomic
    def reserve(self, product_id: int, quantity: int) -> list:
        """
        Reserve the `quantity` oldest in-stock units of a product.

        Units are picked FIFO by (created_at, id).

        Raises:
            InvalidQuantity: quantity is not positive
            InsufficientStock: fewer than `quantity` units are in stock
        """
        if quantity <= 0:
            raise InvalidQuantity(
                f"Reservation quantity must be positive, got {quantity}",
                product_id=product_id,
                quantity=quantity,
            )

        units = self._lock_units(product_id, UnitStatus.IN_STOCK, ('created_at', 'id'), quantity)
        if len(units) < quantity:
            logger.warning(
                f"Insufficient stock for product {product_id}: "
                f"requested {quantity}, available {len(units)}",
                extra={
                    'event': 'inventory.insufficient_stock',
                    'product_id': product_id,
                    'quantity': quantity,
                    'available': len(units),
                },
            )
            raise InsufficientStock(product_id, quantity, len(units))

        self._transition(units, UnitStatus.RESERVED)

        logger.info(
            f"Reserved {quantity} unit(s) of product {product_id}",
            extra={
                'event': 'inventory.reserved',
                'product_id': product_id,
                'quantity': quantity,
                'serial_numbers': [unit.serial_number for unit in units],
            },
        )
        return units

    @retry_on_conflict()
    @transaction.atomic
    def release(self, product_id: int, quantity: int) -> list:
        """
        Return `quantity` reserved units of a product to stock.

        Units are picked by (last_status_change, id), oldest reservation
        first, and flagged with has_return_history.

        Raises:
            InvalidQuantity: quantity is not positive
            InsufficientReservedStock: fewer than `quantity` units are reserved
        """
        if quantity <= 0:
            raise InvalidQuantity(
                f"Release quantity must be positive, got {quantity}",
                product_id=product_id,
                quantity=quantity,
            )

        units = self._lock_units(
            product_id, UnitStatus.RESERVED, ('last_status_change', 'id'), quantity
        )
        if len(units) < quantity:
            logger.warning(
                f"Insufficient reserved stock for product {product_id}: "
                f"requested {quantity}, reserved {len(units)}",
                extra={
                    'event': 'inventory.insufficient_reserved_stock',
                    'product_id': product_id,
                    'quantity': quantity,
                    'reserved': len(units),
                },
            )
            raise InsufficientReservedStock(product_id, quantity, len(units))

        self._transition(units, UnitStatus.IN_STOCK, has_return_history=True)

        logger.info(
            f"Released {quantity} unit(s) of product {product_id} back to stock",
            extra={
                'event': 'inventory.released',
                'product_id': product_id,
                'quantity': quantity,
                'serial_numbers': [unit.serial_number for unit in units],
            },
        )
        return units

    def available_stock(self, product_id: int) -> int:
        return InventoryUnit.objects.filter(
            product_id=product_id, status=UnitStatus.IN_STOCK
        ).count()

    def reserved_stock(self, product_id: int) -> int:
        return InventoryUnit.objects.filter(
            product_id=product_id, status=UnitStatus.RESERVED
        ).count()

    def summary(self) -> list:
        """Per-product stock counts ordered by item number."""
        products = Product.objects.with_stock_counts().order_by('item_number')
        return [
            InventorySummary(
                product_id=product.id,
                item_number=product.item_number,
                name=product.name,
                price=product.price,
                weight=product.weight,
                size_class=product.size_class,
                total=product.total_units,
                available=product.available_units,
                reserved=product.reserved_units,
                returned_items=product.returned_units,
            )
            for product in products
        ]
