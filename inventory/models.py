"""
Inventory Models

Tracks the product catalog and every physical, serially-numbered unit held
in stock.

Flow:
1. Catalog seed creates Product rows and their InventoryUnit pool
2. Allocation → units move IN_STOCK → RESERVED (oldest created first)
3. Returns → units move RESERVED → IN_STOCK and keep a return-history flag

Units are never deleted. Status is the only mutable field that drives
business logic; has_return_history is informational and never gates reuse.
"""

from django.db import models
from django.db.models import Count, Q
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal


class SizeClass(models.TextChoices):
    """Shipping size classes"""
    SMALL = 'small', 'Small'
    MEDIUM = 'medium', 'Medium'
    LARGE = 'large', 'Large'


class UnitStatus(models.TextChoices):
    """Lifecycle of a physical inventory unit"""
    IN_STOCK = 'in_stock', 'In Stock'
    RESERVED = 'reserved', 'Reserved'


class ProductQuerySet(models.QuerySet):

    def with_stock_counts(self):
        """
        Annotate each product with unit counts by status.

        Adds: total_units, available_units, reserved_units, returned_units
        """
        return self.annotate(
            total_units=Count('units'),
            available_units=Count('units', filter=Q(units__status=UnitStatus.IN_STOCK)),
            reserved_units=Count('units', filter=Q(units__status=UnitStatus.RESERVED)),
            returned_units=Count('units', filter=Q(units__has_return_history=True)),
        )


class Product(models.Model):
    """
    Catalog entry.

    Immutable after creation in normal operation and never deleted while
    inventory units or historical line items reference it.
    """

    item_number = models.CharField(
        max_length=20,
        unique=True,
        help_text='Human item number (e.g., "ITM-001")'
    )
    name = models.CharField(max_length=200)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text='Current catalog unit price'
    )
    weight = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text='Shipping weight in pounds'
    )
    size_class = models.CharField(
        max_length=10,
        choices=SizeClass.choices,
        default=SizeClass.SMALL
    )
    created_at = models.DateTimeField(default=timezone.now)

    objects = ProductQuerySet.as_manager()

    class Meta:
        db_table = 'products'
        ordering = ['item_number']

    def __str__(self):
        return f"{self.item_number} - {self.name}"


class InventoryUnit(models.Model):
    """
    One physical item of a product.

    Status transitions only IN_STOCK → RESERVED (allocation) and
    RESERVED → IN_STOCK (return). has_return_history is monotonic.
    """

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name='units'
    )
    serial_number = models.CharField(
        max_length=50,
        unique=True,
        help_text='<item_number>-<4 digit sequence>'
    )
    status = models.CharField(
        max_length=20,
        choices=UnitStatus.choices,
        default=UnitStatus.IN_STOCK
    )
    has_return_history = models.BooleanField(
        default=False,
        help_text='Set once the unit has come back from a customer return'
    )
    created_at = models.DateTimeField(default=timezone.now)
    last_status_change = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'inventory_units'
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['product', 'status', 'created_at'], name='inv_unit_product_status_idx'),
        ]

    def __str__(self):
        return f"{self.serial_number} ({self.get_status_display()})"
