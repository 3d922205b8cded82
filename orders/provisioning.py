"""
Demo data provisioning.

Builds the fixed catalog, a pool of serialized units per product, two demo
customers and twenty orders spread over the past sixty days. Seeded orders
go through the same allocation and return code paths as live traffic, so
returned demo orders get their status derived rather than written.

The provisioner is a pure function of its random generator: the same seed
always produces the same line-item composition.
"""

from datetime import timedelta
import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from inventory.catalog import CATALOG, ORDERABLE_ITEM_COUNT, serial_number
from inventory.models import InventoryUnit, Product
from .allocation import create_order
from .models import Order, OrderStatus
from .returns import ReturnLine
from .status import ALLOCATED_STATUSES

logger = logging.getLogger(__name__)

DEMO_PASSWORD = 'Password123!'

DEMO_USERS = [
    {'email': 'mateo@contoso.com', 'first_name': 'Mateo', 'last_name': 'Gomez'},
    {'email': 'megan@contoso.com', 'first_name': 'Megan', 'last_name': 'Bowen'},
]

# (days before now, final status) per demo user, oldest first
DEMO_ORDER_PLAN = {
    'mateo@contoso.com': [
        (55, OrderStatus.DELIVERED),
        (48, OrderStatus.DELIVERED),
        (41, OrderStatus.RETURNED),
        (35, OrderStatus.DELIVERED),
        (28, OrderStatus.DELIVERED),
        (21, OrderStatus.DELIVERED),
        (14, OrderStatus.DELIVERED),
        (10, OrderStatus.DELIVERED),
        (6, OrderStatus.SHIPPED),
        (2, OrderStatus.PROCESSING),
    ],
    'megan@contoso.com': [
        (52, OrderStatus.DELIVERED),
        (45, OrderStatus.DELIVERED),
        (38, OrderStatus.DELIVERED),
        (32, OrderStatus.DELIVERED),
        (25, OrderStatus.DELIVERED),
        (19, OrderStatus.DELIVERED),
        (13, OrderStatus.DELIVERED),
        (11, OrderStatus.DELIVERED),
        (5, OrderStatus.SHIPPED),
        (1, OrderStatus.PROCESSING),
    ],
}

DEMO_RETURN_REASON = 'Item did not meet expectations'


class DemoDataProvisioner:
    """
    Seed the database with demonstration data.

    Args:
        rng: random.Random instance; the only source of randomness
        allocator: OrderAllocator used to reserve stock for seeded orders
        return_processor: ReturnProcessor used for orders seeded as returned
        now: Aware datetime all seeded timestamps are relative to
        units_per_product: Size of each product's unit pool
    """

    def __init__(self, rng, allocator, return_processor, now, units_per_product=100):
        self.rng = rng
        self.allocator = allocator
        self.return_processor = return_processor
        self.now = now
        self.units_per_product = units_per_product

    def seed_catalog(self):
        """Create catalog products that do not exist yet."""
        existing = set(Product.objects.values_list('item_number', flat=True))
        Product.objects.bulk_create([
            Product(
                item_number=entry.item_number,
                name=entry.name,
                price=entry.price,
                weight=entry.weight,
                size_class=entry.size_class,
                created_at=self.now,
            )
            for entry in CATALOG
            if entry.item_number not in existing
        ])
        products = list(Product.objects.filter(
            item_number__in=[entry.item_number for entry in CATALOG]
        ).order_by('item_number'))
        logger.info(f"Catalog ready with {len(products)} product(s)")
        return products

    def seed_inventory(self, products):
        """
        Create the unit pool for every product that has none.

        All units share one creation timestamp; insertion order (ascending id)
        breaks the tie for FIFO selection.
        """
        stocked = set(
            InventoryUnit.objects.filter(product__in=products)
            .values_list('product_id', flat=True)
            .distinct()
        )
        created = 0
        for product in products:
            if product.pk in stocked:
                continue
            InventoryUnit.objects.bulk_create([
                InventoryUnit(
                    product=product,
                    serial_number=serial_number(product.item_number, sequence),
                    created_at=self.now,
                )
                for sequence in range(1, self.units_per_product + 1)
            ])
            created += self.units_per_product
        logger.info(f"Created {created} inventory unit(s)")
        return created

    def seed_users(self):
        User = get_user_model()
        users = []
        for data in DEMO_USERS:
            user = User.objects.filter(email=data['email']).first()
            if user is None:
                user = User.objects.create_user(
                    username=data['email'],
                    email=data['email'],
                    password=DEMO_PASSWORD,
                    first_name=data['first_name'],
                    last_name=data['last_name'],
                )
            users.append(user)
        return users

    def _pick_lines(self, orderable):
        item_count = self.rng.randint(1, 3)
        products = self.rng.sample(orderable, item_count)
        return [(product, self.rng.randint(1, 3)) for product in products]

    def _fulfillment_dates(self, order_date, status):
        ship_date = delivery_date = None
        if status != OrderStatus.PROCESSING:
            ship_date = order_date + timedelta(days=self.rng.randint(1, 2))
        if status in (OrderStatus.DELIVERED, OrderStatus.RETURNED):
            delivery_date = order_date + timedelta(days=self.rng.randint(5, 9))
        return ship_date, delivery_date

    def seed_orders(self, users, products):
        """
        Create the demo orders, allocate them, then process the planned returns.

        Returns:
            list of created Order instances, in creation order
        """
        orderable = products[:ORDERABLE_ITEM_COUNT]
        orders = []
        to_return = []

        for user in users:
            for days_ago, final_status in DEMO_ORDER_PLAN.get(user.email, []):
                order_date = self.now - timedelta(days=days_ago)
                lines = self._pick_lines(orderable)
                ship_date, delivery_date = self._fulfillment_dates(order_date, final_status)

                # Returned orders start out delivered; the return processor derives the rest
                initial_status = (
                    OrderStatus.DELIVERED if final_status == OrderStatus.RETURNED else final_status
                )
                order = create_order(
                    user,
                    lines,
                    status=initial_status,
                    order_date=order_date,
                    ship_date=ship_date,
                    delivery_date=delivery_date,
                )
                orders.append(order)
                if final_status == OrderStatus.RETURNED:
                    to_return.append(order)

        for order in orders:
            if order.status in ALLOCATED_STATUSES:
                self.allocator.allocate(order.pk, eligible_statuses=ALLOCATED_STATUSES)

        for order in to_return:
            self.return_processor.process_return(order.pk, [
                ReturnLine(item.pk, item.quantity, DEMO_RETURN_REASON)
                for item in order.line_items.order_by('id')
            ])

        logger.info(f"Created {len(orders)} demo order(s), {len(to_return)} returned")
        return orders

    @transaction.atomic
    def run(self):
        """
        Seed everything in one transaction.

        Returns:
            dict with counts, or None when orders already exist
        """
        if Order.objects.exists():
            logger.info("Orders already exist; skipping demo data provisioning")
            return None

        products = self.seed_catalog()
        units = self.seed_inventory(products)
        users = self.seed_users()
        orders = self.seed_orders(users, products)

        return {
            'products': len(products),
            'units': units,
            'users': len(users),
            'orders': len(orders),
        }
