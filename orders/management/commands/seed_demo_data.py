"""
Management command to seed the catalog, inventory and demo orders.

Seeded orders go through the regular allocation and return paths. Running
the command against a database that already has orders does nothing.

Usage:
    python manage.py seed_demo_data
    python manage.py seed_demo_data --seed 7 --units-per-product 50
"""

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
import random

from core.exceptions import FulfillmentError
from orders.allocation import OrderAllocator
from orders.notifications import LoggingRefundNotifier
from orders.provisioning import DemoDataProvisioner
from orders.returns import ReturnProcessor
from orders.services import get_inventory_ledger


class Command(BaseCommand):
    help = 'Seed the product catalog, inventory units and demonstration orders'

    def add_arguments(self, parser):
        parser.add_argument(
            '--seed',
            type=int,
            default=settings.DEMO_DATA_SEED,
            help='Random seed for order composition (default: DEMO_DATA_SEED)',
        )
        parser.add_argument(
            '--units-per-product',
            type=int,
            default=settings.DEMO_UNITS_PER_PRODUCT,
            help='Inventory units to create per product (default: DEMO_UNITS_PER_PRODUCT)',
        )

    def handle(self, *args, **options):
        if options['units_per_product'] <= 0:
            raise CommandError('--units-per-product must be positive')

        ledger = get_inventory_ledger()
        provisioner = DemoDataProvisioner(
            rng=random.Random(options['seed']),
            allocator=OrderAllocator(ledger=ledger),
            # Demo returns are logged, never emailed
            return_processor=ReturnProcessor(ledger=ledger, notifier=LoggingRefundNotifier()),
            now=timezone.now(),
            units_per_product=options['units_per_product'],
        )

        self.stdout.write(f"Seeding demo data (seed={options['seed']})...")
        try:
            result = provisioner.run()
        except FulfillmentError as e:
            raise CommandError(f'Demo data provisioning failed: {e}') from e

        if result is None:
            self.stdout.write(self.style.WARNING('Orders already exist; nothing to do.'))
            return

        self.stdout.write(self.style.SUCCESS(
            f"✓ Seeded {result['products']} products, {result['units']} units, "
            f"{result['users']} users and {result['orders']} orders"
        ))
