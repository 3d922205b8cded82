"""
Shared pytest fixtures for the fulfillment tests.
"""
import itertools
from decimal import Decimal
from unittest.mock import Mock

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from inventory.catalog import serial_number
from inventory.ledger import InventoryLedger
from inventory.models import InventoryUnit, Product
from orders.allocation import OrderAllocator, create_order
from orders.notifications import RefundNotifier
from orders.returns import ReturnProcessor
from orders.services import reset_services

User = get_user_model()


@pytest.fixture(autouse=True)
def fresh_services():
    """Rebuild service singletons for every test to prevent pollution."""
    reset_services()
    yield
    reset_services()


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username='mateo@contoso.com',
        email='mateo@contoso.com',
        password='Password123!',
        first_name='Mateo',
        last_name='Gomez',
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        username='megan@contoso.com',
        email='megan@contoso.com',
        password='Password123!',
        first_name='Megan',
        last_name='Bowen',
    )


@pytest.fixture
def make_product(db):
    """
    Factory for products with a fresh pool of in-stock units.

    Units are inserted in serial order, so FIFO selection follows the serials.
    """
    counter = itertools.count(1)

    def _make(units=0, price=Decimal('10.00'), name=None):
        n = next(counter)
        product = Product.objects.create(
            item_number=f'TST-{n:03d}',
            name=name or f'Test Product {n}',
            price=price,
            weight=Decimal('1.00'),
        )
        InventoryUnit.objects.bulk_create([
            InventoryUnit(product=product, serial_number=serial_number(product.item_number, seq))
            for seq in range(1, units + 1)
        ])
        return product

    return _make


@pytest.fixture
def ledger():
    return InventoryLedger()


@pytest.fixture
def allocator(ledger):
    return OrderAllocator(ledger=ledger)


@pytest.fixture
def notifier():
    return Mock(spec=RefundNotifier)


@pytest.fixture
def processor(ledger, notifier):
    return ReturnProcessor(ledger=ledger, notifier=notifier)


@pytest.fixture
def delivered_order(user, make_product, allocator):
    """
    Delivered order with one line: quantity 3 at $10.00.

    The product has 5 units; 3 of them are reserved for the order.
    """
    product = make_product(units=5, price=Decimal('10.00'))
    order = create_order(user, [(product, 3)])
    allocator.allocate(order.pk)
    order.mark_shipped()
    order.mark_delivered()
    return order
