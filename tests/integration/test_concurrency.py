"""
Concurrency tests.

Each worker thread gets its own database connection, so these run with
real transactions (django_db(transaction=True)) instead of the per-test
wrapping transaction.
"""

import threading
from decimal import Decimal

import pytest
from django.db import connection

from core.exceptions import InsufficientStock
from inventory.models import InventoryUnit, UnitStatus
from orders.allocation import create_order
from orders.models import OrderLineItem, ReturnRecord
from orders.returns import ReturnLine


def _run_concurrently(target, count):
    """Start `count` threads on `target(index)` behind a barrier and collect outcomes."""
    barrier = threading.Barrier(count)
    results = []
    errors = []
    lock = threading.Lock()

    def worker(index):
        try:
            barrier.wait(timeout=10)
            outcome = target(index)
            with lock:
                results.append(outcome)
        except Exception as e:
            with lock:
                errors.append(e)
        finally:
            connection.close()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    return results, errors


@pytest.mark.django_db(transaction=True)
class TestConcurrentReservations:

    def test_n_plus_one_reservations_against_n_units(self, ledger, make_product):
        """N units, N+1 concurrent single-unit reservations: N succeed on distinct units."""
        units = 5
        product = make_product(units=units)

        results, errors = _run_concurrently(lambda i: ledger.reserve(product.pk, 1), units + 1)

        assert len(results) == units
        assert len(errors) == 1
        assert isinstance(errors[0], InsufficientStock)

        serials = [reserved[0].serial_number for reserved in results]
        assert len(set(serials)) == units
        assert InventoryUnit.objects.filter(product=product, status=UnitStatus.RESERVED).count() == units
        assert ledger.available_stock(product.pk) == 0


@pytest.mark.django_db(transaction=True)
class TestConcurrentReturns:

    def test_concurrent_returns_on_same_line_serialize(self, user, make_product, allocator, processor):
        product = make_product(units=3, price=Decimal('10.00'))
        order = create_order(user, [(product, 3)])
        allocator.allocate(order.pk)
        order.mark_shipped()
        order.mark_delivered()
        item = order.line_items.get()

        # Two returns of 2 against a line of 3: only one can fit
        results, errors = _run_concurrently(
            lambda i: processor.process_return(order.pk, [ReturnLine(item.pk, 2, f'worker {i}')]),
            2,
        )

        assert len(results) == 1
        assert len(errors) == 1
        assert errors[0].code == 'invalid_return_quantity'

        item = OrderLineItem.objects.get(pk=item.pk)
        assert item.returned_quantity == 2
        assert sum(r.quantity for r in ReturnRecord.objects.filter(line_item=item)) == 2
