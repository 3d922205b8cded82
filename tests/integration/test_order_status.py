"""
Order store tests: status rules, line-item bookkeeping, immutable return
records, order creation and read queries.
"""

import pytest
from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.exceptions import InvalidQuantity, OrderNotFound, StatusTransitionError
from orders.allocation import create_order
from orders.models import Order, OrderLineItem, OrderStatus, ReturnRecord
from orders.queries import get_order, get_orders, get_return_history
from orders.status import derive_order_status, validate_status_transition


def _item(quantity, returned):
    return SimpleNamespace(quantity=quantity, returned_quantity=returned)


class TestDeriveOrderStatus:
    """Pure derivation; no database needed."""

    def test_no_returns_keeps_status(self):
        items = [_item(2, 0), _item(1, 0)]
        assert derive_order_status(OrderStatus.DELIVERED, items) == OrderStatus.DELIVERED
        assert derive_order_status(OrderStatus.SHIPPED, items) == OrderStatus.SHIPPED

    def test_all_fully_returned_is_returned(self):
        items = [_item(2, 2), _item(1, 1)]
        assert derive_order_status(OrderStatus.DELIVERED, items) == OrderStatus.RETURNED

    def test_partial_return_collapses_to_returned(self):
        items = [_item(3, 1), _item(1, 0)]
        assert derive_order_status(OrderStatus.DELIVERED, items) == OrderStatus.RETURNED

    def test_empty_items_keep_status(self):
        assert derive_order_status(OrderStatus.PROCESSING, []) == OrderStatus.PROCESSING


class TestStatusTransitions:

    @pytest.mark.parametrize('current,new', [
        (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
        (OrderStatus.DELIVERED, OrderStatus.RETURNED),
        (OrderStatus.RETURNED, OrderStatus.RETURNED),
    ])
    def test_valid_transitions(self, current, new):
        assert validate_status_transition(current, new) is True

    @pytest.mark.parametrize('current,new', [
        (OrderStatus.PROCESSING, OrderStatus.DELIVERED),
        (OrderStatus.PROCESSING, OrderStatus.RETURNED),
        (OrderStatus.SHIPPED, OrderStatus.PROCESSING),
        (OrderStatus.RETURNED, OrderStatus.DELIVERED),
    ])
    def test_invalid_transitions(self, current, new):
        with pytest.raises(StatusTransitionError):
            validate_status_transition(current, new)


@pytest.mark.django_db
class TestFulfillmentEvents:

    def test_mark_shipped_then_delivered(self, user, make_product):
        order = create_order(user, [(make_product(), 1)])
        shipped_at = timezone.now() - timedelta(days=2)

        order.mark_shipped(at=shipped_at)
        order.mark_delivered()

        order.refresh_from_db()
        assert order.status == OrderStatus.DELIVERED
        assert order.ship_date == shipped_at
        assert order.delivery_date is not None

    def test_cannot_deliver_unshipped_order(self, user, make_product):
        order = create_order(user, [(make_product(), 1)])

        with pytest.raises(StatusTransitionError):
            order.mark_delivered()

        order.refresh_from_db()
        assert order.status == OrderStatus.PROCESSING
        assert order.delivery_date is None


@pytest.mark.django_db
class TestLineItems:

    def test_derived_properties(self, user, make_product):
        order = create_order(user, [(make_product(price=Decimal('14.99')), 3)])
        item = order.line_items.get()

        assert item.subtotal == Decimal('44.97')
        assert item.remaining_quantity == 3
        assert not item.is_partially_returned
        assert not item.is_fully_returned

        item.returned_quantity = 1
        assert item.is_partially_returned
        item.returned_quantity = 3
        assert item.is_fully_returned
        assert not item.is_partially_returned
        assert item.remaining_quantity == 0

    def test_returned_quantity_cannot_exceed_quantity(self, user, make_product):
        order = create_order(user, [(make_product(), 2)])
        item = order.line_items.get()

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                OrderLineItem.objects.filter(pk=item.pk).update(returned_quantity=3)

    def test_deleted_product_leaves_line_without_inventory_link(self, user, make_product):
        product = make_product(units=0)
        order = create_order(user, [(product, 1)])
        product.delete()

        item = order.line_items.get()
        assert item.product_id is None
        assert item.has_inventory_link is False
        assert item.product_name == product.name


@pytest.mark.django_db
class TestCreateOrder:

    def test_snapshots_price_and_computes_total(self, user, make_product):
        mouse = make_product(price=Decimal('27.99'), name='Wireless Mouse')
        cable = make_product(price=Decimal('9.99'), name='USB Cable')

        order = create_order(user, [(mouse, 2), (cable, 1)])

        assert order.status == OrderStatus.PROCESSING
        assert order.total_amount == Decimal('65.97')
        mouse.price = Decimal('99.00')
        mouse.save()
        item = order.line_items.get(product=mouse)
        assert item.price == Decimal('27.99')
        assert item.product_name == 'Wireless Mouse'

    def test_total_not_recomputed_by_returns(self, delivered_order, processor):
        from orders.returns import ReturnLine

        item = delivered_order.line_items.get()
        processor.process_return(delivered_order.pk, [ReturnLine(item.pk, 1)])

        delivered_order.refresh_from_db()
        assert delivered_order.total_amount == Decimal('30.00')

    def test_rejects_empty_or_non_positive_lines(self, user, make_product):
        with pytest.raises(InvalidQuantity):
            create_order(user, [])
        with pytest.raises(InvalidQuantity):
            create_order(user, [(make_product(), 0)])
        assert not Order.objects.exists()


@pytest.mark.django_db
class TestReturnRecordImmutability:

    @pytest.fixture
    def record(self, delivered_order, processor):
        from orders.returns import ReturnLine

        item = delivered_order.line_items.get()
        return processor.process_return(delivered_order.pk, [ReturnLine(item.pk, 1)]).records[0]

    def test_update_rejected(self, record):
        record.quantity = 2
        with pytest.raises(ValidationError):
            record.save()
        with pytest.raises(ValidationError):
            ReturnRecord.objects.filter(pk=record.pk).update(quantity=2)

        record.refresh_from_db()
        assert record.quantity == 1

    def test_delete_rejected(self, record):
        with pytest.raises(ValidationError):
            record.delete()
        with pytest.raises(ValidationError):
            ReturnRecord.objects.filter(pk=record.pk).delete()

        assert ReturnRecord.objects.filter(pk=record.pk).exists()

    def test_cascade_from_order_removes_records(self, record, delivered_order):
        delivered_order.delete()

        assert not ReturnRecord.objects.exists()
        assert not OrderLineItem.objects.exists()


@pytest.mark.django_db
class TestQueries:

    def test_get_orders_newest_first_for_user_only(self, user, other_user, make_product):
        product = make_product()
        now = timezone.now()
        older = create_order(user, [(product, 1)], order_date=now - timedelta(days=5))
        newer = create_order(user, [(product, 1)], order_date=now - timedelta(days=1))
        create_order(other_user, [(product, 1)])

        orders = get_orders(user.pk)

        assert [o.pk for o in orders] == [newer.pk, older.pk]

    def test_get_order_loads_line_items(self, user, make_product):
        order = create_order(user, [(make_product(), 1), (make_product(), 2)])

        loaded = get_order(order.pk)

        assert [item.quantity for item in loaded.line_items.all()] == [1, 2]

    def test_get_order_missing(self):
        with pytest.raises(OrderNotFound):
            get_order(999999)

    def test_get_order_is_idempotent(self, delivered_order):
        first = get_order(delivered_order.pk)
        second = get_order(delivered_order.pk)

        assert first == second
        assert first.status == second.status
        assert [
            (i.pk, i.returned_quantity) for i in first.line_items.all()
        ] == [(i.pk, i.returned_quantity) for i in second.line_items.all()]

    def test_return_history_oldest_first(self, delivered_order, processor):
        from orders.returns import ReturnLine

        item = delivered_order.line_items.get()
        start = timezone.now()
        processor.clock = lambda: start
        processor.process_return(delivered_order.pk, [ReturnLine(item.pk, 1, 'first')])
        processor.clock = lambda: start + timedelta(minutes=1)
        processor.process_return(delivered_order.pk, [ReturnLine(item.pk, 1, 'second')])

        history = get_return_history(delivered_order.pk)

        assert [r.reason for r in history] == ['first', 'second']
