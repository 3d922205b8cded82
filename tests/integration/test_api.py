"""
API tests for the order, return and inventory endpoints.

Tests cover:
1. Authentication and ownership scoping
2. Order list filtering and detail payloads
3. Return requests and error mapping
4. Return history and inventory summary
"""

import pytest
from decimal import Decimal
from unittest.mock import patch
from django.core import mail
from rest_framework import status

from core.exceptions import PersistenceConflict
from orders.allocation import create_order
from orders.models import OrderStatus
from orders.services import get_refund_notifier


pytestmark = pytest.mark.django_db


@pytest.fixture
def auth_client(api_client, user):
    api_client.force_authenticate(user=user)
    return api_client


def _return_url(order):
    return f'/api/orders/{order.pk}/return-items/'


class TestOrderEndpoints:

    def test_requires_authentication(self, api_client):
        response = api_client.get('/api/orders/')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_only_own_orders_newest_first(self, auth_client, user, other_user, make_product, delivered_order):
        newer = create_order(user, [(make_product(), 1)])
        create_order(other_user, [(make_product(), 1)])

        response = auth_client.get('/api/orders/')

        assert response.status_code == status.HTTP_200_OK
        assert [o['id'] for o in response.data] == [newer.pk, delivered_order.pk]

    def test_list_filter_by_status(self, auth_client, user, make_product, delivered_order):
        create_order(user, [(make_product(), 1)])

        response = auth_client.get('/api/orders/', {'status': 'delivered'})

        assert [o['id'] for o in response.data] == [delivered_order.pk]

    def test_detail_includes_line_items(self, auth_client, delivered_order):
        response = auth_client.get(f'/api/orders/{delivered_order.pk}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'delivered'
        assert response.data['total_amount'] == '30.00'
        line = response.data['line_items'][0]
        assert line['quantity'] == 3
        assert line['remaining_quantity'] == 3
        assert line['subtotal'] == '30.00'

    def test_detail_of_foreign_order_is_not_found(self, api_client, other_user, delivered_order):
        api_client.force_authenticate(user=other_user)

        response = api_client.get(f'/api/orders/{delivered_order.pk}/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'order_not_found'

    def test_detail_of_missing_order(self, auth_client):
        response = auth_client.get('/api/orders/999999/')

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestReturnEndpoint:

    def test_successful_partial_return(self, auth_client, delivered_order):
        item = delivered_order.line_items.get()

        response = auth_client.post(_return_url(delivered_order), {
            'items': [{'line_item_id': item.pk, 'quantity': 2, 'reason': 'damaged'}]
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['order_id'] == delivered_order.pk
        assert response.data['refund_total'] == '20.00'
        assert response.data['status'] == OrderStatus.RETURNED
        assert response.data['records'][0]['quantity'] == 2
        assert response.data['records'][0]['reason'] == 'damaged'

    def test_over_quantity_maps_to_400(self, auth_client, delivered_order):
        item = delivered_order.line_items.get()

        response = auth_client.post(_return_url(delivered_order), {
            'items': [{'line_item_id': item.pk, 'quantity': 4}]
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'invalid_return_quantity'
        assert 'Available: 3' in response.data['detail']

    def test_undelivered_order_maps_to_409(self, auth_client, user, make_product):
        order = create_order(user, [(make_product(units=1), 1)])
        item = order.line_items.get()

        response = auth_client.post(_return_url(order), {
            'items': [{'line_item_id': item.pk, 'quantity': 1}]
        }, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'order_not_eligible'

    def test_unknown_line_item_maps_to_404(self, auth_client, delivered_order):
        response = auth_client.post(_return_url(delivered_order), {
            'items': [{'line_item_id': 999999, 'quantity': 1}]
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'line_item_not_found'

    def test_foreign_order_cannot_be_returned(self, api_client, other_user, delivered_order):
        api_client.force_authenticate(user=other_user)
        item = delivered_order.line_items.get()

        response = api_client.post(_return_url(delivered_order), {
            'items': [{'line_item_id': item.pk, 'quantity': 1}]
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        item.refresh_from_db()
        assert item.returned_quantity == 0

    @pytest.mark.parametrize('payload', [
        {},
        {'items': []},
        {'items': [{'line_item_id': 1}]},
        {'items': [{'line_item_id': 1, 'quantity': 1, 'reason': 'x' * 501}]},
    ])
    def test_malformed_payload(self, auth_client, delivered_order, payload):
        response = auth_client.post(_return_url(delivered_order), payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_persistence_conflict_maps_to_409(self, auth_client, delivered_order):
        item = delivered_order.line_items.get()

        with patch('orders.returns.ReturnProcessor.process_return',
                   side_effect=PersistenceConflict('database is locked')):
            response = auth_client.post(_return_url(delivered_order), {
                'items': [{'line_item_id': item.pk, 'quantity': 1}]
            }, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'persistence_conflict'

    def test_email_notifier_sends_refund_notice(self, auth_client, settings, delivered_order,
                                                 django_capture_on_commit_callbacks):
        settings.REFUND_NOTIFIER_CLASS = 'orders.notifications.EmailRefundNotifier'
        item = delivered_order.line_items.get()

        with django_capture_on_commit_callbacks(execute=True):
            response = auth_client.post(_return_url(delivered_order), {
                'items': [{'line_item_id': item.pk, 'quantity': 1}]
            }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert type(get_refund_notifier()).__name__ == 'EmailRefundNotifier'
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ['mateo@contoso.com']
        assert '$10.00' in mail.outbox[0].body


class TestReturnHistoryEndpoint:

    def test_history_lists_records(self, auth_client, delivered_order):
        item = delivered_order.line_items.get()
        auth_client.post(_return_url(delivered_order), {
            'items': [{'line_item_id': item.pk, 'quantity': 1, 'reason': 'too small'}]
        }, format='json')

        response = auth_client.get(f'/api/orders/{delivered_order.pk}/returns/')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['reason'] == 'too small'
        assert response.data[0]['refund_amount'] == '10.00'
        assert response.data[0]['line_item'] == item.pk


class TestInventoryEndpoint:

    def test_summary(self, auth_client, make_product, delivered_order):
        make_product(units=2, price=Decimal('9.99'))

        response = auth_client.get('/api/inventory/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        first = response.data['results'][0]
        assert first['item_number'] == 'TST-001'
        assert (first['total'], first['available'], first['reserved'], first['returned_items']) == (5, 2, 3, 0)

    def test_summary_is_stable(self, auth_client, delivered_order):
        assert auth_client.get('/api/inventory/').data == auth_client.get('/api/inventory/').data
