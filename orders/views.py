"""
API views for orders and returns.

Every endpoint is scoped to the authenticated user: orders owned by someone
else answer 404, exactly like missing ones. Core errors are mapped to
responses of the form {'error': <code>, 'detail': <message>}.
"""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from core.exceptions import FulfillmentError, OrderNotFound
from .queries import get_order, get_return_history, orders_for_user
from .serializers import (
    OrderSerializer, ReturnRecordSerializer, ReturnRequestSerializer, ReturnResultSerializer,
)
from .services import get_return_processor

logger = logging.getLogger(__name__)


def _error_response(exc):
    return Response({'error': exc.code, 'detail': str(exc)}, status=exc.status_code)


def _get_owned_order(request, order_id):
    order = get_order(order_id)
    if order.user_id != request.user.pk:
        raise OrderNotFound(order_id)
    return order


class OrderListView(generics.ListAPIView):
    """
    List the authenticated user's orders, newest first.

    Query params:
        status: processing | shipped | delivered | returned
    """
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = OrderSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['status']

    def get_queryset(self):
        return orders_for_user(self.request.user.pk)


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def order_detail(request, order_id):
    """Retrieve one of the user's orders with its line items."""
    try:
        order = _get_owned_order(request, order_id)
    except FulfillmentError as e:
        return _error_response(e)

    return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def return_items(request, order_id):
    """
    Return some or all items of a delivered order.

    Body:
        {"items": [{"line_item_id": 1, "quantity": 2, "reason": "Damaged"}]}
    """
    serializer = ReturnRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        _get_owned_order(request, order_id)
        result = get_return_processor().process_return(order_id, serializer.to_return_lines())
    except FulfillmentError as e:
        logger.info(
            f"Return for order {order_id} rejected: {e}",
            extra={'event': 'returns.rejected', 'order_id': order_id, 'code': e.code},
        )
        return _error_response(e)

    return Response(ReturnResultSerializer(result).data, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def order_returns(request, order_id):
    """Return records of one of the user's orders, oldest first."""
    try:
        _get_owned_order(request, order_id)
    except FulfillmentError as e:
        return _error_response(e)

    records = get_return_history(order_id)
    return Response(ReturnRecordSerializer(records, many=True).data, status=status.HTTP_200_OK)
