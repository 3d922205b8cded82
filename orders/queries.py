"""
Read operations on orders.

None of these check ownership; callers resolve the requesting user before
asking for an order.
"""

from django.db.models import Prefetch

from core.exceptions import OrderNotFound
from .models import Order, OrderLineItem, ReturnRecord


def _orders_with_items():
    return Order.objects.prefetch_related(
        Prefetch('line_items', queryset=OrderLineItem.objects.order_by('id'))
    )


def orders_for_user(user_id):
    """Queryset form of get_orders, for callers that filter further."""
    return _orders_with_items().filter(user_id=user_id).order_by('-order_date', '-id')


def get_orders(user_id):
    """The user's orders, newest first, with line items loaded."""
    return list(orders_for_user(user_id))


def get_order(order_id):
    """
    Load one order with its line items.

    Raises:
        OrderNotFound: no order has this id
    """
    try:
        return _orders_with_items().get(pk=order_id)
    except Order.DoesNotExist:
        raise OrderNotFound(order_id)


def get_return_history(order_id):
    """Return records of an order, oldest first."""
    return list(
        ReturnRecord.objects.filter(line_item__order_id=order_id)
        .select_related('line_item')
        .order_by('returned_at', 'id')
    )
