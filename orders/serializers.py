"""
Serializers for order and return endpoints.

Only forward relations are exposed (order → line items); nothing walks
back from a line item or user to its owner.
"""

from rest_framework import serializers

from .models import DEFAULT_RETURN_REASON, Order, OrderLineItem, ReturnRecord
from .returns import MAX_REASON_LENGTH, ReturnLine


class OrderLineItemSerializer(serializers.ModelSerializer):
    """Line item with derived return bookkeeping."""

    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    remaining_quantity = serializers.IntegerField(read_only=True)
    is_fully_returned = serializers.BooleanField(read_only=True)
    is_partially_returned = serializers.BooleanField(read_only=True)

    class Meta:
        model = OrderLineItem
        fields = [
            'id', 'product', 'product_name', 'quantity', 'price', 'returned_quantity',
            'subtotal', 'remaining_quantity', 'is_fully_returned', 'is_partially_returned',
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    line_items = OrderLineItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_date', 'status', 'total_amount',
            'ship_date', 'delivery_date', 'line_items',
        ]
        read_only_fields = fields


class ReturnRecordSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='line_item.product_name', read_only=True)

    class Meta:
        model = ReturnRecord
        fields = ['id', 'line_item', 'product_name', 'quantity', 'reason', 'returned_at', 'refund_amount']
        read_only_fields = fields


class ReturnItemRequestSerializer(serializers.Serializer):
    """One line of a return request."""

    line_item_id = serializers.IntegerField()
    quantity = serializers.IntegerField()
    reason = serializers.CharField(
        max_length=MAX_REASON_LENGTH,
        required=False,
        allow_blank=True,
        default=DEFAULT_RETURN_REASON,
    )


class ReturnRequestSerializer(serializers.Serializer):
    items = ReturnItemRequestSerializer(many=True, allow_empty=False)

    def to_return_lines(self):
        return [
            ReturnLine(
                line_item_id=item['line_item_id'],
                quantity=item['quantity'],
                reason=item.get('reason') or DEFAULT_RETURN_REASON,
            )
            for item in self.validated_data['items']
        ]


class ReturnResultSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    refund_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    status = serializers.CharField()
    records = ReturnRecordSerializer(many=True)
