"""
Serializers for inventory endpoints.
"""

from rest_framework import serializers

from .models import SizeClass


class InventorySummarySerializer(serializers.Serializer):
    """Read-only view of an InventorySummary row."""

    product_id = serializers.IntegerField()
    item_number = serializers.CharField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    weight = serializers.DecimalField(max_digits=8, decimal_places=2)
    size_class = serializers.ChoiceField(choices=SizeClass.choices)
    total = serializers.IntegerField()
    available = serializers.IntegerField()
    reserved = serializers.IntegerField()
    returned_items = serializers.IntegerField()
