"""
Inventory Views

Read-only stock summary across the catalog.
"""

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.services import get_inventory_ledger
from .serializers import InventorySummarySerializer


class InventorySummaryView(APIView):
    """
    Per-product unit counts ordered by item number.

    GET /api/inventory/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        summary = get_inventory_ledger().summary()
        return Response({
            'count': len(summary),
            'results': InventorySummarySerializer(summary, many=True).data,
        })
