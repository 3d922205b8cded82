"""
Inventory URL Routes

Endpoints: /api/inventory/
"""

from django.urls import path
from .views import InventorySummaryView

app_name = 'inventory'

urlpatterns = [
    path('', InventorySummaryView.as_view(), name='inventory-summary'),
]
