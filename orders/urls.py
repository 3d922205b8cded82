"""
URL configuration for order and return endpoints.
"""

from django.urls import path
from .views import OrderListView, order_detail, order_returns, return_items

app_name = 'orders'

urlpatterns = [
    path('', OrderListView.as_view(), name='order-list'),
    path('<int:order_id>/', order_detail, name='order-detail'),

    # Returns
    path('<int:order_id>/return-items/', return_items, name='order-return-items'),
    path('<int:order_id>/returns/', order_returns, name='order-returns'),
]
