"""
URL configuration for the fulfillment ledger project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/orders/', include('orders.urls')),  # Orders, returns and return history
    path('api/inventory/', include('inventory.urls')),  # Inventory summary
]
