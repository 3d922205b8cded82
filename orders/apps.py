"""
Orders App Configuration
Customer orders, line items and the append-only return ledger.
"""
from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'orders'
    verbose_name = 'Orders & Returns'
