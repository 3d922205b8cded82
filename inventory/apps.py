"""
Inventory App Configuration
Product catalog and the pool of serialized inventory units.
"""
from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'inventory'
    verbose_name = 'Inventory Ledger'
