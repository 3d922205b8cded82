"""
Service wiring.

Collaborators are constructed explicitly and resolved once per process.
Views, management commands and tests go through these factories instead
of building the graph themselves.
"""
from functools import lru_cache

from django.conf import settings
from django.utils.module_loading import import_string

from inventory.ledger import InventoryLedger
from .allocation import OrderAllocator
from .returns import ReturnProcessor


@lru_cache(maxsize=None)
def get_inventory_ledger():
    return InventoryLedger()


@lru_cache(maxsize=None)
def get_refund_notifier():
    notifier_class = import_string(settings.REFUND_NOTIFIER_CLASS)
    return notifier_class()


@lru_cache(maxsize=None)
def get_allocator():
    return OrderAllocator(ledger=get_inventory_ledger())


@lru_cache(maxsize=None)
def get_return_processor():
    return ReturnProcessor(ledger=get_inventory_ledger(), notifier=get_refund_notifier())


def reset_services():
    """Drop cached collaborators (after settings change)."""
    for factory in (get_inventory_ledger, get_refund_notifier, get_allocator, get_return_processor):
        factory.cache_clear()
