from django.contrib import admin
from .models import InventoryUnit, Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['item_number', 'name', 'price', 'weight', 'size_class', 'created_at']
    list_filter = ['size_class']
    search_fields = ['item_number', 'name']
    ordering = ['item_number']


@admin.register(InventoryUnit)
class InventoryUnitAdmin(admin.ModelAdmin):
    """
    Units are moved only by the inventory ledger; the admin is read-only.
    """
    list_display = ['serial_number', 'product', 'status', 'has_return_history', 'created_at', 'last_status_change']
    list_filter = ['status', 'has_return_history', 'product']
    search_fields = ['serial_number', 'product__item_number', 'product__name']
    list_select_related = ['product']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
