from django.contrib import admin
from .models import Order, OrderLineItem, ReturnRecord


class OrderLineItemInline(admin.TabularInline):
    model = OrderLineItem
    extra = 0
    fields = ['product', 'product_name', 'quantity', 'price', 'returned_quantity']
    readonly_fields = fields
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders change only through allocation, fulfillment and return processing.
    """
    list_display = ['id', 'user', 'order_date', 'status', 'total_amount', 'allocated_at']
    list_filter = ['status']
    search_fields = ['id', 'user__email']
    date_hierarchy = 'order_date'
    readonly_fields = [
        'user', 'order_date', 'status', 'total_amount',
        'ship_date', 'delivery_date', 'allocated_at', 'updated_at',
    ]
    inlines = [OrderLineItemInline]

    def has_add_permission(self, request):
        return False


@admin.register(ReturnRecord)
class ReturnRecordAdmin(admin.ModelAdmin):
    list_display = ['id', 'line_item', 'quantity', 'refund_amount', 'returned_at']
    search_fields = ['line_item__order__id', 'reason']
    readonly_fields = ['line_item', 'quantity', 'reason', 'returned_at', 'refund_amount']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
