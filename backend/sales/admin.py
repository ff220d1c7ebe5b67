from django.contrib import admin
from .models import SaleRecord


@admin.register(SaleRecord)
class SaleRecordAdmin(admin.ModelAdmin):
    list_display = ['id', 'product', 'customer', 'quantity_sold', 'unit_price', 'total_value', 'sale_date', 'created_by']
    list_filter = ['sale_date', 'created_by']
    search_fields = ['product__name', 'product__sku', 'customer__name']
    readonly_fields = ['product', 'customer', 'quantity_sold', 'unit_price', 'total_value', 'sale_date', 'created_by']
    ordering = ['-sale_date']
    date_hierarchy = 'sale_date'

    def has_add_permission(self, request):
        # Sales go through the sale recording flow so stock stays in sync
        return False
