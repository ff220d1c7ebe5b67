from django.contrib import admin
from .models import Delivery


@admin.register(Delivery)
class DeliveryAdmin(admin.ModelAdmin):
    list_display = ['id', 'sales_record', 'delivery_status', 'tracking_number', 'created_at']
    list_filter = ['delivery_status', 'created_at']
    search_fields = ['tracking_number', 'delivery_address', 'sales_record__product__name']
    ordering = ['-created_at']
