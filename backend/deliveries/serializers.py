from rest_framework import serializers
from .models import Delivery


class DeliverySerializer(serializers.ModelSerializer):
    delivery_status_display = serializers.CharField(source='get_delivery_status_display', read_only=True)
    product_name = serializers.CharField(source='sales_record.product.name', read_only=True)
    customer_name = serializers.CharField(source='sales_record.customer.name', read_only=True, default=None)
    quantity_sold = serializers.IntegerField(source='sales_record.quantity_sold', read_only=True)
    total_value = serializers.DecimalField(source='sales_record.total_value', max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Delivery
        fields = [
            'id', 'sales_record', 'product_name', 'customer_name', 'quantity_sold', 'total_value',
            'delivery_address', 'delivery_status', 'delivery_status_display', 'tracking_number',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields
