from rest_framework import serializers
from .models import SaleRecord


class SaleRecordSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True, default=None)
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = SaleRecord
        fields = [
            'id', 'product', 'product_name', 'customer', 'customer_name',
            'quantity_sold', 'unit_price', 'total_value', 'sale_date',
            'created_by', 'created_by_username'
        ]
        read_only_fields = fields
