from django.conf import settings
from rest_framework import serializers

from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'sku', 'description', 'price', 'stock_quantity',
            'category', 'is_low_stock', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_is_low_stock(self, obj):
        return obj.stock_quantity < settings.LOW_STOCK_THRESHOLD
