from decimal import Decimal

from django.core.validators import MaxLengthValidator, RegexValidator
from rest_framework import serializers

from backend.core.validation import MoneyField, Schema, required_messages


class ProductSchema(Schema):
    name = serializers.CharField(
        validators=[MaxLengthValidator(100, message="Product name must be less than 100 characters")],
        error_messages=required_messages("Product name is required"),
    )
    sku = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[
            RegexValidator(r'^[A-Z0-9\-_]{0,50}$', message="SKU can only contain uppercase letters, numbers, hyphens, and underscores"),
            MaxLengthValidator(50, message="SKU must be less than 50 characters"),
        ],
    )
    description = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[MaxLengthValidator(1000, message="Description must be less than 1000 characters")],
    )
    price = MoneyField(
        min_value=Decimal('0.01'),
        max_value=Decimal('999999.99'),
        error_messages={
            'required': "Price is required",
            'null': "Price is required",
            'invalid': "Price must be a number",
            'min_value': "Price must be greater than 0",
            'max_value': "Price must be less than 1,000,000",
        },
    )
    stock_quantity = serializers.IntegerField(
        min_value=0,
        max_value=999999,
        error_messages={
            'required': "Stock quantity is required",
            'null': "Stock quantity is required",
            'invalid': "Stock quantity must be a whole number",
            'min_value': "Stock quantity cannot be negative",
            'max_value': "Stock quantity must be less than 1,000,000",
        },
    )
    category = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[MaxLengthValidator(50, message="Category must be less than 50 characters")],
    )
