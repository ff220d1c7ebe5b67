from decimal import Decimal

from rest_framework import serializers

from backend.core.validation import CanonicalUUIDField, MoneyField, OptionalUUIDField, Schema, required_messages


class SaleSchema(Schema):
    product_id = CanonicalUUIDField(
        error_messages={**required_messages("Invalid product selection"), 'invalid': "Invalid product selection"},
    )
    customer_id = OptionalUUIDField(
        error_messages={'invalid': "Invalid customer selection"},
    )
    quantity_sold = serializers.IntegerField(
        min_value=1,
        max_value=999999,
        error_messages={
            'required': "Quantity is required",
            'null': "Quantity is required",
            'invalid': "Quantity must be a whole number",
            'min_value': "Quantity must be at least 1",
            'max_value': "Quantity must be less than 1,000,000",
        },
    )
    unit_price = MoneyField(
        min_value=Decimal('0.01'),
        max_value=Decimal('999999.99'),
        error_messages={
            'required': "Unit price is required",
            'null': "Unit price is required",
            'invalid': "Unit price must be a number",
            'min_value': "Unit price must be greater than 0",
            'max_value': "Unit price must be less than 1,000,000",
        },
    )
