from django.core.validators import MaxLengthValidator
from rest_framework import serializers

from backend.core.validation import CanonicalUUIDField, Schema, required_messages
from .models import Delivery

INVALID_STATUS = "Invalid delivery status"


class DeliverySchema(Schema):
    sales_record_id = CanonicalUUIDField(
        error_messages={**required_messages("Please select a sale record"), 'invalid': "Please select a sale record"},
    )
    delivery_address = serializers.CharField(
        validators=[MaxLengthValidator(500, message="Delivery address must be less than 500 characters")],
        error_messages=required_messages("Delivery address is required"),
    )
    delivery_status = serializers.ChoiceField(
        choices=Delivery.STATUS_CHOICES,
        error_messages={**required_messages(INVALID_STATUS), 'invalid_choice': INVALID_STATUS},
    )
    tracking_number = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[MaxLengthValidator(100, message="Tracking number must be less than 100 characters")],
    )
