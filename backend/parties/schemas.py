from django.core.validators import EmailValidator, MaxLengthValidator, RegexValidator
from rest_framework import serializers

from backend.core.validation import Schema, required_messages


class CustomerSchema(Schema):
    name = serializers.CharField(
        validators=[
            MaxLengthValidator(100, message="Name must be less than 100 characters"),
            RegexValidator(r"^[a-zA-Z\s'-]+$", message="Name can only contain letters, spaces, hyphens, and apostrophes"),
        ],
        error_messages=required_messages("Name is required"),
    )
    email = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[
            EmailValidator(message="Invalid email format"),
            MaxLengthValidator(255, message="Email must be less than 255 characters"),
        ],
    )
    phone = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[
            RegexValidator(r'^[+]?[0-9\s\-()]{0,20}$', message="Invalid phone number format"),
            MaxLengthValidator(20, message="Phone number must be less than 20 characters"),
        ],
    )
    address = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        validators=[MaxLengthValidator(500, message="Address must be less than 500 characters")],
    )
