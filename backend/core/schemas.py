from django.core.validators import EmailValidator, MaxLengthValidator, MinLengthValidator, RegexValidator
from rest_framework import serializers

from .validation import Schema, required_messages

EMAIL_VALIDATORS = [
    EmailValidator(message="Invalid email format"),
    MaxLengthValidator(255, message="Email must be less than 255 characters"),
]


class SignInSchema(Schema):
    email = serializers.CharField(
        validators=EMAIL_VALIDATORS,
        error_messages=required_messages("Invalid email format"),
    )
    password = serializers.CharField(
        trim_whitespace=False,
        error_messages=required_messages("Password is required"),
    )


class SignUpSchema(Schema):
    email = serializers.CharField(
        validators=EMAIL_VALIDATORS,
        error_messages=required_messages("Invalid email format"),
    )
    # Each rule reports separately; the field keeps whichever fails first
    password = serializers.CharField(
        trim_whitespace=False,
        validators=[
            MinLengthValidator(8, message="Password must be at least 8 characters long"),
            MaxLengthValidator(128, message="Password must be less than 128 characters"),
            RegexValidator(r'(?=.*[a-z])', message="Password must contain at least one lowercase letter"),
            RegexValidator(r'(?=.*[A-Z])', message="Password must contain at least one uppercase letter"),
            RegexValidator(r'(?=.*\d)', message="Password must contain at least one number"),
            # Messages are %-formatted with the rejected value, hence the doubled %
            RegexValidator(r'(?=.*[@$!%*?&])', message="Password must contain at least one special character (@$!%%*?&)"),
        ],
        error_messages=required_messages("Password must be at least 8 characters long"),
    )
    username = serializers.CharField(
        validators=[
            MinLengthValidator(3, message="Username must be at least 3 characters long"),
            MaxLengthValidator(30, message="Username must be less than 30 characters"),
            RegexValidator(r'^[a-zA-Z0-9_-]+$', message="Username can only contain letters, numbers, hyphens, and underscores"),
        ],
        error_messages=required_messages("Username must be at least 3 characters long"),
    )
