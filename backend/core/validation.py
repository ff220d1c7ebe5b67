"""
Form validation layer.

Each entity kind has one schema (a DRF serializer living in the entity's
app). ``validate`` runs the schema and returns a ``ValidationResult``:
either the normalized record or one message per offending field. Schemas
never touch the database.
"""
import re
import uuid
from decimal import Decimal, ROUND_HALF_UP

from django.utils.module_loading import import_string
from rest_framework import serializers

SCHEMA_REGISTRY = {
    'customer': 'backend.parties.schemas.CustomerSchema',
    'product': 'backend.catalog.schemas.ProductSchema',
    'sale': 'backend.sales.schemas.SaleSchema',
    'delivery': 'backend.deliveries.schemas.DeliverySchema',
    'sign_in': 'backend.core.schemas.SignInSchema',
    'sign_up': 'backend.core.schemas.SignUpSchema',
}


class UnknownSchema(KeyError):
    """No schema is registered for the requested entity kind"""


class ValidationResult:
    """Outcome of validating one form: a normalized record or field errors"""

    def __init__(self, data=None, errors=None):
        self.data = data
        self.errors = errors or {}

    @classmethod
    def valid(cls, data):
        return cls(data=data)

    @classmethod
    def invalid(cls, errors):
        return cls(errors=errors)

    @property
    def is_valid(self):
        return not self.errors

    def __eq__(self, other):
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self.data == other.data and self.errors == other.errors

    def __repr__(self):
        if self.is_valid:
            return f"ValidationResult.valid({self.data!r})"
        return f"ValidationResult.invalid({self.errors!r})"


class Schema(serializers.Serializer):
    """
    Base class for entity schemas.

    Optional text left empty is normalized to ``None`` and optional fields
    that were not submitted at all are filled in as ``None`` too, so the
    validated record always carries every declared field.
    """

    def validate(self, attrs):
        normalized = {}
        for name, field in self.fields.items():
            if field.read_only:
                continue
            value = attrs.get(name)
            normalized[name] = None if value == '' else value
        return normalized


CANONICAL_UUID = re.compile(r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}')


class CanonicalUUIDField(serializers.UUIDField):
    """UUID field accepting only the hyphenated 8-4-4-4-12 form"""

    def to_internal_value(self, data):
        if not isinstance(data, uuid.UUID) and not CANONICAL_UUID.fullmatch(str(data)):
            self.fail('invalid', value=data)
        return super().to_internal_value(data)


class MoneyField(serializers.DecimalField):
    """
    Amount checked against its range as submitted, then rounded half-up to
    cents. Extra precision from float inputs is never an error on its own.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault('max_digits', None)
        kwargs.setdefault('decimal_places', None)
        super().__init__(**kwargs)

    def run_validation(self, data=serializers.empty):
        value = super().run_validation(data)
        if value is None:
            return value
        return value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


class OptionalUUIDField(CanonicalUUIDField):
    """UUID field that treats an empty selection as "not provided"."""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if data == '':
            data = None
        return super().validate_empty_values(data)


def required_messages(message):
    """Error messages for a required field that is missing, null or blank"""
    return {'required': message, 'null': message, 'blank': message}


def first_errors(errors):
    """Keep only the first message reported for each field"""
    collapsed = {}
    for field, messages in errors.items():
        if isinstance(messages, (list, tuple)):
            collapsed[field] = str(messages[0]) if messages else ''
        else:
            collapsed[field] = str(messages)
    return collapsed


def get_schema(entity_kind):
    try:
        return import_string(SCHEMA_REGISTRY[entity_kind])
    except KeyError:
        raise UnknownSchema(entity_kind)


def validate(entity_kind, raw_fields):
    """
    Validate ``raw_fields`` against the schema for ``entity_kind``.

    Rules for a field run in declaration order and only the first failing
    rule's message is reported for that field.
    """
    schema = get_schema(entity_kind)(data=raw_fields)
    if schema.is_valid():
        return ValidationResult.valid(dict(schema.validated_data))
    return ValidationResult.invalid(first_errors(schema.errors))
