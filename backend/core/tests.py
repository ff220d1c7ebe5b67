"""
Test suite for Core module
Tests: form validation schemas, store operations, authentication endpoints, audit logging
"""
from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from rest_framework import status

from backend.catalog.models import Product
from backend.core import store
from backend.core.models import AuditLog
from backend.core.store import NotFound, StoreError
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.utils import create_audit_log
from backend.core.validation import UnknownSchema, ValidationResult, validate

VALID_PRODUCT = {
    'name': 'Steel Water Bottle',
    'sku': 'BTL-001',
    'description': '',
    'price': 12.5,
    'stock_quantity': 40,
    'category': 'Kitchen',
}


class ProductSchemaTests(SimpleTestCase):
    """Product form rules"""

    def product(self, **overrides):
        return {**VALID_PRODUCT, **overrides}

    def test_valid_product_is_normalized(self):
        result = validate('product', self.product(name='  Steel Water Bottle  '))
        self.assertTrue(result.is_valid)
        self.assertEqual(result.data['name'], 'Steel Water Bottle')
        self.assertEqual(result.data['price'], Decimal('12.50'))
        self.assertEqual(result.data['stock_quantity'], 40)
        self.assertIsNone(result.data['description'])

    def test_price_boundaries_accepted(self):
        self.assertTrue(validate('product', self.product(price=0.01)).is_valid)
        self.assertTrue(validate('product', self.product(price=999999.99)).is_valid)

    def test_price_zero_rejected(self):
        result = validate('product', self.product(price=0))
        self.assertEqual(result.errors, {'price': 'Price must be greater than 0'})

    def test_negative_price_rejected(self):
        result = validate('product', self.product(price=-3))
        self.assertEqual(result.errors['price'], 'Price must be greater than 0')

    def test_price_above_maximum_rejected(self):
        result = validate('product', self.product(price=1000000))
        self.assertEqual(result.errors['price'], 'Price must be less than 1,000,000')

    def test_sku_pattern(self):
        self.assertTrue(validate('product', self.product(sku='ABC-123_1')).is_valid)
        result = validate('product', self.product(sku='abc-123'))
        self.assertEqual(
            result.errors['sku'],
            'SKU can only contain uppercase letters, numbers, hyphens, and underscores'
        )

    def test_empty_optional_fields_become_none(self):
        result = validate('product', self.product(sku='', category='   '))
        self.assertTrue(result.is_valid)
        self.assertIsNone(result.data['sku'])
        self.assertIsNone(result.data['category'])

    def test_missing_optional_fields_are_filled_in(self):
        data = {'name': 'Plain Mug', 'price': 4, 'stock_quantity': 1}
        result = validate('product', data)
        self.assertTrue(result.is_valid)
        self.assertEqual(
            set(result.data),
            {'name', 'sku', 'description', 'price', 'stock_quantity', 'category'}
        )

    def test_price_below_a_cent_reports_range(self):
        result = validate('product', self.product(price=0.001))
        self.assertEqual(result.errors, {'price': 'Price must be greater than 0'})

    def test_extra_price_precision_is_rounded(self):
        self.assertEqual(validate('product', self.product(price=19.999)).data['price'], Decimal('20.00'))
        self.assertEqual(validate('product', self.product(price=0.1 + 0.2)).data['price'], Decimal('0.30'))
        self.assertEqual(validate('product', self.product(price=19.985)).data['price'], Decimal('19.99'))

    def test_price_just_above_maximum_rejected(self):
        result = validate('product', self.product(price=999999.995))
        self.assertEqual(result.errors['price'], 'Price must be less than 1,000,000')

    def test_fractional_stock_is_a_type_error(self):
        result = validate('product', self.product(stock_quantity=2.5))
        self.assertEqual(result.errors['stock_quantity'], 'Stock quantity must be a whole number')

    def test_stock_range(self):
        result = validate('product', self.product(stock_quantity=-1))
        self.assertEqual(result.errors['stock_quantity'], 'Stock quantity cannot be negative')
        result = validate('product', self.product(stock_quantity=1000000))
        self.assertEqual(result.errors['stock_quantity'], 'Stock quantity must be less than 1,000,000')

    def test_name_required(self):
        result = validate('product', self.product(name='   '))
        self.assertEqual(result.errors['name'], 'Product name is required')

    def test_name_too_long(self):
        result = validate('product', self.product(name='x' * 101))
        self.assertEqual(result.errors['name'], 'Product name must be less than 100 characters')

    def test_one_message_per_field(self):
        result = validate('product', self.product(name='', price=0, sku='lower'))
        self.assertEqual(set(result.errors), {'name', 'price', 'sku'})
        for message in result.errors.values():
            self.assertIsInstance(message, str)

    def test_validate_is_repeatable(self):
        bad = self.product(price=0, sku='abc')
        self.assertEqual(validate('product', bad), validate('product', bad))
        self.assertEqual(validate('product', VALID_PRODUCT), validate('product', VALID_PRODUCT))


class CustomerSchemaTests(SimpleTestCase):
    """Customer form rules"""

    def test_valid_customer(self):
        result = validate('customer', {
            'name': " Mary O'Neil-Brown ",
            'email': 'mary@example.com',
            'phone': '+1 (555) 123-4567',
            'address': '',
        })
        self.assertTrue(result.is_valid)
        self.assertEqual(result.data['name'], "Mary O'Neil-Brown")
        self.assertIsNone(result.data['address'])

    def test_name_with_digits_rejected(self):
        result = validate('customer', {'name': 'R2D2'})
        self.assertEqual(result.errors['name'], 'Name can only contain letters, spaces, hyphens, and apostrophes')

    def test_name_required(self):
        result = validate('customer', {'name': ''})
        self.assertEqual(result.errors['name'], 'Name is required')

    def test_invalid_email(self):
        result = validate('customer', {'name': 'Ann', 'email': 'not-an-email'})
        self.assertEqual(result.errors, {'email': 'Invalid email format'})

    def test_empty_email_is_absent(self):
        result = validate('customer', {'name': 'Ann', 'email': ''})
        self.assertTrue(result.is_valid)
        self.assertIsNone(result.data['email'])

    def test_invalid_phone(self):
        result = validate('customer', {'name': 'Ann', 'phone': '555-CALL-NOW'})
        self.assertEqual(result.errors['phone'], 'Invalid phone number format')

    def test_address_too_long(self):
        result = validate('customer', {'name': 'Ann', 'address': 'a' * 501})
        self.assertEqual(result.errors['address'], 'Address must be less than 500 characters')


class SaleSchemaTests(SimpleTestCase):
    """Sale form rules"""
    product_id = '5f0c6f8e-3f43-4c8a-9d53-6a0d2b1c7e11'

    def test_valid_sale_without_customer(self):
        result = validate('sale', {
            'product_id': self.product_id,
            'customer_id': '',
            'quantity_sold': 3,
            'unit_price': 19.99,
        })
        self.assertTrue(result.is_valid)
        self.assertIsNone(result.data['customer_id'])
        self.assertEqual(result.data['unit_price'], Decimal('19.99'))
        self.assertEqual(str(result.data['product_id']), self.product_id)

    def test_malformed_product_id(self):
        result = validate('sale', {'product_id': 'product-1', 'quantity_sold': 1, 'unit_price': 5})
        self.assertEqual(result.errors, {'product_id': 'Invalid product selection'})

    def test_product_id_must_be_hyphenated(self):
        for product_id in (
            self.product_id.replace('-', ''),
            f'urn:uuid:{self.product_id}',
            '{' + self.product_id + '}',
        ):
            result = validate('sale', {'product_id': product_id, 'quantity_sold': 1, 'unit_price': 5})
            self.assertEqual(result.errors, {'product_id': 'Invalid product selection'})

    def test_unit_price_is_rounded_to_cents(self):
        result = validate('sale', {'product_id': self.product_id, 'quantity_sold': 1, 'unit_price': 4.005})
        self.assertTrue(result.is_valid)
        self.assertEqual(result.data['unit_price'], Decimal('4.01'))

    def test_malformed_customer_id(self):
        result = validate('sale', {
            'product_id': self.product_id,
            'customer_id': '1234',
            'quantity_sold': 1,
            'unit_price': 5,
        })
        self.assertEqual(result.errors, {'customer_id': 'Invalid customer selection'})

    def test_quantity_rules(self):
        base = {'product_id': self.product_id, 'unit_price': 5}
        self.assertEqual(
            validate('sale', {**base, 'quantity_sold': 0}).errors['quantity_sold'],
            'Quantity must be at least 1'
        )
        self.assertEqual(
            validate('sale', {**base, 'quantity_sold': 1.5}).errors['quantity_sold'],
            'Quantity must be a whole number'
        )
        self.assertEqual(
            validate('sale', {**base, 'quantity_sold': 1000000}).errors['quantity_sold'],
            'Quantity must be less than 1,000,000'
        )

    def test_unit_price_must_be_positive(self):
        result = validate('sale', {'product_id': self.product_id, 'quantity_sold': 1, 'unit_price': 0})
        self.assertEqual(result.errors['unit_price'], 'Unit price must be greater than 0')


class DeliverySchemaTests(SimpleTestCase):
    """Delivery form rules"""
    sale_id = '0b8a5b8e-8d0f-4b2e-a3a8-8d2c1b0e9f55'

    def test_valid_delivery(self):
        result = validate('delivery', {
            'sales_record_id': self.sale_id,
            'delivery_address': ' 221B Baker Street ',
            'delivery_status': 'in_transit',
            'tracking_number': '',
        })
        self.assertTrue(result.is_valid)
        self.assertEqual(result.data['delivery_address'], '221B Baker Street')
        self.assertIsNone(result.data['tracking_number'])

    def test_unknown_status(self):
        result = validate('delivery', {
            'sales_record_id': self.sale_id,
            'delivery_address': 'Somewhere',
            'delivery_status': 'shipped',
        })
        self.assertEqual(result.errors, {'delivery_status': 'Invalid delivery status'})

    def test_sale_id_must_be_hyphenated(self):
        result = validate('delivery', {
            'sales_record_id': self.sale_id.replace('-', ''),
            'delivery_address': 'Somewhere',
            'delivery_status': 'pending',
        })
        self.assertEqual(result.errors, {'sales_record_id': 'Please select a sale record'})

    def test_missing_sale_and_address(self):
        result = validate('delivery', {'sales_record_id': '', 'delivery_address': '', 'delivery_status': 'pending'})
        self.assertEqual(result.errors['sales_record_id'], 'Please select a sale record')
        self.assertEqual(result.errors['delivery_address'], 'Delivery address is required')


class AuthSchemaTests(SimpleTestCase):
    """Sign-in and sign-up form rules"""

    def sign_up(self, **overrides):
        data = {'email': 'new@example.com', 'password': 'Secret123!', 'username': 'new_user'}
        data.update(overrides)
        return validate('sign_up', data)

    def test_valid_sign_up(self):
        self.assertTrue(self.sign_up().is_valid)

    def test_first_failing_password_rule_wins(self):
        # Missing both an uppercase letter and a special character
        result = self.sign_up(password='abc12345')
        self.assertEqual(result.errors, {'password': 'Password must contain at least one uppercase letter'})

    def test_password_rules_in_order(self):
        self.assertEqual(
            self.sign_up(password='Ab1!').errors['password'],
            'Password must be at least 8 characters long'
        )
        self.assertEqual(
            self.sign_up(password='ABCDEFG1!').errors['password'],
            'Password must contain at least one lowercase letter'
        )
        self.assertEqual(
            self.sign_up(password='Abcdefgh!').errors['password'],
            'Password must contain at least one number'
        )
        self.assertEqual(
            self.sign_up(password='Abcdefg12').errors['password'],
            'Password must contain at least one special character (@$!%*?&)'
        )

    def test_password_is_not_trimmed(self):
        result = self.sign_up(password='  Secret123!  ')
        self.assertEqual(result.data['password'], '  Secret123!  ')

    def test_username_rules(self):
        self.assertEqual(
            self.sign_up(username='ab').errors['username'],
            'Username must be at least 3 characters long'
        )
        self.assertEqual(
            self.sign_up(username='has space').errors['username'],
            'Username can only contain letters, numbers, hyphens, and underscores'
        )

    def test_sign_in_requires_password(self):
        result = validate('sign_in', {'email': 'user@example.com', 'password': ''})
        self.assertEqual(result.errors, {'password': 'Password is required'})

    def test_sign_in_rejects_bad_email(self):
        result = validate('sign_in', {'email': 'user.example.com', 'password': 'x'})
        self.assertEqual(result.errors, {'email': 'Invalid email format'})


class ValidationResultTests(SimpleTestCase):

    def test_unknown_entity_kind(self):
        with self.assertRaises(UnknownSchema):
            validate('invoice', {})

    def test_result_tags(self):
        self.assertTrue(ValidationResult.valid({'a': 1}).is_valid)
        invalid = ValidationResult.invalid({'a': 'bad'})
        self.assertFalse(invalid.is_valid)
        self.assertIsNone(invalid.data)


class StoreTests(TestCase):
    """Store operations wrap the ORM and surface StoreError"""

    def setUp(self):
        self.product = TestDataFactory.create_product(stock_quantity=5)

    def test_read_one(self):
        self.assertEqual(store.read_one(Product, self.product.pk), self.product)

    def test_read_one_missing(self):
        with self.assertRaises(NotFound):
            store.read_one(Product, '00000000-0000-0000-0000-000000000000')

    def test_read_one_malformed_id(self):
        with self.assertRaises(NotFound):
            store.read_one(Product, 'not-a-uuid')

    def test_conditional_update(self):
        self.assertEqual(store.update(Product, self.product.pk, {'stock_quantity': 1}, conditions={'stock_quantity__gte': 10}), 0)
        self.assertEqual(store.update(Product, self.product.pk, {'stock_quantity': 1}, conditions={'stock_quantity__gte': 5}), 1)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 1)

    def test_insert_failure_is_wrapped(self):
        with patch.object(Product.objects, 'create', side_effect=DatabaseError('disk full')):
            with self.assertRaises(StoreError) as ctx:
                store.insert(Product, {'name': 'X', 'price': Decimal('1.00')})
        self.assertEqual(ctx.exception.code, 'insert_failed')

    def test_list_rows(self):
        TestDataFactory.create_product(stock_quantity=50)
        rows = store.list_rows(Product, filters={'stock_quantity__lt': 10}, order=['name'])
        self.assertEqual(list(rows), [self.product])


class AuthAPITests(TestCase):
    """Sign-up, sign-in and current user endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_sign_up(self):
        response = self.client.post('/api/v1/auth/sign-up/', {
            'email': 'owner@example.com',
            'password': 'Str0ng&Safe',
            'username': 'shop_owner',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertEqual(response.data['user']['username'], 'shop_owner')
        self.assertTrue(AuditLog.objects.filter(action='sign_up').exists())

    def test_sign_up_weak_password(self):
        response = self.client.post('/api/v1/auth/sign-up/', {
            'email': 'owner@example.com',
            'password': 'abc12345',
            'username': 'shop_owner',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'password': 'Password must contain at least one uppercase letter'})

    def test_sign_up_duplicate_email(self):
        TestDataFactory.create_user(username='first', email='owner@example.com')
        response = self.client.post('/api/v1/auth/sign-up/', {
            'email': 'owner@example.com',
            'password': 'Str0ng&Safe',
            'username': 'second',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_sign_in(self):
        TestDataFactory.create_user(username='clerk', email='clerk@example.com', password='Str0ng&Safe')
        response = self.client.post('/api/v1/auth/sign-in/', {
            'email': 'clerk@example.com',
            'password': 'Str0ng&Safe',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('refresh', response.data)

    def test_sign_in_wrong_password(self):
        TestDataFactory.create_user(username='clerk', email='clerk@example.com', password='Str0ng&Safe')
        response = self.client.post('/api/v1/auth/sign-in/', {
            'email': 'clerk@example.com',
            'password': 'wrong',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        user = TestDataFactory.create_user()
        self.client.authenticate_user(user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], user.email)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AuditLogTests(TestCase):

    def test_missing_fields_skip_entry(self):
        self.assertIsNone(create_audit_log(action='create', model_name='Product'))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_non_staff_sees_own_entries(self):
        user = TestDataFactory.create_user()
        other = TestDataFactory.create_user()
        create_audit_log(action='create', model_name='Product', object_id='1', user=user)
        create_audit_log(action='create', model_name='Product', object_id='2', user=other)
        client = AuthenticatedAPIClient()
        client.authenticate_user(user)
        response = client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([entry['object_id'] for entry in response.data], ['1'])
