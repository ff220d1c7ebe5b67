"""
Test suite for Sales module
Tests: recording sales, stock decrement, insufficient stock, rollback on failure, low stock notifications
"""
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase, override_settings
from rest_framework import status

from backend.catalog.models import Product
from backend.core.models import AuditLog
from backend.core.store import StoreError
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import SaleRecord
from .services import (
    Failed, InsufficientStock, LowStockWarning, Recorded,
    compute_total_value, is_low_stock, record_sale,
)
from .signals import low_stock

MISSING_ID = '00000000-0000-0000-0000-000000000000'


def sale_input(product, quantity, unit_price='20.00', customer=None):
    return {
        'product_id': product.pk,
        'customer_id': customer.pk if customer else None,
        'quantity_sold': quantity,
        'unit_price': Decimal(unit_price),
    }


class RecordSaleTests(TestCase):
    """Sale recording and stock changes"""

    def setUp(self):
        self.user = TestDataFactory.create_user()

    def test_sale_decrements_stock(self):
        product = TestDataFactory.create_product(name='Desk Lamp', stock_quantity=50)
        outcome = record_sale(sale_input(product, 5), user=self.user)

        self.assertIsInstance(outcome, Recorded)
        self.assertIsNone(outcome.low_stock_warning)
        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 45)
        self.assertEqual(outcome.sale.created_by, self.user)
        self.assertEqual(SaleRecord.objects.count(), 1)

    def test_low_stock_warning_after_sale(self):
        product = TestDataFactory.create_product(name='Desk Lamp', stock_quantity=12)
        outcome = record_sale(sale_input(product, 5), user=self.user)

        self.assertIsInstance(outcome, Recorded)
        self.assertEqual(outcome.low_stock_warning, LowStockWarning(product_name='Desk Lamp', remaining_qty=7))
        self.assertEqual(outcome.low_stock_warning.message, 'Desk Lamp has only 7 units left in stock.')
        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 7)

    def test_threshold_is_exclusive(self):
        at_threshold = TestDataFactory.create_product(stock_quantity=15)
        below_threshold = TestDataFactory.create_product(stock_quantity=15)

        self.assertIsNone(record_sale(sale_input(at_threshold, 5)).low_stock_warning)
        warning = record_sale(sale_input(below_threshold, 6)).low_stock_warning
        self.assertEqual(warning.remaining_qty, 9)

    @override_settings(LOW_STOCK_THRESHOLD=3)
    def test_threshold_from_settings(self):
        product = TestDataFactory.create_product(stock_quantity=12)
        self.assertIsNone(record_sale(sale_input(product, 5)).low_stock_warning)

    def test_selling_entire_stock(self):
        product = TestDataFactory.create_product(stock_quantity=4)
        outcome = record_sale(sale_input(product, 4))

        self.assertIsInstance(outcome, Recorded)
        self.assertEqual(outcome.low_stock_warning.remaining_qty, 0)
        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 0)

    def test_insufficient_stock_writes_nothing(self):
        product = TestDataFactory.create_product(name='Desk Lamp', stock_quantity=3)
        outcome = record_sale(sale_input(product, 5))

        self.assertEqual(outcome, InsufficientStock(product_name='Desk Lamp', available=3))
        self.assertEqual(outcome.message, 'Only 3 units of Desk Lamp are available.')
        self.assertEqual(SaleRecord.objects.count(), 0)
        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 3)

    def test_total_value_is_exact(self):
        product = TestDataFactory.create_product(stock_quantity=100)
        outcome = record_sale(sale_input(product, 3, unit_price='19.99'))

        outcome.sale.refresh_from_db()
        self.assertEqual(outcome.sale.total_value, Decimal('59.97'))
        self.assertEqual(outcome.sale.unit_price, Decimal('19.99'))

    def test_sale_with_customer(self):
        product = TestDataFactory.create_product(stock_quantity=100)
        customer = TestDataFactory.create_customer()
        outcome = record_sale(sale_input(product, 1, customer=customer))
        self.assertEqual(outcome.sale.customer, customer)

    def test_missing_product_fails(self):
        outcome = record_sale({
            'product_id': MISSING_ID,
            'customer_id': None,
            'quantity_sold': 1,
            'unit_price': Decimal('1.00'),
        })
        self.assertEqual(outcome, Failed())
        self.assertEqual(outcome.reason, 'Failed to record sale. Please try again.')

    def test_missing_customer_fails_without_writes(self):
        product = TestDataFactory.create_product(stock_quantity=20)
        data = sale_input(product, 2)
        data['customer_id'] = MISSING_ID

        self.assertIsInstance(record_sale(data), Failed)
        self.assertEqual(SaleRecord.objects.count(), 0)
        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 20)

    def test_failed_stock_update_rolls_back_sale(self):
        product = TestDataFactory.create_product(stock_quantity=20)
        with patch('backend.core.store.update', side_effect=StoreError('update failed', 'update_failed')):
            outcome = record_sale(sale_input(product, 2))

        self.assertIsInstance(outcome, Failed)
        self.assertEqual(SaleRecord.objects.count(), 0)
        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 20)

    def test_failed_insert_leaves_stock_alone(self):
        product = TestDataFactory.create_product(stock_quantity=20)
        with patch('backend.core.store.insert', side_effect=StoreError('insert failed', 'insert_failed')):
            outcome = record_sale(sale_input(product, 2))

        self.assertIsInstance(outcome, Failed)
        product.refresh_from_db()
        self.assertEqual(product.stock_quantity, 20)

    def test_stock_consumed_before_decrement(self):
        # The conditional decrement matches no row when another sale got there first
        product = TestDataFactory.create_product(name='Desk Lamp', stock_quantity=20)
        with patch('backend.core.store.update', return_value=0):
            outcome = record_sale(sale_input(product, 2))

        self.assertEqual(outcome, InsufficientStock(product_name='Desk Lamp', available=20))
        self.assertEqual(SaleRecord.objects.count(), 0)

    def test_sale_is_audited(self):
        product = TestDataFactory.create_product(stock_quantity=50)
        outcome = record_sale(sale_input(product, 5), user=self.user)

        entry = AuditLog.objects.get(action='stock_sale')
        self.assertEqual(entry.object_id, str(outcome.sale.id))
        self.assertEqual(entry.changes['stock_before'], 50)
        self.assertEqual(entry.changes['stock_after'], 45)


class LowStockSignalTests(TestCase):
    """Low stock notifications"""

    def setUp(self):
        self.received = []
        low_stock.connect(self.on_low_stock)
        self.addCleanup(low_stock.disconnect, self.on_low_stock)

    def on_low_stock(self, sender, product, remaining_qty, **kwargs):
        self.received.append((product.name, remaining_qty))

    def test_signal_sent_below_threshold(self):
        product = TestDataFactory.create_product(name='Desk Lamp', stock_quantity=15)
        record_sale(sale_input(product, 6))

        self.assertEqual(self.received, [('Desk Lamp', 9)])
        self.assertTrue(AuditLog.objects.filter(action='low_stock', object_name='Desk Lamp').exists())

    def test_no_signal_at_threshold(self):
        product = TestDataFactory.create_product(stock_quantity=15)
        record_sale(sale_input(product, 5))
        self.assertEqual(self.received, [])

    def test_failing_receiver_does_not_undo_sale(self):
        def broken(sender, **kwargs):
            raise RuntimeError('mail server down')

        low_stock.connect(broken)
        self.addCleanup(low_stock.disconnect, broken)

        product = TestDataFactory.create_product(stock_quantity=5)
        outcome = record_sale(sale_input(product, 1))

        self.assertIsInstance(outcome, Recorded)
        self.assertEqual(SaleRecord.objects.count(), 1)


class HelperTests(TestCase):

    def test_compute_total_value(self):
        self.assertEqual(compute_total_value(3, Decimal('0.10')), Decimal('0.30'))

    def test_is_low_stock(self):
        self.assertTrue(is_low_stock(9, threshold=10))
        self.assertFalse(is_low_stock(10, threshold=10))


class SaleAPITests(TestCase):
    """Sale endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.user = TestDataFactory.create_user()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Desk Lamp', stock_quantity=12)

    def test_record_sale(self):
        response = self.client.post('/api/v1/sales/', {
            'product_id': str(self.product.pk),
            'customer_id': '',
            'quantity_sold': 5,
            'unit_price': 20,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Sale recorded successfully!')
        self.assertEqual(response.data['sale']['total_value'], '100.00')
        self.assertEqual(response.data['low_stock_warning']['remaining_qty'], 7)
        self.assertEqual(response.data['next'], '/api/v1/sales/')
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 7)

    def test_recorded_sale_is_logged(self):
        with self.assertLogs('backend.sales', level='INFO') as logs:
            self.client.post('/api/v1/sales/', {
                'product_id': str(self.product.pk),
                'quantity_sold': 1,
                'unit_price': 20,
            }, format='json')
        self.assertTrue(any('recorded by' in line and 'Desk Lamp' in line for line in logs.output))

    def test_insufficient_stock(self):
        response = self.client.post('/api/v1/sales/', {
            'product_id': str(self.product.pk),
            'quantity_sold': 20,
            'unit_price': 20,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Insufficient stock')
        self.assertEqual(response.data['available'], 12)
        self.assertEqual(SaleRecord.objects.count(), 0)

    def test_invalid_sale(self):
        response = self.client.post('/api/v1/sales/', {
            'product_id': 'lamp',
            'quantity_sold': 0,
            'unit_price': 20,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {
            'product_id': 'Invalid product selection',
            'quantity_sold': 'Quantity must be at least 1',
        })

    def test_unknown_product(self):
        response = self.client.post('/api/v1/sales/', {
            'product_id': MISSING_ID,
            'quantity_sold': 1,
            'unit_price': 20,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'Failed to record sale. Please try again.')

    def test_list_sales_filtered_by_product(self):
        TestDataFactory.create_sale(product=self.product)
        TestDataFactory.create_sale()

        response = self.client.get('/api/v1/sales/', {'product': str(self.product.pk)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['product_name'], 'Desk Lamp')

    def test_list_sales_filtered_by_customer(self):
        customer = TestDataFactory.create_customer()
        TestDataFactory.create_sale(product=self.product, customer=customer)
        TestDataFactory.create_sale(product=self.product)

        response = self.client.get('/api/v1/sales/', {'customer': str(customer.pk)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([sale['customer'] for sale in response.data], [customer.pk])

    def test_list_sales_malformed_product_filter(self):
        response = self.client.get('/api/v1/sales/', {'product': 'not-a-uuid'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'product': 'Invalid product selection'})

    def test_list_sales_malformed_customer_filter(self):
        response = self.client.get('/api/v1/sales/', {'customer': 'xyz'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'customer': 'Invalid customer selection'})

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/sales/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
