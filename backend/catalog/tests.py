"""
Test suite for Catalog module
Tests: product creation, listing filters, low stock listing, low stock command
"""
from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status

from backend.core.models import AuditLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Product


class ProductAPITests(TestCase):
    """Product endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_product(self):
        response = self.client.post('/api/v1/products/', {
            'name': '  Ceramic Mug ',
            'sku': 'MUG-01',
            'description': '',
            'price': 10.5,
            'stock_quantity': 20,
            'category': 'Kitchen',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Ceramic Mug')
        self.assertEqual(response.data['price'], '10.50')
        self.assertIsNone(response.data['description'])
        self.assertFalse(response.data['is_low_stock'])
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Product').exists())

    def test_create_product_invalid(self):
        response = self.client.post('/api/v1/products/', {
            'name': 'Ceramic Mug',
            'sku': 'mug-01',
            'price': 0,
            'stock_quantity': 20,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {
            'sku': 'SKU can only contain uppercase letters, numbers, hyphens, and underscores',
            'price': 'Price must be greater than 0',
        })
        self.assertEqual(Product.objects.count(), 0)

    def test_list_products_newest_first(self):
        older = TestDataFactory.create_product(name='Older')
        newer = TestDataFactory.create_product(name='Newer')
        Product.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=1))

        response = self.client.get('/api/v1/products/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['id'] for p in response.data], [str(newer.id), str(older.id)])

    def test_search_products(self):
        TestDataFactory.create_product(name='Blue Pen', sku='PEN-BLUE')
        TestDataFactory.create_product(name='Notebook', sku='NB-A5')

        response = self.client.get('/api/v1/products/', {'search': 'pen'})
        self.assertEqual([p['name'] for p in response.data], ['Blue Pen'])

    def test_filter_low_stock(self):
        TestDataFactory.create_product(name='Scarce', stock_quantity=2)
        TestDataFactory.create_product(name='Plenty', stock_quantity=200)

        response = self.client.get('/api/v1/products/', {'low_stock': 'true'})
        self.assertEqual([p['name'] for p in response.data], ['Scarce'])

    def test_low_stock_endpoint(self):
        TestDataFactory.create_product(name='Nine', stock_quantity=9)
        TestDataFactory.create_product(name='One', stock_quantity=1)
        TestDataFactory.create_product(name='Ten', stock_quantity=10)

        response = self.client.get('/api/v1/products/low-stock/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['threshold'], 10)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual([p['name'] for p in response.data['products']], ['One', 'Nine'])
        self.assertTrue(all(p['is_low_stock'] for p in response.data['products']))

    def test_product_detail(self):
        product = TestDataFactory.create_product(name='Stapler')
        response = self.client.get(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Stapler')

    def test_product_detail_not_found(self):
        response = self.client.get('/api/v1/products/00000000-0000-0000-0000-000000000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/products/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class CheckLowStockCommandTests(TestCase):

    def run_command(self, *args):
        out = StringIO()
        call_command('check_low_stock', *args, stdout=out)
        return out.getvalue()

    def test_lists_low_stock_products(self):
        TestDataFactory.create_product(name='Toner', stock_quantity=3)
        TestDataFactory.create_product(name='Paper', stock_quantity=300)

        output = self.run_command()
        self.assertIn('Toner - 3 units remaining', output)
        self.assertNotIn('Paper', output)

    def test_threshold_option(self):
        TestDataFactory.create_product(name='Paper', stock_quantity=300)
        self.assertIn('Paper', self.run_command('--threshold', '500'))

    @override_settings(LOW_STOCK_THRESHOLD=1)
    def test_nothing_low(self):
        TestDataFactory.create_product(name='Toner', stock_quantity=3)
        self.assertIn('No products below 1 units.', self.run_command())
