"""
Test suite for Reports module
Tests: Dashboard counts, Sales Summary, Top Products
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class ReportsTests(TestCase):
    """Test report endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_dashboard(self):
        low = TestDataFactory.create_product(stock_quantity=4)
        TestDataFactory.create_product(stock_quantity=400)
        TestDataFactory.create_customer()
        sale = TestDataFactory.create_sale(product=low, quantity_sold=2, unit_price=Decimal('12.50'))
        TestDataFactory.create_delivery(sales_record=sale)

        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_products'], 2)
        self.assertEqual(response.data['total_customers'], 1)
        self.assertEqual(response.data['total_sales'], 1)
        self.assertEqual(response.data['pending_deliveries'], 1)
        self.assertEqual(response.data['total_revenue'], '25.00')
        self.assertEqual(response.data['low_stock_products'], 1)

    def test_dashboard_empty(self):
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['total_revenue'], '0.00')

    def test_sales_summary(self):
        """Test sales summary report"""
        product = TestDataFactory.create_product(name='Pen')
        TestDataFactory.create_sale(product=product, quantity_sold=3, unit_price=Decimal('2.00'))
        TestDataFactory.create_sale(product=product, quantity_sold=1, unit_price=Decimal('2.00'))

        response = self.client.get('/api/v1/reports/sales-summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['total_sales'], 2)
        self.assertEqual(response.data['summary']['total_items_sold'], 4)
        self.assertEqual(Decimal(response.data['summary']['total_revenue']), Decimal('8.00'))
        self.assertEqual(response.data['top_products'][0]['product_name'], 'Pen')
        self.assertEqual(len(response.data['daily_breakdown']), 1)

    def test_sales_summary_with_date_range(self):
        """Test sales summary with date range"""
        TestDataFactory.create_sale()
        response = self.client.get('/api/v1/reports/sales-summary/?date_from=2024-01-01&date_to=2024-12-31')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['total_sales'], 0)

    def test_sales_summary_bad_date(self):
        response = self.client.get('/api/v1/reports/sales-summary/?date_from=01-01-2024')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
