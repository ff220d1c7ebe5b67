"""
Test suite for Deliveries module
Tests: scheduling deliveries against sales, status validation, status filter
"""
from django.test import TestCase
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Delivery


class DeliveryAPITests(TestCase):
    """Delivery endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.sale = TestDataFactory.create_sale(quantity_sold=2)

    def test_create_delivery(self):
        response = self.client.post('/api/v1/deliveries/', {
            'sales_record_id': str(self.sale.id),
            'delivery_address': '42 Residency Road',
            'delivery_status': 'pending',
            'tracking_number': 'TRK-1001',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['delivery_status_display'], 'Pending')
        self.assertEqual(response.data['quantity_sold'], 2)
        self.assertEqual(Delivery.objects.get().sales_record, self.sale)

    def test_invalid_status(self):
        response = self.client.post('/api/v1/deliveries/', {
            'sales_record_id': str(self.sale.id),
            'delivery_address': '42 Residency Road',
            'delivery_status': 'lost',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'delivery_status': 'Invalid delivery status'})

    def test_unknown_sale(self):
        response = self.client.post('/api/v1/deliveries/', {
            'sales_record_id': '00000000-0000-0000-0000-000000000000',
            'delivery_address': '42 Residency Road',
            'delivery_status': 'pending',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'sales_record_id': 'Please select a sale record'})
        self.assertEqual(Delivery.objects.count(), 0)

    def test_filter_by_status(self):
        TestDataFactory.create_delivery(sales_record=self.sale, delivery_status='delivered')
        TestDataFactory.create_delivery(delivery_status='pending')

        response = self.client.get('/api/v1/deliveries/', {'status': 'delivered'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['delivery_status'], 'delivered')
