"""
Test suite for Parties module
Tests: customer creation, validation errors, search
"""
from django.test import TestCase
from rest_framework import status

from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Customer


class CustomerAPITests(TestCase):
    """Customer endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_customer(self):
        response = self.client.post('/api/v1/customers/', {
            'name': "Anne O'Hara",
            'email': '',
            'phone': '+44 20 7946 0958',
            'address': '1 High Street',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        customer = Customer.objects.get()
        self.assertEqual(customer.name, "Anne O'Hara")
        self.assertIsNone(customer.email)

    def test_create_customer_invalid(self):
        response = self.client.post('/api/v1/customers/', {
            'name': 'Anne 2',
            'email': 'anne-at-example',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {
            'name': 'Name can only contain letters, spaces, hyphens, and apostrophes',
            'email': 'Invalid email format',
        })
        self.assertEqual(Customer.objects.count(), 0)

    def test_search_customers(self):
        TestDataFactory.create_customer(name='Ravi Kumar')
        TestDataFactory.create_customer(name='Meera Shah')

        response = self.client.get('/api/v1/customers/', {'search': 'ravi'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['name'] for c in response.data], ['Ravi Kumar'])

    def test_customer_detail_not_found(self):
        response = self.client.get('/api/v1/customers/00000000-0000-0000-0000-000000000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
