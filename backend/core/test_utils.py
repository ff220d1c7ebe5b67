"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.catalog.models import Product
from backend.parties.models import Customer
from backend.sales.models import SaleRecord
from backend.deliveries.models import Delivery
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='Testpass123!', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_product(name=None, sku=None, price=None, stock_quantity=100, category=None):
        """Create a test product"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if not sku:
            sku = f'SKU-{TestDataFactory.random_string(8).upper()}'
        if price is None:
            price = Decimal('25.00')
        return Product.objects.create(
            name=name,
            sku=sku,
            price=price,
            stock_quantity=stock_quantity,
            category=category
        )

    @staticmethod
    def create_customer(name=None, phone=None, email=None):
        """Create a test customer"""
        if not name:
            name = f"Customer {''.join(random.choices(string.ascii_letters, k=6))}"
        if not phone:
            phone = f'+91 9{random.randint(100000000, 999999999)}'
        if not email:
            email = f"{name.lower().replace(' ', '.')}@test.com"
        return Customer.objects.create(
            name=name,
            phone=phone,
            email=email
        )

    @staticmethod
    def create_sale(product=None, customer=None, quantity_sold=1, unit_price=None, user=None):
        """Create a sale record directly, without touching stock"""
        if not product:
            product = TestDataFactory.create_product()
        if unit_price is None:
            unit_price = product.price
        return SaleRecord.objects.create(
            product=product,
            customer=customer,
            quantity_sold=quantity_sold,
            unit_price=unit_price,
            total_value=Decimal(quantity_sold) * unit_price,
            created_by=user
        )

    @staticmethod
    def create_delivery(sales_record=None, delivery_status='pending', address=None, tracking_number=None):
        """Create a test delivery"""
        if not sales_record:
            sales_record = TestDataFactory.create_sale()
        return Delivery.objects.create(
            sales_record=sales_record,
            delivery_address=address or '12 Market Road, Pune',
            delivery_status=delivery_status,
            tracking_number=tracking_number
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
