"""
Django management command to list products running low on stock
"""
from django.conf import settings
from django.core.management.base import BaseCommand

from backend.catalog.models import Product


class Command(BaseCommand):
    help = 'List products whose stock quantity is below the low-stock threshold'

    def add_arguments(self, parser):
        parser.add_argument(
            '--threshold',
            type=int,
            default=None,
            help=f'Stock level to compare against (default: LOW_STOCK_THRESHOLD={settings.LOW_STOCK_THRESHOLD})',
        )

    def handle(self, *args, **options):
        threshold = options.get('threshold')
        if threshold is None:
            threshold = settings.LOW_STOCK_THRESHOLD

        products = Product.objects.filter(stock_quantity__lt=threshold).order_by('stock_quantity', 'name')

        if not products.exists():
            self.stdout.write(self.style.SUCCESS(f"No products below {threshold} units."))
            return

        self.stdout.write(self.style.WARNING(
            f"{products.count()} product(s) have low stock (less than {threshold} units):"
        ))
        for product in products:
            self.stdout.write(f"  - {product.name} - {product.stock_quantity} units remaining")
