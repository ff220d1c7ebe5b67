import uuid

from django.db import models
from django.utils import timezone

from backend.catalog.models import Product
from backend.core.models import User
from backend.parties.models import Customer


class SaleRecord(models.Model):
    """A recorded sale of one product, optionally to a known customer"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='sales')
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales')
    quantity_sold = models.IntegerField()
    unit_price = models.DecimalField(max_digits=8, decimal_places=2)
    # Fixed at creation time; never recomputed from later price changes
    total_value = models.DecimalField(max_digits=14, decimal_places=2)
    sale_date = models.DateTimeField(default=timezone.now, db_index=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales')

    def __str__(self):
        return f"Sale {self.id.hex[:8]} - {self.quantity_sold} x {self.product.name}"

    class Meta:
        db_table = 'sales_records'
        ordering = ['-sale_date']
