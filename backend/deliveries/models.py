import uuid

from django.db import models

from backend.sales.models import SaleRecord


class Delivery(models.Model):
    """Delivery of a recorded sale"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('in_transit', 'In Transit'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sales_record = models.ForeignKey(SaleRecord, on_delete=models.PROTECT, related_name='deliveries')
    delivery_address = models.TextField()
    delivery_status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    tracking_number = models.CharField(max_length=100, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Delivery {self.id.hex[:8]} ({self.get_delivery_status_display()})"

    class Meta:
        db_table = 'deliveries'
        verbose_name_plural = 'deliveries'
        ordering = ['-created_at']
