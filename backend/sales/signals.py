"""
Sale side-channel notifications
"""
from django.dispatch import Signal, receiver

from backend.core.utils import create_audit_log

# Sent with ``product`` and ``remaining_qty`` after a sale leaves a product
# below the low-stock threshold
low_stock = Signal()


@receiver(low_stock)
def audit_low_stock(sender, product, remaining_qty, user=None, **kwargs):
    create_audit_log(
        action='low_stock',
        model_name='Product',
        object_id=product.id,
        object_name=product.name,
        user=user,
        changes={'remaining_qty': remaining_qty},
    )
