"""
Recording a sale.

``record_sale`` re-reads the product, refuses the sale when stock is short,
inserts the sale record, decrements the product's stock and finally raises a
low-stock notification when the remaining stock falls below the threshold.

The stock check, sale insert and stock update share one transaction with the
product row locked, and the decrement only applies while enough stock is
left. A failure at any step leaves neither the sale nor the stock change
behind.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import F

from backend.catalog.models import Product
from backend.core import store
from backend.core.store import StoreError
from backend.core.utils import create_audit_log
from backend.parties.models import Customer
from .models import SaleRecord
from .signals import low_stock

logger = logging.getLogger('backend.sales')

RECORD_SALE_FAILED = "Failed to record sale. Please try again."


@dataclass(frozen=True)
class LowStockWarning:
    product_name: str
    remaining_qty: int

    @property
    def message(self):
        return f"{self.product_name} has only {self.remaining_qty} units left in stock."


@dataclass(frozen=True)
class Recorded:
    sale: SaleRecord
    low_stock_warning: Optional[LowStockWarning] = None


@dataclass(frozen=True)
class InsufficientStock:
    product_name: str
    available: int

    @property
    def message(self):
        return f"Only {self.available} units of {self.product_name} are available."


@dataclass(frozen=True)
class Failed:
    reason: str = RECORD_SALE_FAILED


class StockConsumed(Exception):
    """Stock changed under the sale between the check and the decrement"""

    def __init__(self, product):
        super().__init__(f"Stock for {product.name} changed during sale")
        self.product = product


def compute_total_value(quantity_sold, unit_price):
    return Decimal(quantity_sold) * Decimal(unit_price)


def is_low_stock(stock_quantity, threshold=None):
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD
    return stock_quantity < threshold


def record_sale(sale_input, user=None):
    """
    Record a validated sale and take its quantity out of stock.

    ``sale_input`` is the normalized record produced by the ``sale`` schema:
    ``product_id``, ``customer_id`` (may be None), ``quantity_sold`` and
    ``unit_price``. Returns ``Recorded``, ``InsufficientStock`` or ``Failed``;
    store errors never propagate.
    """
    product_id = sale_input['product_id']
    customer_id = sale_input.get('customer_id')
    quantity = sale_input['quantity_sold']
    unit_price = sale_input['unit_price']

    try:
        with transaction.atomic():
            product = store.read_one(Product, product_id, for_update=True)

            if product.stock_quantity < quantity:
                logger.info(
                    f"Sale refused for {product.name}: requested {quantity}, "
                    f"available {product.stock_quantity}"
                )
                return InsufficientStock(product_name=product.name, available=product.stock_quantity)

            customer = store.read_one(Customer, customer_id) if customer_id else None

            sale = store.insert(SaleRecord, {
                'product': product,
                'customer': customer,
                'quantity_sold': quantity,
                'unit_price': unit_price,
                'total_value': compute_total_value(quantity, unit_price),
                'created_by': user if user is not None and user.is_authenticated else None,
            })

            new_stock = product.stock_quantity - quantity
            updated = store.update(
                Product,
                product.pk,
                {'stock_quantity': F('stock_quantity') - quantity},
                conditions={'stock_quantity__gte': quantity},
            )
            if not updated:
                raise StockConsumed(product)
    except StockConsumed as e:
        try:
            available = store.read_one(Product, product_id).stock_quantity
        except StoreError:
            logger.error(f"Failed to re-read stock for product {product_id}", exc_info=True)
            return Failed()
        logger.warning(f"Stock for {e.product.name} was consumed by a concurrent sale; sale rolled back")
        return InsufficientStock(product_name=e.product.name, available=available)
    except (StoreError, DatabaseError) as e:
        logger.error(f"Failed to record sale for product {product_id}: {e}", exc_info=True)
        return Failed()

    create_audit_log(
        action='stock_sale',
        model_name='SaleRecord',
        object_id=sale.id,
        object_name=product.name,
        user=user,
        changes={
            'product_id': str(product.pk),
            'quantity_sold': quantity,
            'unit_price': str(unit_price),
            'total_value': str(sale.total_value),
            'stock_before': product.stock_quantity,
            'stock_after': new_stock,
        }
    )

    warning = None
    if is_low_stock(new_stock):
        warning = LowStockWarning(product_name=product.name, remaining_qty=new_stock)
        logger.warning(f"Low stock: {product.name} has {new_stock} units remaining")
        for receiver, response in low_stock.send_robust(
            sender=Product, product=product, remaining_qty=new_stock, user=user
        ):
            if isinstance(response, Exception):
                logger.error(f"Low stock receiver {receiver} failed: {response}")

    return Recorded(sale=sale, low_stock_warning=warning)
