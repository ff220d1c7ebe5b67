import django_filters

from .models import SaleRecord


class SaleFilter(django_filters.FilterSet):
    """Sale list filters: by product and by customer"""
    product = django_filters.UUIDFilter(
        field_name='product_id',
        error_messages={'invalid': "Invalid product selection"},
    )
    customer = django_filters.UUIDFilter(
        field_name='customer_id',
        error_messages={'invalid': "Invalid customer selection"},
    )

    class Meta:
        model = SaleRecord
        fields = ['product', 'customer']
