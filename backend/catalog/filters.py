import django_filters
from django.conf import settings
from django.db.models import Q

from .models import Product


class ProductFilter(django_filters.FilterSet):
    """Product list filters: free-text search, category and low stock"""
    search = django_filters.CharFilter(method='filter_search')
    category = django_filters.CharFilter(field_name='category', lookup_expr='iexact')
    low_stock = django_filters.BooleanFilter(method='filter_low_stock')

    class Meta:
        model = Product
        fields = ['search', 'category', 'low_stock']

    def filter_search(self, queryset, name, value):
        if value:
            return queryset.filter(
                Q(name__icontains=value) |
                Q(sku__icontains=value) |
                Q(category__icontains=value)
            )
        return queryset

    def filter_low_stock(self, queryset, name, value):
        """If true, only products below the low-stock threshold"""
        if value:
            return queryset.filter(stock_quantity__lt=settings.LOW_STOCK_THRESHOLD)
        return queryset
