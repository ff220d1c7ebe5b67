from datetime import datetime, timedelta
from decimal import Decimal

from django.conf import settings
from django.db.models import Sum, Count, DecimalField
from django.db.models.functions import TruncDate
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.catalog.models import Product
from backend.deliveries.models import Delivery
from backend.parties.models import Customer
from backend.sales.models import SaleRecord


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Headline counts for the dashboard"""
    total_revenue = SaleRecord.objects.aggregate(
        total=Sum('total_value', output_field=DecimalField())
    )['total'] or Decimal('0.00')

    threshold = settings.LOW_STOCK_THRESHOLD
    return Response({
        'total_products': Product.objects.count(),
        'total_customers': Customer.objects.count(),
        'total_sales': SaleRecord.objects.count(),
        'pending_deliveries': Delivery.objects.filter(delivery_status='pending').count(),
        'total_revenue': str(total_revenue.quantize(Decimal('0.01'))),
        'low_stock_products': Product.objects.filter(stock_quantity__lt=threshold).count(),
        'low_stock_threshold': threshold,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sales_summary(request):
    """Sales summary for a date range (defaults to the last 30 days)"""
    try:
        date_from = request.query_params.get('date_from', None)
        date_to = request.query_params.get('date_to', None)
        date_from = datetime.strptime(date_from, '%Y-%m-%d').date() if date_from else (timezone.now() - timedelta(days=30)).date()
        date_to = datetime.strptime(date_to, '%Y-%m-%d').date() if date_to else timezone.now().date()
    except ValueError:
        return Response(
            {'error': 'Dates must use the YYYY-MM-DD format'},
            status=status.HTTP_400_BAD_REQUEST
        )

    sales = SaleRecord.objects.filter(
        sale_date__date__gte=date_from,
        sale_date__date__lte=date_to
    )

    totals = sales.aggregate(
        revenue=Sum('total_value', output_field=DecimalField()),
        items_sold=Sum('quantity_sold'),
        count=Count('id')
    )

    daily_sales = sales.annotate(
        date=TruncDate('sale_date')
    ).values('date').annotate(
        total=Sum('total_value', output_field=DecimalField()),
        count=Count('id')
    ).order_by('date')

    top_products = sales.values('product_id', 'product__name').annotate(
        quantity=Sum('quantity_sold'),
        revenue=Sum('total_value', output_field=DecimalField())
    ).order_by('-revenue')[:5]

    return Response({
        'period': {
            'from': date_from.isoformat(),
            'to': date_to.isoformat()
        },
        'summary': {
            'total_revenue': str(totals['revenue'] or Decimal('0.00')),
            'total_sales': totals['count'],
            'total_items_sold': totals['items_sold'] or 0,
        },
        'daily_breakdown': [
            {'date': row['date'].isoformat(), 'total': str(row['total']), 'count': row['count']}
            for row in daily_sales
        ],
        'top_products': [
            {
                'product_id': str(row['product_id']),
                'product_name': row['product__name'],
                'quantity': row['quantity'],
                'revenue': str(row['revenue']),
            }
            for row in top_products
        ],
    })
