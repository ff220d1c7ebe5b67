import logging

from django.urls import reverse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core import store
from backend.core.store import NotFound
from backend.core.validation import first_errors, validate
from .filters import SaleFilter
from .models import SaleRecord
from .serializers import SaleRecordSerializer
from .services import Failed, InsufficientStock, record_sale

logger = logging.getLogger('backend.sales')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sale_list_create(request):
    """List sales (most recent first) or record a new sale"""
    if request.method == 'GET':
        queryset = store.list_rows(SaleRecord, order=['-sale_date']).select_related('product', 'customer', 'created_by')
        filterset = SaleFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response(first_errors(filterset.errors), status=status.HTTP_400_BAD_REQUEST)
        serializer = SaleRecordSerializer(filterset.qs, many=True)
        return Response(serializer.data)

    result = validate('sale', request.data)
    if not result.is_valid:
        return Response(result.errors, status=status.HTTP_400_BAD_REQUEST)

    outcome = record_sale(result.data, user=request.user)

    if isinstance(outcome, InsufficientStock):
        return Response({
            'error': 'Insufficient stock',
            'message': outcome.message,
            'product_name': outcome.product_name,
            'available': outcome.available,
        }, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(outcome, Failed):
        return Response({'error': outcome.reason}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Sale {outcome.sale.id} recorded by {request.user}: {outcome.sale.quantity_sold} x {outcome.sale.product.name}")
    warning = outcome.low_stock_warning
    return Response({
        'message': 'Sale recorded successfully!',
        'sale': SaleRecordSerializer(outcome.sale).data,
        'low_stock_warning': {
            'product_name': warning.product_name,
            'remaining_qty': warning.remaining_qty,
            'message': warning.message,
        } if warning else None,
        'next': reverse('sale-list-create'),
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sale_detail(request, pk):
    """Retrieve a sale"""
    try:
        sale = store.read_one(SaleRecord, pk)
    except NotFound:
        return Response({'error': 'Sale not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(SaleRecordSerializer(sale).data)
