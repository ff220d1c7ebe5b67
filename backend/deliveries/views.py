import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core import store
from backend.core.store import NotFound, StoreError
from backend.core.utils import create_audit_log
from backend.core.validation import validate
from backend.sales.models import SaleRecord
from .models import Delivery
from .serializers import DeliverySerializer

logger = logging.getLogger('backend.deliveries')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def delivery_list_create(request):
    """List deliveries (newest first) or schedule a delivery for a sale"""
    if request.method == 'GET':
        filters = {}
        delivery_status = request.query_params.get('status', None)
        if delivery_status:
            filters['delivery_status'] = delivery_status
        queryset = store.list_rows(Delivery, filters=filters, order=['-created_at']).select_related(
            'sales_record__product', 'sales_record__customer'
        )
        serializer = DeliverySerializer(queryset, many=True)
        return Response(serializer.data)

    result = validate('delivery', request.data)
    if not result.is_valid:
        return Response(result.errors, status=status.HTTP_400_BAD_REQUEST)

    record = dict(result.data)
    try:
        record['sales_record'] = store.read_one(SaleRecord, record.pop('sales_record_id'))
        delivery = store.insert(Delivery, record)
    except NotFound:
        return Response(
            {'sales_record_id': 'Please select a sale record'},
            status=status.HTTP_400_BAD_REQUEST
        )
    except StoreError as e:
        logger.error(f"Failed to add delivery: {e}", exc_info=True)
        return Response(
            {'error': 'Failed to add delivery. Please try again.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    create_audit_log(
        request=request,
        action='create',
        model_name='Delivery',
        object_id=delivery.id,
        object_name=delivery.sales_record.product.name,
        changes={'delivery_status': delivery.delivery_status, 'tracking_number': delivery.tracking_number},
    )
    return Response(DeliverySerializer(delivery).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def delivery_detail(request, pk):
    """Retrieve a delivery"""
    try:
        delivery = store.read_one(Delivery, pk)
    except NotFound:
        return Response({'error': 'Delivery not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(DeliverySerializer(delivery).data)
