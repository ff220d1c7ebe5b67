import logging

from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core import store
from backend.core.store import NotFound, StoreError
from backend.core.utils import create_audit_log
from backend.core.validation import validate
from .models import Customer
from .serializers import CustomerSerializer

logger = logging.getLogger('backend.parties')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def customer_list_create(request):
    """List all customers (newest first) or create a new customer"""
    if request.method == 'GET':
        queryset = store.list_rows(Customer, order=['-created_at'])
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(email__icontains=search) |
                Q(phone__icontains=search)
            )
        serializer = CustomerSerializer(queryset, many=True)
        return Response(serializer.data)

    result = validate('customer', request.data)
    if not result.is_valid:
        return Response(result.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        customer = store.insert(Customer, result.data)
    except StoreError as e:
        logger.error(f"Failed to add customer {result.data.get('name')}: {e}", exc_info=True)
        return Response(
            {'error': 'Failed to add customer. Please try again.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    create_audit_log(
        request=request,
        action='create',
        model_name='Customer',
        object_id=customer.id,
        object_name=customer.name,
    )
    return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def customer_detail(request, pk):
    """Retrieve a customer"""
    try:
        customer = store.read_one(Customer, pk)
    except NotFound:
        return Response({'error': 'Customer not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(CustomerSerializer(customer).data)
