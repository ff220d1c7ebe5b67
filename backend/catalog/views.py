import logging

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.core import store
from backend.core.store import NotFound, StoreError
from backend.core.utils import create_audit_log
from backend.core.validation import validate
from .filters import ProductFilter
from .models import Product
from .serializers import ProductSerializer

logger = logging.getLogger('backend.catalog')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List all products (newest first) or create a new product"""
    if request.method == 'GET':
        queryset = store.list_rows(Product, order=['-created_at'])
        filterset = ProductFilter(request.query_params, queryset=queryset)
        serializer = ProductSerializer(filterset.qs, many=True)
        return Response(serializer.data)

    result = validate('product', request.data)
    if not result.is_valid:
        return Response(result.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        product = store.insert(Product, result.data)
    except StoreError as e:
        logger.error(f"Failed to add product {result.data.get('name')}: {e}", exc_info=True)
        return Response(
            {'error': 'Failed to add product. Please try again.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    create_audit_log(
        request=request,
        action='create',
        model_name='Product',
        object_id=product.id,
        object_name=product.name,
        changes={
            'sku': product.sku,
            'price': str(product.price),
            'stock_quantity': product.stock_quantity,
        }
    )
    return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def product_detail(request, pk):
    """Retrieve a product"""
    try:
        product = store.read_one(Product, pk)
    except NotFound:
        return Response({'error': 'Product not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(ProductSerializer(product).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def low_stock_products(request):
    """Products whose stock is below the low-stock threshold, lowest first"""
    threshold = settings.LOW_STOCK_THRESHOLD
    queryset = store.list_rows(
        Product,
        filters={'stock_quantity__lt': threshold},
        order=['stock_quantity', 'name']
    )
    return Response({
        'threshold': threshold,
        'count': queryset.count(),
        'products': ProductSerializer(queryset, many=True).data,
    })
