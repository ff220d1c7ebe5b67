from django.urls import path
from .views import delivery_list_create, delivery_detail

urlpatterns = [
    # Delivery endpoints
    path('deliveries/', delivery_list_create, name='delivery-list-create'),
    path('deliveries/<uuid:pk>/', delivery_detail, name='delivery-detail'),
]
