from django.urls import path
from .views import sale_list_create, sale_detail

urlpatterns = [
    # Sale endpoints
    path('sales/', sale_list_create, name='sale-list-create'),
    path('sales/<uuid:pk>/', sale_detail, name='sale-detail'),
]
