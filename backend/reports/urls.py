from django.urls import path
from . import views

urlpatterns = [
    path('reports/dashboard/', views.dashboard, name='dashboard'),
    path('reports/sales-summary/', views.sales_summary, name='sales-summary'),
]
