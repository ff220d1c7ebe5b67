from django.urls import path
from .views import (
    CustomTokenRefreshView, sign_up, sign_in, user_me,
    audit_log_list, audit_log_detail
)

urlpatterns = [
    # Auth endpoints
    path('auth/sign-up/', sign_up, name='sign-up'),
    path('auth/sign-in/', sign_in, name='sign-in'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),
]
