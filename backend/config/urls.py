"""
URL configuration for backend project.

Every app mounts its endpoints under the versioned `api/v1/` prefix.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Business Manager Admin Panel"
admin.site.site_title = "Business Manager Admin Portal"
admin.site.index_title = "Welcome to Business Manager Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.catalog.urls')),
    path('api/v1/', include('backend.parties.urls')),
    path('api/v1/', include('backend.sales.urls')),
    path('api/v1/', include('backend.deliveries.urls')),
    path('api/v1/', include('backend.reports.urls')),
]
