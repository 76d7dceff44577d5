"""URL configuration for the coworking booking project.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
JWT token endpoints, the reservations API and the OpenAPI schema.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/reservations/', include('apps.reservations.urls')),
    path('api/v1/schema/', SpectacularAPIView.as_view(), name='schema'),
]
