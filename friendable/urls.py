"""
URL configuration for the Friendable project.
"""
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from .admin import friendable_admin_site

# Import admin registrations to ensure they're loaded
from . import admin_registrations  # noqa: F401

urlpatterns = [
    path('admin/', friendable_admin_site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/schema/swagger-ui/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # App URLs
    path('api/users/', include('users.urls')),
    path('api/friends/', include('friends.urls')),
]
