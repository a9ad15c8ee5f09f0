"""
Root URL map: the admin site, the care API, and its OpenAPI docs at
``/swagger/`` and ``/redoc/``.  Uploaded media is served by Django only
when DEBUG is on.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

api_info = openapi.Info(
    title="Healthdesk API",
    default_version='v1',
    description="Hospital discovery, doctor rosters and token-based appointment booking.",
)

docs = get_schema_view(api_info, public=True, permission_classes=(permissions.AllowAny,))

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('care.routers')),
    path('swagger/', docs.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', docs.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]

urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
