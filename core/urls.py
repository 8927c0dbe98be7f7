"""
URL configuration for the Manual site backend.

Public reading endpoints live under /api/public/manual/, the management
surface under /api/admin/manual/ and JWT token endpoints under /api/auth/.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('api/public/manual/', include('manual.urls')),  # Public reading surface + tracking
    path('api/admin/manual/', include('manual.admin_urls')),  # Staff-only management
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
