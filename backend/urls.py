"""
Root URL Configuration

- admin/: Django admin (Jazzmin)
- api/token/: JWT obtain and refresh
- api/assessments/: Assessment engine API

Author: DSP Development Team
Version: 1.0.0
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/assessments/", include("assessments.urls")),
]
