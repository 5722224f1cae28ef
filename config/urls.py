from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),

    # Authentication app (login, logout, JWT tokens)
    path("auth/", include("authentication.urls", namespace="auth")),

    # Domain API
    path("", include("prakerin.urls")),
]
