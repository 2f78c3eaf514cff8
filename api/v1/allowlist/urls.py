"""
URL configuration for allow-list API endpoints.
"""

from django.urls import path

from api.v1.allowlist import views

app_name = "allowlist"

urlpatterns = [
    path("check", views.CheckUserIdentityView.as_view(), name="check-user-id"),
]
