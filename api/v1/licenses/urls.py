"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.v1.licenses import views

app_name = "licenses"

urlpatterns = [
    path("issue", views.IssueLicenseView.as_view(), name="issue-license"),
    path("activate", views.ActivateLicenseView.as_view(), name="activate-license"),
    path("status", views.GetLicenseStatusView.as_view(), name="get-license-status"),
]
