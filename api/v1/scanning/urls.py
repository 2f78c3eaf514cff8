"""
URL configuration for content scanning API endpoints.
"""

from django.urls import path

from api.v1.scanning import views

app_name = "scanning"

urlpatterns = [
    path("analyze-file", views.AnalyzeFileView.as_view(), name="analyze-file"),
]
