"""
URL configuration for admin API endpoints.
"""

from django.urls import path

from api.v1.admin import views

app_name = "admin-api"

urlpatterns = [
    path(
        "licenses",
        views.IssueLicenseView.as_view(),
        name="issue-license",
    ),
]
