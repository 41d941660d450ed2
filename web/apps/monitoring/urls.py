from django.urls import path

from .api import health_view

app_name = "monitoring"

urlpatterns = [
    # liveness plus commerce-credential readiness
    path("health/", health_view, name="health"),
]
