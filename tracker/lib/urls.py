from django.urls import path

from . import monitoring

urlpatterns = [
    path("heartbeat/", monitoring.heartbeat, name="heartbeat"),
    path("health-check/", monitoring.health_check, name="health_check"),
]
