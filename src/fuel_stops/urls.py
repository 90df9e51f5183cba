from django.urls import path

from fuel_stops import views

urlpatterns = [
    path("api/v1/health", views.health_view, name="health"),
    path("api/v1/fuel-stops", views.fuel_stops_view, name="fuel-stops"),
]
