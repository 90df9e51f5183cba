from django.apps import AppConfig


class FuelStopsConfig(AppConfig):
    name = "fuel_stops"
    verbose_name = "Fuel stops"
