from django.apps import AppConfig


class TripPlannerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "trip_planner"
