from django.urls import path

from trip_planner import views

urlpatterns = [
    path("api/v1/health", views.health_view, name="health"),
    path("api/v1/trip-plan", views.trip_plan_view, name="trip-plan"),
    path("api/v1/trips/<str:client_id>", views.trip_detail_view, name="trip-detail"),
    path("api/v1/geocode", views.geocode_view, name="geocode"),
    path("api/v1/vehicles", views.vehicle_models_view, name="vehicle-models"),
    path("api/v1/presence", views.presence_view, name="presence"),
    path("api/v1/stations/crowd", views.station_crowd_view, name="station-crowd"),
]
