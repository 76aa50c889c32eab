from django.contrib import admin

from trip_planner.models import ChargingStation


@admin.register(ChargingStation)
class ChargingStationAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "city",
        "state",
        "connector_type",
        "latitude",
        "longitude",
    )
    list_filter = ("state", "connector_type")
    search_fields = ("name", "address", "city", "state")
    ordering = ("state", "city", "name")
