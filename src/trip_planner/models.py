from __future__ import annotations

from django.db import models

from trip_planner.services.types import GeoPoint, Station, is_dc_fast_connector


class ChargingStation(models.Model):
    objects = models.Manager["ChargingStation"]()

    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    latitude = models.FloatField()
    longitude = models.FloatField()
    connector_type = models.CharField(max_length=100, default="AC Charger")
    canonical_key = models.CharField(max_length=700, unique=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("state", "city", "name")
        indexes = (
            models.Index(fields=["state"], name="station_state_idx"),
            models.Index(fields=["latitude", "longitude"], name="station_lat_lon_idx"),
        )

    @property
    def is_dc_fast(self) -> bool:
        return is_dc_fast_connector(self.connector_type)

    def to_station(self) -> Station:
        return Station(
            station_id=str(self.pk),
            name=self.name,
            address=self.address,
            city=self.city,
            state=self.state,
            point=GeoPoint(latitude=self.latitude, longitude=self.longitude),
            connector_type=self.connector_type,
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.city}, {self.state})"
