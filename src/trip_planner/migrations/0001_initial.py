from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ChargingStation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("address", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(blank=True, default="", max_length=100)),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("latitude", models.FloatField()),
                ("longitude", models.FloatField()),
                ("connector_type", models.CharField(default="AC Charger", max_length=100)),
                ("canonical_key", models.CharField(max_length=700, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ("state", "city", "name"),
                "indexes": [
                    models.Index(fields=["state"], name="station_state_idx"),
                    models.Index(fields=["latitude", "longitude"], name="station_lat_lon_idx"),
                ],
            },
        ),
    ]
