from __future__ import annotations

from pathlib import Path
from typing import Any

import polars as pl
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from trip_planner.models import ChargingStation

DC_FAST_LABEL = "DC Fast Charger"
AC_LABEL = "AC Charger"


class Command(BaseCommand):
    help = "Import and normalize EV charging stations from a CSV using Polars."

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument(
            "--csv-path",
            type=str,
            default=str(settings.PROJECT_ROOT / "ev_stations.csv"),
            help="Path to the source charging stations CSV",
        )
        parser.add_argument(
            "--replace",
            action="store_true",
            help="Delete existing stations before importing",
        )

    def handle(self, *_: Any, **options: Any) -> None:
        csv_path = Path(options["csv_path"])
        if not csv_path.exists():
            raise CommandError(f"CSV file does not exist: {csv_path}")

        frame = self._load_and_transform(csv_path)
        records = frame.to_dicts()

        if options["replace"]:
            ChargingStation.objects.all().delete()

        existing = {
            station.canonical_key: station
            for station in ChargingStation.objects.filter(
                canonical_key__in=[row["canonical_key"] for row in records]
            )
        }

        to_create: list[ChargingStation] = []
        to_update: list[ChargingStation] = []

        for row in records:
            station = existing.get(row["canonical_key"])
            if station is None:
                to_create.append(ChargingStation(**row))
                continue

            station.name = row["name"]
            station.address = row["address"]
            station.city = row["city"]
            station.state = row["state"]
            station.connector_type = row["connector_type"]
            to_update.append(station)

        if to_create:
            ChargingStation.objects.bulk_create(to_create, batch_size=1000)
        if to_update:
            ChargingStation.objects.bulk_update(
                to_update,
                ["name", "address", "city", "state", "connector_type"],
                batch_size=1000,
            )

        self.stdout.write(
            self.style.SUCCESS(
                "Imported charging stations: "
                + (
                    f"{len(records)} rows normalized, "
                    f"{len(to_create)} created, {len(to_update)} updated"
                )
            )
        )

    @staticmethod
    def _load_and_transform(csv_path: Path) -> pl.DataFrame:
        frame = pl.read_csv(csv_path, infer_schema_length=5000)
        # The public India dataset spells the column "lattitude".
        if "lattitude" in frame.columns and "latitude" not in frame.columns:
            frame = frame.rename({"lattitude": "latitude"})
        if "type" not in frame.columns:
            frame = frame.with_columns(pl.lit(None, dtype=pl.Utf8).alias("type"))

        required_columns = {"name", "state", "city", "address", "latitude", "longitude"}
        missing_columns = required_columns.difference(frame.columns)
        if missing_columns:
            raise CommandError(f"Missing expected columns: {sorted(missing_columns)}")

        def text(column: str) -> pl.Expr:
            return pl.col(column).cast(pl.Utf8, strict=False).str.strip_chars().fill_null("")

        normalized = (
            frame.select(
                text("name").alias("name"),
                text("address").alias("address"),
                text("city").alias("city"),
                text("state").alias("state"),
                pl.col("latitude").cast(pl.Float64, strict=False).alias("latitude"),
                pl.col("longitude").cast(pl.Float64, strict=False).alias("longitude"),
                text("type").alias("raw_type"),
            )
            .filter(
                pl.col("latitude").is_not_null()
                & pl.col("longitude").is_not_null()
                & pl.col("latitude").is_between(-90.0, 90.0)
                & pl.col("longitude").is_between(-180.0, 180.0)
                & (pl.col("name").str.len_chars() > 0)
            )
            .with_columns(
                _connector_type_expr().alias("connector_type"),
                pl.concat_str(
                    [
                        pl.col("name").str.to_uppercase(),
                        pl.col("address").str.to_uppercase(),
                        pl.col("latitude").round(5).cast(pl.Utf8),
                        pl.col("longitude").round(5).cast(pl.Utf8),
                    ],
                    separator="|",
                ).alias("canonical_key"),
            )
            .drop("raw_type")
            .unique(subset=["canonical_key"], keep="first", maintain_order=True)
        )

        return normalized


def _connector_type_expr() -> pl.Expr:
    """Connector label inferred from the station name, then the raw type column.

    Numeric type values (charger power) do not distinguish AC from DC and are
    ignored.
    """
    lower_name = pl.col("name").str.to_lowercase()
    raw_type = pl.col("raw_type")
    raw_is_label = (raw_type.str.len_chars() > 0) & raw_type.cast(
        pl.Float64, strict=False
    ).is_null()

    return (
        pl.when(lower_name.str.contains("dc|fast|ccs|chademo"))
        .then(pl.lit(DC_FAST_LABEL))
        .when(lower_name.str.contains("ac ", literal=True))
        .then(pl.lit(AC_LABEL))
        .when(raw_is_label)
        .then(raw_type)
        .otherwise(pl.lit(AC_LABEL))
    )
