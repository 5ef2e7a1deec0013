# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Built-in fallback catalog.

Two well-known near-Earth asteroids in the flattened approach-row
layout, so the tools still have something to draw when no catalog file
is available or a real catalog returns too few upcoming approaches.
"""
import logging
import time
from datetime import datetime, timezone

from neodeflect.domain.neo import CelestialBody, parse_approach_row, select_upcoming
from neodeflect.ports import NeoCatalogSource


_log = logging.getLogger(__name__)


_EROS_APPROACH_MS = datetime(2025, 11, 30, 2, 18, tzinfo=timezone.utc).timestamp() * 1000.0
_ALINDA_APPROACH_MS = datetime(2027, 1, 25, 21, 50, tzinfo=timezone.utc).timestamp() * 1000.0

SAMPLE_ROWS: list[dict] = [
    {
        "id": "2000433",
        "neo_reference_id": "2000433",
        "name": "433 Eros",
        "hm": 10.39,
        "dia_km": 35.9,
        "hazardous": False,
        "approach": {
            "date": "2025-11-30T02:18:00Z",
            "epoch": _EROS_APPROACH_MS,
            "miss_km": 5.9487e7,
            "miss_au": 0.3976,
            "vel_kps": 3.73,
        },
        "orbital_data": {
            "eccentricity": ".2228359407071628",
            "semi_major_axis": "1.458120998474684",
            "inclination": "10.82846651399785",
            "ascending_node_longitude": "304.2701025753316",
            "perihelion_argument": "178.9297536744151",
            "epoch_osculation": "2461000.5",
            "mean_anomaly": "310.5543277370992",
            "mean_motion": ".5597752949285997",
            "orbit_class": {"orbit_class_type": "AMO"},
        },
    },
    {
        "id": "2000887",
        "neo_reference_id": "2000887",
        "name": "887 Alinda",
        "hm": 13.81,
        "dia_km": 7.44,
        "hazardous": False,
        "approach": {
            "date": "2027-01-25T21:50:00Z",
            "epoch": _ALINDA_APPROACH_MS,
            "miss_km": 2.488e7,
            "miss_au": 0.1663,
            "vel_kps": 11.27,
        },
        "orbital_data": {
            "eccentricity": ".5711699794580067",
            "semi_major_axis": "2.473628777430923",
            "inclination": "9.400059832996321",
            "ascending_node_longitude": "110.4058757991049",
            "perihelion_argument": "350.5345010543012",
            "epoch_osculation": "2461000.5",
            "mean_anomaly": "81.54059345329632",
            "mean_motion": ".2533391370191288",
            "orbit_class": {"orbit_class_type": "AMO"},
        },
    },
]


def _now_ms() -> float:
    return time.time() * 1000.0


class SampleCatalog(NeoCatalogSource):
    """Fallback catalog of 433 Eros and 887 Alinda."""

    def load_bodies(self) -> list[CelestialBody]:
        return [parse_approach_row(row) for row in SAMPLE_ROWS]

    def upcoming(self, now_ms: float | None = None, limit: int | None = None) -> list[CelestialBody]:
        """Sample bodies whose approach is still ahead, soonest first."""
        if now_ms is None:
            now_ms = _now_ms()
        return select_upcoming(self.load_bodies(), now_ms, limit)

    def pad(
        self,
        bodies: list[CelestialBody],
        limit: int,
        now_ms: float | None = None,
        min_count: int = 5,
    ) -> tuple[list[CelestialBody], bool]:
        """
        Top up a short list with upcoming sample bodies.

        Padding happens only when fewer than min(min_count, limit) bodies
        were found. Sample bodies already present (same id) are not added
        twice.

        Returns:
            (bodies, used_fallback)
        """
        if len(bodies) >= min(min_count, limit):
            return bodies, False
        seen = {b.id for b in bodies}
        extra = [b for b in self.upcoming(now_ms, limit - len(bodies)) if b.id not in seen]
        if not extra:
            return bodies, False
        _log.warning(
            "Only %d upcoming approaches found, padding with %d sample bodies",
            len(bodies), len(extra),
        )
        return (bodies + extra)[:limit], True
