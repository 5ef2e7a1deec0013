# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Near-Earth object records.

Immutable element sets, close-approach events and bodies, plus parsing
of NASA NeoWs JSON records (browse/feed objects or flattened approach
rows) into those domain objects. Fetching the records is not handled
here. Unparsable or missing numbers become None and mark the orbit as
unknown instead of raising.
No external dependencies — only stdlib math/dataclasses.
"""
import math
from dataclasses import dataclass
from typing import Any

from neodeflect.domain.impact_energy import DEFAULT_DENSITY_KG_M3, mass_from_diameter


def _finite(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def _block(value: Any) -> dict | None:
    """A nested JSON object, or None when the value is missing or not an object."""
    return value if isinstance(value, dict) else None


def to_float(value: Any) -> float | None:
    """
    Parse a NeoWs numeric field.

    NeoWs serializes most numbers as strings (".2228359407071628").
    Returns None for missing, empty or unparsable values and for
    non-finite results.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


@dataclass(frozen=True)
class OrbitalElementSet:
    """Osculating heliocentric elements; any field may be missing."""
    semi_major_axis_au: float | None
    eccentricity: float | None
    inclination_deg: float | None = None
    ascending_node_longitude_deg: float | None = None
    perihelion_argument_deg: float | None = None
    mean_anomaly_deg: float | None = None
    mean_motion_deg_per_day: float | None = None
    epoch_osculation_jd: float | None = None

    @property
    def has_shape(self) -> bool:
        """True when a and e are usable; False means "orbit unknown"."""
        return (
            _finite(self.semi_major_axis_au)
            and _finite(self.eccentricity)
            and self.semi_major_axis_au > 0
        )

    @property
    def has_phase(self) -> bool:
        """True when the body can also be placed at a given epoch."""
        return (
            self.has_shape
            and _finite(self.mean_anomaly_deg)
            and _finite(self.mean_motion_deg_per_day)
            and _finite(self.epoch_osculation_jd)
        )

    def angles_deg(self) -> tuple[float, float, float]:
        """(i, Ω, ω) in degrees, missing angles read as 0."""
        return (
            self.inclination_deg if _finite(self.inclination_deg) else 0.0,
            self.ascending_node_longitude_deg if _finite(self.ascending_node_longitude_deg) else 0.0,
            self.perihelion_argument_deg if _finite(self.perihelion_argument_deg) else 0.0,
        )


@dataclass(frozen=True)
class ApproachEvent:
    """Earth close approach as reported upstream (not derived here)."""
    epoch_ms: float
    date: str
    miss_km: float | None
    miss_au: float | None
    velocity_kps: float | None


@dataclass(frozen=True)
class CelestialBody:
    """A near-Earth object with optional orbit and physical data."""
    id: str
    name: str
    elements: OrbitalElementSet | None = None
    diameter_km: float | None = None
    mass_kg: float | None = None
    hazardous: bool = False
    approach: ApproachEvent | None = None
    absolute_magnitude: float | None = None
    orbit_class: str | None = None

    @property
    def orbit_known(self) -> bool:
        return self.elements is not None and self.elements.has_shape

    def resolved_mass_kg(self, density_kg_m3: float = DEFAULT_DENSITY_KG_M3) -> float | None:
        """
        Supplied mass, or sphere-volume mass derived from the diameter.

        Returns None when neither is available.
        """
        if _finite(self.mass_kg):
            return self.mass_kg
        if not _finite(self.diameter_km):
            return None
        return mass_from_diameter(self.diameter_km, density_kg_m3)


def parse_orbital_data(orbital_data: dict | None) -> OrbitalElementSet | None:
    """
    Parse a NeoWs ``orbital_data`` block into an OrbitalElementSet.

    Returns None when the block is absent or not an object. Individual
    fields that fail to parse are kept as None.
    """
    orbital_data = _block(orbital_data)
    if not orbital_data:
        return None
    return OrbitalElementSet(
        semi_major_axis_au=to_float(orbital_data.get("semi_major_axis")),
        eccentricity=to_float(orbital_data.get("eccentricity")),
        inclination_deg=to_float(orbital_data.get("inclination")),
        ascending_node_longitude_deg=to_float(orbital_data.get("ascending_node_longitude")),
        perihelion_argument_deg=to_float(orbital_data.get("perihelion_argument")),
        mean_anomaly_deg=to_float(orbital_data.get("mean_anomaly")),
        mean_motion_deg_per_day=to_float(orbital_data.get("mean_motion")),
        epoch_osculation_jd=to_float(orbital_data.get("epoch_osculation")),
    )


def _orbit_class_name(orbital_data: dict | None) -> str | None:
    orbital_data = _block(orbital_data)
    if not orbital_data:
        return None
    orbit_class = orbital_data.get("orbit_class")
    if isinstance(orbit_class, dict):
        return orbit_class.get("orbit_class_type")
    return orbit_class if isinstance(orbit_class, str) else None


def average_diameter_km(record: dict) -> float | None:
    """Mean of the NeoWs min/max estimated diameter in kilometers."""
    km = _block((_block(record.get("estimated_diameter")) or {}).get("kilometers"))
    if not km:
        return None
    d_min = to_float(km.get("estimated_diameter_min"))
    d_max = to_float(km.get("estimated_diameter_max"))
    if d_min is None or d_max is None:
        return None
    return (d_min + d_max) / 2.0


def earliest_earth_approach(
    record: dict,
    now_ms: float | None = None,
    horizon_ms: float | None = None,
) -> ApproachEvent | None:
    """
    Earliest Earth close approach of a NeoWs object within a window.

    Args:
        record: NeoWs object with ``close_approach_data``.
        now_ms: Lower bound on approach epoch (ms since Unix epoch).
        horizon_ms: Upper bound on approach epoch.

    Returns:
        ApproachEvent, or None when no approach falls in the window.
    """
    candidates = []
    approaches = record.get("close_approach_data")
    if not isinstance(approaches, list):
        approaches = []
    for approach in approaches:
        if not isinstance(approach, dict) or approach.get("orbiting_body") != "Earth":
            continue
        epoch = to_float(approach.get("epoch_date_close_approach"))
        if epoch is None:
            continue
        if now_ms is not None and epoch < now_ms:
            continue
        if horizon_ms is not None and epoch > horizon_ms:
            continue
        candidates.append((epoch, approach))

    if not candidates:
        return None
    epoch, approach = min(candidates, key=lambda c: c[0])
    miss = _block(approach.get("miss_distance")) or {}
    velocity = _block(approach.get("relative_velocity")) or {}
    return ApproachEvent(
        epoch_ms=epoch,
        date=approach.get("close_approach_date_full") or approach.get("close_approach_date", ""),
        miss_km=to_float(miss.get("kilometers")),
        miss_au=to_float(miss.get("astronomical")),
        velocity_kps=to_float(velocity.get("kilometers_per_second")),
    )


def parse_neo_record(
    record: dict,
    now_ms: float | None = None,
    horizon_ms: float | None = None,
) -> CelestialBody:
    """
    Parse a NeoWs browse/feed object into a CelestialBody.

    Raises:
        KeyError: If the record has no ``id``.
    """
    orbital_data = record.get("orbital_data")
    return CelestialBody(
        id=str(record["id"]),
        name=record.get("name", str(record["id"])),
        elements=parse_orbital_data(orbital_data),
        diameter_km=average_diameter_km(record),
        hazardous=bool(record.get("is_potentially_hazardous_asteroid", False)),
        approach=earliest_earth_approach(record, now_ms, horizon_ms),
        absolute_magnitude=to_float(record.get("absolute_magnitude_h")),
        orbit_class=_orbit_class_name(orbital_data),
    )


def parse_approach_row(row: dict) -> CelestialBody:
    """
    Parse a flattened approach row into a CelestialBody.

    Row layout: ``id``, ``name``, ``hm``, ``dia_km``, ``hazardous``,
    ``approach`` {epoch, date, miss_km, miss_au, vel_kps} and
    ``orbital_data`` (NeoWs field names).

    Raises:
        KeyError: If the row has no ``id``.
    """
    approach = _block(row.get("approach"))
    event = None
    if approach and to_float(approach.get("epoch")) is not None:
        event = ApproachEvent(
            epoch_ms=to_float(approach.get("epoch")),
            date=approach.get("date", ""),
            miss_km=to_float(approach.get("miss_km")),
            miss_au=to_float(approach.get("miss_au")),
            velocity_kps=to_float(approach.get("vel_kps")),
        )
    orbital_data = row.get("orbital_data")
    return CelestialBody(
        id=str(row["id"]),
        name=row.get("name", str(row["id"])),
        elements=parse_orbital_data(orbital_data),
        diameter_km=to_float(row.get("dia_km")),
        mass_kg=to_float(row.get("mass_kg")),
        hazardous=bool(row.get("hazardous", False)),
        approach=event,
        absolute_magnitude=to_float(row.get("hm")),
        orbit_class=_orbit_class_name(orbital_data),
    )


def select_upcoming(
    bodies: list[CelestialBody],
    now_ms: float | None = None,
    limit: int | None = None,
) -> list[CelestialBody]:
    """
    Bodies with an approach at or after now, soonest first.

    Ties on epoch are broken by the smaller reported miss distance.
    """
    upcoming = [
        b for b in bodies
        if b.approach is not None and (now_ms is None or b.approach.epoch_ms >= now_ms)
    ]
    upcoming.sort(key=lambda b: (
        b.approach.epoch_ms,
        b.approach.miss_km if b.approach.miss_km is not None else math.inf,
    ))
    return upcoming if limit is None else upcoming[:limit]


@dataclass(frozen=True)
class ApproachSelection:
    """Upcoming approaches plus how the hazard filter was applied."""
    bodies: list[CelestialBody]
    hazardous_only_requested: bool
    relaxed_hazard: bool

    @property
    def hazardous_only_effective(self) -> bool:
        return self.hazardous_only_requested and not self.relaxed_hazard


def select_approaches(
    bodies: list[CelestialBody],
    now_ms: float | None = None,
    limit: int = 20,
    hazardous_only: bool = True,
) -> ApproachSelection:
    """
    Upcoming approaches, preferring potentially hazardous bodies.

    When the hazardous subset cannot fill ``limit``, the filter is
    relaxed once and the non-hazardous bodies are added after it.
    """
    if hazardous_only:
        picked = select_upcoming([b for b in bodies if b.hazardous], now_ms)
    else:
        picked = select_upcoming(bodies, now_ms)

    relaxed = False
    if hazardous_only and len(picked) < limit:
        relaxed = True
        seen = {b.id for b in picked}
        picked += [b for b in select_upcoming(bodies, now_ms) if b.id not in seen]

    picked = select_upcoming(picked)[:limit]
    return ApproachSelection(
        bodies=picked,
        hazardous_only_requested=hazardous_only,
        relaxed_hazard=relaxed,
    )
