# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Encounter geometry against a simplified Earth.

Epoch conversion (Unix ms <-> Julian Date), mean-anomaly advance from the
osculation epoch, body position at an encounter instant and miss
distance against Earth on a uniform circular 1 AU orbit.
No external dependencies — only stdlib math and numpy.
"""
import math
from dataclasses import dataclass

import numpy as np

from neodeflect.domain.neo import CelestialBody, OrbitalElementSet
from neodeflect.domain.orbital_mechanics import HeliocentricConstants, wrap_degrees
from neodeflect.domain.state_vector import StateVector, position_from_element_set

_C = HeliocentricConstants


@dataclass(frozen=True)
class EncounterResult:
    """Body and Earth positions at one instant and their separation."""
    body_id: str
    name: str
    epoch_ms: float
    mean_anomaly_deg: float
    state: StateVector
    earth_position_au: tuple[float, float, float]
    miss_distance_km: float


def ms_to_julian_date(epoch_ms: float) -> float:
    """JD = 2440587.5 + ms / 86 400 000."""
    return _C.JD_UNIX_EPOCH + epoch_ms / _C.MS_PER_DAY


def julian_date_to_ms(jd: float) -> float:
    """Inverse of ms_to_julian_date."""
    return (jd - _C.JD_UNIX_EPOCH) * _C.MS_PER_DAY


def mean_anomaly_at(elements: OrbitalElementSet, epoch_ms: float) -> float | None:
    """
    Mean anomaly at a target epoch, wrapped into [0, 360) degrees.

    M = wrap(M₀ + n·(JD - JD_osc)). Returns None when the element set
    lacks M₀, n or the osculation epoch.
    """
    if not elements.has_phase:
        return None
    delta_days = ms_to_julian_date(epoch_ms) - elements.epoch_osculation_jd
    return wrap_degrees(elements.mean_anomaly_deg + elements.mean_motion_deg_per_day * delta_days)


def encounter_position(
    elements: OrbitalElementSet,
    epoch_ms: float,
    planar: bool = False,
) -> StateVector | None:
    """
    Body position at the encounter instant.

    Independent of any sampled orbit shape: the mean anomaly is advanced
    to the epoch and fed straight into the state vector computation.
    """
    mean_anomaly = mean_anomaly_at(elements, epoch_ms)
    if mean_anomaly is None:
        return None
    return position_from_element_set(elements, mean_anomaly, planar=planar)


def earth_angle_at(elapsed_days: float) -> float:
    """Earth's angle θ = N_EARTH·d (radians) after elapsed days."""
    return _C.N_EARTH * elapsed_days


def earth_position_at(elapsed_days: float) -> tuple[float, float, float]:
    """Earth on a circular 1 AU orbit in the ecliptic plane (AU)."""
    theta = earth_angle_at(elapsed_days)
    return (math.cos(theta), math.sin(theta), 0.0)


def earth_orbit_shape(samples: int = 360) -> list[tuple[float, float, float]]:
    """Closed 1 AU ring for drawing Earth's orbit."""
    angles = np.linspace(0.0, 2.0 * np.pi, samples, endpoint=False)
    return [(float(np.cos(a)), float(np.sin(a)), 0.0) for a in angles]


def distance_au(p1: tuple[float, float, float], p2: tuple[float, float, float]) -> float:
    """Euclidean distance between two AU positions."""
    return float(np.linalg.norm(np.array(p1) - np.array(p2)))


def au_to_km(distance: float) -> float:
    return distance * _C.AU_KM


def miss_distance_km(position_au: tuple[float, float, float], elapsed_days: float) -> float:
    """
    Distance (km) between a body position and Earth after elapsed days.

    The position must be in physical AU, not display-scaled units.
    """
    return au_to_km(distance_au(position_au, earth_position_at(elapsed_days)))


def assess_encounter(
    body: CelestialBody,
    epoch_ms: float,
    elapsed_days: float,
    planar: bool = False,
) -> EncounterResult | None:
    """
    Place a body at an epoch and measure its distance to Earth.

    Args:
        body: Body with an element set.
        epoch_ms: Encounter instant (ms since Unix epoch).
        elapsed_days: Days along Earth's circular orbit at that instant.
        planar: Drop inclination/node/perihelion angles.

    Returns:
        EncounterResult, or None when the body's orbit is unknown.
    """
    if body.elements is None:
        return None
    mean_anomaly = mean_anomaly_at(body.elements, epoch_ms)
    if mean_anomaly is None:
        return None
    state = position_from_element_set(body.elements, mean_anomaly, planar=planar)
    if state is None:
        return None
    earth = earth_position_at(elapsed_days)
    return EncounterResult(
        body_id=body.id,
        name=body.name,
        epoch_ms=epoch_ms,
        mean_anomaly_deg=mean_anomaly,
        state=state,
        earth_position_au=earth,
        miss_distance_km=au_to_km(distance_au(state.position_au, earth)),
    )


def encounter_positions(
    bodies: list[CelestialBody],
    epoch_ms: float,
    planar: bool = False,
) -> dict[str, StateVector]:
    """
    Positions of a population at one epoch, keyed by body id.

    Bodies whose orbit or phase is unknown are left out.
    """
    positions: dict[str, StateVector] = {}
    for body in bodies:
        if body.elements is None:
            continue
        state = encounter_position(body.elements, epoch_ms, planar=planar)
        if state is not None:
            positions[body.id] = state
    return positions
