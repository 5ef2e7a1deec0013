# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbit polylines and time-indexed trajectories.

Two independent generators, both pure functions of their inputs:
the static orbit shape sampled uniformly in true anomaly, and a
trajectory sampled at evenly spaced epochs by advancing the mean
anomaly. Also the aphelion-based display extent used to frame a
population of orbits.
No external dependencies — only stdlib math and numpy.
"""
import math
from dataclasses import dataclass

import numpy as np

from neodeflect.domain.encounter import mean_anomaly_at
from neodeflect.domain.neo import CelestialBody, OrbitalElementSet
from neodeflect.domain.orbital_mechanics import clamp, clamp_eccentricity, conic_radius
from neodeflect.domain.state_vector import (
    StateVector,
    perifocal_rotation,
    position_from_element_set,
    rotate_perifocal,
)

MIN_SHAPE_SAMPLES = 64
MAX_SHAPE_SAMPLES = 2048
DEFAULT_SHAPE_SAMPLES = 720


@dataclass(frozen=True)
class TrajectoryPoint:
    """One sample of a time-indexed trajectory."""
    epoch_ms: float
    state: StateVector


def orbit_shape(
    a_au: float,
    e: float,
    inclination_rad: float = 0.0,
    raan_rad: float = 0.0,
    arg_perihelion_rad: float = 0.0,
    samples: int = DEFAULT_SHAPE_SAMPLES,
    closed: bool = False,
) -> list[tuple[float, float, float]]:
    """
    Orbit outline sampled uniformly in true anomaly over [0, 2π).

    Each ν is converted with the polar conic equation and rotated into
    the inertial frame. Used only to draw the static shape.

    Args:
        a_au: Semi-major axis (AU).
        e: Eccentricity (clamped to [0, 0.99]).
        inclination_rad: Inclination (radians).
        raan_rad: Longitude of ascending node (radians).
        arg_perihelion_rad: Argument of perihelion (radians).
        samples: Point count, clamped to [64, 2048].
        closed: Repeat the first point at the end (for polylines).

    Returns:
        List of (x, y, z) positions in AU.
    """
    e = clamp_eccentricity(e)
    n = int(clamp(samples, MIN_SHAPE_SAMPLES, MAX_SHAPE_SAMPLES))
    rotation = perifocal_rotation(raan_rad, arg_perihelion_rad, inclination_rad)

    points = []
    for nu in np.linspace(0.0, 2.0 * np.pi, n, endpoint=False):
        r = conic_radius(a_au, e, float(nu))
        points.append(rotate_perifocal(r * float(np.cos(nu)), r * float(np.sin(nu)), rotation))
    if closed:
        points.append(points[0])
    return points


def element_set_shape(
    elements: OrbitalElementSet,
    samples: int = DEFAULT_SHAPE_SAMPLES,
    planar: bool = False,
    closed: bool = False,
) -> list[tuple[float, float, float]]:
    """Orbit outline of an element set; empty when the orbit is unknown."""
    if not elements.has_shape:
        return []
    i_deg, raan_deg, argp_deg = (0.0, 0.0, 0.0) if planar else elements.angles_deg()
    return orbit_shape(
        elements.semi_major_axis_au,
        elements.eccentricity,
        math.radians(i_deg),
        math.radians(raan_deg),
        math.radians(argp_deg),
        samples=samples,
        closed=closed,
    )


def sample_times(start: float, end: float, samples: int) -> list[float]:
    """
    Evenly spaced, strictly increasing sample times including both ends.

    Raises:
        ValueError: If samples < 2 or end <= start.
    """
    if samples < 2:
        raise ValueError(f"samples must be at least 2, got {samples}")
    if not end > start:
        raise ValueError(f"end ({end}) must be after start ({start})")
    return [float(t) for t in np.linspace(start, end, samples)]


def trajectory(
    elements: OrbitalElementSet,
    start_ms: float,
    end_ms: float,
    samples: int,
    planar: bool = False,
) -> list[TrajectoryPoint]:
    """
    Body positions at evenly spaced epochs between start and end.

    M(t) = M₀ + n·(t - epoch) at each sample time, fed through the
    state vector computation. Empty when the orbit or phase is unknown.

    Raises:
        ValueError: If samples < 2 or end_ms <= start_ms.
    """
    times = sample_times(start_ms, end_ms, samples)
    if not elements.has_phase:
        return []
    points = []
    for t in times:
        state = position_from_element_set(elements, mean_anomaly_at(elements, t), planar=planar)
        points.append(TrajectoryPoint(epoch_ms=t, state=state))
    return points


def aphelion_au(elements: OrbitalElementSet | None) -> float:
    """Aphelion distance a(1+e); 1 AU when the orbit is unknown."""
    if elements is None or not elements.has_shape:
        return 1.0
    return elements.semi_major_axis_au * (1.0 + elements.eccentricity)


def display_extent_au(
    bodies: list[CelestialBody],
    percentile: float = 0.9,
    lo: float = 1.2,
    hi: float = 4.0,
) -> float:
    """
    Heliocentric radius that frames most of a population.

    Linear-interpolated percentile of the aphelion distances, clamped to
    [lo, hi] so a single distant comet cannot shrink everything else.
    """
    aphelia = sorted(aphelion_au(b.elements) for b in bodies)
    if not aphelia:
        return clamp(1.0, lo, hi)
    extent = float(np.percentile(aphelia, percentile * 100.0))
    return clamp(extent, lo, hi)
