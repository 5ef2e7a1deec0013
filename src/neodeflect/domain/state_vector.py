# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbital elements to heliocentric Cartesian position.

Solves Kepler's equation, builds perifocal coordinates and rotates them
into the inertial (ecliptic) frame. Positions are in AU; display scaling
is a separate, explicit step so physical code never sees scene units.
No external dependencies — only stdlib math and numpy.
"""
import math
from dataclasses import dataclass

import numpy as np

from neodeflect.domain.neo import OrbitalElementSet
from neodeflect.domain.orbital_mechanics import (
    clamp_eccentricity,
    solve_kepler,
    true_anomaly_from_eccentric,
)

DEFAULT_SCENE_UNITS_PER_AU = 1_000_000.0


@dataclass(frozen=True)
class StateVector:
    """Heliocentric position at one instant."""
    x_au: float
    y_au: float
    z_au: float
    true_anomaly_rad: float
    radius_au: float

    @property
    def position_au(self) -> tuple[float, float, float]:
        return (self.x_au, self.y_au, self.z_au)


def perifocal_rotation(
    raan_rad: float,
    arg_perihelion_rad: float,
    inclination_rad: float,
) -> np.ndarray:
    """
    Perifocal-to-inertial rotation matrix R(Ω, ω, i).

    Only the first two columns are used for positions (z_pf = 0); the
    third column is included so the matrix is a proper rotation.
    """
    cO = float(np.cos(raan_rad))
    sO = float(np.sin(raan_rad))
    cw = float(np.cos(arg_perihelion_rad))
    sw = float(np.sin(arg_perihelion_rad))
    ci = float(np.cos(inclination_rad))
    si = float(np.sin(inclination_rad))

    return np.array([
        [cO * cw - sO * sw * ci, -cO * sw - sO * cw * ci, sO * si],
        [sO * cw + cO * sw * ci, -sO * sw + cO * cw * ci, -cO * si],
        [sw * si, cw * si, ci],
    ])


def rotate_perifocal(
    x_pf: float,
    y_pf: float,
    rotation: np.ndarray,
) -> tuple[float, float, float]:
    """Rotate an in-plane perifocal point into the inertial frame."""
    inertial = rotation @ np.array([x_pf, y_pf, 0.0])
    return float(inertial[0]), float(inertial[1]), float(inertial[2])


def position_from_elements(
    a_au: float,
    e: float,
    inclination_rad: float,
    raan_rad: float,
    arg_perihelion_rad: float,
    mean_anomaly_rad: float,
) -> StateVector:
    """
    Heliocentric position from classical elements at a mean anomaly.

    Steps: E from Kepler's equation, perifocal
    x_pf = a(cos E - e), y_pf = a√(1-e²)·sin E, then rotation by
    R(Ω, ω, i). Eccentricity is clamped to [0, 0.99] first.

    Args:
        a_au: Semi-major axis (AU).
        e: Eccentricity.
        inclination_rad: Inclination i (radians).
        raan_rad: Longitude of ascending node Ω (radians).
        arg_perihelion_rad: Argument of perihelion ω (radians).
        mean_anomaly_rad: Mean anomaly M (radians).

    Returns:
        StateVector with position (AU), true anomaly and radius.
    """
    e = clamp_eccentricity(e)
    ecc_anomaly = solve_kepler(mean_anomaly_rad, e)
    cos_e = math.cos(ecc_anomaly)
    sin_e = math.sin(ecc_anomaly)

    x_pf = a_au * (cos_e - e)
    y_pf = a_au * math.sqrt(1.0 - e * e) * sin_e

    rotation = perifocal_rotation(raan_rad, arg_perihelion_rad, inclination_rad)
    x, y, z = rotate_perifocal(x_pf, y_pf, rotation)

    return StateVector(
        x_au=x,
        y_au=y,
        z_au=z,
        true_anomaly_rad=true_anomaly_from_eccentric(ecc_anomaly, e),
        radius_au=a_au * (1.0 - e * cos_e),
    )


def position_2d(
    a_au: float,
    e: float,
    mean_anomaly_rad: float,
    arg_perihelion_rad: float = 0.0,
) -> StateVector:
    """
    In-plane position (i = Ω = 0).

    With the default ω = 0 the rotation collapses to identity and the
    perifocal frame is the inertial frame.
    """
    return position_from_elements(a_au, e, 0.0, 0.0, arg_perihelion_rad, mean_anomaly_rad)


def position_from_element_set(
    elements: OrbitalElementSet,
    mean_anomaly_deg: float,
    planar: bool = False,
) -> StateVector | None:
    """
    Position of a body from its element set at a mean anomaly in degrees.

    Returns None when the orbit is unknown (missing or non-finite a/e).
    Missing angles read as 0; planar=True drops i, Ω and ω.
    """
    if not elements.has_shape:
        return None
    if planar:
        return position_2d(
            elements.semi_major_axis_au,
            elements.eccentricity,
            math.radians(mean_anomaly_deg),
        )
    i_deg, raan_deg, argp_deg = elements.angles_deg()
    return position_from_elements(
        elements.semi_major_axis_au,
        elements.eccentricity,
        math.radians(i_deg),
        math.radians(raan_deg),
        math.radians(argp_deg),
        math.radians(mean_anomaly_deg),
    )


def scale_for_display(
    position_au: tuple[float, float, float],
    scene_units_per_au: float = DEFAULT_SCENE_UNITS_PER_AU,
) -> tuple[float, float, float]:
    """Multiply an AU position by the linear display factor."""
    return tuple(float(c) * scene_units_per_au for c in position_au)
