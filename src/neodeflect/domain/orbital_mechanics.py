# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbital mechanics functions.

Heliocentric constants, the Kepler equation solver and anomaly
conversions shared by every position computation in the package.
No external dependencies — only stdlib math and numpy.
"""
import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class _HeliocentricConstants:
    """Heliocentric constants for the simplified Sun/Earth model."""
    AU_KM: float = 149_597_870.7             # km per astronomical unit
    EARTH_PERIOD_DAYS: float = 365.25        # days — circular Earth orbit
    N_EARTH: float = 2.0 * math.pi / 365.25  # rad/day — Earth mean motion
    JD_UNIX_EPOCH: float = 2440587.5         # Julian Date of 1970-01-01T00:00Z
    MS_PER_DAY: float = 86_400_000.0         # milliseconds per day
    MAX_ECCENTRICITY: float = 0.99           # clamp applied before any solve
    KEPLER_MAX_ITER: int = 15                # Newton-Raphson iteration cap
    KEPLER_TOL: float = 1e-10                # rad — early-exit step size


HeliocentricConstants: _HeliocentricConstants = _HeliocentricConstants()


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value into [lo, hi]."""
    return max(lo, min(hi, value))


def clamp_eccentricity(e: float) -> float:
    """Force eccentricity into [0, MAX_ECCENTRICITY]."""
    return clamp(e, 0.0, HeliocentricConstants.MAX_ECCENTRICITY)


def wrap_degrees(angle_deg: float) -> float:
    """Reduce an angle modulo 360 into [0, 360)."""
    wrapped = math.fmod(angle_deg, 360.0)
    if wrapped < 0:
        wrapped += 360.0
    # fmod of a tiny negative value can round up to exactly 360
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped


def solve_kepler(mean_anomaly_rad: float, e: float) -> float:
    """
    Solve Kepler's equation M = E - e·sin(E) for the eccentric anomaly.

    Newton-Raphson from E₀ = M, capped at 15 iterations, stopping early
    once |step| < 1e-10. There is no failure signal: after the cap the
    best estimate is returned as-is. Convergence is not guaranteed for
    e close to 1 (the clamp stops at 0.99); callers treat that range
    as a boundary case.

    Args:
        mean_anomaly_rad: Mean anomaly M (radians, any range).
        e: Eccentricity, clamped to [0, 0.99] before solving.

    Returns:
        Eccentric anomaly E (radians).
    """
    c = HeliocentricConstants
    e = clamp_eccentricity(e)
    ecc_anomaly = mean_anomaly_rad
    for _ in range(c.KEPLER_MAX_ITER):
        f = ecc_anomaly - e * math.sin(ecc_anomaly) - mean_anomaly_rad
        fp = 1.0 - e * math.cos(ecc_anomaly)
        step = f / fp
        ecc_anomaly -= step
        if abs(step) < c.KEPLER_TOL:
            break
    return ecc_anomaly


def kepler_residual(ecc_anomaly_rad: float, mean_anomaly_rad: float, e: float) -> float:
    """Residual E - e·sin(E) - M of Kepler's equation."""
    return ecc_anomaly_rad - e * math.sin(ecc_anomaly_rad) - mean_anomaly_rad


def true_anomaly_from_eccentric(ecc_anomaly_rad: float, e: float) -> float:
    """
    True anomaly from eccentric anomaly.

    ν = atan2(√(1-e²)·sin E, cos E - e), in (-π, π].
    """
    return float(np.arctan2(
        np.sqrt(1.0 - e * e) * np.sin(ecc_anomaly_rad),
        np.cos(ecc_anomaly_rad) - e,
    ))


def eccentric_from_true(true_anomaly_rad: float, e: float) -> float:
    """
    Eccentric anomaly from true anomaly (half-angle form).

    E = 2·atan2(√(1-e)·sin(ν/2), √(1+e)·cos(ν/2)), in (-π, π].
    Stays finite at ν = π where the tan(ν/2) form blows up.
    """
    half = 0.5 * true_anomaly_rad
    return 2.0 * math.atan2(
        math.sqrt(1.0 - e) * math.sin(half),
        math.sqrt(1.0 + e) * math.cos(half),
    )


def mean_from_eccentric(ecc_anomaly_rad: float, e: float) -> float:
    """Mean anomaly from eccentric anomaly: M = E - e·sin(E)."""
    return ecc_anomaly_rad - e * math.sin(ecc_anomaly_rad)


def mean_from_true(true_anomaly_rad: float, e: float) -> float:
    """Mean anomaly reached at a given true anomaly."""
    return mean_from_eccentric(eccentric_from_true(true_anomaly_rad, e), e)


def conic_radius(a: float, e: float, true_anomaly_rad: float) -> float:
    """
    Polar conic equation r(ν) = a(1-e²) / (1 + e·cos ν).

    Args:
        a: Semi-major axis (any length unit).
        e: Eccentricity (< 1).
        true_anomaly_rad: True anomaly (radians).

    Returns:
        Orbital radius in the unit of a.
    """
    return a * (1.0 - e * e) / (1.0 + e * math.cos(true_anomaly_rad))


def mean_motion_rad_per_day(a_au: float) -> float:
    """
    Mean motion scaled against Earth's: n = N_EARTH / a^1.5.

    Kepler's third law with a 1 AU orbit taking 365.25 days.
    """
    return HeliocentricConstants.N_EARTH / a_au ** 1.5
