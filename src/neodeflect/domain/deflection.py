# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Kinetic-impactor deflection model.

A planar, illustrative model: the asteroid's baseline orbit is sized and
phased so it meets Earth at the encounter, an impulsive tangential Δv
changes the semi-major axis at the burn, and the body is propagated
piecewise (baseline before the burn, deflected after) to get the miss
distance at the nominal encounter. Every call recomputes everything from
the scenario; nothing is cached or mutated.

The speed→eccentricity heuristic lives on DeflectionModel so a better
model can be plugged in without touching the propagation.

No external dependencies — only stdlib math/dataclasses and numpy.
"""
import math
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from neodeflect.domain.encounter import (
    au_to_km,
    distance_au,
    earth_angle_at,
    earth_position_at,
)
from neodeflect.domain.impact_energy import DEFAULT_DENSITY_KG_M3, mass_from_diameter
from neodeflect.domain.orbit_sampling import orbit_shape, sample_times
from neodeflect.domain.orbital_mechanics import (
    HeliocentricConstants,
    clamp,
    mean_from_true,
    mean_motion_rad_per_day,
)
from neodeflect.domain.state_vector import StateVector, position_2d

DEFAULT_SUCCESS_THRESHOLD_KM = 15_000.0
MIN_TOTAL_DAYS = 1.0 / 24.0
BURN_MARGIN_DAYS = 1e-3
MAX_FRACTIONAL_DA = 0.5
MIN_POST_BURN_ECCENTRICITY = 0.01
MAX_POST_BURN_ECCENTRICITY = 0.95


def eccentricity_from_speed(speed_kps: float) -> float:
    """
    Heuristic eccentricity from a heliocentric speed proxy.

    Linear map of 5..65 km/s onto 0.1..0.7, clamped to [0.05, 0.75].
    Not physically derived.
    """
    return clamp(((speed_kps - 5.0) / (65.0 - 5.0)) * 0.6 + 0.1, 0.05, 0.75)


def encounter_days(years: float = 0.0, months: float = 0.0, days: float = 0.0) -> float:
    """Time to encounter in days (365.25-day years, 30-day months)."""
    return years * HeliocentricConstants.EARTH_PERIOD_DAYS + months * 30.0 + days


@dataclass(frozen=True)
class AsteroidParams:
    """Target asteroid physical parameters."""
    diameter_km: float = 800.0
    density_kg_m3: float = DEFAULT_DENSITY_KG_M3
    speed_kps: float = 22.0
    mass_kg: float | None = None

    def resolved_mass_kg(self) -> float:
        """Supplied mass, else sphere-volume mass from diameter and density."""
        if self.mass_kg is not None:
            return self.mass_kg
        return mass_from_diameter(self.diameter_km, self.density_kg_m3)


@dataclass(frozen=True)
class ImpactorParams:
    """Kinetic impactor parameters (φ = 0 prograde, 180 retrograde)."""
    mass_kg: float = 3.5e5
    relative_speed_kps: float = 7.0
    beta: float = 2.0
    phi_deg: float = 15.0
    lead_time_days: float = 30.0


@dataclass(frozen=True)
class DeflectionScenario:
    """Complete, immutable input to one deflection evaluation."""
    asteroid: AsteroidParams = field(default_factory=AsteroidParams)
    impactor: ImpactorParams = field(default_factory=ImpactorParams)
    time_to_encounter_days: float = 365.25
    visual_gain: float = 200.0


@dataclass(frozen=True)
class DeflectionModel:
    """Pluggable heuristics and thresholds of the deflection model."""
    eccentricity_model: Callable[[float], float] = field(default=eccentricity_from_speed)
    success_threshold_km: float = DEFAULT_SUCCESS_THRESHOLD_KM
    min_visual_gain: float = 1.0
    max_visual_gain: float = 1000.0


@dataclass(frozen=True)
class PlanarOrbit:
    """Ecliptic-plane ellipse phased against t = 0 (days)."""
    semi_major_axis_au: float
    eccentricity: float
    arg_perihelion_rad: float
    mean_anomaly_at_start_rad: float
    mean_motion_rad_per_day: float

    def mean_anomaly_at(self, elapsed_days: float) -> float:
        return self.mean_anomaly_at_start_rad + self.mean_motion_rad_per_day * elapsed_days

    def position_at(self, elapsed_days: float) -> StateVector:
        return position_2d(
            self.semi_major_axis_au,
            self.eccentricity,
            self.mean_anomaly_at(elapsed_days),
            self.arg_perihelion_rad,
        )

    def shape(self, samples: int = 1024, closed: bool = True) -> list[tuple[float, float, float]]:
        return orbit_shape(
            self.semi_major_axis_au,
            self.eccentricity,
            arg_perihelion_rad=self.arg_perihelion_rad,
            samples=samples,
            closed=closed,
        )


@dataclass(frozen=True)
class DeltaV:
    """Impulse and orbit-size change, true and display-gained."""
    true_kps: float
    tangent_kps: float
    fractional_da_true: float
    fractional_da_visual: float


@dataclass(frozen=True)
class ImpactOutcome:
    """Miss distance at the nominal encounter against a threshold."""
    miss_km: float
    threshold_km: float
    success: bool


@dataclass(frozen=True)
class DeflectionPaths:
    """Sampled positions for drawing the scenario (AU)."""
    times_days: list[float]
    baseline: list[tuple[float, float, float]]
    deflected: list[tuple[float, float, float]]
    baseline_shape: list[tuple[float, float, float]]
    deflected_shape: list[tuple[float, float, float]]


def classify_outcome(
    miss_km: float,
    threshold_km: float = DEFAULT_SUCCESS_THRESHOLD_KM,
) -> ImpactOutcome:
    """Success when the miss distance reaches the threshold (inclusive)."""
    return ImpactOutcome(miss_km=miss_km, threshold_km=threshold_km, success=miss_km >= threshold_km)


def impulse_delta_v(asteroid_mass_kg: float, impactor: ImpactorParams) -> tuple[float, float]:
    """
    Momentum-transfer Δv of the asteroid (km/s).

    Δv_true = β·m_imp·v_rel / max(1, m_ast); Δv_tangent = Δv_true·cos φ.

    Returns:
        (Δv_true, Δv_tangent)
    """
    dv_true = impactor.beta * impactor.mass_kg * impactor.relative_speed_kps / max(1.0, asteroid_mass_kg)
    return dv_true, dv_true * math.cos(math.radians(impactor.phi_deg))


def fractional_sma_change(
    dv_tangent_kps: float,
    speed_kps: float,
    visual_gain: float,
    model: DeflectionModel | None = None,
) -> tuple[float, float]:
    """
    Linearized Δa/a from a tangential impulse, true and gained.

    Δa/a = clamp(2·Δv_t / max(0.1, v), ±0.5). The gain is clamped to the
    model's range before it multiplies, and the product is clamped again.

    Returns:
        (Δa/a true, Δa/a visual)
    """
    m = model or DeflectionModel()
    frac_true = clamp(2.0 * dv_tangent_kps / max(0.1, speed_kps), -MAX_FRACTIONAL_DA, MAX_FRACTIONAL_DA)
    gain = clamp(visual_gain, m.min_visual_gain, m.max_visual_gain)
    frac_visual = clamp(frac_true * gain, -MAX_FRACTIONAL_DA, MAX_FRACTIONAL_DA)
    return frac_true, frac_visual


def baseline_orbit(eccentricity: float, total_days: float) -> PlanarOrbit:
    """
    Orbit that meets Earth exactly at the encounter.

    The polar conic equation is inverted at Earth's encounter angle θ so
    r(θ) = 1 AU, and the starting mean anomaly is chosen so that after
    total_days the true anomaly equals θ.
    """
    e0 = eccentricity
    theta = earth_angle_at(total_days)
    a0 = (1.0 + e0 * math.cos(theta)) / (1.0 - e0 * e0)
    n0 = mean_motion_rad_per_day(a0)
    m_encounter = mean_from_true(theta, e0)
    return PlanarOrbit(
        semi_major_axis_au=a0,
        eccentricity=e0,
        arg_perihelion_rad=0.0,
        mean_anomaly_at_start_rad=m_encounter - n0 * total_days,
        mean_motion_rad_per_day=n0,
    )


def deflected_orbit(
    baseline: PlanarOrbit,
    fractional_da: float,
    burn_days: float,
) -> PlanarOrbit:
    """
    Post-burn orbit through the burn point with a = a₀(1 + Δa/a).

    Eccentricity starts from clamp(e₀, 0.01, 0.95). The new ellipse is
    rotated (ω₁ = θ_burn - ν₁) so that r(ν₁) equals the burn radius on
    the same inbound/outbound branch, which makes the piecewise path
    continuous. When the requested ellipse cannot reach the burn radius,
    e₁ is raised to the smallest value that can, and if 0.95 is still
    not enough a₁ is pulled into the reachable range.
    """
    burn = baseline.position_at(burn_days)
    r_burn = burn.radius_au
    theta_burn = baseline.arg_perihelion_rad + burn.true_anomaly_rad

    a1 = baseline.semi_major_axis_au * (1.0 + fractional_da)
    if abs(r_burn / a1 - 1.0) > MAX_POST_BURN_ECCENTRICITY:
        a1 = clamp(
            a1,
            r_burn / (1.0 + MAX_POST_BURN_ECCENTRICITY),
            r_burn / (1.0 - MAX_POST_BURN_ECCENTRICITY),
        )
    e1 = clamp(baseline.eccentricity, MIN_POST_BURN_ECCENTRICITY, MAX_POST_BURN_ECCENTRICITY)
    e1 = min(max(e1, abs(r_burn / a1 - 1.0)), MAX_POST_BURN_ECCENTRICITY)

    cos_nu = clamp((a1 * (1.0 - e1 * e1) / r_burn - 1.0) / e1, -1.0, 1.0)
    nu1 = math.acos(cos_nu)
    if math.sin(burn.true_anomaly_rad) < 0:
        nu1 = -nu1

    n1 = mean_motion_rad_per_day(a1)
    return PlanarOrbit(
        semi_major_axis_au=a1,
        eccentricity=e1,
        arg_perihelion_rad=theta_burn - nu1,
        mean_anomaly_at_start_rad=mean_from_true(nu1, e1) - n1 * burn_days,
        mean_motion_rad_per_day=n1,
    )


@dataclass(frozen=True)
class DeflectionResult:
    """Everything derived from one DeflectionScenario."""
    scenario: DeflectionScenario
    baseline: PlanarOrbit
    deflected: PlanarOrbit
    total_days: float
    burn_days: float
    asteroid_mass_kg: float
    delta_v: DeltaV
    requested_semi_major_axis_au: float
    burn_position_au: tuple[float, float, float]
    impulse_direction: tuple[float, float, float]
    baseline_miss_km: float
    outcome: ImpactOutcome

    @property
    def miss_km(self) -> float:
        return self.outcome.miss_km

    def position_at(self, elapsed_days: float) -> StateVector:
        """Piecewise position: baseline up to the burn, deflected after."""
        if elapsed_days <= self.burn_days:
            return self.baseline.position_at(elapsed_days)
        return self.deflected.position_at(elapsed_days)

    def sample_paths(self, samples: int = 900, shape_samples: int = 1024) -> DeflectionPaths:
        """
        Baseline and piecewise deflected trajectories from 0 to encounter.

        The burn instant is inserted into the time grid so the kink in
        the deflected path is sampled exactly.
        """
        grid = sample_times(0.0, self.total_days, samples)
        times = sorted(set(grid) | {self.burn_days})
        return DeflectionPaths(
            times_days=times,
            baseline=[self.baseline.position_at(t).position_au for t in times],
            deflected=[self.position_at(t).position_au for t in times],
            baseline_shape=self.baseline.shape(shape_samples),
            deflected_shape=self.deflected.shape(shape_samples),
        )


def _impulse_direction(burn: StateVector, phi_deg: float) -> tuple[float, float, float]:
    # in-plane tangent (-y, x), flipped for retrograde impacts
    tangent = np.array([-burn.y_au, burn.x_au, 0.0])
    length = float(np.linalg.norm(tangent)) or 1.0
    sign = float(np.sign(np.cos(np.radians(phi_deg)))) or 1.0
    unit = tangent / length * sign
    return float(unit[0]), float(unit[1]), float(unit[2])


def evaluate_deflection(
    scenario: DeflectionScenario,
    model: DeflectionModel | None = None,
) -> DeflectionResult:
    """
    Recompute the whole deflection scene from a scenario.

    Args:
        scenario: Asteroid, impactor, encounter time and visual gain.
        model: Heuristics and success threshold (defaults if None).

    Returns:
        DeflectionResult with both orbits, Δv/Δa (true and gained),
        miss distances and the mission outcome.
    """
    m = model or DeflectionModel()
    asteroid = scenario.asteroid

    total_days = max(MIN_TOTAL_DAYS, scenario.time_to_encounter_days)
    lead = clamp(scenario.impactor.lead_time_days, 0.0, total_days - BURN_MARGIN_DAYS)
    burn_days = total_days - lead

    baseline = baseline_orbit(m.eccentricity_model(asteroid.speed_kps), total_days)

    mass = asteroid.resolved_mass_kg()
    dv_true, dv_tangent = impulse_delta_v(mass, scenario.impactor)
    frac_true, frac_visual = fractional_sma_change(dv_tangent, asteroid.speed_kps, scenario.visual_gain, m)

    deflected = deflected_orbit(baseline, frac_visual, burn_days)
    burn_state = baseline.position_at(burn_days)

    earth = earth_position_at(total_days)
    miss_km = au_to_km(distance_au(deflected.position_at(total_days).position_au, earth))
    baseline_miss_km = au_to_km(distance_au(baseline.position_at(total_days).position_au, earth))

    return DeflectionResult(
        scenario=scenario,
        baseline=baseline,
        deflected=deflected,
        total_days=total_days,
        burn_days=burn_days,
        asteroid_mass_kg=mass,
        delta_v=DeltaV(
            true_kps=dv_true,
            tangent_kps=dv_tangent,
            fractional_da_true=frac_true,
            fractional_da_visual=frac_visual,
        ),
        requested_semi_major_axis_au=baseline.semi_major_axis_au * (1.0 + frac_visual),
        burn_position_au=burn_state.position_au,
        impulse_direction=_impulse_direction(burn_state, scenario.impactor.phi_deg),
        baseline_miss_km=baseline_miss_km,
        outcome=classify_outcome(miss_km, m.success_threshold_km),
    )
