# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
NEO Deflect

Orbital mechanics and impact physics for near-Earth objects: Kepler
solving, element-to-position conversion, orbit and trajectory sampling,
encounter geometry against a circular Earth orbit, a kinetic-impactor
deflection model with piecewise propagation, and toy impact energy and
crater estimates.
"""

from neodeflect.domain.orbital_mechanics import (
    HeliocentricConstants,
    solve_kepler,
    true_anomaly_from_eccentric,
    eccentric_from_true,
    mean_from_eccentric,
    mean_from_true,
    wrap_degrees,
)
from neodeflect.domain.neo import (
    OrbitalElementSet,
    ApproachEvent,
    CelestialBody,
    parse_neo_record,
    parse_approach_row,
    select_upcoming,
)
from neodeflect.domain.state_vector import (
    StateVector,
    position_from_elements,
    position_2d,
    position_from_element_set,
    scale_for_display,
)
from neodeflect.domain.orbit_sampling import (
    TrajectoryPoint,
    orbit_shape,
    element_set_shape,
    trajectory,
    display_extent_au,
)
from neodeflect.domain.encounter import (
    EncounterResult,
    ms_to_julian_date,
    julian_date_to_ms,
    mean_anomaly_at,
    encounter_position,
    earth_position_at,
    miss_distance_km,
    assess_encounter,
    encounter_positions,
)
from neodeflect.domain.deflection import (
    AsteroidParams,
    ImpactorParams,
    DeflectionScenario,
    DeflectionModel,
    DeflectionResult,
    ImpactOutcome,
    PlanarOrbit,
    eccentricity_from_speed,
    encounter_days,
    classify_outcome,
    evaluate_deflection,
)
from neodeflect.domain.impact_energy import (
    ImpactScaling,
    ImpactEstimate,
    mass_from_diameter,
    kinetic_energy_j,
    megatons_tnt,
    estimate_impact,
)
from neodeflect.config import DisplayConfig, MissionConfig

__version__ = "0.3.0"
