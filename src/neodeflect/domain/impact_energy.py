# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Impact energy and effects estimates.

Sphere-volume mass, kinetic energy, TNT equivalent and a toy crater
size with linear secondary effects. The crater and effects laws are
illustrative placeholders, not validated physics, and are carried by
ImpactScaling so they can be swapped without touching the rest.
No external dependencies — only stdlib math/dataclasses.
"""
import math
from dataclasses import dataclass, field
from typing import Callable

JOULES_PER_MEGATON_TNT = 4.184e15
DEFAULT_DENSITY_KG_M3 = 3000.0


def mass_from_diameter(diameter_km: float, density_kg_m3: float = DEFAULT_DENSITY_KG_M3) -> float:
    """
    Mass of a uniform sphere.

    m = ρ·(4/3)·π·r³ with r = diameter_km·500 (meters).
    """
    radius_m = diameter_km * 500.0
    return density_kg_m3 * (4.0 / 3.0) * math.pi * radius_m ** 3


def kinetic_energy_j(mass_kg: float, velocity_kps: float) -> float:
    """KE = ½·m·v² with v converted from km/s to m/s."""
    v_ms = velocity_kps * 1000.0
    return 0.5 * mass_kg * v_ms * v_ms


def megatons_tnt(energy_j: float) -> float:
    """Convert joules to megatons of TNT (1 MT = 4.184e15 J)."""
    return energy_j / JOULES_PER_MEGATON_TNT


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def toy_crater_diameter_km(diameter_km: float, velocity_kps: float) -> float:
    """Toy crater size: max(5, round(d·(0.6 + v/50))) km, halves round up."""
    return float(max(5, _round_half_up(diameter_km * (0.6 + velocity_kps / 50.0))))


@dataclass(frozen=True)
class ImpactScaling:
    """Placeholder scaling laws for crater size and secondary effects."""
    crater_model: Callable[[float, float], float] = field(default=toy_crater_diameter_km)
    blast_radius_per_crater_km: float = 50.0
    population_per_crater_km: float = 490_000.0


@dataclass(frozen=True)
class ImpactEffects:
    """Illustrative secondary effects derived from crater size."""
    severe_blast_radius_km: float
    affected_population: int


@dataclass(frozen=True)
class ImpactEstimate:
    """Energy and crater estimate for one impactor."""
    diameter_km: float
    velocity_kps: float
    density_kg_m3: float
    mass_kg: float
    kinetic_energy_j: float
    energy_megatons: float
    crater_diameter_km: float
    effects: ImpactEffects


def impact_effects(crater_diameter_km: float, scaling: ImpactScaling | None = None) -> ImpactEffects:
    """Linear multiples of crater diameter (blast radius, population)."""
    s = scaling or ImpactScaling()
    return ImpactEffects(
        severe_blast_radius_km=float(_round_half_up(crater_diameter_km * s.blast_radius_per_crater_km)),
        affected_population=max(0, _round_half_up(crater_diameter_km * s.population_per_crater_km)),
    )


def estimate_impact(
    diameter_km: float,
    velocity_kps: float,
    density_kg_m3: float = DEFAULT_DENSITY_KG_M3,
    mass_kg: float | None = None,
    scaling: ImpactScaling | None = None,
) -> ImpactEstimate:
    """
    Estimate impact energy, crater size and secondary effects.

    Args:
        diameter_km: Impactor diameter (km).
        velocity_kps: Impact velocity (km/s).
        density_kg_m3: Bulk density used when mass is not supplied.
        mass_kg: Known mass; overrides the sphere-volume estimate.
        scaling: Crater/effects laws (defaults to the toy model).

    Returns:
        ImpactEstimate with all derived scalars.
    """
    s = scaling or ImpactScaling()
    mass = mass_kg if mass_kg is not None else mass_from_diameter(diameter_km, density_kg_m3)
    energy = kinetic_energy_j(mass, velocity_kps)
    crater = s.crater_model(diameter_km, velocity_kps)
    return ImpactEstimate(
        diameter_km=diameter_km,
        velocity_kps=velocity_kps,
        density_kg_m3=density_kg_m3,
        mass_kg=mass,
        kinetic_energy_j=energy,
        energy_megatons=megatons_tnt(energy),
        crater_diameter_km=crater,
        effects=impact_effects(crater, s),
    )
