# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Run configuration.

Display and mission settings as frozen dataclasses. Physical constants
live in HeliocentricConstants; these are the knobs a caller may turn.
No external dependencies — only stdlib dataclasses.
"""
from dataclasses import dataclass

from neodeflect.domain.deflection import DEFAULT_SUCCESS_THRESHOLD_KM
from neodeflect.domain.impact_energy import DEFAULT_DENSITY_KG_M3
from neodeflect.domain.orbit_sampling import (
    DEFAULT_SHAPE_SAMPLES,
    MAX_SHAPE_SAMPLES,
    MIN_SHAPE_SAMPLES,
)
from neodeflect.domain.state_vector import DEFAULT_SCENE_UNITS_PER_AU


@dataclass(frozen=True)
class DisplayConfig:
    """Scene scaling and polyline resolution."""
    scene_units_per_au: float = DEFAULT_SCENE_UNITS_PER_AU
    shape_samples: int = DEFAULT_SHAPE_SAMPLES

    def __post_init__(self) -> None:
        if not self.scene_units_per_au > 0:
            raise ValueError(f"scene_units_per_au must be positive, got {self.scene_units_per_au}")
        if not MIN_SHAPE_SAMPLES <= self.shape_samples <= MAX_SHAPE_SAMPLES:
            raise ValueError(
                f"shape_samples must be in [{MIN_SHAPE_SAMPLES}, {MAX_SHAPE_SAMPLES}], "
                f"got {self.shape_samples}"
            )


@dataclass(frozen=True)
class MissionConfig:
    """Success threshold and fallback bulk density."""
    success_threshold_km: float = DEFAULT_SUCCESS_THRESHOLD_KM
    default_density_kg_m3: float = DEFAULT_DENSITY_KG_M3

    def __post_init__(self) -> None:
        if self.success_threshold_km < 0:
            raise ValueError(f"success_threshold_km must be >= 0, got {self.success_threshold_km}")
        if not self.default_density_kg_m3 > 0:
            raise ValueError(f"default_density_kg_m3 must be positive, got {self.default_density_kg_m3}")
