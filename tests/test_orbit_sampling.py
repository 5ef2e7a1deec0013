# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for orbit outlines, trajectories and display extent."""
import ast
import math

import pytest

from neodeflect.domain.neo import CelestialBody, OrbitalElementSet
from neodeflect.domain.orbit_sampling import (
    DEFAULT_SHAPE_SAMPLES,
    MAX_SHAPE_SAMPLES,
    MIN_SHAPE_SAMPLES,
    TrajectoryPoint,
    aphelion_au,
    display_extent_au,
    element_set_shape,
    orbit_shape,
    sample_times,
    trajectory,
)


# ── Helpers ──────────────────────────────────────────────────────────

_DAY_MS = 86_400_000.0
_EPOCH_MS = (2461000.5 - 2440587.5) * _DAY_MS


def _norm(p):
    return math.sqrt(sum(c * c for c in p))


def _elements(a=1.458, e=0.2228, **kwargs):
    fields = dict(
        inclination_deg=10.8,
        ascending_node_longitude_deg=304.3,
        perihelion_argument_deg=178.9,
        mean_anomaly_deg=310.55,
        mean_motion_deg_per_day=0.5598,
        epoch_osculation_jd=2461000.5,
    )
    fields.update(kwargs)
    return OrbitalElementSet(semi_major_axis_au=a, eccentricity=e, **fields)


def _body(body_id, a, e):
    return CelestialBody(
        id=body_id, name=body_id,
        elements=OrbitalElementSet(semi_major_axis_au=a, eccentricity=e),
    )


# ── Orbit shape ──────────────────────────────────────────────────────

class TestOrbitShape:

    def test_default_sample_count(self):
        assert len(orbit_shape(1.0, 0.1)) == DEFAULT_SHAPE_SAMPLES

    def test_sample_count_clamped(self):
        """Requested counts outside [64, 2048] are clamped."""
        assert len(orbit_shape(1.0, 0.1, samples=3)) == MIN_SHAPE_SAMPLES
        assert len(orbit_shape(1.0, 0.1, samples=100_000)) == MAX_SHAPE_SAMPLES

    def test_closed_repeats_first_point(self):
        points = orbit_shape(1.0, 0.1, samples=100, closed=True)
        assert len(points) == 101
        assert points[-1] == points[0]

    def test_radii_within_apsides(self):
        a, e = 2.0, 0.5
        for p in orbit_shape(a, e, 0.3, 1.0, 2.0, samples=256):
            assert a * (1 - e) - 1e-12 <= _norm(p) <= a * (1 + e) + 1e-12

    def test_first_point_is_periapsis(self):
        """ν = 0 sits at periapsis on the x axis when angles are zero."""
        points = orbit_shape(2.0, 0.5)
        assert points[0] == pytest.approx((1.0, 0.0, 0.0))

    def test_circle(self):
        for p in orbit_shape(1.0, 0.0, samples=64):
            assert _norm(p) == pytest.approx(1.0)


class TestElementSetShape:

    def test_unknown_orbit_empty(self):
        elements = OrbitalElementSet(semi_major_axis_au=None, eccentricity=None)
        assert element_set_shape(elements) == []

    def test_planar_stays_in_plane(self):
        for p in element_set_shape(_elements(), samples=64, planar=True):
            assert p[2] == 0.0

    def test_inclined_leaves_plane(self):
        points = element_set_shape(_elements(), samples=64)
        assert max(abs(p[2]) for p in points) > 0.01


# ── Trajectory ───────────────────────────────────────────────────────

class TestSampleTimes:

    def test_includes_both_ends(self):
        times = sample_times(0.0, 10.0, 11)
        assert times[0] == 0.0
        assert times[-1] == 10.0
        assert len(times) == 11

    def test_strictly_increasing(self):
        times = sample_times(5.0, 6.0, 50)
        assert all(b > a for a, b in zip(times, times[1:]))

    def test_too_few_samples_raises(self):
        with pytest.raises(ValueError, match="at least 2"):
            sample_times(0.0, 1.0, 1)

    def test_end_before_start_raises(self):
        with pytest.raises(ValueError, match="after start"):
            sample_times(1.0, 1.0, 5)


class TestTrajectory:

    def test_points_and_times(self):
        points = trajectory(_elements(), _EPOCH_MS, _EPOCH_MS + 30 * _DAY_MS, 31)
        assert len(points) == 31
        assert all(isinstance(p, TrajectoryPoint) for p in points)
        assert points[0].epoch_ms == _EPOCH_MS
        assert points[-1].epoch_ms == _EPOCH_MS + 30 * _DAY_MS

    def test_full_period_returns_to_start(self):
        """After one orbital period the body is back where it began."""
        elements = _elements()
        period_days = 360.0 / elements.mean_motion_deg_per_day
        points = trajectory(elements, _EPOCH_MS, _EPOCH_MS + period_days * _DAY_MS, 5)
        assert points[-1].state.position_au == pytest.approx(points[0].state.position_au, abs=1e-9)

    def test_consecutive_points_move(self):
        points = trajectory(_elements(), _EPOCH_MS, _EPOCH_MS + 100 * _DAY_MS, 10)
        for a, b in zip(points, points[1:]):
            assert a.state.position_au != b.state.position_au

    def test_missing_phase_empty(self):
        elements = _elements(mean_motion_deg_per_day=None)
        assert trajectory(elements, _EPOCH_MS, _EPOCH_MS + _DAY_MS, 5) == []

    def test_invalid_window_raises(self):
        with pytest.raises(ValueError):
            trajectory(_elements(), _EPOCH_MS, _EPOCH_MS - _DAY_MS, 5)

    def test_single_sample_raises(self):
        with pytest.raises(ValueError):
            trajectory(_elements(), _EPOCH_MS, _EPOCH_MS + _DAY_MS, 1)


# ── Display extent ───────────────────────────────────────────────────

class TestDisplayExtent:

    def test_aphelion(self):
        assert aphelion_au(OrbitalElementSet(semi_major_axis_au=2.0, eccentricity=0.5)) == pytest.approx(3.0)

    def test_aphelion_unknown_defaults_to_one(self):
        assert aphelion_au(None) == 1.0
        assert aphelion_au(OrbitalElementSet(semi_major_axis_au=None, eccentricity=0.1)) == 1.0

    def test_empty_population_clamped(self):
        assert display_extent_au([]) == 1.2

    def test_percentile_interpolated(self):
        """Aphelia 1.5..2.4 in 0.1 steps: 90th percentile is 2.31."""
        bodies = [_body(str(i), 1.5 + 0.1 * i, 0.0) for i in range(10)]
        assert display_extent_au(bodies) == pytest.approx(2.31)

    def test_outlier_capped(self):
        bodies = [_body('far', 40.0, 0.5), _body('far2', 30.0, 0.5)]
        assert display_extent_au(bodies) == 4.0


# ── Domain purity ────────────────────────────────────────────────────

class TestOrbitSamplingPurity:

    def test_imports_only_stdlib_numpy_and_domain(self):
        import neodeflect.domain.orbit_sampling as mod

        allowed = {'math', 'numpy', 'dataclasses', 'typing', 'abc', 'enum', '__future__', 'datetime'}
        with open(mod.__file__) as f:
            tree = ast.parse(f.read())

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    root = alias.name.split('.')[0]
                    if root not in allowed and not root.startswith('neodeflect'):
                        assert False, f"Disallowed import '{alias.name}'"
            if isinstance(node, ast.ImportFrom):
                if node.module and node.level == 0:
                    root = node.module.split('.')[0]
                    if root not in allowed and root != 'neodeflect':
                        assert False, f"Disallowed import from '{node.module}'"
