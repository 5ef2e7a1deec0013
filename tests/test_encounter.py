# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for epoch conversion, encounter positions and Earth miss distance."""
import ast
import math

import pytest

from neodeflect.domain.encounter import (
    EncounterResult,
    assess_encounter,
    au_to_km,
    distance_au,
    earth_angle_at,
    earth_orbit_shape,
    earth_position_at,
    encounter_position,
    encounter_positions,
    julian_date_to_ms,
    mean_anomaly_at,
    miss_distance_km,
    ms_to_julian_date,
)
from neodeflect.domain.neo import CelestialBody, OrbitalElementSet
from neodeflect.domain.state_vector import position_from_element_set


# ── Helpers ──────────────────────────────────────────────────────────

_DAY_MS = 86_400_000.0
# 2461000.5 JD in ms since the Unix epoch
_EROS_EPOCH_MS = (2461000.5 - 2440587.5) * _DAY_MS


def _eros():
    return OrbitalElementSet(
        semi_major_axis_au=1.458120998474684,
        eccentricity=0.2228359407071628,
        inclination_deg=10.82846651399785,
        ascending_node_longitude_deg=304.2701025753316,
        perihelion_argument_deg=178.9297536744151,
        mean_anomaly_deg=310.5543277370992,
        mean_motion_deg_per_day=0.5597752949285997,
        epoch_osculation_jd=2461000.5,
    )


# ── Epoch conversion ─────────────────────────────────────────────────

class TestJulianDate:

    def test_unix_epoch(self):
        assert ms_to_julian_date(0.0) == 2440587.5

    def test_one_day(self):
        assert ms_to_julian_date(_DAY_MS) == pytest.approx(2440588.5)

    def test_round_trip(self):
        ms = 1_764_469_080_000.0
        assert julian_date_to_ms(ms_to_julian_date(ms)) == pytest.approx(ms, abs=1.0)


# ── Mean anomaly advance ─────────────────────────────────────────────

class TestMeanAnomalyAt:

    def test_at_osculation_epoch_equals_m0(self):
        """JD_target = JD_osc gives M_target ≡ M₀ (mod 360)."""
        elements = _eros()
        assert mean_anomaly_at(elements, _EROS_EPOCH_MS) == pytest.approx(310.5543277370992)

    def test_advances_by_mean_motion(self):
        elements = _eros()
        m = mean_anomaly_at(elements, _EROS_EPOCH_MS + 10 * _DAY_MS)
        assert m == pytest.approx((310.5543277370992 + 10 * 0.5597752949285997) % 360.0)

    def test_wraps_into_range(self):
        elements = _eros()
        m = mean_anomaly_at(elements, _EROS_EPOCH_MS + 200 * _DAY_MS)
        assert 0.0 <= m < 360.0

    def test_before_epoch_wraps(self):
        elements = _eros()
        m = mean_anomaly_at(elements, _EROS_EPOCH_MS - 600 * _DAY_MS)
        assert 0.0 <= m < 360.0

    def test_missing_phase_returns_none(self):
        elements = OrbitalElementSet(semi_major_axis_au=1.0, eccentricity=0.1)
        assert mean_anomaly_at(elements, 0.0) is None


class TestEncounterPosition:

    def test_matches_state_vector_at_m0(self):
        elements = _eros()
        state = encounter_position(elements, _EROS_EPOCH_MS)
        expected = position_from_element_set(elements, 310.5543277370992)
        assert state.position_au == pytest.approx(expected.position_au)

    def test_unknown_phase_none(self):
        elements = OrbitalElementSet(semi_major_axis_au=1.2, eccentricity=0.1, mean_anomaly_deg=10.0)
        assert encounter_position(elements, 0.0) is None


# ── Earth ────────────────────────────────────────────────────────────

class TestEarth:

    def test_start_on_x_axis(self):
        assert earth_position_at(0.0) == pytest.approx((1.0, 0.0, 0.0))

    def test_quarter_year(self):
        assert earth_angle_at(365.25 / 4) == pytest.approx(math.pi / 2)
        assert earth_position_at(365.25 / 4) == pytest.approx((0.0, 1.0, 0.0), abs=1e-12)

    def test_full_year_returns(self):
        assert earth_position_at(365.25) == pytest.approx((1.0, 0.0, 0.0), abs=1e-12)

    def test_orbit_shape_unit_ring(self):
        ring = earth_orbit_shape(90)
        assert len(ring) == 90
        for p in ring:
            assert math.hypot(p[0], p[1]) == pytest.approx(1.0)


class TestMissDistance:

    def test_au_to_km(self):
        assert au_to_km(1.0) == 149_597_870.7

    def test_distance(self):
        assert distance_au((0.0, 0.0, 0.0), (3.0, 4.0, 0.0)) == pytest.approx(5.0)

    def test_at_earth_is_zero(self):
        assert miss_distance_km(earth_position_at(100.0), 100.0) == pytest.approx(0.0, abs=1e-6)

    def test_one_tenth_au(self):
        assert miss_distance_km((1.1, 0.0, 0.0), 0.0) == pytest.approx(14_959_787.07)


# ── Population ───────────────────────────────────────────────────────

class TestAssessEncounter:

    def test_result_fields(self):
        body = CelestialBody(id='2000433', name='433 Eros', elements=_eros())
        result = assess_encounter(body, _EROS_EPOCH_MS, 0.0)
        assert isinstance(result, EncounterResult)
        assert result.body_id == '2000433'
        assert result.mean_anomaly_deg == pytest.approx(310.5543277370992)
        assert result.earth_position_au == (1.0, 0.0, 0.0)
        expected = au_to_km(distance_au(result.state.position_au, (1.0, 0.0, 0.0)))
        assert result.miss_distance_km == pytest.approx(expected)

    def test_no_elements_none(self):
        assert assess_encounter(CelestialBody(id='x', name='x'), 0.0, 0.0) is None

    def test_frozen(self):
        body = CelestialBody(id='2000433', name='433 Eros', elements=_eros())
        result = assess_encounter(body, _EROS_EPOCH_MS, 0.0)
        with pytest.raises(AttributeError):
            result.miss_distance_km = 0.0


class TestEncounterPositions:

    def test_unknown_orbits_skipped(self):
        bodies = [
            CelestialBody(id='a', name='A', elements=_eros()),
            CelestialBody(id='b', name='B'),
            CelestialBody(id='c', name='C', elements=OrbitalElementSet(None, None)),
        ]
        positions = encounter_positions(bodies, _EROS_EPOCH_MS)
        assert set(positions) == {'a'}

    def test_empty(self):
        assert encounter_positions([], 0.0) == {}


# ── Domain purity ────────────────────────────────────────────────────

class TestEncounterPurity:

    def test_imports_only_stdlib_numpy_and_domain(self):
        import neodeflect.domain.encounter as mod

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
