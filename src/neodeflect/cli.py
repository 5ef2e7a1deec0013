# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Command-line interface for NEO positions, orbits, deflection and impacts.

Usage:
    # Catalog positions now (built-in sample when no file is given)
    neodeflect positions
    neodeflect positions -i neows_browse.json --epoch 2026-06-01T00:00:00Z -o pos.csv
    neodeflect positions -i rows.json --limit 10 --hazardous-only --concurrent

    # Orbit outline or trajectory of one body
    neodeflect orbit --body "433 Eros" -o eros.csv
    neodeflect orbit --body 2000433 --start 2026-01-01 --end 2027-01-01 --samples 365 -o eros_traj.csv

    # Kinetic-impactor deflection scenario
    neodeflect deflect --diameter-km 0.5 --years 2 --lead-days 200 -o deflect.json

    # Impact energy estimate
    neodeflect impact --diameter-km 5 --velocity-kps 20
"""
import argparse
import json
import logging
import sys
import time
from datetime import datetime, timezone

from neodeflect.config import DisplayConfig, MissionConfig
from neodeflect.domain.deflection import (
    AsteroidParams,
    DeflectionModel,
    DeflectionResult,
    DeflectionScenario,
    ImpactorParams,
    encounter_days,
    evaluate_deflection,
)
from neodeflect.domain.impact_energy import estimate_impact
from neodeflect.domain.neo import CelestialBody, select_approaches
from neodeflect.domain.orbit_sampling import element_set_shape, trajectory
from neodeflect.domain.orbital_mechanics import HeliocentricConstants
from neodeflect.adapters import (
    ConcurrentPropagator,
    CsvPathExporter,
    CsvPositionExporter,
    JsonNeoCatalogReader,
    JsonResultWriter,
    SampleCatalog,
    assess_population,
)


_log = logging.getLogger(__name__)

DEFAULT_APPROACH_LIMIT = 20


def _now_ms() -> float:
    return time.time() * 1000.0


def parse_epoch(text: str) -> float:
    """
    ISO-8601 date or datetime to ms since the Unix epoch.

    Naive values are read as UTC; a trailing ``Z`` is accepted.

    Raises:
        ValueError: If the text is not an ISO date.
    """
    dt = datetime.fromisoformat(text.strip().replace('Z', '+00:00'))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp() * 1000.0


def load_catalog(path: str | None) -> list[CelestialBody]:
    """Bodies from a JSON catalog, or the built-in sample when no path is given."""
    if path is None:
        _log.info("No catalog file given, using built-in sample catalog")
        return SampleCatalog().load_bodies()
    return JsonNeoCatalogReader(path).load_bodies()


def find_body(bodies: list[CelestialBody], key: str) -> CelestialBody:
    """
    Body by id or case-insensitive name.

    Raises:
        ValueError: If no body matches.
    """
    for body in bodies:
        if body.id == key or body.name.lower() == key.lower():
            return body
    raise ValueError(f"Body '{key}' not found in catalog")


def deflection_summary(result: DeflectionResult) -> dict:
    """Flat JSON-friendly view of a DeflectionResult."""
    scenario = result.scenario
    return {
        'asteroid': {
            'diameter_km': scenario.asteroid.diameter_km,
            'density_kg_m3': scenario.asteroid.density_kg_m3,
            'speed_kps': scenario.asteroid.speed_kps,
            'mass_kg': result.asteroid_mass_kg,
        },
        'impactor': {
            'mass_kg': scenario.impactor.mass_kg,
            'relative_speed_kps': scenario.impactor.relative_speed_kps,
            'beta': scenario.impactor.beta,
            'phi_deg': scenario.impactor.phi_deg,
            'lead_time_days': scenario.impactor.lead_time_days,
        },
        'timing': {
            'encounter_days': result.total_days,
            'burn_days': result.burn_days,
        },
        'delta_v': {
            'true_kps': result.delta_v.true_kps,
            'tangent_kps': result.delta_v.tangent_kps,
            'fractional_da_true': result.delta_v.fractional_da_true,
            'fractional_da_visual': result.delta_v.fractional_da_visual,
            'visual_gain': scenario.visual_gain,
        },
        'baseline_orbit': {
            'a_au': result.baseline.semi_major_axis_au,
            'e': result.baseline.eccentricity,
        },
        'deflected_orbit': {
            'a_au': result.deflected.semi_major_axis_au,
            'a_requested_au': result.requested_semi_major_axis_au,
            'e': result.deflected.eccentricity,
            'arg_perihelion_rad': result.deflected.arg_perihelion_rad,
        },
        'burn_position_au': list(result.burn_position_au),
        'impulse_direction': list(result.impulse_direction),
        'baseline_miss_km': result.baseline_miss_km,
        'miss_km': result.outcome.miss_km,
        'threshold_km': result.outcome.threshold_km,
        'success': result.outcome.success,
    }


def _emit(payload: dict, output: str | None) -> None:
    if output:
        JsonResultWriter().export(payload, output)
        print(f"Wrote {output}")
    else:
        print(json.dumps(payload, indent=2))


def run_positions(args: argparse.Namespace, display: DisplayConfig) -> None:
    now_ms = _now_ms()
    epoch_ms = parse_epoch(args.epoch) if args.epoch else now_ms
    bodies = load_catalog(args.input)

    if args.limit is not None or args.hazardous_only:
        limit = DEFAULT_APPROACH_LIMIT if args.limit is None else args.limit
        selection = select_approaches(bodies, now_ms, limit, args.hazardous_only)
        if selection.relaxed_hazard:
            _log.info("Too few hazardous approaches, hazard filter relaxed")
        bodies, _ = SampleCatalog().pad(selection.bodies, limit, now_ms)

    if args.earth_days is not None:
        elapsed_days = args.earth_days
    else:
        elapsed_days = (epoch_ms - now_ms) / HeliocentricConstants.MS_PER_DAY

    if args.concurrent:
        results = ConcurrentPropagator().assess(bodies, epoch_ms, elapsed_days, planar=args.planar)
    else:
        results = assess_population(bodies, epoch_ms, elapsed_days, planar=args.planar)

    if args.output:
        scale = display.scene_units_per_au if args.display_scale else None
        count = CsvPositionExporter(scene_units_per_au=scale).export(results, args.output)
        print(f"Exported {count} positions to {args.output}")
        return

    for r in results:
        x, y, z = r.state.position_au
        print(f"{r.name:<24} x={x:+.6f} y={y:+.6f} z={z:+.6f} AU  miss={r.miss_distance_km:,.0f} km")


def run_orbit(args: argparse.Namespace, display: DisplayConfig) -> None:
    body = find_body(load_catalog(args.input), args.body)
    if not body.orbit_known:
        raise ValueError(f"Orbit of '{body.name}' is unknown")

    if args.start or args.end:
        if not (args.start and args.end):
            raise ValueError("--start and --end must be given together")
        points = trajectory(
            body.elements, parse_epoch(args.start), parse_epoch(args.end),
            args.samples or 200, planar=args.planar,
        )
        if not points:
            raise ValueError(f"Orbit phase of '{body.name}' is unknown")
    else:
        points = element_set_shape(
            body.elements, args.samples or display.shape_samples, planar=args.planar, closed=True,
        )

    scale = display.scene_units_per_au if args.display_scale else None
    count = CsvPathExporter(scene_units_per_au=scale).export(points, args.output)
    print(f"Exported {count} points for {body.name} to {args.output}")


def run_deflect(args: argparse.Namespace, mission: MissionConfig) -> None:
    scenario = DeflectionScenario(
        asteroid=AsteroidParams(
            diameter_km=args.diameter_km,
            density_kg_m3=args.density or mission.default_density_kg_m3,
            speed_kps=args.speed_kps,
            mass_kg=args.asteroid_mass_kg,
        ),
        impactor=ImpactorParams(
            mass_kg=args.impactor_mass_kg,
            relative_speed_kps=args.relative_speed_kps,
            beta=args.beta,
            phi_deg=args.phi_deg,
            lead_time_days=args.lead_days,
        ),
        time_to_encounter_days=encounter_days(args.years, args.months, args.days),
        visual_gain=args.visual_gain,
    )
    result = evaluate_deflection(
        scenario, DeflectionModel(success_threshold_km=mission.success_threshold_km),
    )
    summary = deflection_summary(result)
    if args.paths:
        paths = result.sample_paths(args.paths)
        summary['paths'] = {
            'times_days': paths.times_days,
            'baseline_au': [list(p) for p in paths.baseline],
            'deflected_au': [list(p) for p in paths.deflected],
        }
    _emit(summary, args.output)


def run_impact(args: argparse.Namespace, mission: MissionConfig) -> None:
    estimate = estimate_impact(
        args.diameter_km,
        args.velocity_kps,
        density_kg_m3=args.density or mission.default_density_kg_m3,
        mass_kg=args.mass_kg,
    )
    _emit({
        'diameter_km': estimate.diameter_km,
        'velocity_kps': estimate.velocity_kps,
        'density_kg_m3': estimate.density_kg_m3,
        'mass_kg': estimate.mass_kg,
        'kinetic_energy_j': estimate.kinetic_energy_j,
        'energy_megatons': estimate.energy_megatons,
        'crater_diameter_km': estimate.crater_diameter_km,
        'severe_blast_radius_km': estimate.effects.severe_blast_radius_km,
        'affected_population': estimate.effects.affected_population,
    }, args.output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='neodeflect',
        description="Near-Earth object orbits, encounters, deflection and impact estimates",
    )
    parser.add_argument(
        '--verbose', '-v', action='count', default=0,
        help="Increase log verbosity (-v info, -vv debug)"
    )
    parser.add_argument(
        '--display-scale', type=float, default=None,
        help="Scene units per AU; adds scaled columns to CSV output (default: 1000000)"
    )
    sub = parser.add_subparsers(dest='command', required=True)

    pos = sub.add_parser('positions', help="Catalog positions and Earth miss distances")
    pos.add_argument('--input', '-i', help="Catalog JSON (NeoWs payload or approach rows)")
    pos.add_argument('--output', '-o', help="Write CSV instead of printing")
    pos.add_argument('--epoch', help="ISO-8601 epoch (default: now)")
    pos.add_argument(
        '--earth-days', type=float, default=None,
        help="Earth's elapsed days on its circular orbit (default: days from now to epoch)"
    )
    pos.add_argument(
        '--limit', type=int,
        help=f"Keep the N soonest upcoming approaches (default with --hazardous-only: {DEFAULT_APPROACH_LIMIT})"
    )
    pos.add_argument(
        '--hazardous-only', action='store_true', default=False,
        help="Prefer potentially hazardous bodies when selecting approaches"
    )
    pos.add_argument('--planar', action='store_true', help="Ignore inclination, node and perihelion")
    pos.add_argument(
        '--concurrent', action='store_true', default=False,
        help="Assess bodies on a thread pool"
    )

    orb = sub.add_parser('orbit', help="Orbit outline or trajectory for one body (CSV)")
    orb.add_argument('--input', '-i', help="Catalog JSON (default: built-in sample)")
    orb.add_argument('--body', required=True, help="Body id or name")
    orb.add_argument('--output', '-o', required=True, help="Output CSV path")
    orb.add_argument('--samples', type=int, help="Point count")
    orb.add_argument('--start', help="Trajectory start (ISO-8601)")
    orb.add_argument('--end', help="Trajectory end (ISO-8601)")
    orb.add_argument('--planar', action='store_true', help="Ignore inclination, node and perihelion")

    dfl = sub.add_parser('deflect', help="Kinetic-impactor deflection scenario (JSON)")
    dfl.add_argument('--diameter-km', type=float, default=800.0)
    dfl.add_argument('--density', type=float, default=None, help="Asteroid density kg/m³")
    dfl.add_argument('--speed-kps', type=float, default=22.0, help="Asteroid speed proxy km/s")
    dfl.add_argument('--asteroid-mass-kg', type=float, default=None)
    dfl.add_argument('--impactor-mass-kg', type=float, default=3.5e5)
    dfl.add_argument('--relative-speed-kps', type=float, default=7.0)
    dfl.add_argument('--beta', type=float, default=2.0, help="Momentum enhancement factor")
    dfl.add_argument('--phi-deg', type=float, default=15.0, help="Impact angle to the velocity vector")
    dfl.add_argument('--lead-days', type=float, default=30.0, help="Days before encounter of the burn")
    dfl.add_argument('--years', type=float, default=1.0)
    dfl.add_argument('--months', type=float, default=0.0)
    dfl.add_argument('--days', type=float, default=0.0)
    dfl.add_argument('--visual-gain', type=float, default=200.0)
    dfl.add_argument('--threshold-km', type=float, default=None, help="Success miss distance (default: 15000)")
    dfl.add_argument('--paths', type=int, default=0, help="Include N sampled path points")
    dfl.add_argument('--output', '-o', help="Write JSON instead of printing")

    imp = sub.add_parser('impact', help="Impact energy and crater estimate (JSON)")
    imp.add_argument('--diameter-km', type=float, required=True)
    imp.add_argument('--velocity-kps', type=float, required=True)
    imp.add_argument('--density', type=float, default=None, help="Density kg/m³ (default: 3000)")
    imp.add_argument('--mass-kg', type=float, default=None, help="Known mass, overrides density")
    imp.add_argument('--output', '-o', help="Write JSON instead of printing")

    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        display = DisplayConfig(
            scene_units_per_au=args.display_scale or DisplayConfig.scene_units_per_au,
        )
        threshold = getattr(args, 'threshold_km', None)
        mission = MissionConfig(
            success_threshold_km=MissionConfig.success_threshold_km if threshold is None else threshold,
        )

        if args.command == 'positions':
            run_positions(args, display)
        elif args.command == 'orbit':
            run_orbit(args, display)
        elif args.command == 'deflect':
            run_deflect(args, mission)
        elif args.command == 'impact':
            run_impact(args, mission)

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
