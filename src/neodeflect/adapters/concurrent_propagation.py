# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Population encounter assessment, sequential or on a thread pool.

Each body is placed at the encounter epoch independently, so the work
fans out per body. Bodies with an unknown orbit or phase are skipped
with a warning; a failing body never aborts the batch.

External dependencies (concurrent.futures) are confined to this adapter.
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed

from neodeflect.domain.encounter import EncounterResult, assess_encounter
from neodeflect.domain.neo import CelestialBody


_log = logging.getLogger(__name__)


def assess_population(
    bodies: list[CelestialBody],
    epoch_ms: float,
    elapsed_days: float,
    planar: bool = False,
) -> list[EncounterResult]:
    """Sequential pass, input order preserved."""
    results: list[EncounterResult] = []
    for body in bodies:
        result = assess_encounter(body, epoch_ms, elapsed_days, planar=planar)
        if result is None:
            _log.warning("Skipping %s: orbit unknown", body.name)
            continue
        results.append(result)
    _log.debug("Assessed %d of %d bodies", len(results), len(bodies))
    return results


class ConcurrentPropagator:
    """
    Places a population at an epoch using a thread pool.

    Results come back in input order, identical to assess_population.

    Args:
        max_workers: Thread pool size.
            Default: min(32, os.cpu_count() + 4) — same as Python default.
    """

    def __init__(self, max_workers: int | None = None):
        self._max_workers = max_workers or min(32, (os.cpu_count() or 1) + 4)

    def assess(
        self,
        bodies: list[CelestialBody],
        epoch_ms: float,
        elapsed_days: float,
        planar: bool = False,
    ) -> list[EncounterResult]:
        by_index: dict[int, EncounterResult] = {}

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = {
                executor.submit(
                    assess_encounter, body, epoch_ms, elapsed_days, planar
                ): (index, body)
                for index, body in enumerate(bodies)
            }

            for future in as_completed(futures):
                index, body = futures[future]
                try:
                    result = future.result()
                except (ArithmeticError, ValueError, TypeError) as e:
                    _log.warning("Skipping %s: %s", body.name, e)
                    continue
                if result is None:
                    _log.warning("Skipping %s: orbit unknown", body.name)
                    continue
                by_index[index] = result

        _log.debug("Assessed %d of %d bodies concurrently", len(by_index), len(bodies))
        return [by_index[i] for i in sorted(by_index)]
