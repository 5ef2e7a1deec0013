# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
CSV exporters for encounter positions and orbit paths.

Positions are written in AU; optional scene-unit columns are added
when a display scale is given.
External dependencies (csv, file I/O) are confined to this adapter.
"""
import csv
import math
from datetime import datetime, timezone

from neodeflect.domain.encounter import EncounterResult
from neodeflect.domain.orbit_sampling import TrajectoryPoint
from neodeflect.domain.state_vector import scale_for_display
from neodeflect.ports import ResultExporter


_POSITION_HEADER = [
    'id', 'name', 'epoch', 'x_au', 'y_au', 'z_au',
    'radius_au', 'true_anomaly_deg', 'mean_anomaly_deg', 'miss_km',
]
_SCENE_HEADER = ['x_scene', 'y_scene', 'z_scene']


def _iso(epoch_ms: float) -> str:
    return datetime.fromtimestamp(epoch_ms / 1000.0, tz=timezone.utc).isoformat()


class CsvPositionExporter(ResultExporter):
    """
    Exports encounter results, one row per body.

    Args:
        scene_units_per_au: When set, x/y/z scene columns are appended.
    """

    def __init__(self, scene_units_per_au: float | None = None):
        self._scale = scene_units_per_au

    def export(self, rows: list[EncounterResult], path: str) -> int:
        header = _POSITION_HEADER + (_SCENE_HEADER if self._scale else [])
        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(header)

            for result in rows:
                state = result.state
                row = [
                    result.body_id,
                    result.name,
                    _iso(result.epoch_ms),
                    f'{state.x_au:.9f}',
                    f'{state.y_au:.9f}',
                    f'{state.z_au:.9f}',
                    f'{state.radius_au:.9f}',
                    f'{math.degrees(state.true_anomaly_rad):.6f}',
                    f'{result.mean_anomaly_deg:.6f}',
                    f'{result.miss_distance_km:.1f}',
                ]
                if self._scale:
                    row += [f'{c:.3f}' for c in scale_for_display(state.position_au, self._scale)]
                writer.writerow(row)

        return len(rows)


class CsvPathExporter(ResultExporter):
    """
    Exports an orbit polyline or a time-indexed trajectory.

    Accepts either (x, y, z) tuples in AU or TrajectoryPoint objects;
    trajectories get an epoch column.
    """

    def __init__(self, scene_units_per_au: float | None = None):
        self._scale = scene_units_per_au

    def export(self, rows: list[tuple[float, float, float]] | list[TrajectoryPoint], path: str) -> int:
        timed = bool(rows) and isinstance(rows[0], TrajectoryPoint)
        header = (['epoch'] if timed else ['index']) + ['x_au', 'y_au', 'z_au']
        if self._scale:
            header += _SCENE_HEADER

        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(header)

            for index, item in enumerate(rows):
                if timed:
                    lead = _iso(item.epoch_ms)
                    position = item.state.position_au
                else:
                    lead = index
                    position = item
                row = [lead] + [f'{c:.9f}' for c in position]
                if self._scale:
                    row += [f'{c:.3f}' for c in scale_for_display(position, self._scale)]
                writer.writerow(row)

        return len(rows)
