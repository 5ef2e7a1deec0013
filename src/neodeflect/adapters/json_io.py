# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
JSON catalog reader and result writer.

Reads NEO catalogs saved from NASA NeoWs (browse or feed payloads) or
in the flattened approach-row layout, and writes computed results as
indented UTF-8 JSON.

External dependencies (json, file I/O) are confined to this adapter.
"""
import json
import logging
from typing import Any

from neodeflect.domain.neo import CelestialBody, parse_approach_row, parse_neo_record
from neodeflect.ports import NeoCatalogSource, ResultExporter


_log = logging.getLogger(__name__)


def _records_from_payload(payload: Any) -> list[dict]:
    """Flatten the supported catalog layouts into one list of dicts."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if "near_earth_objects" in payload:
            neos = payload["near_earth_objects"]
            # feed payloads group objects by date
            if isinstance(neos, dict):
                return [neo for day in sorted(neos) for neo in neos[day]]
            return list(neos)
        if "items" in payload:
            return list(payload["items"])
    raise ValueError(
        "Unsupported catalog layout: expected a list of rows, "
        "{'items': [...]} or a NeoWs payload with 'near_earth_objects'"
    )


class JsonNeoCatalogReader(NeoCatalogSource):
    """
    Loads CelestialBody objects from a JSON catalog file.

    Args:
        path: JSON file path.
        now_ms: Ignore NeoWs close approaches before this epoch.
        horizon_ms: Ignore NeoWs close approaches after this epoch.
    """

    def __init__(
        self,
        path: str,
        now_ms: float | None = None,
        horizon_ms: float | None = None,
    ):
        self._path = path
        self._now_ms = now_ms
        self._horizon_ms = horizon_ms

    def read_payload(self) -> Any:
        with open(self._path, encoding='utf-8') as f:
            return json.load(f)

    def load_bodies(self) -> list[CelestialBody]:
        """
        Parse every record of the catalog.

        Records without an ``id`` or with a malformed structure are
        skipped with a warning.

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file is not valid JSON.
            ValueError: If the JSON layout is not a supported catalog.
        """
        bodies: list[CelestialBody] = []
        for record in _records_from_payload(self.read_payload()):
            if not isinstance(record, dict):
                _log.warning("Skipping non-object catalog entry: %r", record)
                continue
            try:
                if "close_approach_data" in record or "estimated_diameter" in record:
                    body = parse_neo_record(record, self._now_ms, self._horizon_ms)
                else:
                    body = parse_approach_row(record)
            except KeyError as e:
                _log.warning("Skipping %s: missing %s", record.get('name', '?'), e)
                continue
            except (AttributeError, TypeError) as e:
                _log.warning("Skipping %s: malformed record (%s)", record.get('name', '?'), e)
                continue
            bodies.append(body)

        _log.debug("Loaded %d bodies from %s", len(bodies), self._path)
        return bodies


class JsonResultWriter(ResultExporter):
    """Writes result dicts to JSON files."""

    def export(self, rows: Any, path: str) -> int:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(rows, f, indent=2, ensure_ascii=False)
        return len(rows) if isinstance(rows, list) else 1
