# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for NEO catalogs and result export.

Adapters implement these to handle different sources and file formats.
"""
from typing import Any, Protocol, runtime_checkable

from neodeflect.domain.neo import CelestialBody


@runtime_checkable
class NeoCatalogSource(Protocol):
    """Port for loading near-Earth object records."""

    def load_bodies(self) -> list[CelestialBody]:
        """Load and parse all bodies from the source."""
        ...


@runtime_checkable
class ResultExporter(Protocol):
    """Port for writing computed results to file."""

    def export(self, rows: Any, path: str) -> int:
        """
        Write results to a file.

        Args:
            rows: Results to write (format depends on the adapter).
            path: Output file path.

        Returns:
            Number of records written.
        """
        ...
