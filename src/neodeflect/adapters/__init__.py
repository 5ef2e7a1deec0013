# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters for catalog input, result export and population propagation.

External dependencies (json, csv, file I/O, thread pools) are confined
to this layer.
"""
from neodeflect.adapters.json_io import JsonNeoCatalogReader, JsonResultWriter
from neodeflect.adapters.csv_exporter import CsvPositionExporter, CsvPathExporter
from neodeflect.adapters.sample_catalog import SAMPLE_ROWS, SampleCatalog
from neodeflect.adapters.concurrent_propagation import (
    ConcurrentPropagator,
    assess_population,
)
