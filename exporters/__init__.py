"""
Exporters Package
=================

This package contains all workbook/zip output for the shipping pipeline.

Classes:
    - SheetWriter: Shared worksheet writer (bold header, borders, highlight)
    - AggregateExporter: Item aggregation workbook
    - CjUploadExporter: Per-item CJ upload workbooks in a zip
    - TrackingExporter: Original export with tracking numbers
    - UnmatchedExporter: Unmatched reply list

Usage:
    from exporters import TrackingExporter

    exporter = TrackingExporter(job.original_headers, job.original_rows)
    exporter.export(output_dir)
"""

from .base_exporter import SheetWriter, write_workbook
from .aggregate_exporter import AggregateExporter
from .upload_exporter import CjUploadExporter
from .tracking_exporter import TrackingExporter, UnmatchedExporter, is_tracking_header

__all__ = [
    "SheetWriter",
    "write_workbook",
    "AggregateExporter",
    "CjUploadExporter",
    "TrackingExporter",
    "UnmatchedExporter",
    "is_tracking_header",
]
