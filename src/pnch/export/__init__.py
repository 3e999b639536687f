"""Renderers for query results.

Exports machine-readable formats (CSV, JSON, YAML) and the human-facing
list and table views.
"""
from __future__ import annotations

from pnch.export.pretty import build_table, render_list, total_minutes
from pnch.export.records import CSV_COLUMNS, punch_to_dict, to_csv, to_json, to_yaml

__all__ = [
    "CSV_COLUMNS",
    "build_table",
    "punch_to_dict",
    "render_list",
    "to_csv",
    "to_json",
    "to_yaml",
    "total_minutes",
]
