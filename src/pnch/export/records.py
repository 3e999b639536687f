"""Machine-readable renderings of a list of punches: CSV, JSON and YAML."""
from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable
from typing import Any

import yaml

from pnch.punches import Punch

CSV_COLUMNS: tuple[str, ...] = ("tag", "description", "date", "in", "out")


def punch_to_dict(punch: Punch) -> dict[str, Any]:
    """Return a plain mapping for one punch; absent values are ``None``."""
    return {
        "id": punch.id,
        "date": str(punch.date),
        "in": str(punch.time_in),
        "out": str(punch.time_out) if punch.time_out is not None else None,
        "minutes": punch.duration(),
        "tag": punch.tag.text if punch.tag is not None else None,
        "description": punch.description,
    }


def to_csv(punches: Iterable[Punch]) -> str:
    """Render ``tag,description,date,in,out`` rows, empty fields when absent.

    No header row is written.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for punch in punches:
        writer.writerow(
            [
                punch.tag.text if punch.tag is not None else "",
                punch.description or "",
                str(punch.date),
                str(punch.time_in),
                str(punch.time_out) if punch.time_out is not None else "",
            ]
        )
    return buffer.getvalue()


def to_json(punches: Iterable[Punch], indent: int | None = 2) -> str:
    return json.dumps([punch_to_dict(p) for p in punches], indent=indent, ensure_ascii=False)


def to_yaml(punches: Iterable[Punch]) -> str:
    return yaml.safe_dump(
        [punch_to_dict(p) for p in punches],
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )
