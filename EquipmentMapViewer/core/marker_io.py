"""Marker layout import/export using Polars.

Marker layouts can be exchanged as:

- JSON: ``{"image": "<diagram file name>", "markers": [{"id", "x", "y",
  "zone", "equipment": [...]}, ...]}``
- CSV: one row per equipment item with columns ``marker_id, x, y, zone,
  part_number, alternate_part_numbers, description, function_location,
  quantity, status``. Markers without equipment get a single row with empty
  equipment columns. Rows sharing a ``marker_id`` are merged into one
  marker; the first row's position wins.

Notes:
- Positions are percentages of the image size and are clamped to [0, 100]
  on load.
- Alternate part numbers are stored ``;``-separated in CSV because function
  locations already use commas.
"""

from __future__ import annotations

import json
import logging
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import polars as pl

from .markers import EquipmentItem, Marker, new_marker_id
from .viewport import clamp_percent

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "marker_id",
    "x",
    "y",
    "zone",
    "part_number",
    "alternate_part_numbers",
    "description",
    "function_location",
    "quantity",
    "status",
]

MARKER_FILE_EXTENSIONS = (".json", ".csv")


class MarkerFileError(ValueError):
    """Raised when a marker file cannot be read or is malformed."""


def is_marker_file(path) -> bool:
    return Path(path).suffix.lower() in MARKER_FILE_EXTENSIONS


# ------------------------
# Loaders
# ------------------------
def load_markers(path) -> Tuple[List[Marker], Optional[str]]:
    """Load a marker layout from a JSON or CSV file.

    Returns:
        (markers, image_name): image_name is only known for JSON files

    Raises:
        MarkerFileError: If the file is missing, unreadable or malformed
    """
    p = Path(path)
    ext = p.suffix.lower()
    if ext == ".json":
        markers, image_name = load_markers_json(p)
    elif ext == ".csv":
        markers, image_name = load_markers_csv(p), None
    else:
        raise MarkerFileError(f"Unsupported marker file type: {p.name}")
    logger.info("Loaded %d markers from %s", len(markers), p)
    return markers, image_name


def load_markers_json(path) -> Tuple[List[Marker], Optional[str]]:
    p = Path(path)
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise MarkerFileError(f"Cannot read {p.name}: {e}") from e

    # A bare list of markers is accepted as well
    if isinstance(data, list):
        data = {"markers": data}
    if not isinstance(data, dict) or not isinstance(data.get("markers", []), list):
        raise MarkerFileError(f"{p.name}: expected an object with a 'markers' list")

    markers: List[Marker] = []
    for i, entry in enumerate(data.get("markers") or []):
        try:
            markers.append(Marker.from_dict(entry))
        except (KeyError, TypeError, ValueError) as e:
            raise MarkerFileError(f"{p.name}: marker #{i} is invalid ({e})") from e
    return markers, data.get("image")


def _cell(row: Dict[str, Any], key: str) -> str:
    v = row.get(key)
    return "" if v is None else str(v).strip()


def load_markers_csv(path) -> List[Marker]:
    p = Path(path)
    try:
        df = pl.read_csv(str(p), infer_schema_length=0)
    except Exception as e:
        raise MarkerFileError(f"Cannot read {p.name}: {e}") from e

    missing = {"x", "y"} - set(df.columns)
    if missing:
        raise MarkerFileError(f"{p.name}: missing column(s) {', '.join(sorted(missing))}")

    by_id: "OrderedDict[str, Marker]" = OrderedDict()
    for i, row in enumerate(df.to_dicts()):
        marker_id = _cell(row, "marker_id") or new_marker_id()
        marker = by_id.get(marker_id)
        if marker is None:
            try:
                x = clamp_percent(float(_cell(row, "x")))
                y = clamp_percent(float(_cell(row, "y")))
            except ValueError as e:
                raise MarkerFileError(f"{p.name}: row {i + 1} has an invalid position") from e
            marker = Marker(id=marker_id, x_percent=x, y_percent=y, zone=_cell(row, "zone") or None)
            by_id[marker_id] = marker

        part_number = _cell(row, "part_number")
        if not part_number:
            continue
        quantity = _cell(row, "quantity")
        try:
            qty = int(float(quantity)) if quantity else None
        except ValueError as e:
            raise MarkerFileError(f"{p.name}: row {i + 1} has an invalid quantity") from e
        marker.payload.append(
            EquipmentItem(
                part_number=part_number,
                description=_cell(row, "description"),
                function_location=_cell(row, "function_location"),
                alternate_part_numbers=_cell(row, "alternate_part_numbers").split(";"),
                quantity=qty,
                status=_cell(row, "status") or None,
            )
        )
    return list(by_id.values())


# ------------------------
# Export helpers
# ------------------------
def markers_to_polars(markers: Sequence[Marker]) -> pl.DataFrame:
    """Flatten markers into one row per equipment item."""
    rows: List[Dict[str, Any]] = []
    for m in markers:
        base = {"marker_id": m.id, "x": float(m.x_percent), "y": float(m.y_percent), "zone": m.zone or ""}
        items: Iterable[Optional[EquipmentItem]] = m.payload or [None]
        for item in items:
            row = dict(base)
            row["part_number"] = item.part_number if item else ""
            row["alternate_part_numbers"] = ";".join(item.alternate_part_numbers) if item else ""
            row["description"] = item.description if item else ""
            row["function_location"] = item.function_location if item else ""
            row["quantity"] = item.quantity if item else None
            row["status"] = (item.status or "") if item else ""
            rows.append(row)
    schema = {
        "marker_id": pl.Utf8,
        "x": pl.Float64,
        "y": pl.Float64,
        "zone": pl.Utf8,
        "part_number": pl.Utf8,
        "alternate_part_numbers": pl.Utf8,
        "description": pl.Utf8,
        "function_location": pl.Utf8,
        "quantity": pl.Int64,
        "status": pl.Utf8,
    }
    return pl.DataFrame(rows, schema=schema)


def save_markers(path, markers: Sequence[Marker], image_name: Optional[str] = None) -> None:
    """Save markers as JSON or CSV depending on the file extension.

    Raises:
        MarkerFileError: For unsupported extensions or write failures
    """
    p = Path(path)
    ext = p.suffix.lower()
    try:
        if ext == ".json":
            out = {"image": image_name, "markers": [m.to_dict() for m in markers]}
            with open(p, "w", encoding="utf-8") as f:
                json.dump(out, f, ensure_ascii=False, indent=2)
                f.write("\n")
        elif ext == ".csv":
            markers_to_polars(markers).write_csv(str(p))
        else:
            raise MarkerFileError(f"Unsupported marker file type: {p.name}")
    except OSError as e:
        raise MarkerFileError(f"Cannot write {p.name}: {e}") from e
    logger.info("Saved %d markers to %s", len(markers), p)
