"""Equipment markers and their payload.

A marker is a point on a diagram stored in percent-of-image coordinates so
it stays valid for any rendered size. Its payload is the list of equipment
items installed at that location.

The interaction controller never edits markers directly; it emits intents
(see ``intents.py``) and the host applies them with ``apply_intents``.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from .intents import MarkerAdded, MarkerMoved, MarkerDeleteRequested
from .viewport import ImageGeometry, ViewportTransform, clamp_percent


def normalize_part_numbers(values: Iterable[str]) -> List[str]:
    """Upper-case and strip part numbers, dropping blanks and duplicates.

    Order is preserved; the first entry is the primary part number.
    """
    result: List[str] = []
    for v in values or []:
        pn = str(v).strip().upper()
        if pn and pn not in result:
            result.append(pn)
    return result


def split_function_locations(text: Optional[str]) -> List[str]:
    """Split a comma separated function-location field into codes."""
    if not text:
        return []
    return [loc.strip() for loc in str(text).split(",") if loc.strip()]


@dataclass
class EquipmentItem:
    """One piece of equipment installed at a marker location."""

    part_number: str
    description: str = ""
    function_location: str = ""
    alternate_part_numbers: List[str] = field(default_factory=list)
    quantity: Optional[int] = None
    status: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        self.part_number = str(self.part_number or "").strip().upper()
        self.alternate_part_numbers = [
            pn for pn in normalize_part_numbers(self.alternate_part_numbers) if pn != self.part_number
        ]

    @property
    def function_locations(self) -> List[str]:
        return split_function_locations(self.function_location)

    @property
    def all_part_numbers(self) -> List[str]:
        return normalize_part_numbers([self.part_number] + self.alternate_part_numbers)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "partNumber": self.part_number,
            "description": self.description,
            "functionLocation": self.function_location,
            "alternatePartNumbers": list(self.alternate_part_numbers),
        }
        if self.id is not None:
            d["id"] = self.id
        if self.quantity is not None:
            d["quantity"] = self.quantity
        if self.status is not None:
            d["status"] = self.status
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EquipmentItem":
        alternates = data.get("alternatePartNumbers") or data.get("alternate_part_numbers") or []
        if isinstance(alternates, str):
            alternates = alternates.split(",")
        quantity = data.get("quantity")
        return cls(
            part_number=data.get("partNumber", data.get("part_number", "")),
            description=data.get("description") or "",
            function_location=data.get("functionLocation", data.get("function_location")) or "",
            alternate_part_numbers=list(alternates),
            quantity=int(quantity) if quantity is not None else None,
            status=data.get("status"),
            id=data.get("id"),
        )


@dataclass
class Marker:
    """A point of interest on a diagram.

    Attributes:
        id: Stable identifier (used by highlight sets)
        x_percent: Horizontal position, 0-100 of the image width
        y_percent: Vertical position, 0-100 of the image height
        payload: Equipment installed at this location
        zone: Optional free-text zone label
    """

    id: str
    x_percent: float
    y_percent: float
    payload: List[EquipmentItem] = field(default_factory=list)
    zone: Optional[str] = None

    @property
    def position(self) -> tuple[float, float]:
        return (self.x_percent, self.y_percent)

    def moved_to(self, x_percent: float, y_percent: float) -> "Marker":
        return replace(self, x_percent=clamp_percent(x_percent), y_percent=clamp_percent(y_percent))

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "x": self.x_percent,
            "y": self.y_percent,
            "equipment": [item.to_dict() for item in self.payload],
        }
        if self.zone:
            d["zone"] = self.zone
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Marker":
        return cls(
            id=str(data.get("id") or new_marker_id()),
            x_percent=clamp_percent(float(data["x"])),
            y_percent=clamp_percent(float(data["y"])),
            payload=[EquipmentItem.from_dict(item) for item in data.get("equipment") or []],
            zone=data.get("zone"),
        )


def new_marker_id() -> str:
    return uuid.uuid4().hex[:12]


def find_marker_index(markers: Sequence[Marker], marker_id: str) -> Optional[int]:
    for i, m in enumerate(markers):
        if m.id == marker_id:
            return i
    return None


def hit_test(
    markers: Sequence[Marker],
    screen_point: tuple[float, float],
    transform: ViewportTransform,
    geometry: ImageGeometry,
    radius: Union[float, Callable[[Marker], float]],
) -> Optional[int]:
    """Return the index of the marker under ``screen_point``.

    Markers are drawn at a constant screen size, so the pick radius is in
    screen pixels. ``radius`` is either one value for every marker or a
    callable giving each marker's radius (highlighted markers are drawn
    larger). The nearest marker wins; on equal distance the one drawn last
    (topmost) wins.

    Returns:
        Marker index, or None if nothing is within reach
    """
    if geometry.is_empty:
        return None
    radius_of = radius if callable(radius) else (lambda _m: radius)
    best_index = None
    best_dist = math.inf
    px, py = screen_point
    for i, m in enumerate(markers):
        sx, sy = transform.image_percent_to_screen(m.position, geometry)
        dist = math.hypot(sx - px, sy - py)
        if dist <= radius_of(m) and dist <= best_dist:
            best_index = i
            best_dist = dist
    return best_index


def apply_intents(
    markers: Sequence[Marker],
    intents: Iterable[Any],
    new_marker_factory: Optional[Callable[[float, float], Optional[Marker]]] = None,
) -> List[Marker]:
    """Apply marker intents emitted by the controller to a marker list.

    Moves and deletions address markers by index. ``MarkerAdded`` only
    produces a marker when ``new_marker_factory`` is given (the editor
    normally opens a form first). Other intents are ignored.

    Returns:
        A new list; ``markers`` is left untouched.
    """
    result = list(markers)
    for intent in intents:
        if isinstance(intent, MarkerMoved):
            if 0 <= intent.index < len(result):
                result[intent.index] = result[intent.index].moved_to(intent.x_percent, intent.y_percent)
        elif isinstance(intent, MarkerDeleteRequested):
            if 0 <= intent.index < len(result):
                del result[intent.index]
        elif isinstance(intent, MarkerAdded) and new_marker_factory is not None:
            marker = new_marker_factory(intent.x_percent, intent.y_percent)
            if marker is not None:
                result.append(marker)
    return result


def build_equipment_item(
    part_numbers: Iterable[str],
    description: str,
    function_locations: Iterable[str],
    quantity: Optional[int] = None,
    status: Optional[str] = None,
) -> EquipmentItem:
    """Build an item from form fields.

    The first non-blank part number is the primary one; the rest become
    alternates. Function locations are joined with ", ".

    Raises:
        ValueError: If no part number is given
    """
    pns = normalize_part_numbers(part_numbers)
    if not pns:
        raise ValueError("at least one part number is required")
    locations = [loc.strip() for loc in function_locations or [] if loc and loc.strip()]
    return EquipmentItem(
        part_number=pns[0],
        description=(description or "").strip(),
        function_location=", ".join(locations),
        alternate_part_numbers=pns[1:],
        quantity=quantity,
        status=status,
    )


def find_known_item(markers: Sequence[Marker], part_number: str) -> Optional[EquipmentItem]:
    """Return the first item that lists ``part_number`` as primary or alternate.

    Used to pre-fill the description and alternates of a new marker.
    """
    pn = (part_number or "").strip().upper()
    if not pn:
        return None
    for marker in markers:
        for item in marker.payload:
            if pn in item.all_part_numbers:
                return item
    return None


def known_part_numbers(markers: Sequence[Marker]) -> List[str]:
    """All part numbers used in ``markers``, sorted."""
    seen = set()
    for marker in markers:
        for item in marker.payload:
            seen.update(item.all_part_numbers)
    return sorted(seen)
