"""Function-location search and highlight resolution.

Users type part of a function-location code; every equipment item whose
code contains the query (case-insensitive) is a match. The match count
decides what gets highlighted on the diagram:

- 1 match: that marker is the primary highlight (close-up framing)
- 2..limit matches: all matching markers are highlighted and framed together
- more than ``limit``: the query is too general, nothing is highlighted
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .constants import HIGHLIGHT_LIMIT, MARKER_DRAW_RADIUS
from .markers import Marker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HighlightSet:
    """Markers to emphasize and frame.

    Attributes:
        primary: Marker id shown as the main highlight, or None
        ids: Marker ids highlighted together; empty for single highlights
    """

    primary: Optional[str] = None
    ids: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.primary is None and not self.ids

    def contains(self, marker_id: str) -> bool:
        return marker_id == self.primary or marker_id in self.ids

    @classmethod
    def single(cls, marker_id: str) -> "HighlightSet":
        return cls(primary=marker_id)


EMPTY_HIGHLIGHT = HighlightSet()


@dataclass(frozen=True)
class FunctionLocationMatch:
    function_location: str
    marker_id: str
    description: str


def find_function_locations(markers: Sequence[Marker], query: str) -> List[FunctionLocationMatch]:
    """Return every equipment item whose function location contains ``query``.

    Matches are listed in marker order, then equipment order. A blank query
    matches nothing.
    """
    needle = (query or "").strip().upper()
    if not needle:
        return []
    matches: List[FunctionLocationMatch] = []
    for marker in markers:
        for item in marker.payload:
            if item.function_location and needle in item.function_location.upper():
                matches.append(FunctionLocationMatch(item.function_location, marker.id, item.description))
    return matches


def resolve_highlights(matches: Sequence[FunctionLocationMatch], limit: int = HIGHLIGHT_LIMIT) -> HighlightSet:
    """Turn search matches into a highlight set.

    Args:
        matches: Output of ``find_function_locations``
        limit: Largest match count that is still highlighted

    Returns:
        HighlightSet (possibly empty)
    """
    if len(matches) == 1:
        return HighlightSet.single(matches[0].marker_id)
    if 1 < len(matches) <= limit:
        unique_ids: List[str] = []
        for m in matches:
            if m.marker_id not in unique_ids:
                unique_ids.append(m.marker_id)
        return HighlightSet(primary=unique_ids[0], ids=tuple(unique_ids))
    if len(matches) > limit:
        logger.debug("%d function-location matches exceed limit %d; not highlighting", len(matches), limit)
    return EMPTY_HIGHLIGHT


def search_highlights(
    markers: Sequence[Marker],
    query: str,
    limit: int = HIGHLIGHT_LIMIT,
    picked: Optional[HighlightSet] = None,
):
    """Convenience wrapper returning ``(matches, highlight)`` for a query.

    ``picked`` is a highlight the user chose from the result list. It is
    kept as long as its markers are still among the matches, so editing
    markers does not replace it with the search-wide highlight.
    """
    matches = find_function_locations(markers, query)
    if picked is not None and not picked.is_empty:
        matched_ids = {m.marker_id for m in matches}
        picked_ids = set(picked.ids) | ({picked.primary} if picked.primary else set())
        if picked_ids <= matched_ids:
            return matches, picked
    return matches, resolve_highlights(matches, limit)


def highlight_size(marker_id: str, highlight: HighlightSet) -> float:
    """Size multiplier of a marker drawn under ``highlight``.

    The lone primary highlight is three times the normal size, the primary
    of a group 2.5 times and the other group members twice.
    """
    if highlight.primary is not None and marker_id == highlight.primary:
        return 2.5 if highlight.ids else 3.0
    if marker_id in highlight.ids:
        return 2.0
    return 1.0


def marker_pick_radius(
    highlight: HighlightSet,
    hit_radius: float,
    draw_radius: float = MARKER_DRAW_RADIUS,
) -> Callable[[Marker], float]:
    """Return a per-marker pick radius for ``hit_test``.

    Enlarged markers can be picked anywhere on their drawn disk; normal
    markers keep ``hit_radius``.
    """

    def radius(marker: Marker) -> float:
        return max(hit_radius, draw_radius * highlight_size(marker.id, highlight))

    return radius
