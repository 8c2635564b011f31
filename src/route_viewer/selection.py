"""Selection state shared by the table view and the geometric view.

A point can be selected either by its position in the uploaded list
(original index) or by its position in the tour (route index). The linker
resolves one into the other so both views highlight the same location.

Points built by the loader carry a stable ``uid`` and are linked by it.
Coordinate matching within ``COORDINATE_TOLERANCE`` is kept as a best-effort
fallback for points without identities; it cannot tell duplicate or
near-duplicate coordinates apart and always resolves to the first match.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Sequence

from src.route_viewer.errors import SelectionOutOfRange
from src.route_viewer.models import Point, RoutePoint

logger = logging.getLogger(__name__)

COORDINATE_TOLERANCE = 1e-3


def points_match(a: Point, b: Point, tolerance: float = COORDINATE_TOLERANCE) -> bool:
    """True if both axes differ by at most ``tolerance``."""
    return abs(a.x - b.x) <= tolerance and abs(a.y - b.y) <= tolerance


def resolve_route_index_from_original(
    original_index: int | None,
    original_points: Sequence[Point],
    route: Sequence[Point] | None,
) -> int | None:
    """
    Find the tour position of an uploaded point by coordinates.

    Args:
        original_index: Index into ``original_points``
        original_points: Points in upload order
        route: Points in tour order

    Returns:
        Index of the first route point within tolerance, or None if the
        index is invalid or nothing matches
    """
    if original_index is None or not route:
        return None
    if not 0 <= original_index < len(original_points):
        return None

    target = original_points[original_index]
    for route_index, candidate in enumerate(route):
        if points_match(target, candidate):
            return route_index
    return None


def resolve_original_index_from_route(
    route_index: int | None,
    original_points: Sequence[Point],
    route: Sequence[Point] | None,
) -> int | None:
    """Find the upload position of a tour point by coordinates."""
    if route_index is None or not route:
        return None
    if not 0 <= route_index < len(route):
        return None

    target = route[route_index]
    for original_index, candidate in enumerate(original_points):
        if points_match(target, candidate):
            return original_index
    return None


def assign_route_identities(
    original_points: Sequence[Point],
    route: Sequence[RoutePoint],
) -> tuple[RoutePoint, ...]:
    """
    Give route points the ``uid`` of the original point at the same location.

    Each original point is claimed at most once, so duplicated coordinates
    receive distinct identities in tour order. Route points that already have
    a ``uid``, or that match nothing, are returned unchanged.

    This is a nested scan (O(n^2)) run once when a solution is built, not on
    every render.
    """
    claimed: set[int] = {p.uid for p in route if p.uid is not None}
    linked: list[RoutePoint] = []

    for route_point in route:
        if route_point.uid is not None:
            linked.append(route_point)
            continue

        match = None
        for original in original_points:
            if original.uid is None or original.uid in claimed:
                continue
            if points_match(original, route_point):
                match = original
                break

        if match is None:
            logger.debug(f"Route point {route_point.order} has no matching original point")
            linked.append(route_point)
            continue

        claimed.add(match.uid)
        linked.append(dataclasses.replace(route_point, uid=match.uid))

    return tuple(linked)


@dataclass(frozen=True)
class SelectionState:
    """At most one of ``original_index`` / ``route_index`` is set."""

    original_index: int | None = None
    route_index: int | None = None

    def __post_init__(self):
        if self.original_index is not None and self.route_index is not None:
            raise ValueError("Selection must be exclusive to one view")

    @property
    def is_empty(self) -> bool:
        return self.original_index is None and self.route_index is None


def check_index(index: int | None, count: int, view: str) -> SelectionOutOfRange | None:
    """The failure for an index outside ``[0, count)``, or None if it is usable."""
    if index is None or 0 <= index < count:
        return None
    return SelectionOutOfRange(index, count, view)


def validate_index(index: int | None, count: int, view: str) -> int | None:
    """
    Treat an out-of-range index as no selection.

    Returns:
        ``index`` when it lies in ``[0, count)``, otherwise None
    """
    error = check_index(index, count, view)
    if error is not None:
        logger.warning(str(error))
        return None
    return index


def select_original(state: SelectionState, index: int | None, point_count: int) -> SelectionState:
    """
    Select an uploaded point, clearing any route selection.

    Selecting the currently selected index toggles it off.
    """
    index = validate_index(index, point_count, "original")
    if index is None or state.original_index == index:
        return SelectionState()
    return SelectionState(original_index=index)


def select_route(state: SelectionState, index: int | None, route_length: int) -> SelectionState:
    """Select a tour position, clearing any original selection (toggles)."""
    index = validate_index(index, route_length, "route")
    if index is None or state.route_index == index:
        return SelectionState()
    return SelectionState(route_index=index)


class SelectionLinker:
    """
    Resolve selections between the two views for one solution.

    Identity lookups are precomputed when every point carries a ``uid``;
    otherwise each lookup falls back to coordinate matching.
    """

    def __init__(self, original_points: Sequence[Point], route: Sequence[RoutePoint] | None):
        self.original_points = tuple(original_points)
        self.route = tuple(route or ())

        self.uses_identity = bool(self.route) and all(
            p.uid is not None for p in (*self.original_points, *self.route)
        )
        self._original_by_uid: dict[int, int] = {}
        self._route_by_uid: dict[int, int] = {}
        if self.uses_identity:
            for index, point in enumerate(self.original_points):
                self._original_by_uid.setdefault(point.uid, index)
            for index, point in enumerate(self.route):
                self._route_by_uid.setdefault(point.uid, index)

    def route_index_for(self, original_index: int | None) -> int | None:
        """Tour position of an uploaded point, or None."""
        if original_index is None or not 0 <= original_index < len(self.original_points):
            return None
        if self.uses_identity:
            return self._route_by_uid.get(self.original_points[original_index].uid)
        return resolve_route_index_from_original(original_index, self.original_points, self.route)

    def original_index_for(self, route_index: int | None) -> int | None:
        """Upload position of a tour point, or None."""
        if route_index is None or not 0 <= route_index < len(self.route):
            return None
        if self.uses_identity:
            return self._original_by_uid.get(self.route[route_index].uid)
        return resolve_original_index_from_route(route_index, self.original_points, self.route)

    def linked(self, state: SelectionState) -> tuple[int | None, int | None]:
        """
        Both indices of the selected point.

        Returns:
            (original_index, route_index) where the inactive side is resolved
            through the linker and may be None
        """
        if state.original_index is not None:
            return state.original_index, self.route_index_for(state.original_index)
        if state.route_index is not None:
            return self.original_index_for(state.route_index), state.route_index
        return None, None
