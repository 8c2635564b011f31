"""Load solutions from the solver service's JSON payloads."""

import json
import logging
import math
import os
from collections.abc import Mapping
from typing import Any

from src.route_viewer.errors import MalformedSolution
from src.route_viewer.models import Point, RoutePoint, Solution, SolutionStatus
from src.route_viewer.selection import assign_route_identities

logger = logging.getLogger(__name__)


def _coerce_float(value: Any) -> float | None:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    # json.load accepts NaN and Infinity, neither of which is an integer
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _checked_number(payload: Mapping, name: str, coerce, errors: list[MalformedSolution]):
    """Coerce an optional numeric field, reporting values that are present but unusable."""
    raw = payload.get(name)
    if raw is None:
        return None
    value = coerce(raw)
    if value is None:
        errors.append(MalformedSolution(f"{name} is not a finite number: {raw!r}", name))
    return value


def parse_point(raw: Any, uid: int | None = None) -> Point:
    """
    Parse a ``{"x", "y", "address"?}`` mapping.

    Raises:
        MalformedSolution: If the entry is not a mapping or a coordinate is
            missing or not a finite number
    """
    if not isinstance(raw, Mapping):
        raise MalformedSolution(f"Point must be an object, got {type(raw).__name__}", "originalPoints")

    x = _coerce_float(raw.get("x"))
    y = _coerce_float(raw.get("y"))
    if x is None or y is None:
        raise MalformedSolution(f"Point has invalid coordinates: {raw!r}", "originalPoints")

    return Point(x=x, y=y, address=_optional_str(raw.get("address")), uid=uid)


def parse_route_point(raw: Any, position: int, point_count: int) -> RoutePoint:
    """
    Parse a route entry; ``order`` defaults to its position in the list.

    An integer ``originalIndex`` field, when present and in range, becomes
    the point's identity.
    """
    point = parse_point(raw)
    order = _optional_int(raw.get("order"))
    original_index = _optional_int(raw.get("originalIndex"))
    if original_index is not None and not 0 <= original_index < point_count:
        original_index = None

    return RoutePoint(
        x=point.x,
        y=point.y,
        address=point.address,
        uid=original_index,
        order=position if order is None else order,
    )


def _parse_status(raw: Any, errors: list[MalformedSolution]) -> SolutionStatus:
    if raw is None:
        return SolutionStatus.UPLOADED
    try:
        return SolutionStatus(raw)
    except ValueError:
        errors.append(MalformedSolution(f"Unknown status {raw!r}", "status"))
        return SolutionStatus.UPLOADED


def parse_solution(payload: Any) -> tuple[Solution, list[MalformedSolution]]:
    """
    Build a Solution from a solver payload without raising.

    Malformed parts are coerced (missing point lists become empty, invalid
    entries are dropped, ``pointCount`` is corrected to the actual length)
    and reported back instead.

    Args:
        payload: Decoded JSON object in the solver's camelCase shape

    Returns:
        Tuple of (solution, validation failures)
    """
    errors: list[MalformedSolution] = []

    if not isinstance(payload, Mapping):
        errors.append(MalformedSolution(f"Solution must be an object, got {type(payload).__name__}"))
        payload = {}

    raw_points = payload.get("originalPoints")
    if not isinstance(raw_points, list):
        errors.append(MalformedSolution("originalPoints is missing or not a list", "originalPoints"))
        raw_points = []

    original_points: list[Point] = []
    for raw in raw_points:
        try:
            # Identity is the position among the kept points
            original_points.append(parse_point(raw, uid=len(original_points)))
        except MalformedSolution as e:
            errors.append(e)

    declared_count = _checked_number(payload, "pointCount", _optional_int, errors)
    if declared_count is not None and declared_count != len(original_points):
        errors.append(
            MalformedSolution(
                f"pointCount is {declared_count} but {len(original_points)} points were supplied",
                "pointCount",
            )
        )

    route: tuple[RoutePoint, ...] | None = None
    raw_route = payload.get("route")
    if raw_route is not None and not isinstance(raw_route, list):
        errors.append(MalformedSolution("route is not a list", "route"))
    elif raw_route:
        parsed_route: list[RoutePoint] = []
        for position, raw in enumerate(raw_route):
            try:
                parsed_route.append(parse_route_point(raw, position, len(original_points)))
            except MalformedSolution as e:
                errors.append(MalformedSolution(str(e), "route"))
        if len(parsed_route) != len(original_points):
            errors.append(
                MalformedSolution(
                    f"route has {len(parsed_route)} points but the problem has {len(original_points)}",
                    "route",
                )
            )
        route = assign_route_identities(original_points, parsed_route)

    solution = Solution(
        id=str(payload.get("id", "")),
        point_count=len(original_points),
        original_points=tuple(original_points),
        status=_parse_status(payload.get("status"), errors),
        route=route,
        total_distance=_checked_number(payload, "totalDistance", _coerce_float, errors),
        file_name=_optional_str(payload.get("fileName")),
        algorithm=_optional_str(payload.get("algorithm")),
        execution_time_ms=_checked_number(payload, "executionTimeMs", _optional_int, errors),
        created_at=_optional_str(payload.get("createdAt")),
    )

    for error in errors:
        logger.warning(f"Solution {solution.id or '<unknown>'}: {error}")

    return solution, errors


def load_solution(path: str) -> tuple[Solution, list[MalformedSolution]]:
    """
    Load a solution from a JSON file on disk.

    Args:
        path: Path to a JSON file holding one solution object

    Returns:
        Tuple of (solution, validation failures)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not valid JSON
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Solution file not found: {path}")

    with open(path, "r", encoding="utf-8") as solution_file:
        try:
            payload = json.load(solution_file)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse solution file: {e}") from e

    solution, errors = parse_solution(payload)
    route_length = len(solution.route) if solution.route else 0
    logger.info(
        f"Loaded solution {solution.id}: {solution.point_count} points, "
        f"{route_length} route points, status {solution.status.value}"
    )
    return solution, errors
