"""Distance metrics for closed tours.

Distances are always computed on problem-space coordinates. The projection
scale is display-only and never enters a reported metric.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from src.route_viewer.models import Point
from src.route_viewer.transformer import points_to_array


@dataclass(frozen=True)
class RouteMetrics:
    """Per-segment and cumulative distances of a cyclic route."""

    segment_distances: tuple[float, ...]
    cumulative_distances: tuple[float, ...]
    total_distance: float

    def __len__(self) -> int:
        return len(self.segment_distances)


def _segment_array(route: Sequence[Point]) -> np.ndarray:
    coords = points_to_array(route)
    if len(coords) < 2:
        return np.zeros(len(coords), dtype=np.float64)

    # Pair each point with its successor, wrapping the last back to the first
    deltas = np.roll(coords, -1, axis=0) - coords
    return np.hypot(deltas[:, 0], deltas[:, 1])


def segment_distances(route: Sequence[Point]) -> list[float]:
    """
    Euclidean length of every segment of a closed tour.

    Element ``i`` is the distance from point ``i`` to point
    ``(i + 1) % len(route)``. Routes with fewer than two points have only
    zero-length segments.
    """
    return [float(d) for d in _segment_array(route)]


def cumulative_distances(route: Sequence[Point]) -> list[float]:
    """Running sum of segment distances; the last element is the tour length."""
    return [float(d) for d in np.cumsum(_segment_array(route))]


def total_distance(route: Sequence[Point]) -> float:
    """Length of the closed tour (the last cumulative distance)."""
    return compute_route_metrics(route).total_distance


def compute_route_metrics(route: Sequence[Point] | None) -> RouteMetrics:
    """
    Compute all distance metrics for a route in one pass.

    Args:
        route: Ordered route points in problem space; None is treated as empty

    Returns:
        RouteMetrics whose last cumulative distance equals the total
    """
    segments = _segment_array(route or ())
    cumulative = np.cumsum(segments)
    total = float(cumulative[-1]) if len(cumulative) else 0.0
    return RouteMetrics(
        segment_distances=tuple(float(d) for d in segments),
        cumulative_distances=tuple(float(d) for d in cumulative),
        total_distance=total,
    )
