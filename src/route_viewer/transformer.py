"""Coordinate transforms from problem space to viewport pixels."""

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from src.route_viewer.errors import EmptyGeometry
from src.route_viewer.models import Point, ProjectedGeometry, ProjectedPoint, Solution, Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionParams:
    """
    Affine map from problem space to viewport space.

    A problem point (x, y) maps to
    ``(x * scale + offset_x, height - (y * scale + offset_y))``.
    """

    scale: float
    offset_x: float
    offset_y: float
    height: float

    def to_viewport(self, x: float, y: float) -> tuple[float, float]:
        """Map a problem-space coordinate to viewport pixels."""
        return (x * self.scale + self.offset_x, self.height - (y * self.scale + self.offset_y))

    def to_problem(self, vx: float, vy: float) -> tuple[float, float]:
        """
        Map a viewport pixel back to problem space.

        Raises:
            ValueError: If the projection collapsed every point onto one pixel
        """
        if self.scale == 0:
            raise ValueError("Projection has zero scale and cannot be inverted")
        return ((vx - self.offset_x) / self.scale, (self.height - vy - self.offset_y) / self.scale)


def points_to_array(points: Sequence[Point]) -> np.ndarray:
    """Stack point coordinates into an Nx2 float array."""
    if not points:
        return np.empty((0, 2), dtype=np.float64)
    return np.array([(p.x, p.y) for p in points], dtype=np.float64)


def compute_projection(points: Sequence[Point], viewport: Viewport) -> ProjectionParams:
    """
    Fit the bounding box of ``points`` into the padded viewport.

    A single uniform scale is used for both axes so shapes are not distorted.
    Degenerate extents (all points sharing an x or y) use a range of 1.0 for
    the scale and are centered on the viewport.

    Args:
        points: Problem-space points
        viewport: Target surface

    Returns:
        ProjectionParams for the fitted transform

    Raises:
        EmptyGeometry: If ``points`` is empty
    """
    coords = points_to_array(points)
    if len(coords) == 0:
        raise EmptyGeometry("Cannot project an empty point set")

    min_x, min_y = coords.min(axis=0)
    max_x, max_y = coords.max(axis=0)
    extent_x = float(max_x - min_x)
    extent_y = float(max_y - min_y)
    range_x = extent_x or 1.0
    range_y = extent_y or 1.0

    # Padding larger than half the surface collapses the drawable area to zero
    usable_w = max(viewport.width - 2 * viewport.padding, 0)
    usable_h = max(viewport.height - 2 * viewport.padding, 0)
    scale = min(usable_w / range_x, usable_h / range_y)

    offset_x = (viewport.width - extent_x * scale) / 2 - float(min_x) * scale
    offset_y = (viewport.height - extent_y * scale) / 2 - float(min_y) * scale

    return ProjectionParams(
        scale=float(scale),
        offset_x=float(offset_x),
        offset_y=float(offset_y),
        height=float(viewport.height),
    )


def apply_projection(
    points: Sequence[Point],
    params: ProjectionParams,
    viewport: Viewport,
) -> list[ProjectedPoint]:
    """Map points with an existing transform, clamped to the viewport."""
    coords = points_to_array(points)
    if len(coords) == 0:
        return []

    xs = coords[:, 0] * params.scale + params.offset_x
    ys = params.height - (coords[:, 1] * params.scale + params.offset_y)
    # Absorb floating-point overshoot at the edges of an unpadded viewport
    xs = np.clip(xs, 0.0, viewport.width)
    ys = np.clip(ys, 0.0, viewport.height)

    return [ProjectedPoint(float(x), float(y)) for x, y in zip(xs, ys)]


def project_points(
    points: Sequence[Point],
    viewport: Viewport,
) -> tuple[list[ProjectedPoint], ProjectionParams]:
    """
    Project problem-space points into viewport pixels.

    Args:
        points: Problem-space points
        viewport: Target surface

    Returns:
        Tuple of (projected points, projection parameters). The parameters
        can be reused for inverse mapping, e.g. pointer hit testing.

    Raises:
        EmptyGeometry: If ``points`` is empty
    """
    params = compute_projection(points, viewport)
    projected = apply_projection(points, params, viewport)
    logger.debug(
        f"Projected {len(projected)} points into {viewport.width}x{viewport.height} "
        f"(scale={params.scale:.4f})"
    )
    return projected, params


def project_solution(solution: Solution, viewport: Viewport) -> tuple[ProjectedGeometry, ProjectionParams]:
    """
    Project a solution's original points and route with one shared transform.

    The transform is fitted to the original points; the route is a
    permutation of them and reuses the same parameters.

    Raises:
        EmptyGeometry: If the solution has no original points
    """
    points, params = project_points(solution.original_points, viewport)
    route = apply_projection(solution.route or (), params, viewport)
    geometry = ProjectedGeometry(viewport=viewport, points=tuple(points), route=tuple(route))
    return geometry, params


def hit_test(
    pointer: tuple[float, float],
    projected_points: Sequence[ProjectedPoint],
    radius: float = 8.0,
) -> int | None:
    """
    Find the projected point under a pointer position.

    Args:
        pointer: (x, y) in viewport pixels
        projected_points: Candidate points in viewport space
        radius: Maximum pixel distance that counts as a hit

    Returns:
        Index of the nearest point within ``radius``, or None
    """
    if not projected_points:
        return None

    coords = np.array([(p.x, p.y) for p in projected_points], dtype=np.float64)
    distances = np.hypot(coords[:, 0] - pointer[0], coords[:, 1] - pointer[1])
    nearest = int(np.argmin(distances))
    if distances[nearest] > radius:
        return None
    return nearest
