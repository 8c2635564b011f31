"""Data model for solved routing problems."""

from dataclasses import dataclass, field
from enum import Enum


class SolutionStatus(str, Enum):
    """Lifecycle of a solution on the solver service."""

    UPLOADED = "UPLOADED"
    GEOCODED = "GEOCODED"
    SOLVING = "SOLVING"
    SOLVED = "SOLVED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Point:
    """A location in problem space (y grows upward)."""

    x: float
    y: float
    address: str | None = None
    uid: int | None = None  # Stable identity assigned when the solution is built


@dataclass(frozen=True)
class RoutePoint(Point):
    """A point plus its 0-based position in the visiting sequence."""

    order: int = 0


@dataclass(frozen=True)
class Solution:
    """
    A routing problem and, once solved, its tour.

    The route is cyclic: after the last point the tour returns to the first.
    """

    id: str
    point_count: int
    original_points: tuple[Point, ...]
    status: SolutionStatus = SolutionStatus.UPLOADED
    route: tuple[RoutePoint, ...] | None = None
    total_distance: float | None = None
    file_name: str | None = None
    algorithm: str | None = None
    execution_time_ms: int | None = None
    created_at: str | None = None

    @property
    def has_route(self) -> bool:
        return bool(self.route)


@dataclass(frozen=True)
class Viewport:
    """Target drawing surface in pixels."""

    width: int
    height: int
    padding: int = 0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Viewport dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.padding < 0:
            raise ValueError(f"Viewport padding must be non-negative, got {self.padding}")


@dataclass(frozen=True)
class ProjectedPoint:
    """A point in viewport space (y grows downward)."""

    x: float
    y: float


@dataclass(frozen=True)
class ProjectedGeometry:
    """Projection of one solution onto one viewport."""

    viewport: Viewport
    points: tuple[ProjectedPoint, ...]
    route: tuple[ProjectedPoint, ...] = field(default_factory=tuple)
