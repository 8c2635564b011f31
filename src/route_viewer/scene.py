"""Renderer-agnostic scene description for a solved route.

``build_scene`` turns projected geometry, route distances, the current
selection and a theme into an ordered tuple of typed draw primitives. Both
rendering backends consume the same scene and differ only in how they
translate each primitive. Every primitive carries a stable ``key`` so a
retained-mode host can diff two scenes node by node.
"""

import math
from dataclasses import dataclass, field
from typing import ClassVar, Sequence, Union

from src.route_viewer.models import Point, ProjectedPoint, Viewport
from src.route_viewer.selection import SelectionState
from src.route_viewer.theme import Theme

GRID_DIVISIONS = 10
GRID_DASH = (2, 2)
POINT_RADIUS = 6
SELECTED_POINT_RADIUS = 8
ORIGINAL_RING_RADIUS = 12
ROUTE_RING_RADIUS = 15
LABEL_OFFSET = 25  # Perpendicular distance of segment labels from the midpoint
ARROW_SIZE = 10
ARROW_POSITION = 0.8  # Fraction along the segment where the arrowhead sits
ARROW_HALF_ANGLE = math.pi / 6
EMPTY_STATE_MESSAGE = "Upload a file to see the visualization"


@dataclass(frozen=True)
class Rect:
    kind: ClassVar[str] = "rect"

    key: str
    x: float
    y: float
    width: float
    height: float
    fill: str


@dataclass(frozen=True)
class Line:
    kind: ClassVar[str] = "line"

    key: str
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: float = 1.0
    dash: tuple[int, int] | None = None


@dataclass(frozen=True)
class Polygon:
    kind: ClassVar[str] = "polygon"

    key: str
    points: tuple[tuple[float, float], ...]
    fill: str


@dataclass(frozen=True)
class Circle:
    kind: ClassVar[str] = "circle"

    key: str
    cx: float
    cy: float
    r: float
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float = 1.0
    dash: tuple[int, int] | None = None
    opacity: float = 1.0
    hover: str | None = None  # Tooltip text for interactive hosts


@dataclass(frozen=True)
class Label:
    kind: ClassVar[str] = "label"

    key: str
    x: float
    y: float
    text: str
    color: str
    size: int = 12
    bold: bool = False
    anchor: str = "middle"  # "start", "middle" or "end"
    rotation: float = 0.0  # Degrees, counter-clockwise
    halo: str | None = None  # Outline color drawn behind the glyphs


Primitive = Union[Rect, Line, Polygon, Circle, Label]


@dataclass(frozen=True)
class SceneDescription:
    """Ordered draw primitives, back to front."""

    width: int
    height: int
    background: str
    primitives: tuple[Primitive, ...] = field(default_factory=tuple)
    placeholder: bool = False

    def of_kind(self, kind: str) -> list[Primitive]:
        return [p for p in self.primitives if p.kind == kind]

    def find(self, key: str) -> Primitive | None:
        for primitive in self.primitives:
            if primitive.key == key:
                return primitive
        return None


def coordinate_label(point: Point) -> str:
    """Problem-space coordinates as shown under each marker."""
    return f"({point.x:.1f}, {point.y:.1f})"


def _background(viewport: Viewport, theme: Theme) -> list[Primitive]:
    primitives: list[Primitive] = [
        Rect("background", 0.0, 0.0, float(viewport.width), float(viewport.height), theme.background)
    ]
    for i in range(GRID_DIVISIONS + 1):
        x = viewport.width / GRID_DIVISIONS * i
        primitives.append(
            Line(f"grid-v-{i}", x, 0.0, x, float(viewport.height), theme.grid, 1.0, GRID_DASH)
        )
    for i in range(GRID_DIVISIONS + 1):
        y = viewport.height / GRID_DIVISIONS * i
        primitives.append(
            Line(f"grid-h-{i}", 0.0, y, float(viewport.width), y, theme.grid, 1.0, GRID_DASH)
        )
    return primitives


def _arrowhead(key: str, start: ProjectedPoint, end: ProjectedPoint, color: str) -> Polygon | None:
    """Triangle pointing along the segment, placed before the end marker."""
    dx = end.x - start.x
    dy = end.y - start.y
    if math.hypot(dx, dy) < 1e-9:
        return None

    angle = math.atan2(dy, dx)
    tip_x = start.x + dx * ARROW_POSITION
    tip_y = start.y + dy * ARROW_POSITION
    left = (
        tip_x - ARROW_SIZE * math.cos(angle - ARROW_HALF_ANGLE),
        tip_y - ARROW_SIZE * math.sin(angle - ARROW_HALF_ANGLE),
    )
    right = (
        tip_x - ARROW_SIZE * math.cos(angle + ARROW_HALF_ANGLE),
        tip_y - ARROW_SIZE * math.sin(angle + ARROW_HALF_ANGLE),
    )
    return Polygon(key, ((tip_x, tip_y), left, right), color)


def _route_segments(
    route: Sequence[ProjectedPoint],
    distances: Sequence[float],
    theme: Theme,
) -> list[Primitive]:
    primitives: list[Primitive] = []
    if len(route) < 2:
        return primitives

    for i, current in enumerate(route):
        nxt = route[(i + 1) % len(route)]
        primitives.append(Line(f"segment-{i}", current.x, current.y, nxt.x, nxt.y, theme.route, 2.0))

        arrow = _arrowhead(f"arrow-{i}", current, nxt, theme.route)
        if arrow is not None:
            primitives.append(arrow)

        # Labels sit beside the line, not on it
        mid_x = (current.x + nxt.x) / 2
        mid_y = (current.y + nxt.y) / 2
        perp = math.atan2(nxt.y - current.y, nxt.x - current.x) + math.pi / 2
        label_x = mid_x + math.cos(perp) * LABEL_OFFSET
        label_y = mid_y + math.sin(perp) * LABEL_OFFSET
        distance = distances[i] if i < len(distances) else 0.0

        primitives.append(
            Label(f"order-{i}", label_x, label_y - 8, str(i + 1), theme.route,
                  size=13, bold=True, halo=theme.label_halo)
        )
        primitives.append(
            Label(f"distance-{i}", label_x, label_y + 8, f"{distance:.1f}", theme.distance_text,
                  size=11, halo=theme.label_halo)
        )
    return primitives


def _markers(
    points: Sequence[ProjectedPoint],
    selected: int | None,
    coordinate_labels: Sequence[str] | None,
    theme: Theme,
) -> list[Primitive]:
    primitives: list[Primitive] = []
    for i, point in enumerate(points):
        is_selected = i == selected
        is_origin = i == 0
        coords = coordinate_labels[i] if coordinate_labels and i < len(coordinate_labels) else None

        primitives.append(
            Circle(
                f"point-{i}",
                point.x,
                point.y,
                SELECTED_POINT_RADIUS if is_selected else POINT_RADIUS,
                fill=theme.start_point if is_origin else theme.point,
                stroke=theme.point_outline,
                stroke_width=2.0,
                opacity=1.0 if is_selected else 0.9,
                hover=f"Point {i + 1}" + (f" {coords}" if coords else ""),
            )
        )
        if is_origin:
            primitives.append(
                Label("start-label", point.x, point.y - 25, "START", theme.start_point,
                      size=11, bold=True, halo=theme.label_halo)
            )
        if coords:
            primitives.append(
                Label(
                    f"coords-{i}",
                    point.x,
                    point.y + 20,
                    coords,
                    theme.original_highlight if is_selected else theme.coordinate_text,
                    size=10 if is_selected else 9,
                    bold=is_selected,
                    halo=theme.label_halo,
                )
            )
    return primitives


def _selection_rings(
    points: Sequence[ProjectedPoint],
    route: Sequence[ProjectedPoint],
    selection: SelectionState,
    show_route: bool,
    theme: Theme,
) -> list[Primitive]:
    primitives: list[Primitive] = []

    index = selection.original_index
    if index is not None and 0 <= index < len(points):
        point = points[index]
        primitives.append(
            Circle("ring-original", point.x, point.y, ORIGINAL_RING_RADIUS,
                   stroke=theme.original_highlight, stroke_width=3.0, dash=(4, 2), opacity=0.8)
        )
        primitives.append(
            Label("ring-original-label", point.x, point.y, str(index + 1), theme.point_outline,
                  size=12, bold=True)
        )

    index = selection.route_index
    if show_route and index is not None and 0 <= index < len(route):
        point = route[index]
        primitives.append(
            Circle("ring-route", point.x, point.y, ROUTE_RING_RADIUS,
                   stroke=theme.route_highlight, stroke_width=4.0, dash=(6, 3), opacity=0.8)
        )
        primitives.append(
            Label("ring-route-label", point.x, point.y - 30, f"ROUTE #{index + 1}",
                  theme.route_highlight, size=12, bold=True, halo=theme.label_halo)
        )
    return primitives


def _axis_captions(viewport: Viewport, theme: Theme) -> list[Primitive]:
    return [
        Label("caption-x", viewport.width / 2, viewport.height - 10, "X Coordinate", theme.axis_text),
        Label("caption-y", 15.0, viewport.height / 2, "Y Coordinate", theme.axis_text, rotation=90.0),
    ]


def build_scene(
    projected_points: Sequence[ProjectedPoint],
    projected_route: Sequence[ProjectedPoint],
    distances: Sequence[float],
    selection: SelectionState,
    theme: Theme,
    viewport: Viewport,
    coordinate_labels: Sequence[str] | None = None,
    show_route: bool = True,
) -> SceneDescription:
    """
    Describe the full scene, back to front.

    Layers: background grid, route segments (line, arrowhead, order and
    distance labels), point markers, selection rings, axis captions.

    Args:
        projected_points: Original points in viewport space
        projected_route: Route points in viewport space, in tour order
        distances: Problem-space segment distances, one per route point
        selection: Current selection; out-of-range indices draw no ring
        theme: Colors to draw with
        viewport: Surface the points were projected into
        coordinate_labels: Optional text shown under each original point
        show_route: Draw route segments and the route selection ring

    Returns:
        SceneDescription with identical content for identical inputs
    """
    primitives: list[Primitive] = []
    primitives.extend(_background(viewport, theme))
    if show_route:
        primitives.extend(_route_segments(projected_route, distances, theme))
    primitives.extend(_markers(projected_points, selection.original_index, coordinate_labels, theme))
    primitives.extend(_selection_rings(projected_points, projected_route, selection, show_route, theme))
    primitives.extend(_axis_captions(viewport, theme))

    return SceneDescription(
        width=viewport.width,
        height=viewport.height,
        background=theme.background,
        primitives=tuple(primitives),
    )


def build_placeholder_scene(
    viewport: Viewport,
    theme: Theme,
    message: str = EMPTY_STATE_MESSAGE,
) -> SceneDescription:
    """Empty-state scene shown when there is nothing to project."""
    primitives: list[Primitive] = [
        Rect("background", 0.0, 0.0, float(viewport.width), float(viewport.height), theme.background),
        Label("placeholder", viewport.width / 2, viewport.height / 2, message, theme.axis_text, size=14),
    ]
    return SceneDescription(
        width=viewport.width,
        height=viewport.height,
        background=theme.background,
        primitives=tuple(primitives),
        placeholder=True,
    )


def diff_scenes(old: SceneDescription | None, new: SceneDescription) -> set[str]:
    """
    Keys of primitives that were added, removed or changed.

    A retained-mode host only needs to update these nodes.
    """
    if old is None:
        return {p.key for p in new.primitives}

    before = {p.key: p for p in old.primitives}
    after = {p.key: p for p in new.primitives}
    changed = {key for key in before.keys() ^ after.keys()}
    changed.update(key for key in before.keys() & after.keys() if before[key] != after[key])
    return changed


class SceneRenderer:
    """
    Base for rendering backends.

    ``render`` issues exactly one backend command per primitive, in scene
    order, dispatching to ``_draw_<kind>``. Subclasses hold no state between
    calls, so identical scenes always produce identical output.
    """

    def render(self, scene: SceneDescription):
        target = self._begin(scene)
        for primitive in scene.primitives:
            getattr(self, f"_draw_{primitive.kind}")(target, primitive)
        return self._finish(target, scene)

    def _begin(self, scene: SceneDescription):
        raise NotImplementedError

    def _finish(self, target, scene: SceneDescription):
        raise NotImplementedError
