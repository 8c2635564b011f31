"""Event-driven controller tying the table and geometric views together.

The session owns the current solution, viewport and selection. Projection
is memoized per (solution, viewport) so selection or theme changes never
re-run the bounding-box scan. The theme is passed into every render call
and never stored.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from src.route_viewer.errors import (
    EmptyGeometry,
    MalformedSolution,
    RouteViewerError,
    SelectionOutOfRange,
)
from src.route_viewer.loader import parse_solution
from src.route_viewer.metrics import RouteMetrics, compute_route_metrics
from src.route_viewer.models import ProjectedGeometry, Solution, Viewport
from src.route_viewer.scene import (
    SceneDescription,
    SceneRenderer,
    build_placeholder_scene,
    build_scene,
    coordinate_label,
)
from src.route_viewer.selection import (
    SelectionLinker,
    SelectionState,
    check_index,
    select_original,
    select_route,
)
from src.route_viewer.theme import Theme
from src.route_viewer.transformer import ProjectionParams, hit_test, project_solution

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionEvent:
    """Sent to listeners whenever the selection changes."""

    state: SelectionState
    original_index: int | None  # Resolved for both views
    route_index: int | None


@dataclass
class RenderResult:
    """Output of one render pass plus any recoverable failures."""

    output: Any
    scene: SceneDescription
    errors: list[RouteViewerError] = field(default_factory=list)


SelectionListener = Callable[[SelectionEvent], None]


class RouteViewerSession:
    """
    Interactive state for one displayed solution.

    Example:
        session = RouteViewerSession(Viewport(800, 600, 60))
        session.load_solution(solution)
        session.add_listener(table.on_selection)
        session.select_original_point(2)
        result = session.render(VectorRenderer(), LIGHT_THEME)
    """

    def __init__(self, viewport: Viewport):
        self._viewport = viewport
        self._solution: Solution | None = None
        self._load_errors: list[MalformedSolution] = []
        self._selection = SelectionState()
        self._selection_error: SelectionOutOfRange | None = None
        self._linker = SelectionLinker((), None)
        self._listeners: list[SelectionListener] = []
        # Only the latest (solution, viewport) projection is kept
        self._projection_key: tuple | None = None
        self._projection_value: tuple[ProjectedGeometry, ProjectionParams] | None = None
        self._metrics: RouteMetrics | None = None

    @property
    def solution(self) -> Solution | None:
        return self._solution

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def selection(self) -> SelectionState:
        return self._selection

    @property
    def linker(self) -> SelectionLinker:
        return self._linker

    @property
    def selection_error(self) -> SelectionOutOfRange | None:
        """Failure from the most recent selection request, if it was out of range."""
        return self._selection_error

    @property
    def load_errors(self) -> list[MalformedSolution]:
        return list(self._load_errors)

    def add_listener(self, listener: SelectionListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SelectionListener) -> None:
        self._listeners.remove(listener)

    def load_solution(
        self,
        solution: Solution | None,
        errors: Sequence[MalformedSolution] = (),
    ) -> None:
        """
        Display a new solution (or none), dropping cached geometry.

        Args:
            solution: Solution to display; None shows the empty state
            errors: Validation failures reported when the solution was parsed
        """
        self._solution = solution
        self._load_errors = list(errors)
        self._projection_key = None
        self._projection_value = None
        self._selection_error = None
        self._metrics = None
        if solution is None:
            self._linker = SelectionLinker((), None)
        else:
            self._linker = SelectionLinker(solution.original_points, solution.route)
            logger.info(
                f"Showing solution {solution.id} ({solution.point_count} points, "
                f"{'identity' if self._linker.uses_identity else 'coordinate'} linking)"
            )
        self._set_selection(SelectionState())

    def load_payload(self, payload: Any) -> list[MalformedSolution]:
        """Parse a solver payload and display it; returns validation failures."""
        solution, errors = parse_solution(payload)
        self.load_solution(solution, errors)
        return errors

    def set_viewport(self, viewport: Viewport) -> None:
        """Resize the drawing surface; projection recomputes on next use."""
        self._viewport = viewport

    def select_original_point(self, index: int | None) -> SelectionState:
        """Select (or toggle off) a point from the uploaded-points view."""
        count = self._solution.point_count if self._solution else 0
        self._selection_error = check_index(index, count, "original")
        return self._set_selection(select_original(self._selection, index, count))

    def select_route_point(self, index: int | None) -> SelectionState:
        """Select (or toggle off) a stop from the route view."""
        length = len(self._solution.route) if self._solution and self._solution.route else 0
        self._selection_error = check_index(index, length, "route")
        return self._set_selection(select_route(self._selection, index, length))

    def select_at(self, x: float, y: float, radius: float = 8.0) -> SelectionState:
        """Select the original point under a pointer position in viewport pixels."""
        try:
            geometry = self.geometry()
        except EmptyGeometry:
            return self._selection

        index = hit_test((x, y), geometry.points, radius)
        if index is None:
            self._selection_error = None
            return self._set_selection(SelectionState())
        return self.select_original_point(index)

    def linked_selection(self) -> tuple[int | None, int | None]:
        """(original_index, route_index) of the selected point."""
        return self._linker.linked(self._selection)

    def _set_selection(self, state: SelectionState) -> SelectionState:
        if state == self._selection:
            return state

        self._selection = state
        original_index, route_index = self._linker.linked(state)
        event = SelectionEvent(state=state, original_index=original_index, route_index=route_index)
        logger.debug(f"Selection changed: original={original_index}, route={route_index}")
        for listener in list(self._listeners):
            listener(event)
        return state

    def geometry(self) -> ProjectedGeometry:
        """
        Projected points for the current solution and viewport (memoized).

        Raises:
            EmptyGeometry: If no solution is loaded or it has no points
        """
        return self._projection()[0]

    def projection_params(self) -> ProjectionParams:
        return self._projection()[1]

    def _projection(self) -> tuple[ProjectedGeometry, ProjectionParams]:
        if self._solution is None:
            raise EmptyGeometry("No solution loaded")

        vp = self._viewport
        key = (id(self._solution), self._solution.id, vp.width, vp.height, vp.padding)
        if key != self._projection_key:
            self._projection_value = project_solution(self._solution, vp)
            self._projection_key = key
        return self._projection_value

    def metrics(self) -> RouteMetrics:
        """Route distances in problem space (memoized per solution)."""
        if self._metrics is None:
            route = self._solution.route if self._solution else None
            self._metrics = compute_route_metrics(route)
        return self._metrics

    def build_scene(
        self,
        theme: Theme,
        show_route: bool = True,
        show_coordinates: bool = True,
    ) -> tuple[SceneDescription, list[RouteViewerError]]:
        """
        Describe the current state, falling back to the empty-state scene.

        The scene is complete before any backend sees it, so a failure never
        leaves a surface partially drawn.

        Returns:
            Tuple of (scene, recoverable errors including load failures and an
            out-of-range selection request)
        """
        errors: list[RouteViewerError] = list(self._load_errors)
        if self._selection_error is not None:
            errors.append(self._selection_error)
        try:
            geometry = self.geometry()
        except EmptyGeometry as e:
            logger.warning(f"Rendering placeholder: {e}")
            errors.append(e)
            return build_placeholder_scene(self._viewport, theme), errors

        labels = None
        if show_coordinates:
            labels = [coordinate_label(p) for p in self._solution.original_points]

        scene = build_scene(
            geometry.points,
            geometry.route,
            self.metrics().segment_distances,
            self._selection,
            theme,
            geometry.viewport,
            coordinate_labels=labels,
            show_route=show_route,
        )
        return scene, errors

    def render(
        self,
        renderer: SceneRenderer,
        theme: Theme,
        show_route: bool = True,
        show_coordinates: bool = True,
    ) -> RenderResult:
        """Build the scene and hand it to a backend."""
        scene, errors = self.build_scene(theme, show_route=show_route, show_coordinates=show_coordinates)
        return RenderResult(output=renderer.render(scene), scene=scene, errors=errors)
