"""Route Viewer - Interactive visualization for solved routing problems."""

from src.route_viewer.errors import EmptyGeometry, MalformedSolution, SelectionOutOfRange
from src.route_viewer.loader import load_solution, parse_solution
from src.route_viewer.metrics import RouteMetrics, compute_route_metrics
from src.route_viewer.models import Point, RoutePoint, Solution, SolutionStatus, Viewport
from src.route_viewer.raster import RasterRenderer
from src.route_viewer.scene import SceneDescription, build_scene
from src.route_viewer.selection import SelectionLinker, SelectionState
from src.route_viewer.session import RouteViewerSession
from src.route_viewer.theme import DARK_THEME, LIGHT_THEME, get_theme
from src.route_viewer.transformer import project_points
from src.route_viewer.viewer import VectorRenderer

__all__ = [
    "EmptyGeometry",
    "MalformedSolution",
    "SelectionOutOfRange",
    "load_solution",
    "parse_solution",
    "RouteMetrics",
    "compute_route_metrics",
    "Point",
    "RoutePoint",
    "Solution",
    "SolutionStatus",
    "Viewport",
    "RasterRenderer",
    "SceneDescription",
    "build_scene",
    "SelectionLinker",
    "SelectionState",
    "RouteViewerSession",
    "DARK_THEME",
    "LIGHT_THEME",
    "get_theme",
    "project_points",
    "VectorRenderer",
]
