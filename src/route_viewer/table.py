"""Tabular view of a solution, linked to the geometric view by selection."""

from dataclasses import dataclass

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from src.route_viewer.metrics import RouteMetrics
from src.route_viewer.models import Solution, SolutionStatus
from src.route_viewer.selection import SelectionLinker, SelectionState
from src.route_viewer.theme import Theme

ALGORITHM_DESCRIPTIONS = {
    "BRUTE_FORCE": "Exact algorithm (Brute Force) - Optimal solution guaranteed",
    "DYNAMIC_PROGRAMMING": "Exact algorithm (Dynamic Programming) - Optimal solution guaranteed",
    "NEAREST_NEIGHBOR_2OPT": "Heuristic algorithm (Nearest Neighbor + 2-opt) - Good quality solution",
    "SIMULATED_ANNEALING": "Metaheuristic algorithm (Simulated Annealing) - Advanced optimization",
}


@dataclass
class OriginalRow:
    """One uploaded point as listed in the points table."""

    index: int
    x: float
    y: float
    address: str | None
    route_position: int | None  # 0-based tour position, if linked
    highlighted: bool


@dataclass
class RouteRow:
    """One stop of the tour as listed in the route table."""

    order: int
    x: float
    y: float
    address: str | None
    segment_distance: float
    cumulative_distance: float
    highlighted: bool


def build_original_rows(
    solution: Solution,
    linker: SelectionLinker,
    selection: SelectionState,
) -> list[OriginalRow]:
    """
    Rows for the uploaded points, flagging the selected point.

    A route selection highlights the linked original row as well.
    """
    selected_original, _ = linker.linked(selection)
    return [
        OriginalRow(
            index=i,
            x=point.x,
            y=point.y,
            address=point.address,
            route_position=linker.route_index_for(i),
            highlighted=i == selected_original,
        )
        for i, point in enumerate(solution.original_points)
    ]


def build_route_rows(
    solution: Solution,
    metrics: RouteMetrics,
    linker: SelectionLinker,
    selection: SelectionState,
) -> list[RouteRow]:
    """Rows for the tour in visiting order, with per-stop distances."""
    _, selected_route = linker.linked(selection)
    rows = []
    for i, point in enumerate(solution.route or ()):
        segment = metrics.segment_distances[i] if i < len(metrics) else 0.0
        cumulative = metrics.cumulative_distances[i] if i < len(metrics) else 0.0
        rows.append(
            RouteRow(
                order=i,
                x=point.x,
                y=point.y,
                address=point.address,
                segment_distance=segment,
                cumulative_distance=cumulative,
                highlighted=i == selected_route,
            )
        )
    return rows


def _location_text(x: float, y: float, address: str | None) -> str:
    # Long geocoded addresses are cut at the first comma
    if address:
        return address.split(",")[0]
    return f"({x:.1f}, {y:.1f})"


def create_table_figure(
    original_rows: list[OriginalRow],
    route_rows: list[RouteRow],
    theme: Theme,
) -> go.Figure:
    """
    Side-by-side Plotly tables for the points and the route order.

    Highlighted rows use the theme's highlight fill.
    """
    fig = make_subplots(
        rows=1,
        cols=2,
        specs=[[{"type": "table"}, {"type": "table"}]],
        subplot_titles=("Points", "Route Order"),
    )

    original_fill = [theme.table_highlight if r.highlighted else theme.table_cell for r in original_rows]
    fig.add_trace(
        go.Table(
            header=dict(
                values=["#", "Location", "Stop"],
                fill_color=theme.table_header,
                font=dict(color=theme.table_text),
            ),
            cells=dict(
                values=[
                    [r.index + 1 for r in original_rows],
                    [_location_text(r.x, r.y, r.address) for r in original_rows],
                    ["" if r.route_position is None else r.route_position + 1 for r in original_rows],
                ],
                fill_color=[original_fill] * 3,
                font=dict(color=theme.table_text),
            ),
        ),
        row=1,
        col=1,
    )

    route_fill = [theme.table_highlight if r.highlighted else theme.table_cell for r in route_rows]
    fig.add_trace(
        go.Table(
            header=dict(
                values=["Stop", "Location", "Segment", "Cumulative"],
                fill_color=theme.table_header,
                font=dict(color=theme.table_text),
            ),
            cells=dict(
                values=[
                    [r.order + 1 for r in route_rows],
                    [_location_text(r.x, r.y, r.address) for r in route_rows],
                    [f"{r.segment_distance:.2f}" for r in route_rows],
                    [f"{r.cumulative_distance:.2f}" for r in route_rows],
                ],
                fill_color=[route_fill] * 4,
                font=dict(color=theme.table_text),
            ),
        ),
        row=1,
        col=2,
    )

    fig.update_layout(paper_bgcolor=theme.background, font=dict(color=theme.table_text))
    return fig


def describe_algorithm(algorithm: str | None) -> str:
    """Human-readable description of a solver algorithm name."""
    if not algorithm:
        return "Algorithm not specified"
    return ALGORITHM_DESCRIPTIONS.get(algorithm, algorithm)


def format_distance(distance: float | None) -> str:
    if distance is None:
        return "N/A"
    return f"{distance:.2f}"


def format_execution_time(time_ms: int | None) -> str:
    """Milliseconds below one second, seconds with two decimals above."""
    if time_ms is None:
        return "N/A"
    if time_ms < 1000:
        return f"{time_ms}ms"
    return f"{time_ms / 1000:.2f}s"


def summarize_solution(solution: Solution, metrics: RouteMetrics) -> dict[str, str]:
    """
    Display fields for the solution details panel.

    The reported total comes from the solver when present; the computed
    total is always derived from problem-space coordinates.
    """
    summary = {
        "Status": solution.status.value.replace("_", " "),
        "Problem Size": f"{solution.point_count} points",
        "Total Distance": format_distance(solution.total_distance),
        "Computed Distance": format_distance(metrics.total_distance if solution.route else None),
        "Algorithm": describe_algorithm(solution.algorithm),
        "Execution Time": format_execution_time(solution.execution_time_ms),
    }
    if solution.file_name:
        summary["File"] = solution.file_name
    if solution.created_at:
        summary["Created"] = solution.created_at
    return summary


def can_solve(solution: Solution) -> bool:
    """Only freshly uploaded problems can be sent to the solver."""
    return solution.status == SolutionStatus.UPLOADED
