"""Tests for the tabular view and the solution summary."""

import plotly.graph_objects as go
import pytest

from src.route_viewer.metrics import compute_route_metrics
from src.route_viewer.models import Point, Solution
from src.route_viewer.selection import SelectionLinker, SelectionState
from src.route_viewer.table import (
    _location_text,
    build_original_rows,
    build_route_rows,
    can_solve,
    create_table_figure,
    describe_algorithm,
    format_distance,
    format_execution_time,
    summarize_solution,
)
from src.route_viewer.theme import LIGHT_THEME


@pytest.fixture
def linker(pentagon_solution):
    return SelectionLinker(pentagon_solution.original_points, pentagon_solution.route)


class TestRows:
    """Tests for building table rows."""

    def test_original_rows_link_to_route(self, pentagon_solution, linker):
        rows = build_original_rows(pentagon_solution, linker, SelectionState())
        assert [r.route_position for r in rows] == [0, 2, 1, 4, 3]
        assert not any(r.highlighted for r in rows)

    def test_route_selection_highlights_both_tables(self, pentagon_solution, linker):
        """Selecting a route stop highlights its uploaded point too."""
        selection = SelectionState(route_index=1)
        metrics = compute_route_metrics(pentagon_solution.route)

        originals = build_original_rows(pentagon_solution, linker, selection)
        route = build_route_rows(pentagon_solution, metrics, linker, selection)

        assert [r.index for r in originals if r.highlighted] == [2]
        assert [r.order for r in route if r.highlighted] == [1]

    def test_route_rows_carry_distances(self, pentagon_solution, linker):
        metrics = compute_route_metrics(pentagon_solution.route)
        rows = build_route_rows(pentagon_solution, metrics, linker, SelectionState())

        assert rows[0].segment_distance == pytest.approx(6.0)
        assert rows[1].cumulative_distance == pytest.approx(11.0)
        assert rows[-1].cumulative_distance == pytest.approx(metrics.total_distance)

    def test_no_route_rows_without_route(self, pentagon_points):
        solution = Solution(id="u", point_count=5, original_points=tuple(pentagon_points))
        rows = build_route_rows(
            solution, compute_route_metrics(None), SelectionLinker(pentagon_points, None), SelectionState()
        )
        assert rows == []

    def test_location_text_prefers_short_address(self):
        assert _location_text(1, 2, "10 Downing St, London, UK") == "10 Downing St"
        assert _location_text(1, 2, None) == "(1.0, 2.0)"


class TestTableFigure:
    """Tests for the Plotly table figure."""

    def test_two_tables(self, pentagon_solution, linker):
        metrics = compute_route_metrics(pentagon_solution.route)
        selection = SelectionState(original_index=0)
        fig = create_table_figure(
            build_original_rows(pentagon_solution, linker, selection),
            build_route_rows(pentagon_solution, metrics, linker, selection),
            LIGHT_THEME,
        )

        assert len(fig.data) == 2
        assert all(isinstance(trace, go.Table) for trace in fig.data)
        fills = fig.data[0].cells.fill.color[0]
        assert fills[0] == LIGHT_THEME.table_highlight
        assert fills[1] == LIGHT_THEME.table_cell


class TestFormatting:
    """Tests for summary formatting helpers."""

    @pytest.mark.parametrize(
        "time_ms,expected",
        [(None, "N/A"), (0, "0ms"), (999, "999ms"), (1000, "1.00s"), (1500, "1.50s")],
    )
    def test_format_execution_time(self, time_ms, expected):
        assert format_execution_time(time_ms) == expected

    def test_format_distance(self):
        assert format_distance(None) == "N/A"
        assert format_distance(0.0) == "0.00"
        assert format_distance(12.346) == "12.35"

    def test_describe_algorithm(self):
        assert "Simulated Annealing" in describe_algorithm("SIMULATED_ANNEALING")
        assert describe_algorithm("CUSTOM") == "CUSTOM"
        assert describe_algorithm(None) == "Algorithm not specified"


class TestSummary:
    """Tests for the solution details panel."""

    def test_summary_fields(self, pentagon_solution):
        summary = summarize_solution(pentagon_solution, compute_route_metrics(pentagon_solution.route))

        assert summary["Status"] == "SOLVED"
        assert summary["Problem Size"] == "5 points"
        assert summary["Total Distance"] == "30.00"
        assert summary["Computed Distance"] == "30.81"
        assert summary["Execution Time"] == "1.50s"
        assert summary["File"] == "pentagon.txt"
        assert "Created" not in summary

    def test_unsolved_summary(self, pentagon_points):
        solution = Solution(id="u", point_count=5, original_points=tuple(pentagon_points))
        summary = summarize_solution(solution, compute_route_metrics(None))

        assert summary["Computed Distance"] == "N/A"
        assert can_solve(solution)

    def test_solved_cannot_be_solved_again(self, pentagon_solution):
        assert not can_solve(pentagon_solution)

    def test_points_are_plain_points(self, pentagon_solution):
        assert all(isinstance(p, Point) for p in pentagon_solution.original_points)
