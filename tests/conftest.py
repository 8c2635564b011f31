"""
Shared pytest fixtures for route viewer tests.

This module provides reusable fixtures that are automatically discovered
by pytest. Fixtures here are available to all test files.

Educational notes for new developers:
- Fixtures are functions that provide test data or set up test state
- @pytest.fixture decorator marks a function as a fixture
- Fixtures can depend on other fixtures (dependency injection)
- Prefer building real Solution objects over mocks; the core is pure
"""

import pytest

from src.route_viewer.loader import parse_solution
from src.route_viewer.models import Point, Viewport
from src.route_viewer.theme import LIGHT_THEME


PENTAGON = [(0.0, 0.0), (3.0, 4.0), (6.0, 0.0), (3.0, -4.0), (-3.0, 2.0)]


@pytest.fixture
def pentagon_points() -> list[Point]:
    """The five-point example used throughout the docs."""
    return [Point(x, y) for x, y in PENTAGON]


@pytest.fixture
def pentagon_payload() -> dict:
    """
    Solver payload whose route visits the points in a shuffled order.

    Route order: 0 -> 2 -> 1 -> 4 -> 3 (original indices).
    """
    order = [0, 2, 1, 4, 3]
    return {
        "id": "sol-1",
        "fileName": "pentagon.txt",
        "pointCount": 5,
        "status": "SOLVED",
        "algorithm": "SIMULATED_ANNEALING",
        "totalDistance": 30.0,
        "executionTimeMs": 1500,
        "originalPoints": [{"x": x, "y": y} for x, y in PENTAGON],
        "route": [
            {"x": PENTAGON[i][0], "y": PENTAGON[i][1], "order": pos}
            for pos, i in enumerate(order)
        ],
    }


@pytest.fixture
def pentagon_solution(pentagon_payload):
    """Parsed pentagon solution (validation errors are asserted elsewhere)."""
    solution, errors = parse_solution(pentagon_payload)
    assert errors == []
    return solution


@pytest.fixture
def viewport() -> Viewport:
    """The default 800x600 canvas with 60px padding."""
    return Viewport(width=800, height=600, padding=60)


@pytest.fixture
def theme():
    return LIGHT_THEME
