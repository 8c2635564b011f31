"""Tests for the raster and vector rendering backends."""

from unittest.mock import patch

import plotly.graph_objects as go
import pytest
from PIL import Image

from src.route_viewer.metrics import compute_route_metrics
from src.route_viewer.models import Viewport
from src.route_viewer.raster import RasterRenderer, _dashed_arcs, _dashed_segments, save_png
from src.route_viewer.scene import (
    Circle,
    Label,
    Line,
    Rect,
    SceneDescription,
    build_placeholder_scene,
    build_scene,
    coordinate_label,
)
from src.route_viewer.selection import SelectionState
from src.route_viewer.theme import LIGHT_THEME
from src.route_viewer.transformer import project_solution
from src.route_viewer.viewer import VectorRenderer, _dash_pattern, export_html


@pytest.fixture
def pentagon_scene(pentagon_solution, viewport):
    """Full pentagon scene with both selection rings visible."""
    geometry, _ = project_solution(pentagon_solution, viewport)
    metrics = compute_route_metrics(pentagon_solution.route)
    return build_scene(
        geometry.points,
        geometry.route,
        metrics.segment_distances,
        SelectionState(original_index=1),
        LIGHT_THEME,
        viewport,
        coordinate_labels=[coordinate_label(p) for p in pentagon_solution.original_points],
    )


class TestRasterRenderer:
    """Tests for the Pillow backend."""

    def test_returns_image_of_viewport_size(self, pentagon_scene):
        image = RasterRenderer().render(pentagon_scene)
        assert isinstance(image, Image.Image)
        assert image.size == (800, 600)

    def test_background_is_painted(self):
        scene = SceneDescription(
            width=20,
            height=10,
            background="#000000",
            primitives=(Rect("background", 0, 0, 20, 10, "#ff0000"),),
        )
        image = RasterRenderer().render(scene)
        assert image.getpixel((5, 5)) == (255, 0, 0)

    def test_solid_line_is_drawn(self):
        scene = SceneDescription(
            width=20,
            height=20,
            background="#ffffff",
            primitives=(Line("l", 0, 10, 19, 10, "#0000ff", 3.0),),
        )
        image = RasterRenderer().render(scene)
        assert image.getpixel((10, 10)) == (0, 0, 255)

    def test_one_draw_call_per_primitive(self, pentagon_scene):
        """Each solid primitive maps to exactly one Pillow call."""
        with patch("src.route_viewer.raster.ImageDraw.Draw") as mock_draw:
            RasterRenderer().render(pentagon_scene)

        draw = mock_draw.return_value
        solid_circles = [c for c in pentagon_scene.of_kind("circle") if c.dash is None]
        solid_lines = [ln for ln in pentagon_scene.of_kind("line") if ln.dash is None]

        assert draw.rectangle.call_count == len(pentagon_scene.of_kind("rect"))
        assert draw.ellipse.call_count == len(solid_circles)
        assert draw.polygon.call_count == len(pentagon_scene.of_kind("polygon"))
        assert draw.text.call_count == len(pentagon_scene.of_kind("label"))
        solid_line_calls = [c for c in draw.line.call_args_list if c.kwargs["width"] == 2]
        assert len(solid_line_calls) == len(solid_lines)

    def test_dashed_ring_uses_arcs(self):
        scene = SceneDescription(
            width=50,
            height=50,
            background="#ffffff",
            primitives=(Circle("ring", 25, 25, 12, stroke="#ff0000", dash=(4, 2)),),
        )
        with patch("src.route_viewer.raster.ImageDraw.Draw") as mock_draw:
            RasterRenderer().render(scene)

        draw = mock_draw.return_value
        draw.ellipse.assert_not_called()
        assert draw.arc.call_count > 1

    def test_identical_scenes_give_identical_pixels(self, pentagon_scene):
        first = RasterRenderer().render(pentagon_scene)
        second = RasterRenderer().render(pentagon_scene)
        assert first.tobytes() == second.tobytes()

    def test_save_png(self, pentagon_scene, tmp_path):
        path = tmp_path / "scene.png"
        save_png(RasterRenderer().render(pentagon_scene), str(path))
        with Image.open(path) as saved:
            assert saved.format == "PNG"


class TestDashHelpers:
    """Tests for dash splitting on the raster surface."""

    def test_dashed_segments_cover_line(self):
        pieces = _dashed_segments(0, 0, 10, 0, (2, 2))
        assert pieces[0] == ((0.0, 0.0), (2.0, 0.0))
        assert len(pieces) == 3
        assert pieces[-1][1] == (10.0, 0.0)

    def test_zero_length_line_is_one_piece(self):
        assert _dashed_segments(5, 5, 5, 5, (2, 2)) == [((5, 5), (5, 5))]

    def test_dashed_arcs_stay_within_circle(self):
        arcs = _dashed_arcs(12, (4, 2))
        assert arcs[0][0] == 0.0
        assert all(0.0 <= start < end <= 360.0 + 1e-9 for start, end in arcs)


class TestVectorRenderer:
    """Tests for the Plotly backend."""

    def test_returns_figure(self, pentagon_scene):
        fig = VectorRenderer().render(pentagon_scene)
        assert isinstance(fig, go.Figure)
        assert fig.layout.width == 800
        assert fig.layout.height == 600

    def test_y_axis_points_down(self, pentagon_scene):
        fig = VectorRenderer().render(pentagon_scene)
        assert tuple(fig.layout.yaxis.range) == (600, 0)

    def test_one_node_per_primitive(self, pentagon_scene):
        """Labels become annotations, everything else becomes a shape."""
        fig = VectorRenderer().render(pentagon_scene)
        labels = pentagon_scene.of_kind("label")

        assert len(fig.layout.annotations) == len(labels)
        assert len(fig.layout.shapes) == len(pentagon_scene.primitives) - len(labels)

    def test_nodes_are_named_by_key(self, pentagon_scene):
        fig = VectorRenderer().render(pentagon_scene)
        shape_names = [s.name for s in fig.layout.shapes]

        assert shape_names[0] == "background"
        assert "ring-original" in shape_names
        assert "caption-x" in [a.name for a in fig.layout.annotations]

    def test_shape_types(self, pentagon_scene):
        fig = VectorRenderer().render(pentagon_scene)
        by_name = {s.name: s for s in fig.layout.shapes}

        assert by_name["segment-0"].type == "line"
        assert by_name["arrow-0"].type == "path"
        assert by_name["point-0"].type == "circle"
        assert by_name["grid-v-0"].line.dash == "2px,2px"

    def test_hover_trace_carries_marker_keys(self, pentagon_scene):
        fig = VectorRenderer().render(pentagon_scene)
        assert len(fig.data) == 1
        assert list(fig.data[0].customdata) == [f"point-{i}" for i in range(5)]

    def test_bold_and_rotated_labels(self):
        scene = SceneDescription(
            width=100,
            height=100,
            background="#ffffff",
            primitives=(Label("t", 10, 10, "Y", "#000000", bold=True, rotation=90.0),),
        )
        annotation = VectorRenderer().render(scene).layout.annotations[0]
        assert annotation.text == "<b>Y</b>"
        assert annotation.textangle == -90

    def test_label_halo_becomes_backdrop(self, pentagon_scene):
        """Haloed labels keep contrast over grid and route lines."""
        fig = VectorRenderer().render(pentagon_scene)
        by_name = {a.name: a for a in fig.layout.annotations}

        assert by_name["order-0"].bgcolor == LIGHT_THEME.label_halo
        assert by_name["caption-x"].bgcolor == "rgba(0,0,0,0)"

    def test_placeholder_has_no_trace(self):
        fig = VectorRenderer().render(build_placeholder_scene(Viewport(400, 300), LIGHT_THEME))
        assert len(fig.data) == 0
        assert fig.layout.annotations[0].text == "Upload a file to see the visualization"

    def test_export_html(self, pentagon_scene, tmp_path):
        path = tmp_path / "scene.html"
        export_html(VectorRenderer().render(pentagon_scene), str(path))
        assert "<html>" in path.read_text(encoding="utf-8")

    def test_dash_pattern(self):
        assert _dash_pattern(None) == "solid"
        assert _dash_pattern((6, 3)) == "6px,3px"


class TestBackendsAgree:
    """Both backends consume the same scene."""

    def test_same_primitive_count(self, pentagon_scene):
        """Every primitive yields one node in the vector figure and one raster call."""
        with patch("src.route_viewer.raster.ImageDraw.Draw") as mock_draw:
            RasterRenderer().render(pentagon_scene)
        draw = mock_draw.return_value
        raster_nodes = (
            draw.rectangle.call_count
            + draw.polygon.call_count
            + draw.ellipse.call_count
            + draw.text.call_count
            + len([c for c in pentagon_scene.of_kind("circle") if c.dash is not None])
            + len(pentagon_scene.of_kind("line"))
        )

        fig = VectorRenderer().render(pentagon_scene)
        vector_nodes = len(fig.layout.shapes) + len(fig.layout.annotations)

        assert raster_nodes == vector_nodes == len(pentagon_scene.primitives)
