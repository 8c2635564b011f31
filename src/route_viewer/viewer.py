"""Plotly-based vector backend for route scenes.

Each primitive becomes one named layout shape or annotation, so a host that
diffs figures (Dash, plotly.js ``react``) only redraws the nodes whose key
changed. Point markers are also added as a hoverable scatter trace whose
``customdata`` carries the marker key for click handling.
"""

from dataclasses import dataclass, field

import plotly.graph_objects as go

from src.route_viewer.scene import (
    Circle,
    Label,
    Line,
    Polygon,
    Rect,
    SceneDescription,
    SceneRenderer,
)

TRANSPARENT = "rgba(0,0,0,0)"
X_ANCHORS = {"start": "left", "middle": "center", "end": "right"}
UI_REVISION = "route-viewer"


@dataclass
class _FigureParts:
    shapes: list[dict] = field(default_factory=list)
    annotations: list[dict] = field(default_factory=list)
    hover_points: list[Circle] = field(default_factory=list)


def _dash_pattern(dash: tuple[int, int] | None) -> str:
    if dash is None:
        return "solid"
    on, off = dash
    return f"{on}px,{off}px"


class VectorRenderer(SceneRenderer):
    """Build a Plotly figure whose layout mirrors the scene primitives."""

    def _begin(self, scene: SceneDescription) -> _FigureParts:
        return _FigureParts()

    def _finish(self, target: _FigureParts, scene: SceneDescription) -> go.Figure:
        fig = go.Figure()

        if target.hover_points:
            _add_hover_trace(fig, target.hover_points)

        fig.update_layout(
            width=scene.width,
            height=scene.height,
            margin=dict(l=0, r=0, t=0, b=0),
            paper_bgcolor=scene.background,
            plot_bgcolor=scene.background,
            showlegend=False,
            hovermode="closest",
            uirevision=UI_REVISION,
            # Viewport space: origin top-left, y grows downward
            xaxis=dict(range=[0, scene.width], visible=False, fixedrange=True),
            yaxis=dict(range=[scene.height, 0], visible=False, fixedrange=True),
            shapes=target.shapes,
            annotations=target.annotations,
        )
        return fig

    def _draw_rect(self, target: _FigureParts, rect: Rect) -> None:
        target.shapes.append(
            dict(
                type="rect",
                name=rect.key,
                xref="x",
                yref="y",
                x0=rect.x,
                y0=rect.y,
                x1=rect.x + rect.width,
                y1=rect.y + rect.height,
                fillcolor=rect.fill,
                line=dict(width=0),
                layer="below",
            )
        )

    def _draw_line(self, target: _FigureParts, line: Line) -> None:
        target.shapes.append(
            dict(
                type="line",
                name=line.key,
                xref="x",
                yref="y",
                x0=line.x1,
                y0=line.y1,
                x1=line.x2,
                y1=line.y2,
                line=dict(color=line.color, width=line.width, dash=_dash_pattern(line.dash)),
            )
        )

    def _draw_polygon(self, target: _FigureParts, polygon: Polygon) -> None:
        head, *rest = polygon.points
        path = f"M {head[0]} {head[1]} " + " ".join(f"L {x} {y}" for x, y in rest) + " Z"
        target.shapes.append(
            dict(
                type="path",
                name=polygon.key,
                xref="x",
                yref="y",
                path=path,
                fillcolor=polygon.fill,
                line=dict(width=0),
            )
        )

    def _draw_circle(self, target: _FigureParts, circle: Circle) -> None:
        target.shapes.append(
            dict(
                type="circle",
                name=circle.key,
                xref="x",
                yref="y",
                x0=circle.cx - circle.r,
                y0=circle.cy - circle.r,
                x1=circle.cx + circle.r,
                y1=circle.cy + circle.r,
                fillcolor=circle.fill or TRANSPARENT,
                line=dict(
                    color=circle.stroke or TRANSPARENT,
                    width=circle.stroke_width,
                    dash=_dash_pattern(circle.dash),
                ),
                opacity=circle.opacity,
            )
        )
        if circle.hover:
            target.hover_points.append(circle)

    def _draw_label(self, target: _FigureParts, label: Label) -> None:
        text = f"<b>{label.text}</b>" if label.bold else label.text
        target.annotations.append(
            dict(
                name=label.key,
                xref="x",
                yref="y",
                x=label.x,
                y=label.y,
                text=text,
                showarrow=False,
                font=dict(size=label.size, color=label.color),
                xanchor=X_ANCHORS.get(label.anchor, "center"),
                yanchor="middle",
                # Plotly rotates clockwise
                textangle=-label.rotation,
                # Halo drawn as a tight backdrop in the halo color
                bgcolor=label.halo or TRANSPARENT,
                borderpad=1,
            )
        )


def _add_hover_trace(fig: go.Figure, markers: list[Circle]) -> None:
    """Invisible markers that carry hover text and click keys."""
    fig.add_trace(
        go.Scatter(
            x=[m.cx for m in markers],
            y=[m.cy for m in markers],
            mode="markers",
            marker=dict(size=[2 * m.r for m in markers], color=TRANSPARENT),
            hovertext=[m.hover for m in markers],
            hoverinfo="text",
            customdata=[m.key for m in markers],
            name="Points",
        )
    )


def show_figure(fig: go.Figure) -> None:
    """Display figure in browser."""
    fig.show()


def export_html(fig: go.Figure, output_path: str) -> None:
    """Export figure as standalone HTML file."""
    fig.write_html(output_path, include_plotlyjs=True, full_html=True)
