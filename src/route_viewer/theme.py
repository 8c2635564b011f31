"""Color themes passed explicitly into every render call."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Semantic color names mapped to hex colors."""

    name: str
    background: str
    grid: str
    axis_text: str
    route: str
    distance_text: str
    start_point: str
    point: str
    point_outline: str
    original_highlight: str
    route_highlight: str
    coordinate_text: str
    label_halo: str
    table_header: str
    table_cell: str
    table_highlight: str
    table_text: str


LIGHT_THEME = Theme(
    name="light",
    background="#ffffff",
    grid="#f3f4f6",
    axis_text="#6b7280",
    route="#ef4444",
    distance_text="#059669",
    start_point="#22c55e",
    point="#3b82f6",
    point_outline="#ffffff",
    original_highlight="#3b82f6",
    route_highlight="#22c55e",
    coordinate_text="#374151",
    label_halo="#ffffff",
    table_header="#e5e7eb",
    table_cell="#ffffff",
    table_highlight="#dbeafe",
    table_text="#111827",
)

DARK_THEME = Theme(
    name="dark",
    background="#1e293b",
    grid="#334155",
    axis_text="#94a3b8",
    route="#ef4444",
    distance_text="#34d399",
    start_point="#22c55e",
    point="#3b82f6",
    point_outline="#ffffff",
    original_highlight="#60a5fa",
    route_highlight="#4ade80",
    coordinate_text="#cbd5e1",
    label_halo="#1e293b",
    table_header="#334155",
    table_cell="#1e293b",
    table_highlight="#1e3a8a",
    table_text="#f1f5f9",
)

THEMES = {theme.name: theme for theme in (LIGHT_THEME, DARK_THEME)}


def get_theme(name: str) -> Theme:
    """
    Look up a theme by name (case-insensitive).

    Raises:
        ValueError: If no theme has that name
    """
    try:
        return THEMES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown theme '{name}', expected one of {sorted(THEMES)}") from None
