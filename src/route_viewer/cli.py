"""Command-line interface for the route viewer."""

import argparse
import logging
import sys

from src.logging_config import setup_logging
from src.route_viewer.config import load_settings
from src.route_viewer.loader import load_solution
from src.route_viewer.models import Viewport
from src.route_viewer.raster import RasterRenderer, save_png
from src.route_viewer.session import RouteViewerSession
from src.route_viewer.table import (
    build_original_rows,
    build_route_rows,
    can_solve,
    create_table_figure,
    summarize_solution,
)
from src.route_viewer.theme import THEMES, get_theme
from src.route_viewer.viewer import VectorRenderer, export_html, show_figure


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Route Viewer - Interactive visualization for solved routing problems",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # View solution in browser
  uv run python -m src.route_viewer solutions/berlin52.json

  # Dark theme, highlight the third uploaded point
  uv run python -m src.route_viewer solutions/berlin52.json --theme dark --select-original 3

  # Export vector scene, raster scene and data tables
  uv run python -m src.route_viewer solutions/berlin52.json --export route.html --png route.png --table table.html
        """,
    )

    parser.add_argument(
        "path",
        type=str,
        help="Path to a solution JSON file",
    )
    parser.add_argument(
        "--export",
        type=str,
        metavar="FILE",
        help="Export the scene to an HTML file instead of opening the browser",
    )
    parser.add_argument(
        "--png",
        type=str,
        metavar="FILE",
        help="Also rasterize the scene to a PNG file",
    )
    parser.add_argument(
        "--table",
        type=str,
        metavar="FILE",
        help="Export the points and route tables to an HTML file",
    )
    parser.add_argument(
        "--theme",
        type=str,
        choices=sorted(THEMES),
        default=None,
        help="Color theme (default: ROUTE_VIEWER_THEME or light)",
    )
    parser.add_argument("--width", type=int, default=None, help="Canvas width in pixels")
    parser.add_argument("--height", type=int, default=None, help="Canvas height in pixels")
    parser.add_argument("--padding", type=int, default=None, help="Canvas padding in pixels")

    selection = parser.add_mutually_exclusive_group()
    selection.add_argument(
        "--select-original",
        type=int,
        metavar="N",
        help="Highlight the N-th uploaded point (1-based)",
    )
    selection.add_argument(
        "--select-route",
        type=int,
        metavar="N",
        help="Highlight the N-th stop of the route (1-based)",
    )

    parser.add_argument(
        "--no-route",
        action="store_true",
        help="Hide route segments",
    )
    parser.add_argument(
        "--no-coordinates",
        action="store_true",
        help="Hide coordinate labels under each point",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for route viewer CLI."""
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging()
    if args.verbose:
        logging.getLogger("src.route_viewer").setLevel(logging.DEBUG)

    logger = logging.getLogger(__name__)

    try:
        settings = load_settings()
        viewport = Viewport(
            width=args.width if args.width is not None else settings.width,
            height=args.height if args.height is not None else settings.height,
            padding=args.padding if args.padding is not None else settings.padding,
        )
        theme = get_theme(args.theme or settings.theme)

        logger.info(f"Loading solution from {args.path}")
        solution, errors = load_solution(args.path)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    session = RouteViewerSession(viewport)
    session.load_solution(solution, errors)

    if args.select_original is not None:
        session.select_original_point(args.select_original - 1)
    elif args.select_route is not None:
        session.select_route_point(args.select_route - 1)

    for name, value in summarize_solution(solution, session.metrics()).items():
        print(f"{name}: {value}")
    if can_solve(solution):
        logger.info("Solution has not been solved yet; showing points only")

    show_route = not args.no_route
    show_coordinates = not args.no_coordinates
    result = session.render(VectorRenderer(), theme, show_route=show_route, show_coordinates=show_coordinates)

    if args.png:
        raster = session.render(RasterRenderer(), theme, show_route=show_route, show_coordinates=show_coordinates)
        save_png(raster.output, args.png)
        print(f"Rasterized to {args.png}")

    if args.table:
        table = create_table_figure(
            build_original_rows(solution, session.linker, session.selection),
            build_route_rows(solution, session.metrics(), session.linker, session.selection),
            theme,
        )
        export_html(table, args.table)
        print(f"Tables exported to {args.table}")

    # Display or export
    if args.export:
        logger.info(f"Exporting to {args.export}")
        export_html(result.output, args.export)
        print(f"Exported to {args.export}")
    else:
        logger.info("Opening in browser")
        show_figure(result.output)


if __name__ == "__main__":
    main()
