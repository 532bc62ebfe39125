"""Application entry point.

This module provides the main() function that parses the command line,
initializes the Qt application and displays the DiagramViewer window.

Usage:
    equipment-map-viewer diagram.png --markers diagram.json --edit

    # Or as a module:
    python -m EquipmentMapViewer.app diagram.png

    # Or from Python:
    from EquipmentMapViewer import main
    main()
"""

import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from .core.gestures import InteractionMode
from .ui.viewer import DiagramViewer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="equipment-map-viewer",
        description="Locate aircraft equipment on zoomable diagrams.",
    )
    parser.add_argument("image", nargs="?", help="Diagram image to open")
    parser.add_argument("--markers", help="Marker file to import (.json or .csv)")
    parser.add_argument("--edit", action="store_true", help="Start in edit mode")
    parser.add_argument("--highlight-limit", type=int, help="Largest match count that is still highlighted")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    return parser


def main(argv=None):
    """Run the diagram viewer application.

    Args:
        argv: Command-line arguments (defaults to sys.argv)

    Returns:
        Exit code from QApplication.exec()
    """
    if argv is None:
        argv = sys.argv
    args, qt_args = build_parser().parse_known_args(argv[1:])

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides = {}
    if args.highlight_limit is not None:
        overrides["highlight_limit"] = args.highlight_limit

    app = QApplication(argv[:1] + qt_args)

    mode = InteractionMode.EDIT if args.edit else InteractionMode.VIEW
    try:
        w = DiagramViewer(mode=mode, config_overrides=overrides)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    if args.image:
        w.load_image_file(args.image)
    if args.markers:
        w.load_marker_file(args.markers)
    w.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
