# gui.py
"""
Host window for a single "where would you click" test.

Flow:
1. The window loads the image given on the command line and embeds an
   ``ImageAnnotator``.  With ``--limited-view`` the image disappears after
   ``--delay-ms`` but clicks are still recorded.
2. The subject clicks, undoes (button or Ctrl+Z), clears and finally presses
   Done.
3. On Done the point list is written to stdout as JSON
   (``[{"x": 0.25, "y": 0.5, "t": 1700000000000}, ...]``).  Nothing is saved
   to disk.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPixmap
from PyQt5.QtWidgets import QApplication, QLabel, QMainWindow, QMessageBox, QVBoxLayout, QWidget

from .annotator import ImageAnnotator
from .config import AnnotatorConfig
from .errors import AnnotatorError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
WINDOW_TITLE = "Where would you click?"
SCREEN_FILL = 0.8  # Initial window fits 80 % of the available screen


class AnnotatorWindow(QMainWindow):
    """Main window: prompt label on top, annotator below."""

    def __init__(
        self,
        image_path: Path,
        config: Optional[AnnotatorConfig] = None,
        prompt: str = "",
        output: Optional[TextIO] = None,
    ):
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.output = output if output is not None else sys.stdout
        self.result: Optional[List[Dict[str, Any]]] = None

        self.prompt_label = QLabel(prompt)
        self.prompt_label.setAlignment(Qt.AlignCenter)
        self.prompt_label.setVisible(bool(prompt))

        self.annotator = ImageAnnotator(config=config)
        self.annotator.finished.connect(self.handle_finished)

        main_layout = QVBoxLayout()
        main_layout.addWidget(self.prompt_label)
        main_layout.addWidget(self.annotator, 1)

        container = QWidget()
        container.setLayout(main_layout)
        self.setCentralWidget(container)

        self.image_path = image_path
        self.load_image(image_path)

    # ------------------------------------------------------------------

    def load_image(self, image_path: Path) -> bool:
        pixmap = QPixmap(str(image_path))
        if pixmap.isNull():
            QMessageBox.critical(self, "Error", f"Failed to load image: {image_path}")
            return False

        self.annotator.set_source(pixmap)

        # Scale to fit the screen, keeping the image aspect
        screen = QApplication.primaryScreen()
        if screen is not None:
            geom = screen.availableGeometry()
            scale = min(1.0, geom.width() * SCREEN_FILL / pixmap.width(), geom.height() * SCREEN_FILL / pixmap.height())
            self.resize(int(pixmap.width() * scale) + 50, int(pixmap.height() * scale) + 120)
        return True

    def handle_finished(self, points: List[Dict[str, Any]]) -> None:
        self.result = points
        json.dump(points, self.output, indent=2)
        self.output.write("\n")
        self.output.flush()
        self.statusBar().showMessage(f"Recorded {len(points)} point(s)")

    def closeEvent(self, event):  # noqa: N802
        self.annotator.teardown()
        super().closeEvent(event)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Collect click points on an image.")
    parser.add_argument("image", type=Path, help="Image shown to the subject")
    parser.add_argument("--prompt", default="", help="Instruction shown above the image")
    parser.add_argument("--circle-radius", type=int, default=None, help="Marker ring radius in px")
    heat = parser.add_mutually_exclusive_group()
    heat.add_argument("--heatmap", dest="show_heatmap", action="store_true", default=None)
    heat.add_argument("--no-heatmap", dest="show_heatmap", action="store_false")
    parser.set_defaults(show_heatmap=None)
    parser.add_argument("--limited-view", action="store_true", default=None, help="Hide the image after a delay")
    parser.add_argument("--delay-ms", type=int, default=None, help="Limited-view delay in milliseconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def config_from_args(args: argparse.Namespace, base: AnnotatorConfig) -> AnnotatorConfig:
    """Command line flags win over the environment-derived ``base``."""
    return AnnotatorConfig(
        circle_radius_px=base.circle_radius_px if args.circle_radius is None else args.circle_radius,
        show_heatmap=base.show_heatmap if args.show_heatmap is None else args.show_heatmap,
        limited_view=base.limited_view if args.limited_view is None else args.limited_view,
        auto_hide_delay_ms=base.auto_hide_delay_ms if args.delay_ms is None else args.delay_ms,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:  # pragma: no cover
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args, AnnotatorConfig.from_env())
    except AnnotatorError as exc:
        logger.error("%s", exc)
        return 2

    app = QApplication(sys.argv[:1])
    window = AnnotatorWindow(args.image, config=config, prompt=args.prompt)
    window.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
