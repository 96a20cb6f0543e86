"""
Shared fixtures for the click annotator tests.

Qt runs on the offscreen platform so the suite works without a display.
"""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402
from PyQt5.QtGui import QColor, QPixmap  # noqa: E402

from click_annotator.config import AnnotatorConfig  # noqa: E402


@pytest.fixture
def pixmap(qapp):
    """Plain 200x100 image"""
    pm = QPixmap(200, 100)
    pm.fill(QColor(40, 90, 160))
    return pm


@pytest.fixture
def image_file(tmp_path, pixmap):
    """The same image saved as a PNG"""
    path = tmp_path / "screen.png"
    assert pixmap.save(str(path), "PNG")
    return path


@pytest.fixture
def make_annotator(qtbot, pixmap):
    """Factory for shown annotators with a given config"""
    from click_annotator.annotator import ImageAnnotator

    def _make(config=None, source=pixmap):
        annotator = ImageAnnotator(source, config=config or AnnotatorConfig())
        qtbot.addWidget(annotator)
        annotator.resize(400, 300)
        annotator.show()
        qtbot.waitExposed(annotator)
        return annotator

    return _make


@pytest.fixture
def annotator(make_annotator):
    return make_annotator()
