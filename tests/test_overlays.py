"""
Tests for the marker and heatmap overlays.

Covers:
- Heatmap blobs: centre alpha, falloff, stacking
- Re-rendering starts from a cleared surface
- Empty boxes draw nothing
- Overlays let clicks through
"""
import pytest
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QColor, QImage, QPainter

from click_annotator.geometry import BoxSize, Point
from click_annotator.overlays import (
    HEAT_CENTER_COLOR,
    HeatmapOverlay,
    MarkerOverlay,
    draw_markers,
    render_heatmap,
)

BOX = BoxSize(200, 100)
CENTER = Point(0.5, 0.5, 0)


def _surface(w=200, h=100):
    image = QImage(w, h, QImage.Format_ARGB32_Premultiplied)
    image.fill(Qt.transparent)
    return image


def _alpha(image, x, y):
    return image.pixelColor(x, y).alpha()


class TestRenderHeatmap:

    def test_centre_is_translucent_red(self):
        surface = _surface()
        assert render_heatmap(surface, [CENTER], BOX, 40)
        color = surface.pixelColor(100, 50)
        assert color.red() >= 250
        assert color.green() == 0
        assert _alpha(surface, 100, 50) == pytest.approx(HEAT_CENTER_COLOR.alpha(), abs=4)

    def test_fades_towards_radius(self):
        surface = _surface()
        render_heatmap(surface, [CENTER], BOX, 40)
        assert _alpha(surface, 100, 50) > _alpha(surface, 120, 50) > _alpha(surface, 135, 50)
        assert _alpha(surface, 145, 50) == 0
        assert _alpha(surface, 0, 0) == 0

    def test_overlapping_points_darken(self):
        single, double = _surface(), _surface()
        render_heatmap(single, [CENTER], BOX, 40)
        render_heatmap(double, [CENTER, CENTER], BOX, 40)
        assert _alpha(double, 100, 50) > _alpha(single, 100, 50)

    def test_rerender_does_not_accumulate(self):
        surface = _surface()
        render_heatmap(surface, [CENTER], BOX, 40)
        first = _alpha(surface, 100, 50)
        render_heatmap(surface, [CENTER], BOX, 40)
        assert _alpha(surface, 100, 50) == first

    def test_no_points_clears_surface(self):
        surface = _surface()
        surface.fill(QColor(0, 0, 255, 255))
        assert render_heatmap(surface, [], BOX, 40)
        assert _alpha(surface, 10, 10) == 0

    @pytest.mark.parametrize("box", [BoxSize(0, 100), BoxSize(200, 0)])
    def test_empty_box_leaves_surface_untouched(self, box):
        surface = _surface()
        surface.fill(QColor(0, 0, 255, 255))
        assert render_heatmap(surface, [CENTER], box, 40) is False
        assert surface.pixelColor(100, 50) == QColor(0, 0, 255, 255)


class TestDrawMarkers:

    def _draw(self, points, box, radius=10):
        surface = _surface()
        painter = QPainter(surface)
        drawn = draw_markers(painter, points, box, radius)
        painter.end()
        return surface, drawn

    def test_ring_is_unfilled(self):
        surface, drawn = self._draw([CENTER], BOX)
        assert drawn == 1
        assert max(_alpha(surface, x, 50) for x in range(108, 113)) > 0  # On the ring
        assert _alpha(surface, 100, 50) == 0  # Centre left empty

    def test_empty_box_draws_nothing(self):
        surface, drawn = self._draw([CENTER], BoxSize(0, 100))
        assert drawn == 0
        assert max(_alpha(surface, x, 50) for x in range(108, 113)) == 0


class TestOverlayWidgets:

    def test_transparent_for_mouse_events(self, qtbot):
        for overlay in (MarkerOverlay(), HeatmapOverlay()):
            qtbot.addWidget(overlay)
            assert overlay.testAttribute(Qt.WA_TransparentForMouseEvents)

    def test_heatmap_surface_follows_box(self, qtbot):
        overlay = HeatmapOverlay(radius=40)
        qtbot.addWidget(overlay)
        overlay.set_points([CENTER])
        overlay.set_box(BoxSize(300, 150))
        assert overlay.surface.width() == 300
        assert overlay.surface.height() == 150
        assert _alpha(overlay.surface, 150, 75) > 0

    def test_heatmap_redraws_on_point_change(self, qtbot):
        overlay = HeatmapOverlay(radius=40)
        qtbot.addWidget(overlay)
        overlay.set_box(BOX)
        overlay.set_points([CENTER])
        assert _alpha(overlay.surface, 100, 50) > 0
        overlay.set_points([])
        assert _alpha(overlay.surface, 100, 50) == 0

    def test_heatmap_empty_box_keeps_surface_null(self, qtbot):
        overlay = HeatmapOverlay()
        qtbot.addWidget(overlay)
        overlay.set_points([CENTER])
        overlay.set_box(BoxSize(0, 0))
        assert overlay.surface.isNull()

    def test_heatmap_radius_change(self, qtbot):
        overlay = HeatmapOverlay(radius=40)
        qtbot.addWidget(overlay)
        overlay.set_box(BOX)
        overlay.set_points([CENTER])
        assert _alpha(overlay.surface, 150, 50) == 0
        overlay.set_radius(70)
        assert overlay.radius == 70
        assert _alpha(overlay.surface, 150, 50) > 0

    def test_marker_overlay_tracks_box(self, qtbot):
        overlay = MarkerOverlay(radius_px=12)
        qtbot.addWidget(overlay)
        overlay.set_box(BoxSize(320, 240))
        assert overlay.box == BoxSize(320, 240)
        assert (overlay.width(), overlay.height()) == (320, 240)

    def test_box_and_radius_change_renders_once(self, qtbot, monkeypatch):
        import click_annotator.overlays as overlays

        calls = []
        real_render = overlays.render_heatmap

        def counting_render(surface, points, box, radius):
            calls.append((box, radius))
            return real_render(surface, points, box, radius)

        monkeypatch.setattr(overlays, "render_heatmap", counting_render)
        overlay = HeatmapOverlay(radius=40)
        qtbot.addWidget(overlay)
        overlay.set_points([CENTER])
        overlay.set_box(BoxSize(3000, 1000), radius=80)
        assert calls == [(BoxSize(3000, 1000), 80)]
        assert overlay.radius == 80
