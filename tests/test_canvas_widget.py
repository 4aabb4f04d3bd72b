"""
Widget tests for the canvas surface and selection overlay.

Covers:
- View transform fit/center, zoom clamping and zoom-to-cursor
- Coordinate cache invalidation on zoom, pan and resize
- Overlay geometry tracking and handle drag via mouse events
- Zoom toolbar presets
"""
import pytest
from PyQt5.QtCore import Qt, QPoint

from models.frame import Frame
from models.scene import Scene
from components.canvas_widget import CanvasWidget
from components.zoom_toolbar import ZoomToolbar


@pytest.fixture
def canvas(qtbot):
    scene = Scene(canvas_bounds=(0, 0, 1000, 1000))
    scene.add_element('a', Frame(100, 100, 100, 100))
    scene.add_element('b', Frame(600, 600, 200, 100))
    widget = CanvasWidget(scene)
    qtbot.addWidget(widget)
    widget.resize(600, 600)
    return widget


def screen(canvas, x, y):
    p = canvas.coords.logical_to_screen((x, y))
    return QPoint(int(round(p.x)), int(round(p.y)))


class TestViewTransform:

    def test_fit_and_center(self, canvas):
        assert canvas.view_scale() == pytest.approx(0.54)
        p = canvas.coords.logical_to_screen((500, 500))
        assert (p.x, p.y) == pytest.approx((300, 300))

    def test_no_transform_for_empty_canvas(self, qtbot):
        widget = CanvasWidget(Scene(canvas_bounds=(0, 0, 0, 0)))
        qtbot.addWidget(widget)
        widget.resize(300, 300)
        assert widget.view_transform() is None
        assert widget.local_transform() is not None

    def test_zoom_clamped(self, canvas):
        for _ in range(20):
            canvas.zoom_in()
        assert canvas.zoom_level == pytest.approx(5.0)
        for _ in range(40):
            canvas.zoom_out()
        assert canvas.zoom_level == pytest.approx(0.25)

    def test_zoom_emits_percent(self, canvas, qtbot):
        with qtbot.waitSignal(canvas.zoomChanged) as blocker:
            canvas.set_zoom_level(200)
        assert blocker.args == [200]

    def test_zoom_invalidates_inverse(self, canvas):
        before = canvas.coords.screen_to_logical((0, 0))
        canvas.zoom_in()
        after = canvas.coords.screen_to_logical((0, 0))
        assert after.x != pytest.approx(before.x)
        center = canvas.coords.screen_to_logical((300, 300))
        assert (center.x, center.y) == pytest.approx((500, 500))

    def test_zoom_to_cursor_keeps_point_fixed(self, canvas):
        canvas.zoom_in(QPoint(300, 300))
        canvas.zoom_in(QPoint(450, 150))
        before = canvas.coords.screen_to_logical((450, 150))
        canvas.zoom_in(QPoint(450, 150))
        after = canvas.coords.screen_to_logical((450, 150))
        assert (after.x, after.y) == pytest.approx((before.x, before.y))

    def test_pan_invalidates_inverse(self, canvas):
        canvas.zoom_in()
        canvas.zoom_in()
        before = canvas.coords.screen_to_logical((300, 300))
        canvas.pan_by(30, 0)
        after = canvas.coords.screen_to_logical((300, 300))
        assert after.x < before.x

    def test_resize_invalidates_inverse(self, canvas):
        canvas.coords.screen_to_logical((0, 0))
        canvas.resize(800, 600)
        center = canvas.coords.screen_to_logical((400, 300))
        assert (center.x, center.y) == pytest.approx((500, 500))


class TestOverlay:

    def test_overlay_follows_parent_size(self, canvas, qtbot):
        canvas.show()
        canvas.resize(700, 500)
        qtbot.waitUntil(lambda: canvas.overlay.size() == canvas.size())

    def test_handle_drag_resizes(self, canvas, qtbot):
        canvas.show()
        canvas.scene.set_selection(['a'])
        controller = canvas.controller

        qtbot.mousePress(canvas.overlay, Qt.LeftButton, pos=screen(canvas, 200, 200))
        assert controller.drag_state() == 'se'

        controller.update_drag(screen(canvas, 250, 250))
        qtbot.mouseRelease(canvas.overlay, Qt.LeftButton, pos=screen(canvas, 250, 250))

        assert controller.drag_state() == 'idle'
        assert not controller.is_subscribed
        frame = canvas.scene.get_frame('a')
        assert frame.width == pytest.approx(150, abs=2)

    def test_press_off_handle_selects_element(self, canvas, qtbot):
        canvas.show()
        qtbot.mousePress(canvas.overlay, Qt.LeftButton, pos=screen(canvas, 700, 650))
        assert canvas.scene.selected_keys() == ['b']
        assert canvas.controller.drag_state() == 'move'
        qtbot.mouseRelease(canvas.overlay, Qt.LeftButton, pos=screen(canvas, 700, 650))
        assert canvas.controller.drag_state() == 'idle'

    def test_press_on_empty_clears_selection(self, canvas, qtbot):
        canvas.show()
        canvas.scene.set_selection(['a'])
        qtbot.mousePress(canvas.overlay, Qt.LeftButton, pos=screen(canvas, 450, 450))
        assert canvas.scene.selected_keys() == []
        assert canvas.controller.drag_state() == 'idle'

    def test_escape_cancels(self, canvas, qtbot):
        canvas.show()
        canvas.scene.set_selection(['a'])
        qtbot.mousePress(canvas.overlay, Qt.LeftButton, pos=screen(canvas, 150, 150))
        assert canvas.controller.drag_state() == 'move'
        qtbot.keyClick(canvas.overlay, Qt.Key_Escape)
        assert canvas.controller.drag_state() == 'idle'


class TestZoomToolbar:

    def test_presets(self, qtbot):
        toolbar = ZoomToolbar()
        qtbot.addWidget(toolbar)
        with qtbot.waitSignal(toolbar.zoom_changed) as blocker:
            toolbar.zoom_in_btn.click()
        assert blocker.args == [150]
        toolbar.set_zoom_percent(500)
        toolbar.zoom_in_btn.click()
        assert toolbar.get_zoom_percent() == 500

    def test_silent_update(self, qtbot):
        toolbar = ZoomToolbar()
        qtbot.addWidget(toolbar)
        with qtbot.assertNotEmitted(toolbar.zoom_changed):
            toolbar.set_zoom_percent(300, emit_signal=False)
        assert toolbar.get_zoom_percent() == 300
