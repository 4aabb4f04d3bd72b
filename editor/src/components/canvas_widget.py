"""
Canvas Widget - renders frames and owns the view transform

Provides:
- Zoom in/out/reset with zoom-to-cursor (Ctrl+wheel)
- Pan with middle mouse drag, or left drag on empty canvas when zoomed in
- Optional grid display
- Click to select, Shift+click to extend the selection

Implements the surface protocol used by CoordinateSystem:
- view_transform(): logical canvas units -> widget pixels
- local_transform(): zoom/pan only, used before the widget has a size
- view_scale(): logical -> screen scale factor

The SelectionOverlay child covers this widget exactly, so widget pixels are also
the overlay's pixels.
"""

import logging

from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QRectF, QLineF, pyqtSignal
from PyQt5.QtGui import QPainter, QPen, QBrush, QColor, QTransform, QFont

from constants import ZOOM_MIN, ZOOM_MAX, ZOOM_STEP, HANDLE_MOVE, DEFAULT_SNAP_GRID_SIZE
from utils.coordinate_system import CoordinateSystem
from utils.errors import SurfaceNotBound, NonInvertibleTransform
from components.transform_controller import TransformController
from components.selection_overlay import SelectionOverlay


# Fraction of the widget the canvas occupies at 100% zoom
CANVAS_FIT_MARGIN = 0.9

# Maximum pan as a fraction of the zoomed canvas size
MAX_PAN_FRACTION = 0.3

BACKGROUND_COLOR = QColor(40, 40, 40)
CANVAS_COLOR = QColor(250, 250, 250)
FRAME_OUTLINE_COLOR = QColor(120, 120, 120)
FRAME_FILL_COLOR = QColor(210, 222, 240, 160)
GRID_COLOR = QColor(0, 0, 0, 25)


class CanvasWidget(QWidget):
	"""Canvas surface for a Scene with zoom, pan and an interactive selection overlay"""

	zoomChanged = pyqtSignal(int)  # Zoom percentage (25-500)

	def __init__(self, scene, snap_options=None, snap_to_grid=False,
	             grid_size=DEFAULT_SNAP_GRID_SIZE, parent=None):
		super().__init__(parent)
		self._logger = logging.getLogger('CanvasWidget')
		self.setMouseTracking(True)
		self.setFocusPolicy(Qt.StrongFocus)
		self.setMinimumSize(200, 200)

		self.scene = scene

		# View state
		self.zoom_level = 1.0
		self.pan_x = 0.0
		self.pan_y = 0.0
		self.is_panning = False
		self.last_mouse_pos = None
		self.show_grid = False
		self.grid_size = grid_size

		self.coords = CoordinateSystem(self)
		self.controller = TransformController(
			scene, self.coords, snap_options,
			snap_to_grid=snap_to_grid, grid_size=grid_size, parent=self,
		)
		self.overlay = SelectionOverlay(self.controller, self)

		self.scene.add_listener(self._on_scene_changed)
		self.controller.transformEnded.connect(self.update)

	# ========================================
	# Surface protocol
	# ========================================

	def view_scale(self):
		"""Logical units -> widget pixels at the current zoom."""
		_, _, bw, bh = self.scene.canvas_bounds
		if bw <= 0 or bh <= 0 or self.width() <= 0 or self.height() <= 0:
			return self.zoom_level
		fit = min(self.width() / bw, self.height() / bh) * CANVAS_FIT_MARGIN
		return fit * self.zoom_level

	def view_transform(self):
		"""Canvas centered in the widget, scaled to fit, then zoomed and panned.

		Returns:
			QTransform, or None until the widget has been laid out
		"""
		bx, by, bw, bh = self.scene.canvas_bounds
		if bw <= 0 or bh <= 0 or self.width() <= 0 or self.height() <= 0:
			return None
		scale = self.view_scale()
		tx = self.width() / 2 + self.pan_x - (bx + bw / 2) * scale
		ty = self.height() / 2 + self.pan_y - (by + bh / 2) * scale
		return QTransform(scale, 0.0, 0.0, scale, tx, ty)

	def local_transform(self):
		"""Zoom and pan without layout, for use before the first resize."""
		return QTransform(self.zoom_level, 0.0, 0.0, self.zoom_level, self.pan_x, self.pan_y)

	def _view_changed(self):
		"""Any zoom/pan/size change: drop cached inverse and repaint."""
		self.coords.invalidate()
		self.update()
		self.overlay.update()

	def _on_scene_changed(self, key):
		if key is None:
			# Selection or canvas bounds changed
			self.coords.invalidate()
		self.update()
		self.overlay.update()

	# ========================================
	# Zoom & pan
	# ========================================

	def zoom_in(self, cursor_pos=None):
		"""Zoom in by 25%."""
		self._apply_zoom(min(self.zoom_level * ZOOM_STEP, ZOOM_MAX), cursor_pos)

	def zoom_out(self, cursor_pos=None):
		"""Zoom out by 25%."""
		self._apply_zoom(max(self.zoom_level / ZOOM_STEP, ZOOM_MIN), cursor_pos)

	def zoom_reset(self):
		"""Reset zoom to 100%."""
		self.pan_x = 0.0
		self.pan_y = 0.0
		self._apply_zoom(1.0)

	def set_zoom_level(self, zoom_percent):
		"""Set zoom to specific percentage."""
		self._apply_zoom(max(ZOOM_MIN, min(ZOOM_MAX, zoom_percent / 100.0)))

	def get_zoom_percent(self):
		"""Get current zoom percentage."""
		return int(round(self.zoom_level * 100))

	def _apply_zoom(self, new_zoom, cursor_pos=None):
		old_zoom = self.zoom_level
		if new_zoom == old_zoom:
			return
		self.zoom_level = new_zoom
		if cursor_pos is not None:
			self._adjust_pan_for_zoom(cursor_pos, old_zoom, new_zoom)
		if self.zoom_level <= 1.0:
			self.pan_x = 0.0
			self.pan_y = 0.0
		self._view_changed()
		self.zoomChanged.emit(self.get_zoom_percent())

	def _adjust_pan_for_zoom(self, cursor_pos, old_zoom, new_zoom):
		"""Adjust pan to keep the point under the cursor fixed."""
		cursor_offset_x = cursor_pos.x() - self.width() / 2 - self.pan_x
		cursor_offset_y = cursor_pos.y() - self.height() / 2 - self.pan_y
		scale_ratio = new_zoom / old_zoom
		self.pan_x += cursor_offset_x * (1 - scale_ratio)
		self.pan_y += cursor_offset_y * (1 - scale_ratio)

	def pan_by(self, dx, dy):
		"""Pan by a pixel delta, clamped to the zoomed canvas size."""
		self.pan_x += dx
		self.pan_y += dy
		canvas_size = min(self.width(), self.height())
		max_pan = canvas_size * self.zoom_level * MAX_PAN_FRACTION
		self.pan_x = max(-max_pan, min(max_pan, self.pan_x))
		self.pan_y = max(-max_pan, min(max_pan, self.pan_y))
		self._view_changed()

	def set_show_grid(self, show):
		"""Toggle grid visibility."""
		self.show_grid = show
		self.update()

	def set_snap_to_grid(self, enabled):
		self.controller.snap_to_grid = enabled
		self.set_show_grid(enabled)

	def resizeEvent(self, event):
		super().resizeEvent(event)
		self.coords.invalidate()

	def closeEvent(self, event):
		self.controller.teardown()
		super().closeEvent(event)

	# ========================================
	# Painting
	# ========================================

	def paintEvent(self, event):
		painter = QPainter(self)
		painter.setRenderHint(QPainter.Antialiasing)
		painter.fillRect(self.rect(), BACKGROUND_COLOR)

		transform = self.view_transform()
		if transform is None:
			return
		painter.setTransform(transform)

		bx, by, bw, bh = self.scene.canvas_bounds
		painter.fillRect(QRectF(bx, by, bw, bh), CANVAS_COLOR)

		if self.show_grid:
			self._paint_grid(painter, bx, by, bw, bh)

		outline = QPen(FRAME_OUTLINE_COLOR, 1)
		outline.setCosmetic(True)
		for key in self.scene.keys():
			element = self.scene.element(key)
			frame = element.frame
			painter.save()
			painter.translate(frame.center_x, frame.center_y)
			painter.rotate(frame.rotation)
			rect = QRectF(-frame.width / 2, -frame.height / 2, frame.width, frame.height)
			painter.setPen(outline)
			painter.setBrush(QBrush(FRAME_FILL_COLOR))
			painter.drawRect(rect)
			if element.is_text:
				font = QFont()
				font.setPixelSize(max(1, int(element.font_size or 1)))
				painter.setFont(font)
				painter.drawText(rect, Qt.AlignCenter, key)
			painter.restore()

	def _paint_grid(self, painter, bx, by, bw, bh):
		if self.grid_size <= 0:
			return
		pen = QPen(GRID_COLOR, 1)
		pen.setCosmetic(True)
		painter.setPen(pen)
		x = bx
		while x <= bx + bw:
			painter.drawLine(QLineF(x, by, x, by + bh))
			x += self.grid_size
		y = by
		while y <= by + bh:
			painter.drawLine(QLineF(bx, y, bx + bw, y))
			y += self.grid_size

	# ========================================
	# Mouse Event Handlers
	# ========================================

	def wheelEvent(self, event):
		"""Handle mouse wheel for zoom."""
		if event.modifiers() & Qt.ControlModifier:
			cursor_pos = event.pos()
			delta = event.angleDelta().y()
			if delta > 0:
				self.zoom_in(cursor_pos)
			elif delta < 0:
				self.zoom_out(cursor_pos)
			event.accept()
			return
		super().wheelEvent(event)

	def mousePressEvent(self, event):
		"""Select under the cursor and start a move, or start panning."""
		if event.button() == Qt.MiddleButton:
			self._start_pan(event)
			return

		if event.button() != Qt.LeftButton:
			super().mousePressEvent(event)
			return

		try:
			p = self.coords.screen_to_logical(event.pos())
		except (SurfaceNotBound, NonInvertibleTransform) as e:
			self._logger.debug(f"Ignoring press before layout: {e}")
			return
		key = self.scene.element_at(p.x, p.y)

		if key is None:
			if not (event.modifiers() & Qt.ShiftModifier):
				self.scene.clear_selection()
			if self.zoom_level > 1.0:
				self._start_pan(event)
			return

		if event.modifiers() & Qt.ShiftModifier:
			self.scene.add_to_selection(key)
		elif key not in self.scene.selected_keys():
			self.scene.set_selection([key])

		self.overlay.start_drag(HANDLE_MOVE, event.pos(), event.timestamp(), event.modifiers())

	def mouseMoveEvent(self, event):
		if self.is_panning and self.last_mouse_pos is not None:
			delta = event.globalPos() - self.last_mouse_pos
			self.last_mouse_pos = event.globalPos()
			self.pan_by(delta.x(), delta.y())
			return
		if self.zoom_level > 1.0:
			self.setCursor(Qt.OpenHandCursor)
		else:
			self.setCursor(Qt.ArrowCursor)
		super().mouseMoveEvent(event)

	def mouseReleaseEvent(self, event):
		if self.is_panning and event.button() in (Qt.LeftButton, Qt.MiddleButton):
			self.is_panning = False
			self.last_mouse_pos = None
			self.setCursor(Qt.OpenHandCursor if self.zoom_level > 1.0 else Qt.ArrowCursor)
			return
		super().mouseReleaseEvent(event)

	def _start_pan(self, event):
		self.is_panning = True
		self.last_mouse_pos = event.globalPos()
		self.setCursor(Qt.ClosedHandCursor)
