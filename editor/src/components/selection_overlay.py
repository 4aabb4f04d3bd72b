"""
Selection Overlay - interactive handles and snap guides over the canvas

Draws on top of the canvas widget:
- Selection box around the selected frames (union box for multi-selection)
- Corner, edge and rotation handles at a constant screen size
- Alignment guides published by the transform controller

Presses on a handle start a controller drag; presses anywhere else are ignored
so they fall through to the canvas underneath (selection, panning).
"""

import logging

from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QPointF, QLineF, QRectF, QEvent
from PyQt5.QtGui import QPainter, QPen, QColor, QFont

from constants import (
	HANDLE_COLOR, HANDLE_ROTATE, HANDLE_BORDER_RADIUS, GUIDE_COLOR_CENTER, GUIDE_COLOR_DEFAULT,
	GUIDE_STROKE_WIDTH, GUIDE_FONT_SIZE,
)
from models.snapping import AXIS_VERTICAL
from utils.errors import SurfaceNotBound, NonInvertibleTransform
from utils.logger import loggerRaise
from components.transform_widgets.modes import create_mode
from components.transform_controller import modifiers_from_qt


# Dash patterns (in pen widths) for canvas-center guides and all others
CENTER_GUIDE_DASHES = [4, 2]
DEFAULT_GUIDE_DASHES = [6, 3]


class SelectionOverlay(QWidget):
	"""Transparent overlay driving a TransformController"""

	def __init__(self, controller, parent=None):
		super().__init__(parent)
		self._logger = logging.getLogger('SelectionOverlay')
		self.setAttribute(Qt.WA_TranslucentBackground)
		self.setMouseTracking(True)
		self.setFocusPolicy(Qt.StrongFocus)

		self.controller = controller
		self.controller.guidesChanged.connect(self._on_controller_changed)
		self.controller.hoverChanged.connect(self._on_controller_changed)
		self.controller.dragStateChanged.connect(self._on_controller_changed)

		# Position absolutely on top of parent
		if parent:
			self.setGeometry(0, 0, parent.width(), parent.height())
			parent.installEventFilter(self)

	def eventFilter(self, obj, event):
		"""Handle parent resize to keep widget covering parent"""
		if event.type() == QEvent.Resize and obj == self.parent():
			self.setGeometry(0, 0, obj.width(), obj.height())
		return super().eventFilter(obj, event)

	def _on_controller_changed(self, *args):
		self.update()

	def _to_screen(self, point):
		return self.controller.coords.logical_to_screen(point)

	# ========================================
	# Painting
	# ========================================

	def paintEvent(self, event):
		"""Draw the selection box, handles and guides"""
		coords = self.controller.coords
		if not coords.is_bound:
			return

		keys = self.controller.scene.selected_keys()
		box = self.controller.selection_bounds()
		mode = create_mode(len(keys))

		painter = QPainter(self)
		painter.setRenderHint(QPainter.Antialiasing)
		try:
			if box is not None and mode is not None:
				self._paint_selection(painter, keys, box, mode, coords.view_scale())
			self._paint_guides(painter)
		except (SurfaceNotBound, NonInvertibleTransform) as e:
			self._logger.debug(f"Skipping overlay paint: {e}")
		finally:
			painter.end()

	def _screen_rect(self, frame):
		top_left = self._to_screen((frame.left, frame.top))
		bottom_right = self._to_screen((frame.right, frame.bottom))
		return QRectF(top_left.x, top_left.y, bottom_right.x - top_left.x, bottom_right.y - top_left.y)

	def _paint_selection(self, painter, keys, box, mode, scale):
		painter.setBrush(Qt.NoBrush)

		# Individual outlines inside a group box
		if len(keys) > 1:
			painter.setPen(QPen(QColor(HANDLE_COLOR), 1, Qt.DotLine))
			for key in keys:
				frame = self.controller.scene.get_frame(key)
				if frame is not None:
					painter.drawRect(self._screen_rect(frame))

		painter.setPen(QPen(QColor(HANDLE_COLOR), 1))
		if len(keys) == 1:
			painter.drawRoundedRect(self._screen_rect(box), HANDLE_BORDER_RADIUS, HANDLE_BORDER_RADIUS)
		else:
			painter.drawRect(self._screen_rect(box))

		rotate = mode.get_handle(HANDLE_ROTATE)
		if rotate is not None:
			start = self._to_screen((box.center_x, box.bottom))
			end = self._to_screen(rotate.position(box, scale))
			painter.setPen(QPen(QColor(HANDLE_COLOR), 1, Qt.DashLine))
			painter.drawLine(QLineF(start.x, start.y, end.x, end.y))

		hovered = self.controller.drag_state()
		if hovered == 'idle':
			hovered = self.controller.hover_handle
		for name, handle in mode.get_handles().items():
			handle.draw(painter, self._to_screen, box, scale, hovered=(name == hovered))

	def _paint_guides(self, painter):
		guides = self.controller.guides
		if not guides:
			return

		font = QFont()
		font.setPixelSize(GUIDE_FONT_SIZE)
		painter.setFont(font)

		for guide in guides:
			color = QColor(guide.color_hint or GUIDE_COLOR_DEFAULT)
			pen = QPen(color, GUIDE_STROKE_WIDTH)
			pen.setDashPattern(
				CENTER_GUIDE_DASHES if guide.color_hint == GUIDE_COLOR_CENTER else DEFAULT_GUIDE_DASHES
			)
			painter.setPen(pen)

			if guide.axis == AXIS_VERTICAL:
				x = self._to_screen((guide.position, 0.0)).x
				painter.drawLine(QLineF(x, 0, x, self.height()))
				label_pos = QPointF(x + 4, GUIDE_FONT_SIZE + 4)
			else:
				y = self._to_screen((0.0, guide.position)).y
				painter.drawLine(QLineF(0, y, self.width(), y))
				label_pos = QPointF(4, y - 4)

			if guide.label:
				painter.setPen(color)
				painter.drawText(label_pos, guide.label)

	# ========================================
	# Mouse Event Handlers
	# ========================================

	def _handle_at(self, pos):
		try:
			return self.controller.handle_at(pos)
		except (SurfaceNotBound, NonInvertibleTransform) as e:
			self._logger.debug(f"Hit test unavailable: {e}")
			return None

	def _cursor_for(self, name):
		mode = create_mode(len(self.controller.scene.selected_keys()))
		handle = mode.get_handle(name) if mode else None
		return handle.get_cursor() if handle else Qt.ArrowCursor

	def start_drag(self, handle, pos, timestamp=None, qt_modifiers=Qt.NoModifier):
		"""Begin a controller drag and listen for pointer events until it ends.

		Returns:
			DragSession or None
		"""
		try:
			session = self.controller.begin_drag(
				handle, pos, timestamp=timestamp, modifiers=modifiers_from_qt(qt_modifiers),
			)
		except SurfaceNotBound as e:
			loggerRaise(e, "The canvas is not ready for editing yet")
		if session is not None:
			self.controller.subscribe(self)
			self.setFocus()
		return session

	def mousePressEvent(self, event):
		"""Start a drag on a handle; otherwise let the canvas handle it"""
		if event.button() == Qt.LeftButton and not self.controller.is_dragging:
			handle = self._handle_at(event.pos())
			if handle is not None:
				self.start_drag(handle, event.pos(), event.timestamp(), event.modifiers())
				event.accept()
				return
		event.ignore()

	def mouseMoveEvent(self, event):
		"""Hover highlighting while idle; drag moves arrive via the subscription"""
		if self.controller.is_dragging:
			event.accept()
			return

		handle = self._handle_at(event.pos())
		self.controller.set_hover_handle(handle)
		if handle is None:
			self.unsetCursor()
			event.ignore()
			return
		self.setCursor(self._cursor_for(handle))
		event.accept()

	def mouseReleaseEvent(self, event):
		"""Ends the drag if the subscription has not already done so"""
		if self.controller.is_dragging:
			if event.button() == Qt.LeftButton:
				self.controller.end_drag()
			event.accept()
			return
		event.ignore()

	def leaveEvent(self, event):
		self.controller.set_hover_handle(None)
		super().leaveEvent(event)

	def keyPressEvent(self, event):
		"""Escape cancels the drag in progress"""
		if event.key() == Qt.Key_Escape and self.controller.is_dragging:
			self.controller.cancel_drag()
			event.accept()
			return
		super().keyPressEvent(event)
