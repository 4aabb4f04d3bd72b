"""
Transform Controller - drag / resize / rotate state machine for selected frames

States:
- idle
- dragging(handle): 'move', 'rotate', or one of the 8 resize handles

Each pointer-move converts the pointer to logical space, derives the delta from
the drag start, smooths pointer velocity to scale the snap threshold down during
fast motion, runs the snap engine and proposes new frames to the scene.
Multi-selection corner resizes go through the group scaler without snapping.
"""

import logging
import math
import time

from PyQt5.QtCore import QObject, QEvent, Qt, pyqtSignal

from constants import (
	HANDLE_MOVE, HANDLE_ROTATE, RESIZE_HANDLES, MIN_FRAME_SIZE,
	VELOCITY_SMOOTHING_FACTOR, VELOCITY_SNAP_CUTOFF, MIN_MOVE_INTERVAL_MS,
	ROTATION_OFFSET_DEGREES, DEFAULT_SNAP_TO_GRID, DEFAULT_SNAP_GRID_SIZE,
)
from models.frame import Frame, union_bbox, resize_by_handle
from models.snapping import SnapOptions, SnapState
from services.group_scaler import GroupScaler
from services.snap_engine import calculate_smart_snap, snap_to_grid
from utils.errors import DegenerateResize
from utils.logger import loggerRaise
from components.transform_widgets.drag_context import DragSession
from components.transform_widgets.modes import create_mode


STATE_IDLE = 'idle'

# Modifiers that bypass smart snapping for the current move
SNAP_BYPASS_MODIFIERS = ('ctrl', 'meta')


def modifiers_from_qt(qt_modifiers):
	"""Convert Qt.KeyboardModifiers to a frozenset of names."""
	names = set()
	if qt_modifiers & Qt.ControlModifier:
		names.add('ctrl')
	if qt_modifiers & Qt.MetaModifier:
		names.add('meta')
	if qt_modifiers & Qt.ShiftModifier:
		names.add('shift')
	if qt_modifiers & Qt.AltModifier:
		names.add('alt')
	return frozenset(names)


def smooth_velocity(previous, instant, factor=VELOCITY_SMOOTHING_FACTOR):
	"""Exponential moving average of pointer speed (px/ms)."""
	return previous * (1 - factor) + instant * factor


def velocity_snap_factor(velocity, cutoff=VELOCITY_SNAP_CUTOFF):
	"""1.0 when still, falling linearly to 0.0 at the cutoff speed."""
	return max(0.0, 1.0 - min(1.0, velocity / cutoff))


class DragSubscription(QObject):
	"""Pointer listeners scoped to one drag session.

	Installs an application-wide event filter on subscribe() so moves and the
	release are seen even when the pointer leaves the widget. unsubscribe() is
	idempotent and is called on every exit path by the controller.
	"""

	def __init__(self, controller, widget):
		super().__init__()
		self.controller = controller
		self.widget = widget
		self._source = None
		self._last_seen = None

	@property
	def active(self):
		return self._source is not None

	def subscribe(self, source):
		if self._source is not None:
			return
		self._source = source
		source.installEventFilter(self)

	def unsubscribe(self):
		if self._source is None:
			return
		self._source.removeEventFilter(self)
		self._source = None
		self._last_seen = None

	def _widget_pos(self, event):
		return self.widget.mapFromGlobal(event.globalPos())

	def eventFilter(self, obj, event):
		etype = event.type()

		if etype == QEvent.MouseMove:
			# Propagated copies of the same event share timestamp and global position
			seen = (event.timestamp(), event.globalPos().x(), event.globalPos().y())
			if seen != self._last_seen:
				self._last_seen = seen
				self.controller.update_drag(
					self._widget_pos(event),
					timestamp=event.timestamp(),
					modifiers=modifiers_from_qt(event.modifiers()),
				)
			return False

		if etype == QEvent.MouseButtonRelease and event.button() == Qt.LeftButton:
			self.controller.end_drag()
			return False

		if etype == QEvent.KeyPress and event.key() == Qt.Key_Escape:
			self.controller.cancel_drag()
			return True

		if etype == QEvent.ApplicationDeactivate:
			self.controller.cancel_drag()

		return False


class TransformController(QObject):
	"""Drives interactive transforms of the scene's selected frames."""

	# Signals
	guidesChanged = pyqtSignal(list)  # list[SnapGuide]
	dragStateChanged = pyqtSignal(str)  # 'idle' or the active handle
	hoverChanged = pyqtSignal(str)  # handle name, '' when none
	transformEnded = pyqtSignal()  # Emitted when a drag completes (for history saving)

	def __init__(self, scene, coordinate_system, snap_options=None,
	             snap_to_grid=DEFAULT_SNAP_TO_GRID, grid_size=DEFAULT_SNAP_GRID_SIZE,
	             clock=None, parent=None):
		"""
		Args:
			scene: Frame store / selection / canvas bounds collaborator
			coordinate_system: CoordinateSystem bound to the canvas surface
			snap_options: SnapOptions (defaults from constants)
			snap_to_grid: Round positions/sizes to the grid before smart snapping
			grid_size: Grid spacing in logical units
			clock: callable returning milliseconds, used when events carry no timestamp
		"""
		super().__init__(parent)
		self._logger = logging.getLogger('TransformController')
		self.scene = scene
		self.coords = coordinate_system
		self.snap_options = snap_options or SnapOptions()
		self.snap_to_grid = snap_to_grid
		self.grid_size = grid_size
		self._clock = clock or (lambda: time.monotonic() * 1000.0)

		self._session = None
		self._guides = []
		self._hover_handle = None
		self._subscription = None

	# ========================================
	# State
	# ========================================

	@property
	def session(self):
		return self._session

	@property
	def is_dragging(self):
		return self._session is not None

	@property
	def guides(self):
		return list(self._guides)

	@property
	def is_subscribed(self):
		return self._subscription is not None and self._subscription.active

	@property
	def hover_handle(self):
		return self._hover_handle

	def drag_state(self):
		"""'idle' or the handle currently being dragged."""
		return self._session.handle if self._session else STATE_IDLE

	def set_hover_handle(self, name):
		if name != self._hover_handle:
			self._hover_handle = name
			self.hoverChanged.emit(name or '')

	def _publish_guides(self, guides):
		self._guides = list(guides)
		self.guidesChanged.emit(self.guides)

	# ========================================
	# Selection geometry
	# ========================================

	def selection_bounds(self):
		"""Union box of the selected frames, or None without a selection."""
		frames = [self.scene.get_frame(k) for k in self.scene.selected_keys()]
		frames = [f for f in frames if f is not None]
		if not frames:
			return None
		if len(frames) == 1:
			return frames[0]
		return union_bbox(frames)

	def handle_at(self, screen_pos):
		"""Name of the selection handle under a screen position, or None."""
		keys = self.scene.selected_keys()
		box = self.selection_bounds()
		mode = create_mode(len(keys))
		if box is None or mode is None:
			return None
		p = self.coords.screen_to_logical(screen_pos)
		handle = mode.get_handle_at_pos(p.x, p.y, box, self.coords.view_scale())
		return handle.name if handle else None

	def _siblings(self, dragged_keys):
		"""Frames that are not part of the drag (snap targets)."""
		return {k: f for k, f in self.scene.frames().items() if k not in dragged_keys}

	# ========================================
	# Subscription
	# ========================================

	def subscribe(self, widget, source=None):
		"""Attach pointer listeners for the active session.

		Args:
			widget: Widget whose coordinates the surface transform uses
			source: QObject to filter (defaults to the QApplication instance)
		"""
		if source is None:
			from PyQt5.QtWidgets import QApplication
			source = QApplication.instance()
		self._unsubscribe()
		self._subscription = DragSubscription(self, widget)
		self._subscription.subscribe(source)

	def _unsubscribe(self):
		if self._subscription is not None:
			self._subscription.unsubscribe()
			self._subscription = None

	def teardown(self):
		"""Component teardown: drop listeners and any gesture in progress."""
		self.cancel_drag()
		self._unsubscribe()

	# ========================================
	# Transitions
	# ========================================

	def begin_drag(self, handle, screen_pos, timestamp=None, modifiers=()):
		"""idle -> dragging(handle).

		Raises:
			SurfaceNotBound: coordinate system has no surface (stays idle)
			RuntimeError: a gesture is already in progress

		Returns:
			DragSession, or None when nothing is selected
		"""
		if self._session is not None:
			e = RuntimeError(f"Drag already in progress ({self._session.handle})")
			loggerRaise(e, "Cannot start a new drag before the current one ends")

		keys = self.scene.selected_keys()
		if not keys:
			return None

		# May raise SurfaceNotBound before any state changes
		start = self.coords.screen_to_logical(screen_pos)
		now = self._clock() if timestamp is None else float(timestamp)

		original_frames = {}
		for key in keys:
			frame = self.scene.get_frame(key)
			if frame is not None:
				original_frames[key] = frame
		if not original_frames:
			return None

		session = DragSession(
			handle=handle,
			start_logical_x=start.x,
			start_logical_y=start.y,
			original_frames=original_frames,
			last_move_timestamp=now,
			last_logical_x=start.x,
			last_logical_y=start.y,
			modifiers=frozenset(modifiers),
		)

		if session.is_multi_selection:
			session.original_group_bounds = union_bbox(original_frames.values())
			if handle in RESIZE_HANDLES:
				session.original_font_sizes = {
					k: self.scene.get_font_size(k) for k in original_frames
					if self.scene.is_text(k) and self.scene.get_font_size(k)
				}
			if session.is_corner:
				session.group_scaler = GroupScaler(
					original_frames, session.original_group_bounds, session.original_font_sizes,
				)

		self._session = session
		self._logger.debug(f"Begin drag '{handle}' on {list(original_frames)}")
		self.dragStateChanged.emit(handle)
		return session

	def end_drag(self):
		"""dragging -> idle after a normal pointer-up."""
		if self._session is None:
			return
		self._logger.debug(f"End drag '{self._session.handle}'")
		self._finish()
		self.transformEnded.emit()

	def cancel_drag(self):
		"""dragging -> idle without any further mutation (Escape, lost listener)."""
		if self._session is None:
			return
		self._logger.debug(f"Cancel drag '{self._session.handle}'")
		self._finish()

	def _finish(self):
		self._session = None
		self._unsubscribe()
		self._publish_guides([])
		self.dragStateChanged.emit(STATE_IDLE)

	# ========================================
	# Pointer move
	# ========================================

	def update_drag(self, screen_pos, timestamp=None, modifiers=None):
		"""dragging -> dragging on pointer-move. No-op while idle.

		Returns:
			bool: True if at least one mutation was proposed
		"""
		session = self._session
		if session is None:
			return False

		if modifiers is not None:
			session.modifiers = frozenset(modifiers)

		now = self._clock() if timestamp is None else float(timestamp)
		pos = self.coords.screen_to_logical(screen_pos)
		scale = self.coords.view_scale()

		dx = pos.x - session.start_logical_x
		dy = pos.y - session.start_logical_y

		# Pointer speed in screen pixels per millisecond
		elapsed = max(MIN_MOVE_INTERVAL_MS, now - session.last_move_timestamp)
		dist_px = math.hypot(pos.x - session.last_logical_x, pos.y - session.last_logical_y) * scale
		session.velocity = smooth_velocity(session.velocity, dist_px / elapsed)
		session.last_move_timestamp = now
		session.last_logical_x = pos.x
		session.last_logical_y = pos.y

		# Fast motion suppresses snapping, slow motion enables it fully
		factor = velocity_snap_factor(session.velocity)
		options = self.snap_options.with_threshold(self.snap_options.threshold_px * factor)
		bypass = any(m in session.modifiers for m in SNAP_BYPASS_MODIFIERS)
		smart_snap = self.snap_options.enabled and not bypass and factor > 0.0

		if session.is_move:
			return self._move(session, dx, dy, options, smart_snap, scale)
		if session.is_rotate:
			return self._rotate(session, pos)
		if session.is_resize:
			if not session.is_multi_selection:
				return self._resize_single(session, dx, dy, options, smart_snap, scale)
			if session.is_corner:
				return self._resize_group(session, dx, dy)
		return False

	def _grid(self, value):
		return snap_to_grid(value, self.grid_size) if self.snap_to_grid else value

	def _move(self, session, dx, dy, options, smart_snap, scale):
		keys = session.keys
		lead = session.original_frames[keys[0]]

		new_x = self._grid(lead.x + dx)
		new_y = self._grid(lead.y + dy)

		if smart_snap:
			result = calculate_smart_snap(
				lead.with_changes(x=new_x, y=new_y),
				self._siblings(keys),
				self.scene.canvas_bounds,
				options,
				HANDLE_MOVE,
				session.snap_state,
				scale,
			)
			new_x = result.frame.x
			new_y = result.frame.y
			session.snap_state = result.state
			self._publish_guides(result.guides)
		else:
			session.snap_state = SnapState()
			self._publish_guides([])

		# Same offset for every frame keeps the relative layout
		offset_x = new_x - lead.x
		offset_y = new_y - lead.y
		for key in keys:
			original = session.original_frames[key]
			self.scene.propose_frame(key, {'x': original.x + offset_x, 'y': original.y + offset_y})
		return True

	def _resize_single(self, session, dx, dy, options, smart_snap, scale):
		key = session.keys[0]
		original = session.original_frames[key]

		candidate = resize_by_handle(original, session.handle, dx, dy)
		if self.snap_to_grid:
			candidate = Frame(
				self._grid(candidate.x), self._grid(candidate.y),
				self._grid(candidate.width), self._grid(candidate.height),
				candidate.rotation,
			)

		guides = []
		state = SnapState()
		if smart_snap:
			result = calculate_smart_snap(
				candidate,
				self._siblings([key]),
				self.scene.canvas_bounds,
				options,
				session.handle,
				session.snap_state,
				scale,
			)
			candidate = result.frame
			guides = result.guides
			state = result.state

		try:
			self._validate_size(candidate)
		except DegenerateResize as e:
			self._logger.debug(f"Rejected resize of '{key}': {e}")
			return False

		session.snap_state = state
		self._publish_guides(guides)
		self.scene.propose_frame(key, {
			'x': candidate.x,
			'y': candidate.y,
			'width': candidate.width,
			'height': candidate.height,
		})
		return True

	def _resize_group(self, session, dx, dy):
		try:
			result = session.group_scaler.scale(session.handle, dx, dy)
		except DegenerateResize as e:
			self._logger.debug(f"Rejected group resize: {e}")
			return False

		# Snapping is disabled for group resize
		self._publish_guides([])
		for key, frame in result.frames.items():
			self.scene.propose_frame(key, {
				'x': self._grid(frame.x),
				'y': self._grid(frame.y),
				'width': self._grid(frame.width),
				'height': self._grid(frame.height),
			})
		for key, size in result.font_sizes.items():
			self.scene.propose_font_size(key, size)
		return bool(result.frames)

	def _rotate(self, session, pos):
		if session.is_multi_selection:
			return False
		key = session.keys[0]
		original = session.original_frames[key]

		angle = math.degrees(math.atan2(pos.y - original.center_y, pos.x - original.center_x))
		self._publish_guides([])
		self.scene.propose_frame(key, {'rotation': angle + ROTATION_OFFSET_DEGREES})
		return True

	@staticmethod
	def _validate_size(frame, min_size=MIN_FRAME_SIZE):
		if frame.width <= min_size or frame.height <= min_size:
			raise DegenerateResize(frame.width, frame.height, min_size)
