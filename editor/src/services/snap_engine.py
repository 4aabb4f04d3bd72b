"""Smart snapping for frames being moved or resized.

Detects canvas edge snapping, canvas center alignment and object-to-object
snapping. Thresholds are given in screen pixels and converted to logical units
with the current view scale, so snapping feels the same at every zoom level.
Hysteresis keeps a snap until the value moves 1.5x the threshold away, which
prevents flicker when hovering near a boundary.
"""
from dataclasses import dataclass
from typing import Optional

import numpy as np

from constants import (
	HANDLE_MOVE, RESIZE_HANDLES, SNAP_HYSTERESIS_FACTOR,
	GUIDE_COLOR_CENTER, GUIDE_COLOR_DEFAULT,
)
from models.frame import Frame
from models.snapping import (
	SnapTarget, SnapGuide, SnapLock, SnapState, SnapResult,
	TARGET_EDGE, TARGET_CENTER, TARGET_SIBLING,
	AXIS_VERTICAL, AXIS_HORIZONTAL,
)


@dataclass(frozen=True)
class SnapMatch:
	"""Outcome of searching one coordinate against one axis' targets."""
	snapped: bool
	value: float
	target: Optional[SnapTarget] = None

	def lock(self):
		return SnapLock(self.value, self.target)


def snap_to_grid(value, grid_size):
	"""Round a coordinate to the nearest grid line."""
	if not grid_size or grid_size <= 0:
		return value
	return round(value / grid_size) * grid_size


def build_snap_targets(frame, other_frames, canvas_bounds, options):
	"""Collect per-axis snap targets.

	Args:
		frame: Candidate Frame (excluded from sibling targets if identical)
		other_frames: Mapping of key -> Frame
		canvas_bounds: (x, y, width, height)
		options: SnapOptions

	Returns:
		(x_targets, y_targets): lists of SnapTarget
	"""
	bx, by, bw, bh = canvas_bounds
	x_targets = []
	y_targets = []

	if options.snap_to_edges:
		x_targets.append(SnapTarget(bx, TARGET_EDGE, 'Left edge'))
		x_targets.append(SnapTarget(bx + bw, TARGET_EDGE, 'Right edge'))
		y_targets.append(SnapTarget(by, TARGET_EDGE, 'Top edge'))
		y_targets.append(SnapTarget(by + bh, TARGET_EDGE, 'Bottom edge'))

	if options.snap_to_center:
		x_targets.append(SnapTarget(bx + bw / 2, TARGET_CENTER, 'Center'))
		y_targets.append(SnapTarget(by + bh / 2, TARGET_CENTER, 'Center'))

	if options.snap_to_objects:
		for other in other_frames.values():
			# Don't snap to self
			if other.same_box(frame):
				continue
			x_targets.append(SnapTarget(other.left, TARGET_SIBLING))
			x_targets.append(SnapTarget(other.right, TARGET_SIBLING))
			x_targets.append(SnapTarget(other.center_x, TARGET_SIBLING))
			y_targets.append(SnapTarget(other.top, TARGET_SIBLING))
			y_targets.append(SnapTarget(other.bottom, TARGET_SIBLING))
			y_targets.append(SnapTarget(other.center_y, TARGET_SIBLING))

	return x_targets, y_targets


def find_closest_snap(value, targets, threshold, hysteresis_threshold, last_snap=None):
	"""Find the closest target within threshold, honouring hysteresis.

	If the previous move snapped and value is still within hysteresis_threshold
	of that snap, the previous target is kept. Otherwise the nearest target at
	distance <= threshold wins (first one on ties).

	Returns:
		SnapMatch
	"""
	if last_snap is not None and abs(value - last_snap.value) <= hysteresis_threshold:
		return SnapMatch(True, last_snap.value, last_snap.target)

	if not targets:
		return SnapMatch(False, value)

	values = np.fromiter((t.value for t in targets), dtype=float, count=len(targets))
	distances = np.abs(values - value)
	index = int(np.argmin(distances))
	if distances[index] <= threshold:
		target = targets[index]
		return SnapMatch(True, target.value, target)

	return SnapMatch(False, value)


def _guide(axis, match, with_label=False):
	"""Guide for a snapped match. Canvas-center snaps get the center color."""
	target = match.target
	is_center = target is not None and target.kind == TARGET_CENTER
	return SnapGuide(
		axis=axis,
		position=match.value,
		label=target.label if (with_label and target is not None) else None,
		color_hint=GUIDE_COLOR_CENTER if (with_label and is_center) else GUIDE_COLOR_DEFAULT,
	)


def _snap_move(frame, x_targets, y_targets, threshold, hysteresis, state):
	"""Move: test left/right/center per axis, center beats edges."""
	guides = []
	new_x = frame.x
	new_y = frame.y
	lock_x = None
	lock_y = None

	left = find_closest_snap(frame.left, x_targets, threshold, hysteresis, state.last_snap_x)
	right = find_closest_snap(frame.right, x_targets, threshold, hysteresis, state.last_snap_x)
	center_x = find_closest_snap(frame.center_x, x_targets, threshold, hysteresis, state.last_snap_x)
	top = find_closest_snap(frame.top, y_targets, threshold, hysteresis, state.last_snap_y)
	bottom = find_closest_snap(frame.bottom, y_targets, threshold, hysteresis, state.last_snap_y)
	center_y = find_closest_snap(frame.center_y, y_targets, threshold, hysteresis, state.last_snap_y)

	if center_x.snapped:
		new_x = center_x.value - frame.width / 2
		guides.append(_guide(AXIS_VERTICAL, center_x, with_label=True))
		lock_x = center_x.lock()
	elif left.snapped:
		new_x = left.value
		guides.append(_guide(AXIS_VERTICAL, left))
		lock_x = left.lock()
	elif right.snapped:
		new_x = right.value - frame.width
		guides.append(_guide(AXIS_VERTICAL, right))
		lock_x = right.lock()

	if center_y.snapped:
		new_y = center_y.value - frame.height / 2
		guides.append(_guide(AXIS_HORIZONTAL, center_y, with_label=True))
		lock_y = center_y.lock()
	elif top.snapped:
		new_y = top.value
		guides.append(_guide(AXIS_HORIZONTAL, top))
		lock_y = top.lock()
	elif bottom.snapped:
		new_y = bottom.value - frame.height
		guides.append(_guide(AXIS_HORIZONTAL, bottom))
		lock_y = bottom.lock()

	return frame.with_changes(x=new_x, y=new_y), guides, SnapState(lock_x, lock_y)


def _snap_resize(frame, handle, x_targets, y_targets, threshold, hysteresis, state):
	"""Resize: only the edges moved by the handle are tested, opposite edges stay put."""
	guides = []
	x = frame.x
	y = frame.y
	width = frame.width
	height = frame.height
	lock_x = None
	lock_y = None

	if 'w' in handle:
		left = find_closest_snap(frame.left, x_targets, threshold, hysteresis, state.last_snap_x)
		if left.snapped:
			x = left.value
			width = frame.width - (left.value - frame.left)
			guides.append(_guide(AXIS_VERTICAL, left))
			lock_x = left.lock()
	if 'e' in handle:
		right = find_closest_snap(frame.right, x_targets, threshold, hysteresis, state.last_snap_x)
		if right.snapped:
			width = right.value - frame.x
			guides.append(_guide(AXIS_VERTICAL, right))
			lock_x = right.lock()
	if 'n' in handle:
		top = find_closest_snap(frame.top, y_targets, threshold, hysteresis, state.last_snap_y)
		if top.snapped:
			y = top.value
			height = frame.height - (top.value - frame.top)
			guides.append(_guide(AXIS_HORIZONTAL, top))
			lock_y = top.lock()
	if 's' in handle:
		bottom = find_closest_snap(frame.bottom, y_targets, threshold, hysteresis, state.last_snap_y)
		if bottom.snapped:
			height = bottom.value - frame.y
			guides.append(_guide(AXIS_HORIZONTAL, bottom))
			lock_y = bottom.lock()

	snapped = Frame(x, y, width, height, frame.rotation)
	return snapped, guides, SnapState(lock_x, lock_y)


def calculate_smart_snap(frame, other_frames, canvas_bounds, options,
                         handle=None, snap_state=None, scale=1.0):
	"""Snap a candidate frame to canvas and sibling targets.

	Args:
		frame: Candidate Frame in logical units
		other_frames: Mapping key -> Frame (the frames being dragged excluded)
		canvas_bounds: (x, y, width, height) of the canvas
		options: SnapOptions (threshold_px in screen pixels)
		handle: 'move', a resize handle ('n', 'ne', ...), or None for no snapping
		snap_state: SnapState from the previous move of this drag
		scale: Current logical -> screen scale

	Returns:
		SnapResult with the corrected frame, guides and the next SnapState
	"""
	if not options.enabled:
		return SnapResult(frame, [], SnapState())

	state = snap_state or SnapState()

	# Convert threshold from screen pixels to logical units
	threshold = options.threshold_px / scale if scale else options.threshold_px
	hysteresis = threshold * SNAP_HYSTERESIS_FACTOR
	if threshold <= 0:
		# Nothing snaps, not even exact hits or held locks
		return SnapResult(frame, [], SnapState())

	x_targets, y_targets = build_snap_targets(frame, other_frames, canvas_bounds, options)

	if handle == HANDLE_MOVE:
		snapped, guides, new_state = _snap_move(frame, x_targets, y_targets, threshold, hysteresis, state)
	elif handle in RESIZE_HANDLES:
		snapped, guides, new_state = _snap_resize(frame, handle, x_targets, y_targets, threshold, hysteresis, state)
	else:
		return SnapResult(frame, [], SnapState())

	return SnapResult(snapped, guides, new_state)
