"""Multi-selection group resize.

Frames in a multi-selection are resized through their shared union bounding
box: each child keeps its position and size as fractions of the box, so the
relative layout of the group is invariant under scaling. Text children scale
their font size with the vertical factor.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict

from constants import CORNER_HANDLES, MIN_FRAME_SIZE, MIN_FONT_SIZE
from models.frame import Frame, resize_by_handle
from utils.errors import DegenerateResize


_logger = logging.getLogger('GroupScaler')


@dataclass
class GroupScaleResult:
	"""New child frames plus the font sizes that actually changed."""
	frames: Dict[str, Frame] = field(default_factory=dict)
	font_sizes: Dict[str, int] = field(default_factory=dict)
	bounds: Frame = None
	scale_x: float = 1.0
	scale_y: float = 1.0


def scale_font_size(original_size, scale_y, min_font_size=MIN_FONT_SIZE):
	"""Scale a font size by the vertical factor, rounded and floored."""
	return max(min_font_size, int(round(original_size * scale_y)))


def reproject_frame(frame, old_bounds, new_bounds):
	"""Map a frame's fractional placement in old_bounds into new_bounds."""
	rel_x = (frame.x - old_bounds.x) / old_bounds.width
	rel_y = (frame.y - old_bounds.y) / old_bounds.height
	rel_w = frame.width / old_bounds.width
	rel_h = frame.height / old_bounds.height
	return Frame(
		new_bounds.x + rel_x * new_bounds.width,
		new_bounds.y + rel_y * new_bounds.height,
		rel_w * new_bounds.width,
		rel_h * new_bounds.height,
		frame.rotation,
	)


class GroupScaler:
	"""Proportional corner resize for a fixed group of frames.

	Built once per drag from the snapshot taken at pointer-down; scale() is
	called on every pointer-move with the total delta since drag start.
	"""

	def __init__(self, original_frames, original_bounds, original_font_sizes=None,
	             min_size=MIN_FRAME_SIZE, min_font_size=MIN_FONT_SIZE):
		self.original_frames = dict(original_frames)
		self.original_bounds = original_bounds
		self.original_font_sizes = dict(original_font_sizes or {})
		self.min_size = min_size
		self.min_font_size = min_font_size
		self._last_font_sizes = dict(self.original_font_sizes)

	@property
	def last_font_sizes(self):
		return dict(self._last_font_sizes)

	def scale(self, handle, dx, dy):
		"""Resize the group box by a corner handle delta.

		Args:
			handle: 'nw', 'ne', 'se' or 'sw'
			dx, dy: Logical delta since drag start

		Returns:
			GroupScaleResult (empty if the original box has no area)

		Raises:
			ValueError: handle is not a corner handle
			DegenerateResize: new box would be smaller than min_size
		"""
		if handle not in CORNER_HANDLES:
			raise ValueError(f"Group resize requires a corner handle, got '{handle}'")

		old = self.original_bounds
		if old is None or old.width == 0 or old.height == 0:
			return GroupScaleResult(bounds=old)

		new_bounds = resize_by_handle(old, handle, dx, dy)
		if new_bounds.width < self.min_size or new_bounds.height < self.min_size:
			raise DegenerateResize(new_bounds.width, new_bounds.height, self.min_size)

		scale_x = new_bounds.width / old.width
		scale_y = new_bounds.height / old.height

		result = GroupScaleResult(bounds=new_bounds, scale_x=scale_x, scale_y=scale_y)
		for key, frame in self.original_frames.items():
			result.frames[key] = reproject_frame(frame, old, new_bounds)

			original_size = self.original_font_sizes.get(key)
			if not original_size:
				continue
			new_size = scale_font_size(original_size, scale_y, self.min_font_size)
			# Skip redundant updates on sub-pixel moves
			if self._last_font_sizes.get(key) != new_size:
				result.font_sizes[key] = new_size
				self._last_font_sizes[key] = new_size

		_logger.debug("Group scale %.3f x %.3f over %d frames", scale_x, scale_y, len(result.frames))
		return result


def scale_group(original_frames, original_bounds, handle, dx, dy, original_font_sizes=None):
	"""One-shot group resize without per-drag font size tracking.

	Returns:
		GroupScaleResult, or None when the new box would be degenerate
	"""
	scaler = GroupScaler(original_frames, original_bounds, original_font_sizes)
	try:
		return scaler.scale(handle, dx, dy)
	except DegenerateResize as e:
		_logger.debug("Group resize rejected: %s", e)
		return None
