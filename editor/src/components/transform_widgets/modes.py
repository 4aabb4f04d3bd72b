"""Selection modes - defines which handles are active for a selection."""

from .handles import CornerHandle, EdgeHandle, RotationHandle, MoveHandle
from constants import CORNER_HANDLES, EDGE_HANDLES, HANDLE_MOVE, HANDLE_ROTATE


class SelectionMode:
	"""Base class for selection modes."""

	# Hit test priority, first match wins
	check_order = ()

	def __init__(self):
		self.handles = {}  # handle_name -> handle_object

	def get_handles(self):
		"""Return all handles for this mode."""
		return self.handles

	def get_handle(self, name):
		return self.handles.get(name)

	def get_handle_at_pos(self, x, y, box, scale):
		"""Find which handle (if any) is at a logical position.

		Args:
			x, y: Pointer position in logical units
			box: Selection box (Frame) in logical units
			scale: Current logical -> screen scale

		Returns:
			Handle object or None
		"""
		for name in self.check_order:
			handle = self.handles.get(name)
			if handle is not None and handle.hit_test(x, y, box, scale):
				return handle
		return None


class SingleSelectionMode(SelectionMode):
	"""Single element - corners, edges, rotation and move."""

	check_order = (HANDLE_ROTATE,) + CORNER_HANDLES + EDGE_HANDLES + (HANDLE_MOVE,)

	def __init__(self):
		super().__init__()
		for name in CORNER_HANDLES:
			self.handles[name] = CornerHandle(name)
		for name in EDGE_HANDLES:
			self.handles[name] = EdgeHandle(name)
		self.handles[HANDLE_ROTATE] = RotationHandle()
		self.handles[HANDLE_MOVE] = MoveHandle()


class MultiSelectionMode(SelectionMode):
	"""Several elements - group box with corners, edges and move (no rotation)."""

	check_order = CORNER_HANDLES + EDGE_HANDLES + (HANDLE_MOVE,)

	def __init__(self):
		super().__init__()
		for name in CORNER_HANDLES:
			self.handles[name] = CornerHandle(name)
		for name in EDGE_HANDLES:
			self.handles[name] = EdgeHandle(name)
		self.handles[HANDLE_MOVE] = MoveHandle()


def create_mode(selection_count):
	"""Factory function to create the mode for a selection size.

	Args:
		selection_count: Number of selected elements

	Returns:
		SelectionMode instance, or None when nothing is selected
	"""
	if selection_count <= 0:
		return None
	if selection_count == 1:
		return SingleSelectionMode()
	return MultiSelectionMode()
