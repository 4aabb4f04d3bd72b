"""Drag session dataclass for the transform controller.

Unified drag state for a single pointer gesture, created on pointer-down and
discarded on pointer-up or cancel.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from constants import CORNER_HANDLES, RESIZE_HANDLES, HANDLE_MOVE, HANDLE_ROTATE
from models.frame import Frame
from models.snapping import SnapState


@dataclass
class DragSession:
    """State owned by the transform controller for one gesture.

    Replaces per-widget boolean flags with a single explicit object that is
    threaded through each pointer-move.
    """
    handle: str  # 'move', 'rotate', or a resize handle ('n', 'ne', ..., 'nw')
    start_logical_x: float
    start_logical_y: float
    original_frames: Dict[str, Frame]
    last_move_timestamp: float
    last_logical_x: float
    last_logical_y: float
    velocity: float = 0.0  # px/ms, exponentially smoothed
    original_font_sizes: Optional[Dict[str, int]] = None
    original_group_bounds: Optional[Frame] = None
    modifiers: frozenset = field(default_factory=frozenset)  # {'ctrl', 'meta', 'shift', 'alt'}
    snap_state: SnapState = field(default_factory=SnapState)
    group_scaler: object = None  # GroupScaler for multi-selection corner resize

    @property
    def keys(self):
        """Dragged element keys in selection order."""
        return list(self.original_frames)

    @property
    def is_multi_selection(self):
        return len(self.original_frames) > 1

    @property
    def is_move(self):
        return self.handle == HANDLE_MOVE

    @property
    def is_rotate(self):
        return self.handle == HANDLE_ROTATE

    @property
    def is_resize(self):
        return self.handle in RESIZE_HANDLES

    @property
    def is_corner(self):
        return self.handle in CORNER_HANDLES
