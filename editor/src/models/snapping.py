"""Snapping data structures: targets, guides, options and hysteresis state."""
from dataclasses import dataclass, field, replace
from typing import List, Optional

from constants import (
    DEFAULT_SNAP_ENABLED, DEFAULT_SNAP_THRESHOLD_PX, DEFAULT_SNAP_TO_EDGES,
    DEFAULT_SNAP_TO_CENTER, DEFAULT_SNAP_TO_OBJECTS,
)

from .frame import Frame


# Target kinds
TARGET_EDGE = 'edge'
TARGET_CENTER = 'center'
TARGET_SIBLING = 'sibling'

# Guide axes
AXIS_VERTICAL = 'vertical'  # Constant x, guides x-axis snaps
AXIS_HORIZONTAL = 'horizontal'  # Constant y, guides y-axis snaps


@dataclass(frozen=True)
class SnapTarget:
    """1D candidate coordinate on one axis."""
    value: float
    kind: str  # 'edge', 'center', 'sibling'
    label: Optional[str] = None


@dataclass(frozen=True)
class SnapGuide:
    """Rendering hint for an active alignment. Never persisted."""
    axis: str  # 'vertical' or 'horizontal'
    position: float
    label: Optional[str] = None
    color_hint: Optional[str] = None


@dataclass(frozen=True)
class SnapLock:
    """Snap adopted on the previous move for one axis."""
    value: float
    target: SnapTarget


@dataclass(frozen=True)
class SnapState:
    """Hysteresis state carried between moves of a single drag."""
    last_snap_x: Optional[SnapLock] = None
    last_snap_y: Optional[SnapLock] = None

    @property
    def is_empty(self):
        return self.last_snap_x is None and self.last_snap_y is None


@dataclass
class SnapOptions:
    """User-facing smart snap settings.

    threshold_px is in screen pixels; the engine divides by zoom scale.
    """
    enabled: bool = DEFAULT_SNAP_ENABLED
    threshold_px: float = DEFAULT_SNAP_THRESHOLD_PX
    snap_to_edges: bool = DEFAULT_SNAP_TO_EDGES
    snap_to_center: bool = DEFAULT_SNAP_TO_CENTER
    snap_to_objects: bool = DEFAULT_SNAP_TO_OBJECTS

    def with_threshold(self, threshold_px):
        return replace(self, threshold_px=threshold_px)


@dataclass(frozen=True)
class SnapResult:
    """Corrected frame plus guides and the state for the next move."""
    frame: Frame
    guides: List[SnapGuide] = field(default_factory=list)
    state: SnapState = field(default_factory=SnapState)
