"""
Frame Transform Editor - Transform Widget Components

This package contains the selection handle architecture:
- handles.py: ABC-based handle classes (CornerHandle, EdgeHandle, etc.)
- modes.py: Mode classes defining handle sets (single vs multi selection)
- drag_context.py: Drag session state for one gesture
"""

from .handles import Handle, CornerHandle, EdgeHandle, RotationHandle, MoveHandle
from .modes import SelectionMode, SingleSelectionMode, MultiSelectionMode, create_mode
from .drag_context import DragSession

__all__ = [
    'Handle', 'CornerHandle', 'EdgeHandle', 'RotationHandle', 'MoveHandle',
    'SelectionMode', 'SingleSelectionMode', 'MultiSelectionMode', 'create_mode',
    'DragSession',
]
