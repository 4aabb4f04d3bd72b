"""UI components for the Frame Transform Editor

This package contains the interactive canvas pieces:
- transform_widgets: Handle classes, selection modes and drag session state
- transform_controller: Drag / resize / rotate state machine
- selection_overlay: Handles and snap guides painted over the canvas
- canvas_widget: Zoomable canvas implementing the view transform
- zoom_toolbar: Zoom and snapping controls
"""

from .transform_controller import TransformController, DragSubscription
from .selection_overlay import SelectionOverlay
from .canvas_widget import CanvasWidget
from .zoom_toolbar import ZoomToolbar

__all__ = [
	'TransformController',
	'DragSubscription',
	'SelectionOverlay',
	'CanvasWidget',
	'ZoomToolbar',
]
