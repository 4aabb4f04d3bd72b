"""
Frame Transform Editor - Constants and Configuration

This module contains all constant values used throughout the application:
- Snapping thresholds and hysteresis
- Drag velocity smoothing
- Min/max values and constraints
- Handle sizes (screen pixels, divided by zoom at draw time)
- Guide colors
"""

# ======================================================================
# COORDINATE SYSTEM
# ======================================================================

# Logical canvas space: fixed document units, Y-down, independent of zoom/pan.
# Default canvas bounds (x, y, width, height)
DEFAULT_CANVAS_BOUNDS = (0.0, 0.0, 1080.0, 1080.0)

# ======================================================================
# SIZE CONSTRAINTS
# ======================================================================

# Frames at or below this size (logical units) are rejected during resize
MIN_FRAME_SIZE = 10.0

# Font sizes never scale below this during group resize
MIN_FONT_SIZE = 6
DEFAULT_FONT_SIZE = 16

# ======================================================================
# SMART SNAPPING
# ======================================================================

DEFAULT_SNAP_ENABLED = True
DEFAULT_SNAP_THRESHOLD_PX = 10.0  # Screen pixels, converted to logical by dividing by scale
DEFAULT_SNAP_TO_EDGES = True
DEFAULT_SNAP_TO_CENTER = True
DEFAULT_SNAP_TO_OBJECTS = True

# Keep a snap until the value moves this many thresholds away
SNAP_HYSTERESIS_FACTOR = 1.5

# Grid snapping (applied before smart snapping)
DEFAULT_SNAP_TO_GRID = False
DEFAULT_SNAP_GRID_SIZE = 10.0

# ======================================================================
# DRAG VELOCITY
# ======================================================================

# Exponential moving average weight of the newest sample
VELOCITY_SMOOTHING_FACTOR = 0.3

# Velocity (px/ms) at which snapping is fully suppressed
VELOCITY_SNAP_CUTOFF = 2.0

# Lower bound for elapsed time between moves (ms)
MIN_MOVE_INTERVAL_MS = 1.0

# Rotation handle points up at 0 degrees
ROTATION_OFFSET_DEGREES = 90.0

# ======================================================================
# HANDLE NAMES
# ======================================================================

HANDLE_MOVE = 'move'
HANDLE_ROTATE = 'rotate'
CORNER_HANDLES = ('nw', 'ne', 'se', 'sw')
EDGE_HANDLES = ('n', 'e', 's', 'w')
RESIZE_HANDLES = CORNER_HANDLES + EDGE_HANDLES

# ======================================================================
# TRANSFORM WIDGET CONSTANTS
# ======================================================================

# Handle visual appearance (screen pixels, constant regardless of zoom)
HANDLE_CORNER_SIZE = 12  # Corner circle diameter
HANDLE_EDGE_WIDTH = 20  # Edge tab long side
HANDLE_EDGE_HEIGHT = 8  # Edge tab short side
HANDLE_BORDER_WIDTH = 2
HANDLE_BORDER_RADIUS = 8  # Single selection box corner radius
HANDLE_ROTATE_DISTANCE = 40  # Distance below bottom edge
HANDLE_ROTATE_RADIUS = 12
HANDLE_HIT_TOLERANCE = 4  # Extra pixels for handle hit detection

HANDLE_COLOR = '#0066FF'
HANDLE_FILL = '#FFFFFF'

# ======================================================================
# GUIDES
# ======================================================================

GUIDE_COLOR_CENTER = '#ef4444'  # Canvas center alignment
GUIDE_COLOR_DEFAULT = '#3b82f6'  # Edges and siblings
GUIDE_STROKE_WIDTH = 1.5
GUIDE_FONT_SIZE = 11

# ======================================================================
# ZOOM / PAN
# ======================================================================

ZOOM_MIN = 0.25
ZOOM_MAX = 5.0
ZOOM_STEP = 1.25
