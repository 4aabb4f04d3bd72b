"""Frame data structures for canvas-space geometry."""
import math
from dataclasses import dataclass, replace


@dataclass
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y coordinate pair across different spaces:
    - Screen pixels (pointer events, widget coordinates)
    - Logical canvas units
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))


@dataclass(frozen=True)
class Frame:
    """Positioned rectangle in logical canvas units.

    x/y is the top-left corner (Y-down). Rotation is in degrees around the
    frame center and does not affect x/y/width/height.
    """
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0

    @property
    def left(self):
        return self.x

    @property
    def right(self):
        return self.x + self.width

    @property
    def top(self):
        return self.y

    @property
    def bottom(self):
        return self.y + self.height

    @property
    def center_x(self):
        return self.x + self.width / 2

    @property
    def center_y(self):
        return self.y + self.height / 2

    def with_changes(self, **changes):
        """Copy with some fields replaced (None values are ignored)."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes)

    def is_valid(self, min_size=0.0):
        return self.width > min_size and self.height > min_size

    def same_box(self, other):
        """True if both frames cover exactly the same rectangle."""
        return (self.x == other.x and self.y == other.y and
                self.width == other.width and self.height == other.height)

    def to_dict(self):
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'rotation': self.rotation,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            float(data['x']),
            float(data['y']),
            float(data['width']),
            float(data['height']),
            float(data.get('rotation', 0.0) or 0.0),
        )

    @classmethod
    def from_bounds(cls, bounds):
        """Build a frame from an (x, y, width, height) tuple."""
        x, y, width, height = bounds
        return cls(float(x), float(y), float(width), float(height))


def bbox_corners(frame):
    """Corners clockwise from top-left."""
    return [
        Vec2(frame.x, frame.y),
        Vec2(frame.x + frame.width, frame.y),
        Vec2(frame.x + frame.width, frame.y + frame.height),
        Vec2(frame.x, frame.y + frame.height),
    ]


def rotated_bbox(frame):
    """Axis-aligned bounding box containing a rotated frame.

    Args:
        frame: Frame with rotation in degrees

    Returns:
        Frame with rotation 0
    """
    if frame.rotation % 360 == 0:
        return Frame(frame.x, frame.y, frame.width, frame.height)

    cx = frame.center_x
    cy = frame.center_y
    rad = math.radians(frame.rotation)
    cos_r = math.cos(rad)
    sin_r = math.sin(rad)

    xs = []
    ys = []
    for corner in bbox_corners(frame):
        dx = corner.x - cx
        dy = corner.y - cy
        xs.append(cx + dx * cos_r - dy * sin_r)
        ys.append(cy + dx * sin_r + dy * cos_r)

    return Frame(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def union_bbox(frames, respect_rotation=False):
    """Union bounding box of several frames.

    Args:
        frames: Iterable of Frame
        respect_rotation: Use each frame's rotated AABB instead of its raw box

    Returns:
        Frame covering all inputs, or a zero frame when empty
    """
    frames = list(frames)
    if not frames:
        return Frame(0.0, 0.0, 0.0, 0.0)

    if respect_rotation:
        frames = [rotated_bbox(f) for f in frames]

    min_x = min(f.left for f in frames)
    min_y = min(f.top for f in frames)
    max_x = max(f.right for f in frames)
    max_y = max(f.bottom for f in frames)
    return Frame(min_x, min_y, max(0.0, max_x - min_x), max(0.0, max_y - min_y))


def resize_by_handle(frame, handle, dx, dy):
    """Apply a drag delta to the edges named by a resize handle.

    'w'/'n' move the origin and shrink the size so the opposite edge stays
    fixed; 'e'/'s' only change the size. The result may be degenerate.

    Args:
        frame: Original Frame
        handle: 'n', 'ne', 'e', 'se', 's', 'sw', 'w' or 'nw'
        dx, dy: Logical delta since drag start

    Returns:
        Frame
    """
    x, y, width, height = frame.x, frame.y, frame.width, frame.height
    if 'w' in handle:
        x = frame.x + dx
        width = frame.width - dx
    if 'e' in handle:
        width = frame.width + dx
    if 'n' in handle:
        y = frame.y + dy
        height = frame.height - dy
    if 's' in handle:
        height = frame.height + dy
    return Frame(x, y, width, height, frame.rotation)


def contains_point(frame, x, y):
    """Check if a logical point lies inside a frame (inclusive, unrotated)."""
    return frame.left <= x <= frame.right and frame.top <= y <= frame.bottom
