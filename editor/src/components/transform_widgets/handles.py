"""Selection handle system - ABC-based handle architecture.

Each handle type is a class that knows:
- Where it sits around a box (logical canvas units)
- How to test if a logical pointer position hits it
- How to draw itself at a constant on-screen size
- Which cursor to show

Handle sizes are defined in screen pixels. Hit testing happens in logical space,
so pixel sizes are divided by the current view scale; that keeps handles the
same visual size at every zoom level.
"""

from abc import ABC, abstractmethod
from PyQt5.QtCore import QPointF, QRectF, Qt
from PyQt5.QtGui import QPen, QBrush, QColor
import math

from constants import (
    HANDLE_CORNER_SIZE, HANDLE_EDGE_WIDTH, HANDLE_EDGE_HEIGHT,
    HANDLE_BORDER_WIDTH, HANDLE_ROTATE_DISTANCE, HANDLE_ROTATE_RADIUS,
    HANDLE_HIT_TOLERANCE, HANDLE_COLOR, HANDLE_FILL, HANDLE_MOVE, HANDLE_ROTATE,
)
from models.frame import Vec2, contains_point


def _px(value, scale):
    """Screen pixels -> logical units at the given view scale."""
    return value / scale if scale else value


def _handle_pen_brush(hovered):
    pen = QPen(QColor(HANDLE_COLOR), HANDLE_BORDER_WIDTH)
    brush = QBrush(QColor(HANDLE_COLOR if hovered else HANDLE_FILL))
    return pen, brush


class Handle(ABC):
    """Abstract base class for selection handles."""

    name = None

    @abstractmethod
    def position(self, box, scale):
        """Logical position of the handle center.

        Args:
            box: Frame the handles surround (logical units)
            scale: Current logical -> screen scale

        Returns:
            Vec2 in logical units
        """
        pass

    @abstractmethod
    def hit_test(self, x, y, box, scale) -> bool:
        """Test if a logical pointer position hits this handle."""
        pass

    @abstractmethod
    def draw(self, painter, to_screen, box, scale, hovered=False):
        """Draw this handle.

        Args:
            painter: QPainter in screen (widget pixel) space
            to_screen: callable(Vec2) -> Vec2 mapping logical to screen
            box: Frame in logical units
            scale: Current logical -> screen scale
            hovered: Draw with the highlighted fill
        """
        pass

    @abstractmethod
    def get_cursor(self):
        """Qt cursor shape to display while hovering this handle."""
        pass


class CornerHandle(Handle):
    """Corner handle for two-edge resizing (circle)."""

    _FRACTIONS = {
        'nw': (0.0, 0.0),
        'ne': (1.0, 0.0),
        'se': (1.0, 1.0),
        'sw': (0.0, 1.0),
    }

    def __init__(self, corner_type, handle_size=HANDLE_CORNER_SIZE, hit_tolerance=HANDLE_HIT_TOLERANCE):
        """
        Args:
            corner_type: 'nw', 'ne', 'se', 'sw'
            handle_size: Visual diameter in pixels
            hit_tolerance: Extra pixels for hit detection
        """
        self.name = corner_type
        self.handle_size = handle_size
        self.hit_tolerance = hit_tolerance
        self.frac_x, self.frac_y = self._FRACTIONS[corner_type]

    def position(self, box, scale):
        return Vec2(box.x + self.frac_x * box.width, box.y + self.frac_y * box.height)

    def hit_test(self, x, y, box, scale):
        p = self.position(box, scale)
        radius = _px(self.handle_size / 2 + self.hit_tolerance, scale)
        return math.hypot(x - p.x, y - p.y) <= radius

    def draw(self, painter, to_screen, box, scale, hovered=False):
        p = to_screen(self.position(box, scale))
        pen, brush = _handle_pen_brush(hovered)
        painter.setPen(pen)
        painter.setBrush(brush)
        r = self.handle_size / 2
        painter.drawEllipse(QPointF(p.x, p.y), r, r)

    def get_cursor(self):
        """Diagonal resize cursor matching the corner."""
        if self.name in ('nw', 'se'):
            return Qt.SizeFDiagCursor
        return Qt.SizeBDiagCursor


class EdgeHandle(Handle):
    """Edge handle for single-axis resizing (flattened tab)."""

    _FRACTIONS = {
        'n': (0.5, 0.0),
        'e': (1.0, 0.5),
        's': (0.5, 1.0),
        'w': (0.0, 0.5),
    }

    def __init__(self, edge_type, tab_width=HANDLE_EDGE_WIDTH, tab_height=HANDLE_EDGE_HEIGHT,
                 hit_tolerance=HANDLE_HIT_TOLERANCE):
        """
        Args:
            edge_type: 'n', 'e', 's', 'w'
            tab_width: Long side of the tab in pixels
            tab_height: Short side of the tab in pixels
            hit_tolerance: Extra pixels for hit detection
        """
        self.name = edge_type
        self.tab_width = tab_width
        self.tab_height = tab_height
        self.hit_tolerance = hit_tolerance
        self.frac_x, self.frac_y = self._FRACTIONS[edge_type]

    @property
    def is_horizontal(self):
        """Tabs on top/bottom edges lie horizontally."""
        return self.name in ('n', 's')

    def _tab_size_px(self):
        if self.is_horizontal:
            return self.tab_width, self.tab_height
        return self.tab_height, self.tab_width

    def position(self, box, scale):
        return Vec2(box.x + self.frac_x * box.width, box.y + self.frac_y * box.height)

    def hit_test(self, x, y, box, scale):
        p = self.position(box, scale)
        w_px, h_px = self._tab_size_px()
        half_w = _px(w_px / 2 + self.hit_tolerance, scale)
        half_h = _px(h_px / 2 + self.hit_tolerance, scale)
        return abs(x - p.x) <= half_w and abs(y - p.y) <= half_h

    def draw(self, painter, to_screen, box, scale, hovered=False):
        p = to_screen(self.position(box, scale))
        pen, brush = _handle_pen_brush(hovered)
        painter.setPen(pen)
        painter.setBrush(brush)
        w_px, h_px = self._tab_size_px()
        painter.drawRoundedRect(QRectF(p.x - w_px / 2, p.y - h_px / 2, w_px, h_px), 2, 2)

    def get_cursor(self):
        """Horizontal or vertical resize cursor based on edge orientation."""
        if self.is_horizontal:
            return Qt.SizeVerCursor
        return Qt.SizeHorCursor


class RotationHandle(Handle):
    """Rotation handle (circle below the bottom edge)."""

    name = HANDLE_ROTATE

    def __init__(self, distance=HANDLE_ROTATE_DISTANCE, radius=HANDLE_ROTATE_RADIUS,
                 hit_tolerance=HANDLE_HIT_TOLERANCE):
        """
        Args:
            distance: Distance below the bottom edge in pixels
            radius: Visual radius in pixels
            hit_tolerance: Extra pixels for hit detection
        """
        self.distance = distance
        self.radius = radius
        self.hit_tolerance = hit_tolerance

    def position(self, box, scale):
        return Vec2(box.center_x, box.bottom + _px(self.distance, scale))

    def hit_test(self, x, y, box, scale):
        p = self.position(box, scale)
        return math.hypot(x - p.x, y - p.y) <= _px(self.radius + self.hit_tolerance, scale)

    def draw(self, painter, to_screen, box, scale, hovered=False):
        p = to_screen(self.position(box, scale))
        pen, brush = _handle_pen_brush(hovered)
        painter.setPen(pen)
        painter.setBrush(brush)
        painter.drawEllipse(QPointF(p.x, p.y), float(self.radius), float(self.radius))

        # Circular arrow glyph
        painter.setPen(QPen(QColor(HANDLE_FILL if hovered else HANDLE_COLOR), 1.5))
        painter.setBrush(Qt.NoBrush)
        glyph = self.radius * 0.5
        painter.drawArc(QRectF(p.x - glyph, p.y - glyph, glyph * 2, glyph * 2), 90 * 16, 270 * 16)

    def get_cursor(self):
        """Cross cursor for rotation."""
        return Qt.CrossCursor


class MoveHandle(Handle):
    """Move handle - full box hit area for translation."""

    name = HANDLE_MOVE

    def position(self, box, scale):
        return Vec2(box.center_x, box.center_y)

    def hit_test(self, x, y, box, scale):
        return contains_point(box, x, y)

    def draw(self, painter, to_screen, box, scale, hovered=False):
        """Move area is invisible; the selection border is drawn by the overlay."""
        pass

    def get_cursor(self):
        """Move cursor for translation."""
        return Qt.SizeAllCursor
