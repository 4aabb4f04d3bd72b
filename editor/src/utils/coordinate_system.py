"""Coordinate system service: viewport pixels <-> logical canvas units.

The surface supplies its current forward view transform (logical -> screen) as a
QTransform. The inverse is cached because every pointer-move needs it; callers
must invalidate() after zoom, pan, layout or surface size changes.

Surface protocol:
- view_transform() -> QTransform or None (primary, e.g. includes widget offset)
- local_transform() -> QTransform or None (fallback when primary unavailable)
- view_scale() -> float (optional)
"""
import math

from models.frame import Vec2
from utils.errors import SurfaceNotBound, NonInvertibleTransform


# Determinants smaller than this are treated as singular
_SINGULAR_EPSILON = 1e-12


def _point_xy(point):
	"""Accept Vec2, (x, y) tuples or Qt points (QPoint/QPointF)."""
	x = point.x() if callable(getattr(point, 'x', None)) else None
	if x is not None:
		return float(x), float(point.y())
	if isinstance(point, Vec2):
		return float(point.x), float(point.y)
	px, py = point
	return float(px), float(py)


class CoordinateSystem:
	"""Maps between screen (viewport pixel) space and logical canvas space."""

	def __init__(self, surface=None):
		self._surface = None
		self._cached_inverse = None
		if surface is not None:
			self.set_surface(surface)

	# ========================================
	# Surface binding
	# ========================================

	def set_surface(self, surface):
		"""Bind the rendering surface. Invalidates cached transforms."""
		self._surface = surface
		self.invalidate()

	@property
	def surface(self):
		return self._surface

	@property
	def is_bound(self):
		return self._surface is not None

	def invalidate(self):
		"""Drop the cached inverse. Call on zoom, pan, resize, or layout shift."""
		self._cached_inverse = None

	def _forward_transform(self):
		"""Current logical -> screen transform (primary, then fallback)."""
		if self._surface is None:
			raise SurfaceNotBound("CoordinateSystem: surface not set. Call set_surface() first.")

		transform = self._surface.view_transform()
		if transform is None:
			local = getattr(self._surface, 'local_transform', None)
			transform = local() if local is not None else None

		if transform is None:
			raise SurfaceNotBound("CoordinateSystem: unable to get a view transform from surface.")
		return transform

	def _inverse_transform(self):
		"""Inverse view transform, computed once and cached until invalidate()."""
		if self._cached_inverse is not None:
			return self._cached_inverse

		forward = self._forward_transform()
		if abs(forward.determinant()) < _SINGULAR_EPSILON:
			raise NonInvertibleTransform(
				f"CoordinateSystem: view transform is singular (det={forward.determinant()})"
			)

		inverse, invertible = forward.inverted()
		if not invertible:
			raise NonInvertibleTransform("CoordinateSystem: view transform is not invertible")

		self._cached_inverse = inverse
		return inverse

	# ========================================
	# Conversions
	# ========================================

	def screen_to_logical(self, point):
		"""Convert viewport pixels (e.g. event.pos()) to logical canvas units.

		Args:
			point: Vec2, (x, y) tuple, or QPoint/QPointF in screen pixels

		Returns:
			Vec2 in logical units
		"""
		x, y = _point_xy(point)
		lx, ly = self._inverse_transform().map(x, y)
		return Vec2(lx, ly)

	def logical_to_screen(self, point):
		"""Convert logical canvas units to viewport pixels (not cached).

		Args:
			point: Vec2 or (x, y) tuple in logical units

		Returns:
			Vec2 in screen pixels
		"""
		x, y = _point_xy(point)
		sx, sy = self._forward_transform().map(x, y)
		return Vec2(sx, sy)

	def pixel_delta_to_logical(self, dx, dy):
		"""Convert a screen-space vector to logical units.

		Both endpoints go through the inverse, so pan (translation) cancels out.

		Returns:
			(dx, dy) in logical units
		"""
		inverse = self._inverse_transform()
		ox, oy = inverse.map(0.0, 0.0)
		ex, ey = inverse.map(float(dx), float(dy))
		return ex - ox, ey - oy

	def view_scale(self):
		"""Logical -> screen scale factor (1.0 when no surface is bound).

		Used to keep handle sizes constant on screen and to convert pixel
		thresholds to logical units.
		"""
		if self._surface is None:
			return 1.0
		scale_fn = getattr(self._surface, 'view_scale', None)
		if scale_fn is not None:
			return float(scale_fn())
		try:
			forward = self._forward_transform()
		except SurfaceNotBound:
			return 1.0
		scale = math.hypot(forward.m11(), forward.m12())
		return scale if scale > 0 else 1.0
