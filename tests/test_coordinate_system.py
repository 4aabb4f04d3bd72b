"""
Tests for the screen <-> logical coordinate system.

Covers:
- Round trips under identity, scale, translate and scale+translate
- Inverse caching and invalidation
- Pixel delta conversion (pan cancels out)
- Fallback transform and unbound surface errors
- Singular transforms
"""
import pytest
from PyQt5.QtCore import QPointF, QPoint
from PyQt5.QtGui import QTransform

from models.frame import Vec2
from utils.coordinate_system import CoordinateSystem
from utils.errors import SurfaceNotBound, NonInvertibleTransform


# ══════════════════════════════════════════════════════════════════════════
# Round trips
# ══════════════════════════════════════════════════════════════════════════

class TestRoundTrip:

    @pytest.mark.parametrize("scale,tx,ty", [
        (1.0, 0.0, 0.0),
        (2.0, 0.0, 0.0),
        (1.0, 30.0, -40.0),
        (0.5, 120.0, 35.0),
    ])
    def test_screen_logical_screen(self, make_surface, scale, tx, ty):
        coords = CoordinateSystem(make_surface(scale, tx, ty))
        for sx, sy in [(0, 0), (17, 250), (-33.5, 800.25)]:
            logical = coords.screen_to_logical((sx, sy))
            back = coords.logical_to_screen(logical)
            assert back.x == pytest.approx(sx, abs=1e-5)
            assert back.y == pytest.approx(sy, abs=1e-5)

    @pytest.mark.parametrize("scale,tx,ty", [
        (1.0, 0.0, 0.0),
        (2.0, 0.0, 0.0),
        (1.0, 30.0, -40.0),
        (0.5, 120.0, 35.0),
        (3.7, -812.25, 64.5),
    ])
    def test_logical_screen_logical(self, make_surface, scale, tx, ty):
        coords = CoordinateSystem(make_surface(scale, tx, ty))
        for lx, ly in [(0, 0), (100, 100), (999.75, -12.5), (1080, 1920)]:
            back = coords.screen_to_logical(coords.logical_to_screen((lx, ly)))
            assert back.x == pytest.approx(lx, abs=1e-5)
            assert back.y == pytest.approx(ly, abs=1e-5)

    def test_scale_and_translate_values(self, make_surface):
        coords = CoordinateSystem(make_surface(2.0, 30.0, 40.0))
        p = coords.screen_to_logical((230, 240))
        assert (p.x, p.y) == pytest.approx((100.0, 100.0))
        s = coords.logical_to_screen(Vec2(100, 100))
        assert (s.x, s.y) == pytest.approx((230.0, 240.0))

    def test_accepts_qt_points(self, make_surface):
        coords = CoordinateSystem(make_surface(2.0))
        assert tuple(coords.screen_to_logical(QPointF(20.0, 10.0))) == pytest.approx((10.0, 5.0))
        assert tuple(coords.screen_to_logical(QPoint(20, 10))) == pytest.approx((10.0, 5.0))


# ══════════════════════════════════════════════════════════════════════════
# Caching
# ══════════════════════════════════════════════════════════════════════════

class TestInverseCache:

    def test_inverse_computed_once(self, coords, surface):
        coords.screen_to_logical((10, 10))
        coords.screen_to_logical((20, 20))
        coords.pixel_delta_to_logical(5, 5)
        assert surface.view_calls == 1

    def test_invalidate_forces_requery(self, coords, surface):
        coords.screen_to_logical((10, 10))
        coords.invalidate()
        coords.screen_to_logical((10, 10))
        assert surface.view_calls == 2

    def test_stale_until_invalidated(self, coords, surface):
        assert coords.screen_to_logical((100, 100)).x == pytest.approx(100)
        surface.set_view(scale=2.0)
        # Cached inverse still in use
        assert coords.screen_to_logical((100, 100)).x == pytest.approx(100)
        coords.invalidate()
        assert coords.screen_to_logical((100, 100)).x == pytest.approx(50)

    def test_set_surface_invalidates(self, coords, make_surface):
        coords.screen_to_logical((100, 100))
        coords.set_surface(make_surface(4.0))
        assert coords.screen_to_logical((100, 100)).x == pytest.approx(25)

    def test_forward_not_cached(self, coords, surface):
        coords.logical_to_screen((1, 1))
        coords.logical_to_screen((2, 2))
        assert surface.view_calls == 2


# ══════════════════════════════════════════════════════════════════════════
# Deltas & scale
# ══════════════════════════════════════════════════════════════════════════

class TestDeltas:

    def test_pixel_delta_ignores_translation(self, make_surface):
        coords = CoordinateSystem(make_surface(2.0, 300.0, -75.0))
        dx, dy = coords.pixel_delta_to_logical(20, 10)
        assert (dx, dy) == pytest.approx((10.0, 5.0))

    def test_view_scale_from_transform(self, make_surface):
        assert CoordinateSystem(make_surface(2.5, 10, 10)).view_scale() == pytest.approx(2.5)

    def test_view_scale_prefers_surface(self, make_surface):
        surface = make_surface(2.0)
        surface.view_scale = lambda: 3.0
        assert CoordinateSystem(surface).view_scale() == 3.0

    def test_view_scale_unbound(self):
        assert CoordinateSystem().view_scale() == 1.0


# ══════════════════════════════════════════════════════════════════════════
# Errors & fallback
# ══════════════════════════════════════════════════════════════════════════

class TestErrors:

    def test_unbound_raises(self):
        coords = CoordinateSystem()
        assert not coords.is_bound
        with pytest.raises(SurfaceNotBound):
            coords.screen_to_logical((0, 0))
        with pytest.raises(SurfaceNotBound):
            coords.logical_to_screen((0, 0))

    def test_fallback_to_local_transform(self, make_surface):
        surface = make_surface(primary=False, local=QTransform(2.0, 0, 0, 2.0, 0, 0))
        coords = CoordinateSystem(surface)
        assert tuple(coords.screen_to_logical((10, 10))) == pytest.approx((5.0, 5.0))

    def test_no_transform_at_all_raises(self, make_surface):
        coords = CoordinateSystem(make_surface(primary=False, local=None))
        with pytest.raises(SurfaceNotBound):
            coords.screen_to_logical((10, 10))

    def test_singular_transform(self, make_surface):
        coords = CoordinateSystem(make_surface(0.0))
        with pytest.raises(NonInvertibleTransform):
            coords.screen_to_logical((10, 10))

    def test_error_hierarchy(self):
        assert issubclass(SurfaceNotBound, RuntimeError)
        assert issubclass(NonInvertibleTransform, ValueError)
