"""
Tests for multi-selection group resize.

Covers:
- Fractional layout preserved under scaling
- Corner handle origin behaviour
- Font size scaling, floor and change-only emission
- Degenerate and zero-area boxes
"""
import pytest

from models.frame import Frame, union_bbox
from services.group_scaler import GroupScaler, scale_font_size, reproject_frame, scale_group
from utils.errors import DegenerateResize


FRAMES = {
    'a': Frame(100, 100, 100, 100),
    't': Frame(300, 100, 100, 100),
}
BOUNDS = union_bbox(FRAMES.values())


def _box(frame):
    return pytest.approx((frame.x, frame.y, frame.width, frame.height))


def _fractions(frame, box):
    return (
        (frame.x - box.x) / box.width,
        (frame.y - box.y) / box.height,
        frame.width / box.width,
        frame.height / box.height,
    )


class TestGroupScale:

    def test_bounds_fixture(self):
        assert BOUNDS == Frame(100, 100, 300, 100)

    def test_double_size_preserves_fractions(self):
        scaler = GroupScaler(FRAMES, BOUNDS)
        result = scaler.scale('se', 300, 100)

        assert result.bounds == Frame(100, 100, 600, 200)
        assert result.scale_x == pytest.approx(2.0)
        assert result.scale_y == pytest.approx(2.0)
        a = result.frames['a']
        assert (a.x, a.y, a.width, a.height) == _box(Frame(100, 100, 200, 200))
        t = result.frames['t']
        assert (t.x, t.y, t.width, t.height) == _box(Frame(500, 100, 200, 200))
        for key, frame in FRAMES.items():
            assert _fractions(result.frames[key], result.bounds) == pytest.approx(_fractions(frame, BOUNDS))

    def test_north_west_moves_origin(self):
        result = GroupScaler(FRAMES, BOUNDS).scale('nw', -300, -100)
        assert result.bounds == Frame(-200, 0, 600, 200)
        assert result.frames['a'].x == pytest.approx(-200)
        assert result.frames['t'].x == pytest.approx(200)

    def test_non_uniform(self):
        result = GroupScaler(FRAMES, BOUNDS).scale('ne', 0, 50)
        # North handle moving down shrinks height
        assert result.bounds == Frame(100, 150, 300, 50)
        assert result.scale_x == pytest.approx(1.0)
        assert result.scale_y == pytest.approx(0.5)

    def test_rotation_carried(self):
        frames = {'r': Frame(0, 0, 50, 50, rotation=30), 's': Frame(50, 50, 50, 50)}
        result = GroupScaler(frames, union_bbox(frames.values())).scale('se', 100, 100)
        assert result.frames['r'].rotation == 30

    def test_edge_handle_rejected(self):
        with pytest.raises(ValueError):
            GroupScaler(FRAMES, BOUNDS).scale('e', 10, 0)

    def test_degenerate_raises(self):
        with pytest.raises(DegenerateResize):
            GroupScaler(FRAMES, BOUNDS).scale('se', -295, 0)

    def test_exactly_minimum_allowed(self):
        result = GroupScaler(FRAMES, BOUNDS).scale('se', 0, -90)
        assert result.bounds.height == pytest.approx(10)

    def test_zero_area_box_is_noop(self):
        frames = {'a': Frame(10, 10, 0, 50), 'b': Frame(10, 70, 0, 50)}
        result = GroupScaler(frames, union_bbox(frames.values())).scale('se', 50, 50)
        assert result.frames == {}
        assert result.font_sizes == {}


class TestFontScaling:

    def test_scale_font_size(self):
        assert scale_font_size(20, 2.0) == 40
        assert scale_font_size(15, 1.1) == 16
        assert scale_font_size(10, 0.5) == 6

    def test_fonts_follow_vertical_scale(self):
        scaler = GroupScaler(FRAMES, BOUNDS, {'t': 20})
        result = scaler.scale('se', 0, 100)
        assert result.font_sizes == {'t': 40}
        assert 'a' not in result.font_sizes

    def test_only_changes_emitted(self):
        scaler = GroupScaler(FRAMES, BOUNDS, {'t': 20})
        assert scaler.scale('se', 0, 100).font_sizes == {'t': 40}
        # Sub-pixel move, same rounded size
        assert scaler.scale('se', 0, 101).font_sizes == {}
        assert scaler.last_font_sizes == {'t': 40}

    def test_unchanged_size_not_emitted_on_first_move(self):
        scaler = GroupScaler(FRAMES, BOUNDS, {'t': 20})
        assert scaler.scale('se', 50, 1).font_sizes == {}

    def test_shrink_floors_at_minimum(self):
        scaler = GroupScaler(FRAMES, BOUNDS, {'t': 10})
        assert scaler.scale('se', 0, -80).font_sizes == {'t': 6}


class TestHelpers:

    def test_reproject_frame(self):
        old = Frame(0, 0, 100, 100)
        new = Frame(50, 50, 200, 50)
        assert reproject_frame(Frame(25, 50, 50, 50), old, new) == Frame(100, 75, 100, 25)

    def test_scale_group_one_shot(self):
        result = scale_group(FRAMES, BOUNDS, 'se', 300, 100, {'t': 20})
        t = result.frames['t']
        assert (t.x, t.y, t.width, t.height) == _box(Frame(500, 100, 200, 200))
        assert result.font_sizes == {'t': 40}

    def test_scale_group_degenerate(self):
        assert scale_group(FRAMES, BOUNDS, 'se', -300, 0) is None
