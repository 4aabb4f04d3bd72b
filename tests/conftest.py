"""
Shared fixtures for Frame Transform Editor tests.

Provides a fake rendering surface, an injectable clock, sample scenes and a
transform controller wired to them.
"""
import sys
import os
import pytest

# Run Qt headless when no display is available
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

from PyQt5.QtGui import QTransform


# ── Fakes ───────────────────────────────────────────────────────────────

class FakeSurface:
    """Surface exposing a configurable view transform and counting queries."""

    def __init__(self, scale=1.0, tx=0.0, ty=0.0, local=None, primary=True):
        self.transform = QTransform(scale, 0.0, 0.0, scale, tx, ty)
        self.local = local
        self.primary = primary
        self.view_calls = 0

    def set_view(self, scale=1.0, tx=0.0, ty=0.0):
        self.transform = QTransform(scale, 0.0, 0.0, scale, tx, ty)

    def view_transform(self):
        self.view_calls += 1
        return self.transform if self.primary else None

    def local_transform(self):
        return self.local


class FakeClock:
    """Millisecond clock advanced manually by tests."""

    def __init__(self, now=0.0):
        self.now = now

    def advance(self, ms):
        self.now += ms

    def __call__(self):
        return self.now


# ── Fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def make_surface():
    """Factory for surfaces with a custom transform"""
    return FakeSurface


@pytest.fixture
def surface():
    """Identity view transform (1 logical unit == 1 pixel)"""
    return FakeSurface()


@pytest.fixture
def coords(surface):
    from utils.coordinate_system import CoordinateSystem
    return CoordinateSystem(surface)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scene():
    """1000x1000 canvas with two shapes"""
    from models.scene import Scene
    from models.frame import Frame
    scene = Scene(canvas_bounds=(0, 0, 1000, 1000))
    scene.add_element('a', Frame(100, 100, 100, 100))
    scene.add_element('b', Frame(400, 300, 100, 100))
    return scene


@pytest.fixture
def group_scene():
    """Shape plus text element side by side, both selected"""
    from models.scene import Scene, ELEMENT_TEXT
    from models.frame import Frame
    scene = Scene(canvas_bounds=(0, 0, 1000, 1000))
    scene.add_element('a', Frame(100, 100, 100, 100))
    scene.add_element('t', Frame(300, 100, 100, 100), ELEMENT_TEXT, font_size=20)
    scene.set_selection(['a', 't'])
    return scene


@pytest.fixture
def controller(qapp, scene, coords, clock):
    """Transform controller over the two-shape scene with default snapping"""
    from components.transform_controller import TransformController
    ctrl = TransformController(scene, coords, clock=clock)
    yield ctrl
    ctrl.teardown()
