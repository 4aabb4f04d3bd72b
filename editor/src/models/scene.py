"""Scene model: positioned elements, selection and canvas bounds.

Plays the frame store, selection and canvas-bounds collaborators for the
transform controller. Frames are proposed through propose_frame(); listeners are
notified per mutation so views can repaint and history can record changes.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from constants import DEFAULT_CANVAS_BOUNDS, DEFAULT_FONT_SIZE
from .frame import Frame


ELEMENT_TEXT = 'text'
ELEMENT_BUTTON = 'button'
ELEMENT_IMAGE = 'image'
ELEMENT_SHAPE = 'shape'

# Element kinds whose font size follows group resize
TEXT_KINDS = (ELEMENT_TEXT, ELEMENT_BUTTON)


@dataclass
class Element:
    """A keyed element on the canvas. Content is rendered elsewhere."""
    key: str
    frame: Frame
    kind: str = ELEMENT_SHAPE
    font_size: Optional[int] = None
    locked: bool = False

    @property
    def is_text(self):
        return self.kind in TEXT_KINDS


class Scene:
    """In-memory element store with an ordered selection."""

    def __init__(self, canvas_bounds=DEFAULT_CANVAS_BOUNDS):
        self._logger = logging.getLogger('Scene')
        self._elements = {}
        self._selection = []
        self._canvas_bounds = tuple(float(v) for v in canvas_bounds)
        self._listeners = []

    # ========================================
    # Elements
    # ========================================

    def add_element(self, key, frame, kind=ELEMENT_SHAPE, font_size=None, locked=False):
        """Add an element. Text elements default to DEFAULT_FONT_SIZE."""
        if key in self._elements:
            raise ValueError(f"Element '{key}' already exists")
        if kind in TEXT_KINDS and font_size is None:
            font_size = DEFAULT_FONT_SIZE
        self._elements[key] = Element(key, frame, kind, font_size, locked)
        return self._elements[key]

    def remove_element(self, key):
        self._elements.pop(key, None)
        if key in self._selection:
            self._selection.remove(key)

    def element(self, key):
        return self._elements.get(key)

    def keys(self):
        return list(self._elements)

    def frames(self):
        """All frames keyed by element key."""
        return {key: el.frame for key, el in self._elements.items()}

    # ========================================
    # Frame store collaborator
    # ========================================

    def get_frame(self, key):
        el = self._elements.get(key)
        return el.frame if el else None

    def propose_frame(self, key, changes):
        """Apply a partial frame update ({'x': .., 'rotation': ..}).

        Unknown keys are ignored with a warning; locked elements are skipped.
        """
        el = self._elements.get(key)
        if el is None:
            self._logger.warning(f"propose_frame for unknown element '{key}'")
            return
        if el.locked:
            return
        el.frame = el.frame.with_changes(**changes)
        self._notify(key)

    def is_text(self, key):
        el = self._elements.get(key)
        return bool(el and el.is_text)

    def get_font_size(self, key):
        el = self._elements.get(key)
        return el.font_size if el else None

    def propose_font_size(self, key, size):
        el = self._elements.get(key)
        if el is None or not el.is_text:
            return
        el.font_size = int(size)
        self._notify(key)

    # ========================================
    # Selection collaborator
    # ========================================

    def selected_keys(self):
        """Selected keys in selection order (unlocked, existing elements only)."""
        return [k for k in self._selection if k in self._elements and not self._elements[k].locked]

    def set_selection(self, keys):
        self._selection = [k for k in keys if k in self._elements]
        self._notify(None)

    def add_to_selection(self, key):
        if key in self._elements and key not in self._selection:
            self._selection.append(key)
            self._notify(None)

    def clear_selection(self):
        self._selection = []
        self._notify(None)

    def set_locked(self, key, locked):
        el = self._elements.get(key)
        if el:
            el.locked = locked

    # ========================================
    # Canvas bounds
    # ========================================

    @property
    def canvas_bounds(self):
        return self._canvas_bounds

    def set_canvas_bounds(self, bounds):
        self._canvas_bounds = tuple(float(v) for v in bounds)
        self._notify(None)

    def element_at(self, x, y):
        """Topmost element containing a logical point (last added wins)."""
        for key in reversed(list(self._elements)):
            f = self._elements[key].frame
            if f.left <= x <= f.right and f.top <= y <= f.bottom:
                return key
        return None

    # ========================================
    # Listeners
    # ========================================

    def add_listener(self, callback):
        """Register callback(key_or_None) for any change."""
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self, key):
        for callback in list(self._listeners):
            callback(key)
