"""
Frame Transform Editor - Data Models

This module contains the data model classes for the scene.
This is the MODEL in MVC architecture.

Public API: Frame geometry, snapping structures and the Scene store.
"""

from .frame import Vec2, Frame, union_bbox, rotated_bbox, resize_by_handle, contains_point
from .snapping import SnapTarget, SnapGuide, SnapLock, SnapState, SnapOptions, SnapResult
from .scene import Scene, Element

__all__ = [
    'Vec2', 'Frame', 'union_bbox', 'rotated_bbox', 'resize_by_handle', 'contains_point',
    'SnapTarget', 'SnapGuide', 'SnapLock', 'SnapState', 'SnapOptions', 'SnapResult',
    'Scene', 'Element',
]
