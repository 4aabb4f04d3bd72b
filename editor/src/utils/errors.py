"""Error types raised by the coordinate and transform layers."""


class SurfaceNotBound(RuntimeError):
    """Coordinate conversion requested before a surface (or any of its transforms) is available."""


class NonInvertibleTransform(ValueError):
    """View transform has a zero determinant - no screen/logical mapping exists."""


class DegenerateResize(ValueError):
    """Resize would push width or height to or below the minimum frame size."""

    def __init__(self, width, height, min_size):
        super().__init__(f"Resize to {width:.3f}x{height:.3f} is at or below minimum size {min_size}")
        self.width = width
        self.height = height
        self.min_size = min_size
