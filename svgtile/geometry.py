from __future__ import annotations

from dataclasses import dataclass

from .errors import GeometryError


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    def as_tuple(self) -> tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class Geometry:
    canvas: Size
    render: Size
    offset: tuple[int, int]

    @property
    def render_box(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) of the render region in canvas coordinates."""
        x, y = self.offset
        return x, y, x + self.render.width, y + self.render.height


def _pixel_size(side: object, what: str) -> Size:
    if isinstance(side, bool) or not isinstance(side, int):
        raise GeometryError(f"{what} must be an integer pixel count, got {side!r}")
    if side <= 0:
        raise GeometryError(f"{what} must be positive, got {side}")
    return Size(side, side)


def compute_geometry(canvas_size: int, margin: int) -> Geometry:
    """Derive the canvas and render sizes from the fixed constants.

    The render region is the canvas inset by ``margin`` on every side.
    Raises GeometryError if either side would not be a valid pixel size.
    """
    if isinstance(margin, bool) or not isinstance(margin, int) or margin < 0:
        raise GeometryError(f"margin must be a non-negative integer, got {margin!r}")
    canvas = _pixel_size(canvas_size, "canvas size")
    render = _pixel_size(canvas_size - 2 * margin, "render size")
    return Geometry(canvas=canvas, render=render, offset=(margin, margin))
