from __future__ import annotations

import io

from PIL import Image

from .color import BackgroundColor
from .errors import CompositeError, WriteError
from .geometry import Geometry


def composite(geometry: Geometry, color: BackgroundColor, layer: Image.Image) -> Image.Image:
    """Fill a canvas with ``color`` and draw ``layer`` over it at the render offset.

    Uses source-over blending, so pixels outside the render region keep the
    flat background color.
    """
    x, y, right, bottom = geometry.render_box
    cw, ch = geometry.canvas.as_tuple()
    lw, lh = layer.size
    if layer.size != geometry.render.as_tuple():
        raise CompositeError(
            f"layer is {lw}x{lh}, render region is {geometry.render.width}x{geometry.render.height}"
        )
    if x < 0 or y < 0 or right > cw or bottom > ch:
        raise CompositeError(f"layer {lw}x{lh} at ({x}, {y}) exceeds canvas {cw}x{ch}")
    try:
        canvas = Image.new("RGBA", (cw, ch), color.rgba8)
        if layer.mode != "RGBA":
            layer = layer.convert("RGBA")
        canvas.alpha_composite(layer, dest=(x, y))
    except (MemoryError, ValueError) as e:
        raise CompositeError(str(e) or type(e).__name__) from e
    return canvas


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    try:
        # canvas is fully opaque after compositing
        image.convert("RGB").save(buf, format="PNG")
    except (OSError, ValueError) as e:
        raise WriteError(f"PNG encoding failed: {e}") from e
    return buf.getvalue()
