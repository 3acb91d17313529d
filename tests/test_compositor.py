import io
import random

import pytest
from PIL import Image

from svgtile.color import pastel_color
from svgtile.compositor import composite, encode_png
from svgtile.errors import CompositeError
from svgtile.geometry import Geometry, Size, compute_geometry


@pytest.fixture
def color():
    return pastel_color(random.Random(3))


def _layer(size=(192, 192)) -> Image.Image:
    return Image.new("RGBA", size, (0, 0, 0, 0))


def test_transparent_layer_leaves_background(color):
    out = composite(compute_geometry(256, 32), color, _layer())
    assert out.size == (256, 256)
    assert out.getcolors() == [(256 * 256, color.rgba8)]


def test_opaque_pixel_replaces_background(color):
    layer = _layer()
    layer.putpixel((0, 0), (10, 20, 30, 255))
    layer.putpixel((191, 191), (200, 100, 0, 255))
    out = composite(compute_geometry(256, 32), color, layer)
    assert out.getpixel((32, 32)) == (10, 20, 30, 255)
    assert out.getpixel((223, 223)) == (200, 100, 0, 255)
    assert out.getpixel((33, 33)) == color.rgba8
    for xy in [(0, 0), (255, 0), (0, 255), (255, 255), (31, 31), (224, 224)]:
        assert out.getpixel(xy) == color.rgba8


def test_half_alpha_blends_source_over(color):
    layer = _layer()
    layer.putpixel((5, 5), (255, 255, 255, 128))
    r, g, b, a = composite(compute_geometry(256, 32), color, layer).getpixel((37, 37))
    bg = color.rgba8
    assert a == 255
    for got, base in zip((r, g, b), bg[:3]):
        expected = 255 * 128 / 255 + base * (1 - 128 / 255)
        assert abs(got - expected) <= 1


def test_layer_size_mismatch(color):
    with pytest.raises(CompositeError):
        composite(compute_geometry(256, 32), color, _layer((100, 100)))


def test_offset_out_of_bounds(color):
    g = Geometry(canvas=Size(256, 256), render=Size(192, 192), offset=(100, 100))
    with pytest.raises(CompositeError):
        composite(g, color, _layer())
    g = Geometry(canvas=Size(256, 256), render=Size(192, 192), offset=(-1, 0))
    with pytest.raises(CompositeError):
        composite(g, color, _layer())


def test_encode_png_is_opaque_rgb(color):
    data = encode_png(composite(compute_geometry(256, 32), color, _layer()))
    assert data.startswith(b"\x89PNG\r\n\x1a\n")
    img = Image.open(io.BytesIO(data))
    assert img.format == "PNG"
    assert img.mode == "RGB"
    assert img.size == (256, 256)
    assert img.getpixel((0, 0)) == color.rgba8[:3]
