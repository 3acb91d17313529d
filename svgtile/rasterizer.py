from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator

from cairosvg.parser import Tree
from cairosvg.surface import PNGSurface
from PIL import Image

from .errors import ParseError, RenderError
from .fonts import FontDatabase
from .geometry import Size

TEXT_TAGS = frozenset({"text", "tspan", "textPath", "tref"})


@dataclass
class TextRun:
    family: str
    resolved_family: str
    found: bool


@dataclass
class Scene:
    """Parsed vector document owned by a single pipeline invocation."""

    tree: Any
    text_runs: list[TextRun] = field(default_factory=list)

    @property
    def missing_families(self) -> set[str]:
        return {r.family for r in self.text_runs if not r.found}


def parse_scene(data: bytes) -> Scene:
    if not data or not data.strip():
        raise ParseError("empty document")
    try:
        tree = Tree(bytestring=data)
    except Exception as e:
        raise ParseError(f"invalid vector document: {e}") from e
    if getattr(tree, "tag", None) != "svg":
        raise ParseError(f"root element is {getattr(tree, 'tag', None)!r}, expected 'svg'")
    return Scene(tree=tree)


def _walk(node: Any) -> Iterator[tuple[Any, bool]]:
    """Yield (node, inside_text) for the node and all descendants."""
    stack = [(node, False)]
    while stack:
        n, in_text = stack.pop()
        in_text = in_text or getattr(n, "tag", None) in TEXT_TAGS
        yield n, in_text
        for child in reversed(tuple(getattr(n, "children", ()) or ())):
            stack.append((child, in_text))


def _families(raw: str) -> list[str]:
    return [f.strip().strip("\"'").strip() for f in raw.split(",") if f.strip(" \"'")]


def convert_text(scene: Scene, fontdb: FontDatabase, fallback_family: str = "sans-serif") -> Scene:
    """Resolve text fonts against ``fontdb`` before rasterization.

    Each text node gets the first family from its font-family list that the
    database knows about. Nodes with no available family are switched to
    ``fallback_family`` so they render with fallback glyphs instead of failing.
    """
    resolved: dict[str, tuple[str, bool]] = {}
    for node, in_text in _walk(scene.tree):
        if not in_text:
            continue
        raw = node.get("font-family") or fallback_family
        if raw not in resolved:
            candidates = _families(raw) or [fallback_family]
            hit = next((f for f in candidates if fontdb.has_family(f)), None)
            if hit is None:
                logging.warning(
                    "Font family %r not available, falling back to %r", raw, fallback_family
                )
                resolved[raw] = (fallback_family, False)
            else:
                resolved[raw] = (hit, True)
        family, found = resolved[raw]
        node["font-family"] = family
        if node.tag in TEXT_TAGS:
            scene.text_runs.append(TextRun(family=raw, resolved_family=family, found=found))
    return scene


def rasterize(scene: Scene, size: Size) -> Image.Image:
    """Render ``scene`` into a transparent RGBA layer of exactly ``size``.

    Fitting is cairosvg's: the viewBox is scaled per preserveAspectRatio
    (xMidYMid meet by default), so non-square content is letterboxed.
    """
    if size.width <= 0 or size.height <= 0:
        raise RenderError(f"invalid target size {size.width}x{size.height}")
    output = io.BytesIO()
    try:
        surface = PNGSurface(
            scene.tree,
            output,
            96,
            output_width=size.width,
            output_height=size.height,
        )
        surface.finish()
        layer = Image.open(io.BytesIO(output.getvalue()))
        layer.load()
    except Exception as e:
        raise RenderError(f"rasterization failed: {e}") from e
    if layer.size != size.as_tuple():
        raise RenderError(
            f"rasterizer produced {layer.size[0]}x{layer.size[1]}, "
            f"expected {size.width}x{size.height}"
        )
    return layer.convert("RGBA")
