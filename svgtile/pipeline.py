from __future__ import annotations

import contextlib
import logging
import os
import random
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image

from .color import BackgroundColor, pastel_color
from .compositor import composite, encode_png
from .config import Settings
from .errors import FatalSetupError, ItemReadError, TileError, WriteError
from .fonts import FontDatabase
from .geometry import compute_geometry
from .rasterizer import convert_text, parse_scene, rasterize
from .utils import human_bytes, output_name


@dataclass
class ItemResult:
    source: Path
    output: Path | None = None
    ok: bool = False
    error: TileError | None = None
    color: BackgroundColor | None = None
    bytes_written: int = 0


@dataclass
class BatchReport:
    results: list[ItemResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[ItemResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[ItemResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok_count(self) -> int:
        return len(self.succeeded)


def _write_atomic(target: Path, data: bytes) -> None:
    """Write ``data`` next to ``target`` and move it into place."""
    try:
        fd, tmp = tempfile.mkstemp(prefix=f".{target.stem}_", suffix=".tmp", dir=target.parent)
    except OSError as e:
        raise WriteError(str(e)) from e
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, target)
    except OSError as e:
        with contextlib.suppress(OSError):
            os.remove(tmp)
        raise WriteError(str(e)) from e


class Pipeline:
    """Per-item rendering pipeline plus the sequential batch loop.

    The random source and font database are shared by every item; the random
    source advances one draw per rendered item.
    """

    def __init__(self, settings: Settings, rng: random.Random, fontdb: FontDatabase):
        self.settings = settings
        self.rng = rng
        self.fontdb = fontdb

    def render_with_color(self, data: bytes) -> tuple[Image.Image, BackgroundColor]:
        cfg = self.settings.render
        scene = parse_scene(data)
        convert_text(scene, self.fontdb, self.settings.fallback_font_family)
        if scene.missing_families:
            logging.info(
                "Missing fonts replaced by %r: %s",
                self.settings.fallback_font_family,
                ", ".join(sorted(scene.missing_families)),
            )
        geometry = compute_geometry(cfg.canvas_size, cfg.margin)
        color = pastel_color(self.rng, cfg.saturation, cfg.lightness, cfg.hue_max)
        layer = rasterize(scene, geometry.render)
        return composite(geometry, color, layer), color

    def process_item(self, path: Path, output_dir: Path) -> ItemResult:
        """Run the full pipeline for one entry. Never raises a TileError."""
        result = ItemResult(source=path)
        try:
            result.output = output_dir / output_name(path)
            try:
                is_file = path.is_file()
            except OSError as e:
                raise ItemReadError(str(e)) from e
            if not is_file:
                raise ItemReadError("not a regular file")
            try:
                data = path.read_bytes()
            except OSError as e:
                raise ItemReadError(str(e)) from e
            image, result.color = self.render_with_color(data)
            encoded = encode_png(image)
            _write_atomic(result.output, encoded)
        except TileError as e:
            result.error = e
            return result
        result.ok = True
        result.bytes_written = len(encoded)
        return result

    def run(self, input_dir: Path, output_dir: Path) -> BatchReport:
        try:
            with os.scandir(input_dir) as it:
                entries = [Path(ent.path) for ent in it]
        except OSError as e:
            raise FatalSetupError(f"cannot enumerate {input_dir}: {e}") from e

        report = BatchReport()
        for path in entries:
            res = self.process_item(path, output_dir)
            report.results.append(res)
            if res.ok:
                logging.debug(
                    "Rendered %s -> %s (%s, hue %.1f)",
                    path,
                    res.output,
                    human_bytes(res.bytes_written),
                    res.color.hue,
                )
            else:
                logging.error("error handling %s: %s", path, res.error)
        return report
