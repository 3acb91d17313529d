from __future__ import annotations


class TileError(Exception):
    """Base class for everything the tile pipeline raises on purpose."""

    stage = "pipeline"

    def __str__(self) -> str:
        msg = super().__str__()
        return f"{self.stage}: {msg}" if msg else self.stage


class FatalSetupError(TileError):
    """Input/output directory cannot be resolved or enumerated. Aborts the run."""

    stage = "setup"


class OutputNameError(TileError):
    stage = "output name"


class ItemReadError(TileError):
    stage = "read"


class ParseError(TileError):
    stage = "parse"


class GeometryError(TileError):
    stage = "geometry"


class ColorGenerationError(TileError):
    stage = "color"


class RenderError(TileError):
    stage = "render"


class CompositeError(TileError):
    stage = "composite"


class WriteError(TileError):
    stage = "write"
