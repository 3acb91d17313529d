from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from PIL import ImageFont

FONT_SUFFIXES = frozenset({".ttf", ".otf", ".ttc", ".otc"})

# CSS generic families are always resolved by the renderer's own fallback
GENERIC_FAMILIES = frozenset(
    {"serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui"}
)


def system_font_dirs() -> list[Path]:
    home = Path.home()
    if sys.platform.startswith("win"):
        windir = Path(os.environ.get("WINDIR", r"C:\Windows"))
        return [windir / "Fonts", home / "AppData/Local/Microsoft/Windows/Fonts"]
    if sys.platform == "darwin":
        return [Path("/System/Library/Fonts"), Path("/Library/Fonts"), home / "Library/Fonts"]
    return [
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        home / ".fonts",
        home / ".local/share/fonts",
    ]


def normalize_family(name: str) -> str:
    return name.strip().strip("\"'").strip().lower()


class FontDatabase:
    """Index of font families available for text in vector documents.

    Built once per run and shared read-only by every item.
    """

    def __init__(self) -> None:
        self._families: dict[str, list[Path]] = {}
        self._files: set[Path] = set()

    def __len__(self) -> int:
        return len(self._files)

    @property
    def families(self) -> list[str]:
        return sorted(self._families)

    def load_font_file(self, path: Path) -> bool:
        path = Path(path)
        if path in self._files:
            return True
        try:
            family, _style = ImageFont.truetype(str(path), size=12).getname()
        except (OSError, ValueError) as e:
            logging.debug("Skipping unreadable font %s: %s", path, e)
            return False
        if not family:
            return False
        self._families.setdefault(normalize_family(family), []).append(path)
        self._files.add(path)
        return True

    def load_fonts_dir(self, directory: Path) -> int:
        directory = Path(directory)
        if not directory.is_dir():
            return 0
        candidates = (p for p in directory.rglob("*") if p.suffix.lower() in FONT_SUFFIXES)
        return sum(self.load_font_file(p) for p in candidates if p.is_file())

    def load_system_fonts(self) -> int:
        loaded = sum(self.load_fonts_dir(d) for d in system_font_dirs())
        logging.debug("Loaded %d system fonts", loaded)
        return loaded

    def has_family(self, name: str) -> bool:
        key = normalize_family(name)
        return key in GENERIC_FAMILIES or key in self._families
