from __future__ import annotations

import os
from pathlib import Path

from .errors import FatalSetupError, OutputNameError


def canonical_dir(raw: str | Path) -> Path:
    """Resolve ``raw`` to an absolute path of an existing directory."""
    try:
        p = Path(os.path.expanduser(str(raw).strip())).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise FatalSetupError(f"cannot resolve {raw}: {e}") from e
    if not p.is_dir():
        raise FatalSetupError(f"not a directory: {p}")
    return p


def output_name(path: Path) -> str:
    stem = Path(path).stem
    if not stem or stem in (".", ".."):
        raise OutputNameError(f"no file stem in {str(path)!r}")
    return f"{stem}.png"


def human_bytes(n: int) -> str:
    step = 1024.0
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    v = float(n)
    while v >= step and i < len(units) - 1:
        v /= step
        i += 1
    return f"{v:.2f} {units[i]}"
