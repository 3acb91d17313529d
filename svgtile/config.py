import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator


def _parse_dirs(raw: str | None) -> tuple[Path, ...]:
    dirs: list[Path] = []
    if not raw:
        return ()
    for sep in (";", ","):
        raw = raw.replace(sep, os.pathsep)
    for part in raw.split(os.pathsep):
        p = part.strip()
        if not p:
            continue
        path = Path(p).expanduser().resolve()
        if path not in dirs:
            dirs.append(path)
    return tuple(dirs)


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name, "") or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


class RenderSettings(BaseModel):
    """Fixed rendering constants.

    canvas_size: side of the square output image, in pixels.
    margin: inset between the canvas edge and the render region.
    saturation, lightness: HSL parameters of the pastel background.
    hue_max: hue is sampled uniformly from [0, hue_max).
    """

    model_config = ConfigDict(frozen=True)

    canvas_size: int = 256
    margin: int = 32
    saturation: float = 0.75
    lightness: float = 0.75
    hue_max: float = 360.0


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    render: RenderSettings = RenderSettings()
    # Fonts
    font_dirs: tuple[Path, ...] = ()
    fallback_font_family: str = "sans-serif"
    # Logging
    log_file: Path | None = None
    log_level: str = "INFO"
    log_max_bytes: int = 5 * 1024 * 1024
    log_backups: int = 5

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return (v or "INFO").upper()

    @field_validator("log_file", mode="before")
    @classmethod
    def _ensure_log_path(cls, v: str | Path | None) -> Path | None:
        if not v:
            return None
        return Path(v).expanduser().resolve()

    @field_validator("font_dirs", mode="before")
    @classmethod
    def _normalize_dirs(cls, v: object) -> tuple[Path, ...]:
        if v in (None, "", (), []):
            return ()
        if isinstance(v, (list, tuple, set, frozenset)):
            return tuple(Path(p).expanduser().resolve() for p in v)
        return _parse_dirs(str(v))

    @field_validator("fallback_font_family", mode="before")
    @classmethod
    def _default_family(cls, v: str | None) -> str:
        return (v or "").strip() or "sans-serif"


def load_settings() -> Settings:
    # Logging
    log_file_raw = os.getenv("LOG_FILE", "").strip()
    log_file = Path(log_file_raw).expanduser().resolve() if log_file_raw else None
    log_level = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()
    log_max_bytes = _env_int("LOG_MAX_BYTES", 5 * 1024 * 1024)
    log_backups = _env_int("LOG_BACKUPS", 5)

    # Fonts
    font_dirs = _parse_dirs(os.getenv("FONT_DIRS"))
    fallback = os.getenv("FALLBACK_FONT_FAMILY", "sans-serif")

    return Settings(
        font_dirs=font_dirs,
        fallback_font_family=fallback,
        log_file=log_file,
        log_level=log_level,
        log_max_bytes=log_max_bytes,
        log_backups=log_backups,
    )
