from pathlib import Path

import pytest

from svgtile import fonts
from svgtile.fonts import FontDatabase, normalize_family


class _FakeFont:
    def __init__(self, family: str):
        self.family = family

    def getname(self):
        return self.family, "Regular"


@pytest.fixture
def fake_truetype(monkeypatch: pytest.MonkeyPatch):
    def truetype(path, size=12):
        if Path(path).read_bytes() != b"font":
            raise OSError("unknown file format")
        return _FakeFont(Path(path).stem.replace("_", " ").title())

    monkeypatch.setattr(fonts.ImageFont, "truetype", truetype)


def test_normalize_family():
    assert normalize_family(' "DejaVu Sans" ') == "dejavu sans"


def test_generic_families_always_resolve():
    db = FontDatabase()
    assert len(db) == 0
    for name in ("serif", "Sans-Serif", "monospace"):
        assert db.has_family(name)
    assert not db.has_family("Helvetica Neue")


def test_load_fonts_dir(tmp_path: Path, fake_truetype):
    sub = tmp_path / "nested"
    sub.mkdir()
    (tmp_path / "open_sans.ttf").write_bytes(b"font")
    (sub / "fira_code.OTF").write_bytes(b"font")
    (sub / "broken.ttf").write_bytes(b"garbage")
    (tmp_path / "readme.txt").write_bytes(b"font")

    db = FontDatabase()
    assert db.load_fonts_dir(tmp_path) == 2
    assert len(db) == 2
    assert db.families == ["fira code", "open sans"]
    assert db.has_family("Open Sans")
    assert db.has_family("'FIRA CODE'")
    assert not db.has_family("broken")


def test_load_font_file_twice_counts_once(tmp_path: Path, fake_truetype):
    f = tmp_path / "noto.ttf"
    f.write_bytes(b"font")
    db = FontDatabase()
    assert db.load_font_file(f)
    assert db.load_font_file(f)
    assert len(db) == 1


def test_load_fonts_dir_missing(tmp_path: Path):
    assert FontDatabase().load_fonts_dir(tmp_path / "missing") == 0


def test_load_system_fonts_scans_platform_dirs(
    tmp_path: Path, fake_truetype, monkeypatch: pytest.MonkeyPatch
):
    (tmp_path / "liberation_mono.ttf").write_bytes(b"font")
    monkeypatch.setattr(fonts, "system_font_dirs", lambda: [tmp_path, tmp_path / "none"])
    db = FontDatabase()
    assert db.load_system_fonts() == 1
    assert db.has_family("Liberation Mono")
