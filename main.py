from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from logging.handlers import RotatingFileHandler

from dotenv import load_dotenv

from svgtile.config import Settings, load_settings
from svgtile.errors import FatalSetupError
from svgtile.fonts import FontDatabase
from svgtile.pipeline import Pipeline
from svgtile.utils import canonical_dir, human_bytes


def _setup_logging(settings: Settings) -> None:
    # Configure logging: console always; optional rotating file
    log_format = "%(asctime)s %(levelname)s %(name)s %(message)s"
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=log_format)
    if settings.log_file:
        try:
            settings.log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                settings.log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backups,
                encoding="utf-8",
            )
            fh.setLevel(level)
            fh.setFormatter(logging.Formatter(log_format))
            root = logging.getLogger()
            root.addHandler(fh)
        except Exception:
            logging.exception("Failed to set up file logging")


def _build_fontdb(settings: Settings) -> FontDatabase:
    fontdb = FontDatabase()
    fontdb.load_system_fonts()
    for d in settings.font_dirs:
        n = fontdb.load_fonts_dir(d)
        logging.debug("Loaded %d fonts from %s", n, d)
    logging.info("Font database: %d fonts, %d families", len(fontdb), len(fontdb.families))
    return fontdb


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="pastel-tiles",
        description="Render every SVG in a directory to a 256x256 PNG on a random pastel background.",
    )
    ap.add_argument("inputdir", help="Directory containing vector files")
    ap.add_argument("outputdir", help="Directory to write PNG files into")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # Load .env if present
    load_dotenv()

    settings = load_settings()
    _setup_logging(settings)

    try:
        input_dir = canonical_dir(args.inputdir)
        output_dir = canonical_dir(args.outputdir)
    except FatalSetupError as e:
        logging.error("%s", e)
        return 1

    pipeline = Pipeline(settings, random.Random(), _build_fontdb(settings))

    logging.info("Rendering %s -> %s", input_dir, output_dir)
    started = time.monotonic()
    try:
        report = pipeline.run(input_dir, output_dir)
    except FatalSetupError as e:
        logging.error("%s", e)
        return 1

    written = sum(r.bytes_written for r in report.succeeded)
    logging.info(
        "Done in %.1fs: %d rendered (%s), %d failed",
        time.monotonic() - started,
        report.ok_count,
        human_bytes(written),
        len(report.failed),
    )
    return 0


def run() -> None:
    try:
        code = main()
    except KeyboardInterrupt:
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    run()
