#!/usr/bin/env python3
# build_field_journal_v1 - build the geological field journal DOCX
#
# v1 goal:
#   * Read travelData.json and the photos/ folder
#   * Audit photo references (warnings only)
#   * Assemble title page, timeline, TOC, day entries, glossary, stratigraphic index
#   * Write Geological_Field_Journal_2026.docx (overwritten on each run)
#
# Usage:
#   python build_field_journal_v1.py
#   python build_field_journal_v1.py --data trip.json --photos ./photos --output out.docx --open

from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from journal_assembly_v1 import assemble_journal
from journal_config_v1 import (
    DEFAULT_DATA_PATH,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_PHOTO_DIR,
    JOURNAL_LOGS_DIR,
    LOG_NAME,
    JournalConfig,
)
from journal_docx_writer_v1 import write_docx
from journal_photo_audit_v1 import run_audit
from journal_record_v1 import load_record

# ── Logging setup ──────────────────────────────────────────────────────────────


def setup_logger(level: str = "info", logs_dir: Path = JOURNAL_LOGS_DIR) -> logging.Logger:
    """Create a simple file+console logger for the journal build."""
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / "build_field_journal_v1.log"

    logger = logging.getLogger(LOG_NAME)
    logger.setLevel(logging.DEBUG if level == "debug" else logging.INFO)

    # Avoid duplicate handlers if called repeatedly in the same process.
    if not logger.handlers:
        fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setFormatter(fmt)
        logger.addHandler(fh)

        ch = logging.StreamHandler()
        ch.setFormatter(fmt)
        logger.addHandler(ch)

    return logger


# ── Build ─────────────────────────────────────────────────────────────────────


def build_journal(config: JournalConfig, logger: logging.Logger) -> Path:
    """load -> audit -> assemble -> write. Returns the written path."""
    record = load_record(config.data_path)
    run_audit(record, config.photo_dir, logger)
    document = assemble_journal(record, config)
    return write_docx(document, config.output_path, config.styles)


def open_in_viewer(path: Path) -> None:
    """Hand the file to the platform's default viewer (fire and forget)."""
    if sys.platform == "darwin":
        subprocess.Popen(["open", str(path)])
    elif os.name == "nt":
        os.startfile(str(path))  # type: ignore[attr-defined]
    else:
        subprocess.Popen(["xdg-open", str(path)])


# ── CLI ───────────────────────────────────────────────────────────────────────


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Build the geological field journal DOCX from travelData.json and photos/")
    p.add_argument("--data", type=str, default=None, help=f"Journal record JSON (default: {DEFAULT_DATA_PATH.name})")
    p.add_argument("--photos", type=str, default=None, help=f"Photo folder (default: {DEFAULT_PHOTO_DIR.name}/)")
    p.add_argument("--output", type=str, default=None, help=f"Output DOCX path (default: {DEFAULT_OUTPUT_PATH.name})")
    p.add_argument("--header", type=str, default=None, help="Optional running page header text")
    p.add_argument(
        "--no-regional-context",
        action="store_true",
        help="Omit the regional context heading and map placeholder before the timeline.",
    )
    p.add_argument("--no-map-links", action="store_true", help="Render GPS coordinates as plain text.")
    p.add_argument("--open", action="store_true", help="Open the finished file in the default viewer.")
    p.add_argument("--logs-dir", type=str, default=None, help="Override the log folder")
    p.add_argument("--level", choices=["info", "debug"], default="info", help="Logging level (default: info)")
    return p.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> JournalConfig:
    config = JournalConfig()
    overrides = {}
    if args.data:
        overrides["data_path"] = Path(args.data).expanduser()
    if args.photos:
        overrides["photo_dir"] = Path(args.photos).expanduser()
    if args.output:
        overrides["output_path"] = Path(args.output).expanduser()
    if args.header:
        overrides["header_text"] = args.header
    if args.no_regional_context:
        overrides["include_regional_context"] = False
    if args.no_map_links:
        overrides["link_coordinates"] = False
    return replace(config, **overrides)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logs_dir = Path(args.logs_dir).expanduser() if args.logs_dir else JOURNAL_LOGS_DIR
    try:
        logger = setup_logger(args.level, logs_dir)
    except OSError as exc:
        print(f"BUILD FAILED: cannot open log directory {logs_dir}: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    config = config_from_args(args)
    logger.info("Starting field journal build")
    logger.info("Data:   %s", config.data_path)
    logger.info("Photos: %s", config.photo_dir)
    logger.info("Output: %s", config.output_path)

    try:
        out_path = build_journal(config, logger)
    except Exception as exc:
        logger.error("BUILD FAILED: %s", exc)
        raise SystemExit(1) from exc

    logger.info("BUILD SUCCESS: %s", out_path)

    if args.open:
        open_in_viewer(out_path)


if __name__ == "__main__":
    main()
