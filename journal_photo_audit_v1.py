#!/usr/bin/env python3
"""
journal_photo_audit_v1.py

Cross-check every photo referenced by the journal record against the photo
folder. Missing photos are diagnostics only: the build still runs and renders
a visible placeholder in their place.

Usage:
  python journal_photo_audit_v1.py
  python journal_photo_audit_v1.py --data travelData.json --photos photos/
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from journal_config_v1 import DEFAULT_DATA_PATH, DEFAULT_PHOTO_DIR, LOG_NAME
from journal_record_v1 import ImageRef, JournalRecord, load_record


@dataclass(frozen=True)
class MissingAsset:
    image_name: str
    context_label: str


def iter_image_refs(record: JournalRecord) -> Iterator[Tuple[str, ImageRef]]:
    """Yield (context_label, ref) for the cover and each day image, in reading order."""
    if record.cover_image is not None:
        yield "COVER", record.cover_image
    for day in record.days:
        for ref in day.images:
            yield f"Day {day.day}", ref


def audit_photos(record: JournalRecord, photo_dir: Path) -> List[MissingAsset]:
    # Each occurrence is reported, duplicates included.
    return [
        MissingAsset(image_name=ref.filename, context_label=label)
        for label, ref in iter_image_refs(record)
        if not (photo_dir / ref.filename).exists()
    ]


def report_audit(missing: List[MissingAsset], logger: logging.Logger) -> None:
    for m in missing:
        if m.context_label == "COVER":
            logger.warning("COVER MISSING: %s", m.image_name)
        else:
            logger.warning("MISSING: %s (%s)", m.image_name, m.context_label)

    if not missing:
        logger.info("ALL PHOTOS LOCATED.")
    else:
        logger.info("AUDIT COMPLETE: %d missing.", len(missing))


def run_audit(record: JournalRecord, photo_dir: Path, logger: logging.Logger) -> List[MissingAsset]:
    logger.info("STARTING PHOTO AUDIT (%s)", photo_dir)
    missing = audit_photos(record, photo_dir)
    report_audit(missing, logger)
    return missing


# ── CLI ───────────────────────────────────────────────────────────────────────


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Audit journal photo references against the photo folder")
    ap.add_argument("--data", default=str(DEFAULT_DATA_PATH), help="Path to travelData.json")
    ap.add_argument("--photos", default=str(DEFAULT_PHOTO_DIR), help="Photo folder")
    ap.add_argument("--level", choices=["info", "debug"], default="info", help="Logging level (default: info)")
    args = ap.parse_args(argv)

    logger = logging.getLogger(LOG_NAME)
    logger.setLevel(logging.DEBUG if args.level == "debug" else logging.INFO)
    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(ch)

    try:
        record = load_record(Path(args.data).expanduser())
    except (OSError, ValueError) as exc:
        logger.error("Cannot audit: %s", exc)
        return 2

    missing = run_audit(record, Path(args.photos).expanduser(), logger)
    return 1 if missing else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
