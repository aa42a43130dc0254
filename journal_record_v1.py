#!/usr/bin/env python3
"""
journal_record_v1.py

Load the travel record (travelData.json) and canonicalize it into one
read-only shape before any document node is built.

Canonical form:
- every image reference is an ImageRef(filename, caption)
- DayEntry.images is always populated: the "images" array when the key holds a
  list (even an empty one), else the legacy single "image", else empty
- geo notes are FieldNote or None, coordinates are a non-blank string or None
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from journal_config_v1 import LOG_NAME

logger = logging.getLogger(LOG_NAME)


# ── Data structures ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ImageRef:
    filename: str
    caption: str = ""


@dataclass(frozen=True)
class FieldNote:
    title: str
    text: str


@dataclass(frozen=True)
class GlossaryTerm:
    term: str
    definition: str


@dataclass(frozen=True)
class DayEntry:
    day: str
    title: str
    description: str
    coordinates: Optional[str] = None
    geo_note: Optional[FieldNote] = None
    images: Tuple[ImageRef, ...] = ()


@dataclass(frozen=True)
class JournalRecord:
    title: str
    days: Tuple[DayEntry, ...]
    author: str = ""
    subtitle: str = ""
    cover_image: Optional[ImageRef] = None
    glossary: Tuple[GlossaryTerm, ...] = ()


# ── Helpers ───────────────────────────────────────────────────────────────────


def _clean_str(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _day_label(value: object) -> str:
    # JSON numbers like 3 or 3.0 read as "3"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return _clean_str(value)


def first_key(d: Dict[str, Any], keys: List[str], default: str = "") -> str:
    for k in keys:
        value = d.get(k)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return default


def parse_image_ref(raw: object, context: str = "") -> Optional[ImageRef]:
    """Resolve a bare filename or a {url, caption} object into an ImageRef."""
    if isinstance(raw, str):
        name = raw.strip()
        return ImageRef(filename=name) if name else None

    if isinstance(raw, dict):
        name = first_key(raw, ["url", "filename", "file"])
        if not name:
            logger.warning("Image entry without a filename ignored (%s): %r", context or "record", raw)
            return None
        return ImageRef(filename=name, caption=_clean_str(raw.get("caption")))

    if raw is not None:
        logger.warning("Unrecognised image entry ignored (%s): %r", context or "record", raw)
    return None


def parse_field_note(raw: object) -> Optional[FieldNote]:
    if not isinstance(raw, dict):
        return None
    title = _clean_str(raw.get("title"))
    text = _clean_str(raw.get("text"))
    if not title and not text:
        return None
    return FieldNote(title=title, text=text)


def _parse_glossary(raw: object) -> Tuple[GlossaryTerm, ...]:
    if not isinstance(raw, list):
        return ()
    out: List[GlossaryTerm] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        term = _clean_str(item.get("term"))
        if not term:
            logger.warning("Glossary entry without a term ignored: %r", item)
            continue
        out.append(GlossaryTerm(term=term, definition=_clean_str(item.get("definition"))))
    return tuple(out)


def canonicalize_day(raw: Dict[str, Any]) -> DayEntry:
    label = _day_label(raw.get("day"))
    context = f"Day {label}"

    raw_images = raw.get("images")
    if isinstance(raw_images, list):
        refs = [parse_image_ref(x, context) for x in raw_images]
    else:
        # Legacy single-image records
        refs = [parse_image_ref(raw.get("image"), context)]
    images = tuple(r for r in refs if r is not None)

    coordinates = _clean_str(raw.get("coordinates")) or None

    day = DayEntry(
        day=label,
        title=_clean_str(raw.get("title")),
        description=_clean_str(raw.get("description")),
        coordinates=coordinates,
        geo_note=parse_field_note(raw.get("geoNote")),
        images=images,
    )
    logger.debug(
        "%s: images=%d, geo_note=%s, coordinates=%s",
        context,
        len(day.images),
        "yes" if day.geo_note else "no",
        day.coordinates or "-",
    )
    return day


def canonicalize_record(raw: object, source: str = "record") -> JournalRecord:
    """
    Validate the required fields and normalize everything optional.
    Raises ValueError when tripTitle or days is missing or malformed.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"{source}: top-level JSON value must be an object.")

    title = first_key(raw, ["tripTitle", "title"])
    if not title:
        raise ValueError(f"{source}: required field 'tripTitle' is missing or empty.")

    raw_days = raw.get("days")
    if raw_days is None:
        raise ValueError(f"{source}: required field 'days' is missing.")
    if not isinstance(raw_days, list):
        raise ValueError(f"{source}: field 'days' must be a list (got {type(raw_days).__name__}).")

    days: List[DayEntry] = []
    for i, d in enumerate(raw_days):
        if not isinstance(d, dict):
            raise ValueError(f"{source}: days[{i}] must be an object (got {type(d).__name__}).")
        days.append(canonicalize_day(d))

    return JournalRecord(
        title=title,
        days=tuple(days),
        author=_clean_str(raw.get("author")),
        subtitle=_clean_str(raw.get("subtitle")),
        cover_image=parse_image_ref(raw.get("coverImage"), "COVER"),
        glossary=_parse_glossary(raw.get("glossary")),
    )


def load_record(path: Path) -> JournalRecord:
    """Read and canonicalize the journal record. Missing or malformed input is fatal."""
    if not path.exists():
        raise FileNotFoundError(f"Expected journal data at {path} but it does not exist.")

    text = path.read_text(encoding="utf-8")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"{path}: malformed JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}"
        ) from exc

    record = canonicalize_record(raw, source=str(path))
    logger.info(
        "Loaded record: %r (%d days, %d glossary terms)",
        record.title,
        len(record.days),
        len(record.glossary),
    )
    return record
