#!/usr/bin/env python3
"""
journal_builders_v1.py

Turn one fragment of the journal record into document nodes.

Builder contract:
- every builder takes the JournalConfig explicitly and reads no module state
- optional input never raises: an absent note yields [], an absent photo
  yields a visible "[MISSING IMAGE: ...]" marker
- the returned lists are appended as-is by the assembler
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import quote

from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from journal_config_v1 import LOG_NAME, JournalConfig
from journal_nodes_v1 import (
    Block,
    CellBorder,
    Heading,
    Hyperlink,
    Image,
    PageBreak,
    PageField,
    Paragraph,
    Table,
    TableCell,
    TableRow,
    TextRun,
)
from journal_record_v1 import DayEntry, FieldNote, GlossaryTerm, ImageRef, JournalRecord

logger = logging.getLogger(LOG_NAME)

# Formats Word embeds as-is; anything else Pillow can read is re-encoded as PNG.
DOCX_NATIVE_FORMATS = {"JPEG", "PNG", "GIF", "BMP", "TIFF"}

PNG_SAVE_MODES = {"1", "L", "LA", "I", "P", "RGB", "RGBA"}

FIELD_NOTE_MARKER = "⛏ FIELD NOTE: "
GPS_PREFIX = "📍 GPS: "
ELLIPSIS = "..."


# ── Images ────────────────────────────────────────────────────────────────────


def _placeholder(text: str, config: JournalConfig) -> List[Block]:
    return [
        Paragraph(
            children=(TextRun(text, bold=True, color=config.styles.missing_color, highlight=True),),
            align="center",
        )
    ]


def load_image_payload(path: Path) -> bytes:
    """
    Read the whole file into memory. Formats Word cannot embed are converted
    to PNG. Raises UnidentifiedImageError / OSError when Pillow cannot decode it.
    """
    data = path.read_bytes()
    with PILImage.open(io.BytesIO(data)) as im:
        fmt = (im.format or "").upper()
        if fmt in DOCX_NATIVE_FORMATS:
            return data

        logger.debug("Converting %s (%s) to PNG for embedding", path.name, fmt or "unknown")
        if im.mode not in PNG_SAVE_MODES:
            im = im.convert("RGBA" if "A" in im.getbands() else "RGB")
        out = io.BytesIO()
        im.save(out, format="PNG")
        return out.getvalue()


def build_image_block(ref: ImageRef, config: JournalConfig, is_cover: bool = False) -> List[Block]:
    img_path = config.photo_dir / ref.filename

    # names the OS cannot represent (embedded NUL) count as missing
    try:
        found = img_path.exists()
    except (OSError, ValueError):
        found = False
    if not found:
        logger.error("Could not find image at %r", str(img_path))
        return _placeholder(f"[MISSING IMAGE: {ref.filename}]", config)

    img_path = img_path.resolve()

    try:
        data = load_image_payload(img_path)
    except (UnidentifiedImageError, OSError) as exc:
        logger.warning("Could not read image %s: %s", img_path, exc)
        return _placeholder(f"[UNREADABLE IMAGE: {ref.filename}]", config)

    width, height = config.cover_image_size_px if is_cover else config.body_image_size_px
    blocks: List[Block] = [
        Image(
            filename=ref.filename,
            data=data,
            width_px=width,
            height_px=height,
            align="center",
            space_before_pt=10,
        )
    ]

    if ref.caption:
        blocks.append(
            Paragraph(
                children=(TextRun(ref.caption, italic=True, size_pt=9, color=config.styles.caption_color),),
                align="center",
                space_after_pt=10,
            )
        )
    return blocks


# ── Boxes and tables ──────────────────────────────────────────────────────────


def build_field_note(note: Optional[FieldNote], config: JournalConfig) -> List[Block]:
    if note is None:
        return []

    s = config.styles
    cell = TableCell(
        children=(
            Paragraph(children=(TextRun(FIELD_NOTE_MARKER + note.title, bold=True, color=s.accent_color),)),
            Paragraph(children=(TextRun(note.text, italic=True),)),
        ),
        fill=s.note_fill,
        borders=(
            CellBorder("left", "single", 20, s.accent_color),
            CellBorder("top", "nil"),
            CellBorder("right", "nil"),
            CellBorder("bottom", "nil"),
        ),
        margins=(200, 200, 200, 200),
    )
    return [Table(rows=(TableRow(cells=(cell,)),))]


def build_timeline_table(config: JournalConfig) -> Table:
    rows = []
    for text, fill, color, is_header in config.timeline_rows:
        rows.append(
            TableRow(
                cells=(
                    TableCell(
                        children=(
                            Paragraph(
                                children=(TextRun(text, bold=is_header, color=color, size_pt=10),),
                                align="center" if is_header else "left",
                            ),
                        ),
                        fill=fill,
                        margins=(120, 120, 120, 120),
                    ),
                )
            )
        )
    return Table(rows=tuple(rows))


def build_map_placeholder(config: JournalConfig) -> Table:
    cell = TableCell(
        children=(
            Paragraph(
                children=(TextRun(config.map_placeholder_text, italic=True, color="555555"),),
                align="center",
            ),
        ),
        borders=(CellBorder("top", "dashed", 10), CellBorder("bottom", "dashed", 10)),
        margins=(500, 500, 120, 120),
    )
    return Table(rows=(TableRow(cells=(cell,)),))


def summarize(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return text[:length] + ELLIPSIS


def build_stratigraphic_index(days: Sequence[DayEntry], config: JournalConfig) -> Table:
    s = config.styles

    def header_cell(label: str) -> TableCell:
        return TableCell(
            children=(Paragraph(children=(TextRun(label, bold=True, color="FFFFFF"),)),),
            fill=s.accent_color,
        )

    rows = [TableRow(cells=(header_cell("DAY"), header_cell("TOPIC"), header_cell("SUMMARY")))]

    for day in days:
        if day.geo_note is None:
            continue
        rows.append(
            TableRow(
                cells=(
                    TableCell(children=(Paragraph(children=(TextRun(day.day),)),)),
                    TableCell(children=(Paragraph(children=(TextRun(day.geo_note.title, bold=True),)),)),
                    TableCell(
                        children=(
                            Paragraph(children=(TextRun(summarize(day.geo_note.text, config.summary_length)),)),
                        )
                    ),
                )
            )
        )
    return Table(rows=tuple(rows))


# ── Day entries ───────────────────────────────────────────────────────────────


def map_search_url(coordinates: str, config: JournalConfig) -> str:
    return config.map_url_template.format(query=quote(coordinates, safe=""))


def build_gps_line(coordinates: Optional[str], config: JournalConfig) -> List[Block]:
    if not coordinates:
        return []

    s = config.styles
    prefix = TextRun(GPS_PREFIX, bold=True, color=s.gps_color, size_pt=8)
    if config.link_coordinates:
        value = Hyperlink(
            url=map_search_url(coordinates, config),
            runs=(TextRun(coordinates, italic=True, underline=True, color=s.link_color, size_pt=8),),
        )
    else:
        value = TextRun(coordinates, italic=True, color=s.gps_color, size_pt=8)
    return [Paragraph(children=(prefix, value), space_after_pt=5)]


def day_heading_text(day: DayEntry) -> str:
    if day.day and day.title:
        return f"{day.day}: {day.title}"
    return day.title or day.day


def build_day_entry(day: DayEntry, config: JournalConfig) -> List[Block]:
    blocks: List[Block] = [Heading(day_heading_text(day), level=2)]
    blocks.extend(build_gps_line(day.coordinates, config))
    blocks.append(Paragraph(children=(TextRun(day.description),), space_after_pt=10))
    blocks.extend(build_field_note(day.geo_note, config))
    for ref in day.images:
        blocks.extend(build_image_block(ref, config))
    blocks.append(PageBreak())
    return blocks


# ── Back matter and page furniture ────────────────────────────────────────────


def build_glossary_lines(glossary: Sequence[GlossaryTerm]) -> List[Block]:
    return [
        Paragraph(
            children=(TextRun(g.term + ": ", bold=True), TextRun(g.definition)),
            indent_left_pt=12,
            space_after_pt=6,
        )
        for g in glossary
    ]


def build_footer(record: JournalRecord) -> Paragraph:
    lead = f"© {record.author} | Page " if record.author else "Page "
    return Paragraph(
        children=(
            TextRun(lead),
            PageField("PAGE", bold=True),
            TextRun(" of "),
            PageField("NUMPAGES", bold=True),
        ),
        align="right",
    )


def build_header(config: JournalConfig) -> Optional[Paragraph]:
    if not config.header_text:
        return None
    return Paragraph(
        children=(TextRun(config.header_text, size_pt=8, color=config.styles.muted_color),),
        align="right",
    )
