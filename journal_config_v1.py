#!/usr/bin/env python3
# journal_config_v1.py - config for the geological field journal build

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

"""
Directory layout reminder (relative to this config file):

Field Journal/
    journal_config_v1.py
    build_field_journal_v1.py
    travelData.json        <- the journal record
    photos/                <- every image filename is resolved here
    Logs/
    Geological_Field_Journal_2026.docx   <- overwritten on each run
"""

# Root of the journal workspace (folder that contains this config file)
JOURNAL_ROOT: Path = Path(__file__).resolve().parent

# Inputs
DEFAULT_DATA_PATH: Path = JOURNAL_ROOT / "travelData.json"
DEFAULT_PHOTO_DIR: Path = JOURNAL_ROOT / "photos"

# Output we generate
DEFAULT_OUTPUT_PATH: Path = JOURNAL_ROOT / "Geological_Field_Journal_2026.docx"

# Where we log things
JOURNAL_LOGS_DIR: Path = JOURNAL_ROOT / "Logs"

LOG_NAME = "field_journal"

# ── Static reference content ──────────────────────────────────────────────────

# (text, fill, font colour, is_header); first row is the table header.
TIMELINE_ROWS: List[Tuple[str, str, str, bool]] = [
    ("FIELD STRATIGRAPHY & REGIONAL TIMELINE", "A04040", "FFFFFF", True),
    ("HOLOCENE (0.01 Ma): Rapa Nui human history and Moai carving.", "F5F5DC", "000000", False),
    ("PLEISTOCENE (2.5 Ma): Formation of Atacama evaporite basins.", "EFEBE9", "000000", False),
    ("MIOCENE (12 Ma): Intrusion of the Torres del Paine laccoliths.", "D7CCC8", "000000", False),
    ("CRETACEOUS (100 Ma): Initial compression and subduction of the Nazca plate.", "BCAAA4", "000000", False),
]

MAP_PLACEHOLDER_TEXT = "📍 PLACEHOLDER: TECTONIC MAP OF CHILE / NAZCA PLATE SUBDUCTION"

# {query} receives the percent-encoded "lat,long" string
MAP_URL_TEMPLATE = "https://www.google.com/maps/search/?api=1&query={query}"

# Index summaries are cut to this many characters (plus an ellipsis)
SUMMARY_LENGTH = 80

# Display sizes in pixels (96 dpi); cover images render larger than body images
BODY_IMAGE_SIZE_PX: Tuple[int, int] = (450, 300)
COVER_IMAGE_SIZE_PX: Tuple[int, int] = (550, 350)


@dataclass(frozen=True)
class JournalStyles:
    """Fonts and colours applied by the docx writer and the node builders."""

    font: str = "Georgia"
    body_size_pt: float = 11
    heading1_size_pt: float = 24
    heading2_size_pt: float = 16
    heading1_color: str = "A04040"
    heading2_color: str = "4F4F4F"
    accent_color: str = "A04040"
    note_fill: str = "EFEBE9"
    caption_color: str = "4F4F4F"
    muted_color: str = "999999"
    gps_color: str = "666666"
    link_color: str = "0000FF"
    missing_color: str = "FF0000"


@dataclass(frozen=True)
class JournalConfig:
    """Everything a run needs, built once at process start and passed down."""

    data_path: Path = DEFAULT_DATA_PATH
    photo_dir: Path = DEFAULT_PHOTO_DIR
    output_path: Path = DEFAULT_OUTPUT_PATH
    styles: JournalStyles = field(default_factory=JournalStyles)
    timeline_rows: Tuple[Tuple[str, str, str, bool], ...] = tuple(TIMELINE_ROWS)
    map_placeholder_text: str = MAP_PLACEHOLDER_TEXT
    include_regional_context: bool = True
    link_coordinates: bool = True
    map_url_template: str = MAP_URL_TEMPLATE
    header_text: Optional[str] = None
    summary_length: int = SUMMARY_LENGTH
    body_image_size_px: Tuple[int, int] = BODY_IMAGE_SIZE_PX
    cover_image_size_px: Tuple[int, int] = COVER_IMAGE_SIZE_PX
