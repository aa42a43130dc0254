#!/usr/bin/env python3
"""
journal_assembly_v1.py

Compose the full journal in a fixed section order:

  title -> cover (+ subtitle) -> page break
  -> regional context heading + map placeholder (optional) -> timeline table
  -> page break -> table of contents -> page break
  -> day entries (input order)
  -> glossary (when present) -> stratigraphic index -> "End of Records"

The footer (page X of Y) is attached once at document level.
"""

from __future__ import annotations

import logging
from typing import List

from journal_builders_v1 import (
    build_day_entry,
    build_footer,
    build_glossary_lines,
    build_header,
    build_image_block,
    build_map_placeholder,
    build_stratigraphic_index,
    build_timeline_table,
)
from journal_config_v1 import LOG_NAME, JournalConfig
from journal_nodes_v1 import (
    Block,
    Heading,
    Image,
    JournalDocument,
    PageBreak,
    Paragraph,
    TableOfContents,
    TextRun,
    iter_blocks,
)
from journal_record_v1 import JournalRecord

logger = logging.getLogger(LOG_NAME)

REGIONAL_CONTEXT_HEADING = "Regional Geological Context"
GLOSSARY_HEADING = "Geological Glossary"
INDEX_HEADING = "Stratigraphic Index"
INDEX_INTRO = "Summary of key geological observations recorded during the expedition."
CLOSING_LINE = "End of Records"


def _title_page(record: JournalRecord, config: JournalConfig) -> List[Block]:
    blocks: List[Block] = [Heading(record.title, level=1, align="center")]
    if record.cover_image is not None:
        blocks.extend(build_image_block(record.cover_image, config, is_cover=True))
    if record.subtitle:
        blocks.append(Paragraph(children=(TextRun(record.subtitle, italic=True),), align="center"))
    blocks.append(PageBreak())
    return blocks


def _front_matter(config: JournalConfig) -> List[Block]:
    blocks: List[Block] = []
    if config.include_regional_context:
        blocks.append(Heading(REGIONAL_CONTEXT_HEADING, level=1))
        blocks.append(build_map_placeholder(config))
    blocks.append(build_timeline_table(config))
    blocks.append(PageBreak())
    blocks.append(TableOfContents(levels="1-3", hyperlinks=True))
    blocks.append(PageBreak())
    return blocks


def _back_matter(record: JournalRecord, config: JournalConfig) -> List[Block]:
    blocks: List[Block] = []
    if record.glossary:
        blocks.append(Heading(GLOSSARY_HEADING, level=1))
        blocks.extend(build_glossary_lines(record.glossary))

    blocks.append(Heading(INDEX_HEADING, level=1))
    blocks.append(Paragraph(children=(TextRun(INDEX_INTRO),), space_after_pt=10))
    blocks.append(build_stratigraphic_index(record.days, config))
    blocks.append(
        Paragraph(
            children=(TextRun(CLOSING_LINE, italic=True, color=config.styles.muted_color),),
            align="right",
        )
    )
    return blocks


def assemble_journal(record: JournalRecord, config: JournalConfig) -> JournalDocument:
    body: List[Block] = []
    body.extend(_title_page(record, config))
    body.extend(_front_matter(config))
    for day in record.days:
        body.extend(build_day_entry(day, config))
    body.extend(_back_matter(record, config))

    doc = JournalDocument(
        title=record.title,
        author=record.author,
        body=tuple(body),
        footer=build_footer(record),
        header=build_header(config),
    )

    images = sum(1 for b in iter_blocks(doc.body) if isinstance(b, Image))
    placeholders = sum(
        1
        for b in iter_blocks(doc.body)
        if isinstance(b, Paragraph) and b.text.startswith(("[MISSING IMAGE:", "[UNREADABLE IMAGE:"))
    )
    logger.info(
        "Assembled journal: days=%d, blocks=%d, images=%d, placeholders=%d",
        len(record.days),
        len(doc.body),
        images,
        placeholders,
    )
    return doc
