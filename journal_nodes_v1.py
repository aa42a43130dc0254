#!/usr/bin/env python3
"""
journal_nodes_v1.py

Generic document nodes produced by the builders and consumed once by the
docx writer. Nodes are frozen: nothing is mutated after it is appended.

Units follow Word's own: spacing and font sizes in points, cell margins in
dxa (twentieths of a point), border sizes in eighths of a point, image sizes
in pixels at 96 dpi.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


# ── Inline nodes ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TextRun:
    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    color: Optional[str] = None
    size_pt: Optional[float] = None
    highlight: bool = False


@dataclass(frozen=True)
class PageField:
    """Page-number field, evaluated by Word at render time."""

    kind: str  # "PAGE" or "NUMPAGES"
    bold: bool = False
    size_pt: Optional[float] = None


@dataclass(frozen=True)
class Hyperlink:
    url: str
    runs: Tuple[TextRun, ...]


Inline = Union[TextRun, PageField, Hyperlink]


# ── Block nodes ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Heading:
    text: str
    level: int = 1
    align: str = "left"


@dataclass(frozen=True)
class Paragraph:
    children: Tuple[Inline, ...] = ()
    align: str = "left"
    space_before_pt: Optional[float] = None
    space_after_pt: Optional[float] = None
    indent_left_pt: Optional[float] = None

    @property
    def text(self) -> str:
        parts = []
        for child in self.children:
            if isinstance(child, TextRun):
                parts.append(child.text)
            elif isinstance(child, Hyperlink):
                parts.extend(r.text for r in child.runs)
        return "".join(parts)


@dataclass(frozen=True)
class Image:
    filename: str
    data: bytes = field(repr=False)
    width_px: int = 0
    height_px: int = 0
    align: str = "center"
    space_before_pt: Optional[float] = None


@dataclass(frozen=True)
class CellBorder:
    side: str  # top | bottom | left | right
    style: str = "single"  # single | dashed | nil
    size: int = 4
    color: str = "auto"


@dataclass(frozen=True)
class TableCell:
    children: Tuple["Block", ...]
    fill: Optional[str] = None
    borders: Tuple[CellBorder, ...] = ()
    # (top, bottom, left, right) in dxa
    margins: Optional[Tuple[int, int, int, int]] = None


@dataclass(frozen=True)
class TableRow:
    cells: Tuple[TableCell, ...]


@dataclass(frozen=True)
class Table:
    rows: Tuple[TableRow, ...]
    full_width: bool = True


@dataclass(frozen=True)
class PageBreak:
    pass


@dataclass(frozen=True)
class TableOfContents:
    title: str = "Table of Contents"
    levels: str = "1-3"
    hyperlinks: bool = True


Block = Union[Heading, Paragraph, Image, Table, PageBreak, TableOfContents]


@dataclass(frozen=True)
class JournalDocument:
    title: str
    body: Tuple[Block, ...]
    footer: Paragraph
    author: str = ""
    header: Optional[Paragraph] = None


def iter_blocks(blocks: Tuple[Block, ...]):
    """Walk blocks depth-first, descending into table cells."""
    for b in blocks:
        yield b
        if isinstance(b, Table):
            for row in b.rows:
                for cell in row.cells:
                    yield from iter_blocks(cell.children)
