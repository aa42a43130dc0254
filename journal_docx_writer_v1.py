#!/usr/bin/env python3
"""
journal_docx_writer_v1.py

Render a JournalDocument node tree with python-docx and write it to disk.

Node mapping:
- Heading          -> "Heading N" paragraph style
- Paragraph        -> Normal paragraph with formatted runs / hyperlinks / fields
- Image            -> inline picture in a centered paragraph
- Table            -> "Table Grid" table, 100% width, per-cell shading/borders/margins
- PageBreak        -> paragraph holding a page break
- TableOfContents  -> title line + TOC field (Word fills it on open)
- footer / header  -> first section footer / header

Word features python-docx has no API for (shading, borders, cell margins,
hyperlinks, PAGE / NUMPAGES / TOC fields, updateFields) are written as raw
OOXML via OxmlElement.
"""

from __future__ import annotations

import io
import logging
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Optional

from docx import Document
from docx.document import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_BREAK, WD_COLOR_INDEX
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor
from docx.text.run import Run

from journal_config_v1 import LOG_NAME, JournalStyles
from journal_nodes_v1 import (
    Block,
    Heading,
    Hyperlink,
    Image,
    JournalDocument,
    PageBreak,
    PageField,
    Paragraph,
    Table,
    TableCell,
    TableOfContents,
    TextRun,
)

logger = logging.getLogger(LOG_NAME)

# characters XML 1.0 cannot carry; lxml rejects them outright
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def xml_text(text: str) -> str:
    """Drop control characters that cannot appear in a WordprocessingML part."""
    return _XML_ILLEGAL.sub("", text)


ALIGNMENTS = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
}

# OOXML child order inside w:tcBorders / w:tcMar
_SIDE_ORDER = {"top": 0, "left": 1, "bottom": 2, "right": 3}

PX_PER_INCH = 96

TOC_PLACEHOLDER = "Right-click and choose Update Field to build the table of contents."


# ── Styles ────────────────────────────────────────────────────────────────────


def _set_style_font(style, name: str) -> None:
    style.font.name = name
    # Theme font attributes win over w:ascii, so drop them.
    rfonts = style.element.rPr.find(qn("w:rFonts"))
    if rfonts is not None:
        for attr in ("w:asciiTheme", "w:hAnsiTheme", "w:eastAsiaTheme", "w:cstheme"):
            rfonts.attrib.pop(qn(attr), None)


def apply_styles(doc: DocxDocument, styles: JournalStyles) -> None:
    normal = doc.styles["Normal"]
    _set_style_font(normal, styles.font)
    normal.font.size = Pt(styles.body_size_pt)

    for name, size, color in (
        ("Heading 1", styles.heading1_size_pt, styles.heading1_color),
        ("Heading 2", styles.heading2_size_pt, styles.heading2_color),
    ):
        st = doc.styles[name]
        _set_style_font(st, styles.font)
        st.font.size = Pt(size)
        st.font.bold = True
        st.font.color.rgb = RGBColor.from_string(color)


def _enable_update_fields(doc: DocxDocument) -> None:
    """Ask Word to refresh the TOC and page fields when the file is opened."""
    settings = doc.settings.element
    el = settings.find(qn("w:updateFields"))
    if el is None:
        el = OxmlElement("w:updateFields")
        settings.append(el)
    el.set(qn("w:val"), "true")


# ── Runs, fields, hyperlinks ──────────────────────────────────────────────────


def _format_run(run: Run, node: TextRun) -> None:
    if node.bold:
        run.bold = True
    if node.italic:
        run.italic = True
    if node.underline:
        run.underline = True
    if node.color:
        run.font.color.rgb = RGBColor.from_string(node.color)
    if node.size_pt:
        run.font.size = Pt(node.size_pt)
    if node.highlight:
        run.font.highlight_color = WD_COLOR_INDEX.YELLOW


def _add_field(
    paragraph,
    instr: str,
    placeholder: str = "",
    bold: bool = False,
    size_pt: Optional[float] = None,
) -> None:
    """Append a complex field: begin / instrText / separate / cached result / end."""

    def styled_run():
        run = paragraph.add_run()
        if bold:
            run.bold = True
        if size_pt:
            run.font.size = Pt(size_pt)
        return run

    begin = OxmlElement("w:fldChar")
    begin.set(qn("w:fldCharType"), "begin")
    styled_run()._r.append(begin)

    instr_el = OxmlElement("w:instrText")
    instr_el.set(qn("xml:space"), "preserve")
    instr_el.text = f" {instr} "
    styled_run()._r.append(instr_el)

    sep = OxmlElement("w:fldChar")
    sep.set(qn("w:fldCharType"), "separate")
    styled_run()._r.append(sep)

    styled_run().text = placeholder

    end = OxmlElement("w:fldChar")
    end.set(qn("w:fldCharType"), "end")
    styled_run()._r.append(end)


def _add_hyperlink(paragraph, link: Hyperlink) -> None:
    r_id = paragraph.part.relate_to(link.url, RT.HYPERLINK, is_external=True)
    h = OxmlElement("w:hyperlink")
    h.set(qn("r:id"), r_id)
    for node in link.runs:
        r = OxmlElement("w:r")
        h.append(r)
        run = Run(r, paragraph)
        _format_run(run, node)
        run.text = xml_text(node.text)
    paragraph._p.append(h)


def _fill_paragraph(p, node: Paragraph) -> None:
    p.alignment = ALIGNMENTS.get(node.align, WD_ALIGN_PARAGRAPH.LEFT)
    pf = p.paragraph_format
    if node.space_before_pt is not None:
        pf.space_before = Pt(node.space_before_pt)
    if node.space_after_pt is not None:
        pf.space_after = Pt(node.space_after_pt)
    if node.indent_left_pt is not None:
        pf.left_indent = Pt(node.indent_left_pt)

    for child in node.children:
        if isinstance(child, TextRun):
            _format_run(p.add_run(xml_text(child.text)), child)
        elif isinstance(child, PageField):
            _add_field(p, child.kind, placeholder="1", bold=child.bold, size_pt=child.size_pt)
        elif isinstance(child, Hyperlink):
            _add_hyperlink(p, child)
        else:
            raise TypeError(f"Unsupported inline node: {type(child).__name__}")


# ── Tables ────────────────────────────────────────────────────────────────────


def _set_full_width(table) -> None:
    tblPr = table._tbl.tblPr
    tblW = tblPr.find(qn("w:tblW"))
    if tblW is None:
        tblW = OxmlElement("w:tblW")
        tblPr.append(tblW)
    tblW.set(qn("w:type"), "pct")
    tblW.set(qn("w:w"), "5000")


def _style_cell(cell, node: TableCell) -> None:
    tcPr = cell._tc.get_or_add_tcPr()

    if node.borders:
        borders = OxmlElement("w:tcBorders")
        for b in sorted(node.borders, key=lambda x: _SIDE_ORDER.get(x.side, 9)):
            el = OxmlElement(f"w:{b.side}")
            el.set(qn("w:val"), b.style)
            if b.style != "nil":
                el.set(qn("w:sz"), str(b.size))
                el.set(qn("w:space"), "0")
                el.set(qn("w:color"), b.color)
            borders.append(el)
        tcPr.append(borders)

    if node.fill:
        shd = OxmlElement("w:shd")
        shd.set(qn("w:val"), "clear")
        shd.set(qn("w:color"), "auto")
        shd.set(qn("w:fill"), node.fill)
        tcPr.append(shd)

    if node.margins:
        top, bottom, left, right = node.margins
        mar = OxmlElement("w:tcMar")
        for side, value in (("top", top), ("left", left), ("bottom", bottom), ("right", right)):
            el = OxmlElement(f"w:{side}")
            el.set(qn("w:w"), str(value))
            el.set(qn("w:type"), "dxa")
            mar.append(el)
        tcPr.append(mar)


def _fill_cell(cell, node: TableCell, styles: JournalStyles) -> None:
    _style_cell(cell, node)
    initial = cell.paragraphs[0]
    for child in node.children:
        _render_block(cell, child, styles, in_cell=True)
    # A new cell starts with one empty paragraph; drop it once content exists.
    if node.children:
        initial._p.getparent().remove(initial._p)


def _render_table(doc: DocxDocument, node: Table, styles: JournalStyles) -> None:
    ncols = max((len(r.cells) for r in node.rows), default=1)
    table = doc.add_table(rows=0, cols=ncols)
    table.style = "Table Grid"
    if node.full_width:
        _set_full_width(table)

    for row_node in node.rows:
        cells = table.add_row().cells
        for cell, cell_node in zip(cells, row_node.cells):
            _fill_cell(cell, cell_node, styles)


# ── Blocks ────────────────────────────────────────────────────────────────────


def _render_block(container, block: Block, styles: JournalStyles, in_cell: bool = False) -> None:
    if isinstance(block, Heading):
        level = min(max(block.level, 1), 9)
        p = container.add_paragraph(xml_text(block.text), style=f"Heading {level}")
        p.alignment = ALIGNMENTS.get(block.align, WD_ALIGN_PARAGRAPH.LEFT)

    elif isinstance(block, Paragraph):
        _fill_paragraph(container.add_paragraph(), block)

    elif isinstance(block, Image):
        p = container.add_paragraph()
        p.alignment = ALIGNMENTS.get(block.align, WD_ALIGN_PARAGRAPH.CENTER)
        if block.space_before_pt is not None:
            p.paragraph_format.space_before = Pt(block.space_before_pt)
        p.add_run().add_picture(
            io.BytesIO(block.data),
            width=Inches(block.width_px / PX_PER_INCH),
            height=Inches(block.height_px / PX_PER_INCH),
        )

    elif isinstance(block, PageBreak):
        container.add_paragraph().add_run().add_break(WD_BREAK.PAGE)

    elif isinstance(block, Table):
        if in_cell:
            raise TypeError("Nested tables are not supported")
        _render_table(container, block, styles)

    elif isinstance(block, TableOfContents):
        if in_cell:
            raise TypeError("A table of contents cannot be placed in a table cell")
        title = container.add_paragraph()
        title_run = title.add_run(xml_text(block.title))
        title_run.bold = True
        title_run.font.size = Pt(14)
        switches = f'TOC \\o "{block.levels}"' + (" \\h" if block.hyperlinks else "") + " \\z \\u"
        _add_field(container.add_paragraph(), switches, placeholder=TOC_PLACEHOLDER)

    else:
        raise TypeError(f"Unsupported block node: {type(block).__name__}")


def render_docx(document: JournalDocument, styles: JournalStyles) -> DocxDocument:
    doc = Document()
    apply_styles(doc, styles)
    _enable_update_fields(doc)

    doc.core_properties.title = xml_text(document.title)
    if document.author:
        doc.core_properties.author = xml_text(document.author)

    section = doc.sections[0]
    _fill_paragraph(section.footer.paragraphs[0], document.footer)
    if document.header is not None:
        _fill_paragraph(section.header.paragraphs[0], document.header)

    for block in document.body:
        _render_block(doc, block, styles)
    return doc


def serialize_docx(document: JournalDocument, styles: JournalStyles) -> bytes:
    buf = io.BytesIO()
    render_docx(document, styles).save(buf)
    return buf.getvalue()


def _output_mode(out_path: Path) -> int:
    if out_path.exists():
        return stat.S_IMODE(out_path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_docx(document: JournalDocument, out_path: Path, styles: JournalStyles) -> Path:
    """
    Serialize, write to a temporary file beside out_path, then rename into place.
    On failure the temporary file is removed and the error propagates.
    """
    data = serialize_docx(document, styles)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{out_path.name}.", suffix=".tmp", dir=str(out_path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # mkstemp creates 0600; give the result the mode a plain open() would
        os.chmod(tmp_path, _output_mode(out_path))
        os.replace(tmp_path, out_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    logger.info("WROTE: %s (%d bytes)", out_path, len(data))
    return out_path
