#!/usr/bin/env python3
"""
ABOUTME: Walks the body of word/document.xml and renders it as HTML
ABOUTME: Paragraphs become <p>/<li>, tables become <table>; owns the list open/close state machine
"""

import math
import sys
from dataclasses import dataclass
from html import escape
from typing import Optional, Tuple, Union

from lxml import etree

from hyperlink_resolver import HyperlinkResolver
from numbering_resolver import NumberingResolver
from run_formatter import RunFormatter
from style_sheet import StyleSheet
from xml_utils import attr, format_number, local_name, qn

# Case-sensitive substring that marks a paragraph style as a heading
HEADING_MARKER = 'Heading'


# ============================================================
# List state machine
# ============================================================

@dataclass(frozen=True)
class NoList:
    """No list is open."""


@dataclass(frozen=True)
class InList:
    """A list is open; close_tag must be emitted before the next non-list block."""

    open_tag: str
    close_tag: str


ListState = Union[NoList, InList]

NO_LIST = NoList()


def open_list(state: ListState, list_tags: Tuple[str, str]) -> Tuple[ListState, str]:
    """
    Enter a list.

    Returns:
        (new_state, html) - html is the opening tag, or '' if a list is already open
    """
    if isinstance(state, InList):
        return state, ''
    open_tag, close_tag = list_tags
    return InList(open_tag, close_tag), open_tag


def close_list(state: ListState) -> Tuple[ListState, str]:
    """
    Leave the current list.

    Returns:
        (NO_LIST, html) - html is the stored closing tag, or '' if no list was open
    """
    if isinstance(state, InList):
        return NO_LIST, state.close_tag
    return state, ''


# ============================================================
# Paragraph properties
# ============================================================

def _spacing_px(value: Optional[str]) -> Optional[float]:
    """Spacing is stored in twentieths of a point; rendered as value / 10 px."""
    if value is None:
        return None
    try:
        px = float(value) / 10
    except ValueError:
        return None
    return px if math.isfinite(px) else None


@dataclass
class ParagraphContext:
    """Properties of one w:p, rebuilt for every paragraph."""

    style_id: Optional[str] = None
    is_heading: bool = False
    spacing_before_px: Optional[float] = None
    spacing_after_px: Optional[float] = None
    alignment: Optional[str] = None
    list_ref: Optional[Tuple[Optional[str], Optional[str]]] = None  # (numId, ilvl)

    @classmethod
    def from_paragraph(cls, para_elem) -> 'ParagraphContext':
        """Read w:pPr of a paragraph; missing elements leave the property unset."""
        ctx = cls()
        pPr = para_elem.find(qn('w:pPr'))
        if pPr is None:
            return ctx

        ctx.style_id = attr(pPr.find(qn('w:pStyle')))
        ctx.is_heading = bool(ctx.style_id) and HEADING_MARKER in ctx.style_id

        spacing = pPr.find(qn('w:spacing'))
        if spacing is not None:
            ctx.spacing_before_px = _spacing_px(attr(spacing, 'w:before'))
            ctx.spacing_after_px = _spacing_px(attr(spacing, 'w:after'))

        ctx.alignment = attr(pPr.find(qn('w:jc')))

        numPr = pPr.find(qn('w:numPr'))
        if numPr is not None:
            ctx.list_ref = (
                attr(numPr.find(qn('w:numId'))),
                attr(numPr.find(qn('w:ilvl'))),
            )
        return ctx

    @property
    def is_list_item(self) -> bool:
        """Headings are never list items, even with w:numPr."""
        return self.list_ref is not None and not self.is_heading

    def style_attribute(self) -> str:
        """CSS for the <p> tag: alignment, then top/bottom padding; '' when none apply."""
        style = ''
        if self.alignment:
            style += f'text-align:{self.alignment};'
        if self.spacing_before_px is not None:
            style += f'padding-top:{format_number(self.spacing_before_px)}px;'
        if self.spacing_after_px is not None:
            style += f'padding-bottom:{format_number(self.spacing_after_px)}px;'
        return style


# ============================================================
# Body walker
# ============================================================

def parse_document_xml(document_xml):
    """
    Parse word/document.xml markup (str or bytes) with lxml.

    Raises:
        etree.XMLSyntaxError: If the markup is not well-formed
    """
    if isinstance(document_xml, str):
        document_xml = document_xml.encode('utf-8')
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    return etree.fromstring(document_xml, parser)


class BodyRenderer:
    """
    Renders the w:body of a document as an HTML fragment.

    - Top-level paragraphs: <p> (with alignment/spacing style) or <li> inside
      <ul>/<ol>/<ul class="list-unstyled"> for list paragraphs
    - Tables: <table class="table" border="1">, one <tr> per row, one <td> per
      cell (colspan from w:gridSpan)
    - Consecutive list paragraphs share one list; a non-list paragraph, a table
      or the end of the body closes it

    The list state lives only for the duration of one render() call, so an
    instance can be reused across documents.
    """

    def __init__(
        self,
        style_sheet: Optional[StyleSheet] = None,
        numbering_resolver: Optional[NumberingResolver] = None,
        hyperlink_resolver: Optional[HyperlinkResolver] = None,
        debug: bool = False,
    ):
        self.style_sheet = style_sheet or StyleSheet()
        self.numbering_resolver = numbering_resolver or NumberingResolver()
        self.run_formatter = RunFormatter(hyperlink_resolver, debug=debug)
        self.debug = debug

    def render(self, document_xml) -> str:
        """
        Render document.xml markup.

        Raises:
            etree.XMLSyntaxError: If the markup is not well-formed
        """
        root = parse_document_xml(document_xml)
        if local_name(root) == 'body':
            return self.render_body(root)

        html = ''
        for body in root.findall(qn('w:body')):
            html += self.render_body(body)
        return html

    def render_body(self, body_elem) -> str:
        """Render every block element of a w:body in document order."""
        state: ListState = NO_LIST
        html = ''
        for elem in body_elem:
            state, fragment = self.render_block(elem, state)
            html += fragment

        # Document may end inside a list
        state, closing = close_list(state)
        if closing and self.debug:
            print(f"[DEBUG] Closed list at end of body: {closing}", file=sys.stderr)
        return html + closing

    def render_block(self, elem, state: ListState) -> Tuple[ListState, str]:
        """Dispatch a body child; returns (new_state, html)."""
        kind = local_name(elem)
        if kind == 'p':
            return self.render_paragraph(elem, state)
        if kind == 'tbl':
            state, closing = close_list(state)
            return state, closing + self.render_table(elem)
        return state, ''

    def render_paragraph(self, para_elem, state: ListState) -> Tuple[ListState, str]:
        """
        Render a top-level paragraph.

        List paragraphs open a list when none is open and become <li>; every
        other paragraph closes an open list before emitting <p>.
        """
        ctx = ParagraphContext.from_paragraph(para_elem)
        tags, attrs = self.style_sheet.resolve(ctx.style_id)
        content = self.run_formatter.render_paragraph_content(para_elem, tags, attrs)

        if ctx.is_list_item:
            opening = ''
            if isinstance(state, NoList):
                num_id, ilvl = ctx.list_ref
                list_tags = self.numbering_resolver.get_list_tags(num_id, ilvl)
                state, opening = open_list(state, list_tags)
                if self.debug:
                    print(f"[DEBUG] Opened list {opening} (numId={num_id}, ilvl={ilvl})", file=sys.stderr)
            return state, opening + '<li>' + content + '</li>'

        state, closing = close_list(state)
        style = ctx.style_attribute()
        if style:
            p_open = f'<p style="{escape(style)}">'
        else:
            p_open = '<p>'
        return state, closing + p_open + content + '</p>'

    def render_table(self, tbl_elem) -> str:
        """Render a w:tbl; cell content never touches the top-level list state."""
        html = '<table class="table" border="1">'
        for tr in tbl_elem.findall(qn('w:tr')):
            html += '<tr>'
            for tc in tr.findall(qn('w:tc')):
                html += self.render_cell(tc)
            html += '</tr>'
        return html + '</table>'

    def render_cell(self, tc_elem) -> str:
        grid_span = attr(tc_elem.find(f"{qn('w:tcPr')}/{qn('w:gridSpan')}"))
        if grid_span:
            html = f'<td colspan="{escape(grid_span)}">'
        else:
            html = '<td>'

        for child in tc_elem:
            kind = local_name(child)
            if kind == 'p':
                html += self.render_cell_paragraph(child)
            elif kind == 'tbl':
                html += self.render_table(child)
        return html + '</td>'

    def render_cell_paragraph(self, para_elem) -> str:
        """
        Render a paragraph inside a table cell.

        Self-contained: a list paragraph becomes <li><p>...</p></li> without any
        enclosing list, and any alignment renders as centered.
        """
        ctx = ParagraphContext.from_paragraph(para_elem)
        tags, attrs = self.style_sheet.resolve(ctx.style_id)
        content = self.run_formatter.render_paragraph_content(para_elem, tags, attrs)

        if ctx.alignment:
            html = '<p style="text-align:center">' + content + '</p>'
        else:
            html = '<p>' + content + '</p>'

        if ctx.is_list_item:
            html = '<li>' + html + '</li>'
        return html
