#!/usr/bin/env python3
"""
ABOUTME: Renders text runs and hyperlinks of a paragraph as inline HTML
ABOUTME: Merges paragraph-style formatting with run properties into <span> + nested tags
"""

import sys
from html import escape
from typing import List, Optional, Tuple

from hyperlink_resolver import HyperlinkResolver
from style_sheet import half_points_to_pt
from xml_utils import attr, is_toggle_on, local_name, qn

# rStyle / underline values that are rendered (anything else is ignored)
ALLOWED_FORMATS = ('Strong', 'single')


def extract_run_text(run_elem) -> str:
    """
    Extract escaped HTML text from a run element.

    - w:t: text content (all of them, in order)
    - w:tab: tab character
    - w:br: <br /> for soft line breaks; page and column breaks are skipped

    Args:
        run_elem: lxml run element (w:r)

    Returns:
        HTML-escaped text, possibly empty
    """
    text = ''
    for child in run_elem:
        tag = local_name(child)
        if tag == 't' and child.text:
            text += escape(child.text, quote=False)
        elif tag == 'tab':
            text += '\t'
        elif tag == 'br':
            br_type = child.get(qn('w:type'))
            if br_type in (None, 'textWrapping'):
                text += '<br />'
    return text


def wrap_text(text: str, tags: List[str], attrs: List[str]) -> str:
    """
    Wrap text in <span style="..."> and the collected tags.

    Tags open in collection order and close in reverse, so <strong><em>x</em></strong>.
    """
    open_tags = ''.join(f'<{tag}>' for tag in tags)
    close_tags = ''.join(f'</{tag}>' for tag in reversed(tags))
    span = '<span style="' + escape(';'.join(attrs)) + '">'
    return span + open_tags + text + close_tags + '</span>'


class RunFormatter:
    """
    Produces one inline HTML fragment per run-level element of a paragraph.

    Formatting context for each run is seeded from the paragraph's resolved
    style (tags, attrs) and augmented by the run's own properties:
    - w:b -> strong, w:i -> em
    - w:u -> u, only when w:val is in ALLOWED_FORMATS
    - w:rStyle -> strong, only when w:val is in ALLOWED_FORMATS
    - w:color -> "color:#VAL"
    - w:sz -> "font-size:(VAL/2)pt"
    - a w:pPr/w:numPr inside the run adds an extra "li" tag
    """

    def __init__(self, hyperlink_resolver: Optional[HyperlinkResolver] = None, debug: bool = False):
        self.hyperlink_resolver = hyperlink_resolver or HyperlinkResolver()
        self.debug = debug

    def run_context(self, run_elem, inherited_tags, inherited_attrs) -> Tuple[List[str], List[str]]:
        """
        Build the (tags, attrs) context of a run.

        Args:
            run_elem: lxml run element (w:r)
            inherited_tags: Tags resolved from the paragraph style
            inherited_attrs: CSS attributes resolved from the paragraph style

        Returns:
            New (tags, attrs) lists; the inherited lists are not modified
        """
        tags = list(inherited_tags)
        attrs = list(inherited_attrs)

        pPr = run_elem.find(qn('w:pPr'))
        if pPr is not None and pPr.find(qn('w:numPr')) is not None:
            tags.append('li')

        for rPr in run_elem.findall(qn('w:rPr')):
            for prop in rPr:
                name = local_name(prop)
                value = attr(prop)
                if name == 'rStyle':
                    if value in ALLOWED_FORMATS:
                        tags.append('strong')
                elif name == 'b':
                    if is_toggle_on(prop):
                        tags.append('strong')
                elif name == 'i':
                    if is_toggle_on(prop):
                        tags.append('em')
                elif name == 'u':
                    if value in ALLOWED_FORMATS:
                        tags.append('u')
                elif name == 'color':
                    if value:
                        attrs.append(f'color:#{value}')
                elif name == 'sz':
                    size = half_points_to_pt(value)
                    if size is not None:
                        attrs.append(f'font-size:{size}pt')
        return tags, attrs

    def render_run(self, elem, inherited_tags=(), inherited_attrs=()) -> str:
        """
        Render a w:r or w:hyperlink element; other elements render as ''.

        A run whose text is empty after property parsing emits nothing.
        """
        kind = local_name(elem)
        if kind == 'r':
            tags, attrs = self.run_context(elem, inherited_tags, inherited_attrs)
            text = extract_run_text(elem)
        elif kind == 'hyperlink':
            tags, attrs = list(inherited_tags), list(inherited_attrs)
            text = self.render_hyperlink_text(elem)
        else:
            return ''

        if not text:
            return ''
        return wrap_text(text, tags, attrs)

    def render_hyperlink_text(self, hyperlink_elem) -> str:
        """
        Resolve a w:hyperlink to an anchor around its text.

        The anchor is only added when the r:id resolves; otherwise the bare text
        is returned.
        """
        text = ''.join(extract_run_text(r) for r in hyperlink_elem.iter(qn('w:r')))
        if not text:
            return ''

        rel_id = hyperlink_elem.get(qn('r:id'))
        target = self.hyperlink_resolver.resolve_target(rel_id)
        if target is None:
            if self.debug and rel_id:
                print(f"[DEBUG] Unresolved hyperlink relationship: {rel_id}", file=sys.stderr)
            return text
        return f'<a href="{escape(target, quote=True)}" target="_blank">{text}</a>'

    def render_paragraph_content(self, para_elem, tags=(), attrs=()) -> str:
        """Concatenate the rendering of every run-level child of a paragraph in document order."""
        return ''.join(self.render_run(child, tags, attrs) for child in para_elem)
