#!/usr/bin/env python3
"""
ABOUTME: Shared WordprocessingML helpers for the HTML converter
ABOUTME: Namespace constants, attribute access, number formatting, output sanitization
"""

from typing import Optional

from docx.oxml.ns import qn

NS = {
    'w': 'http://schemas.openxmlformats.org/wordprocessingml/2006/main',
    'r': 'http://schemas.openxmlformats.org/officeDocument/2006/relationships',
}

REL_NS = 'http://schemas.openxmlformats.org/package/2006/relationships'

# Values that switch a toggle property (w:b, w:i) off
FALSE_VALUES = ('0', 'false', 'off')

__all__ = [
    'NS', 'REL_NS', 'FALSE_VALUES', 'qn',
    'local_name', 'attr', 'is_toggle_on', 'format_number', 'sanitize_html_string',
]


def local_name(elem) -> str:
    """Return the tag of an element without its namespace."""
    tag = elem.tag
    if not isinstance(tag, str):
        # Comments and processing instructions
        return ''
    return tag.split('}')[-1]


def attr(elem, name: str = 'w:val') -> Optional[str]:
    """
    Read a namespaced attribute, tolerating a missing element.

    Args:
        elem: lxml/ElementTree element or None
        name: Prefixed attribute name (default 'w:val')

    Returns:
        Attribute value, or None when the element or attribute is absent
    """
    if elem is None:
        return None
    return elem.get(qn(name))


def format_number(value: float) -> str:
    """Render a number the way a template engine would: 12.0 -> '12', 11.5 -> '11.5'."""
    if value == int(value):
        return str(int(value))
    return repr(value)


def sanitize_html_string(text: str) -> str:
    """
    Remove characters that cannot appear in well-formed UTF-8 HTML output.

    Drops:
    - Lone surrogates (not encodable as UTF-8)
    - Control characters illegal in XML 1.0 (0x00-0x08, 0x0B, 0x0C, 0x0E-0x1F)

    Tab, LF and CR are kept.

    Args:
        text: Rendered HTML

    Returns:
        Sanitized HTML. Returns input unchanged if not a non-empty string.
    """
    if not text or not isinstance(text, str):
        return text
    text = text.encode('utf-8', 'ignore').decode('utf-8')
    illegal_chars = ''.join(
        chr(c) for c in range(0x20)
        if c not in (0x09, 0x0A, 0x0D)
    )
    return text.translate(str.maketrans('', '', illegal_chars))


def is_toggle_on(prop) -> bool:
    """w:b / w:i are on unless w:val explicitly switches them off."""
    value = attr(prop)
    return value is None or value.lower() not in FALSE_VALUES
