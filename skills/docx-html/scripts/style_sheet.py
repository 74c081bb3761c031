#!/usr/bin/env python3
"""
ABOUTME: Extracts named style definitions from styles.xml
ABOUTME: Each styleId becomes a reusable (HTML tags, CSS attributes) pair
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET

from xml_utils import NS, attr, format_number, is_toggle_on, local_name

NSMAP = {'w': NS['w']}

# styles.xml rPr child -> HTML tag
STYLE_TAGS = {
    'b': 'strong',
    'i': 'em',
    'u': 'u',
}


@dataclass(frozen=True)
class StyleDefinition:
    """Resolved formatting of one named style."""

    style_id: str
    tags: Tuple[str, ...] = ()
    css_attributes: Tuple[str, ...] = ()


class StyleSheet:
    """
    Resolved mapping styleId -> StyleDefinition, built once per document.

    Only direct run properties of a style are modelled:
    - w:b -> <strong>, w:i -> <em>, w:u -> <u> (underline style is not checked here)
    - w:color -> "color:#VAL"
    - w:sz (half-points) -> "font-size:(VAL/2)pt"

    basedOn inheritance and paragraph properties of styles are not followed.
    """

    def __init__(self, definitions: Optional[Dict[str, StyleDefinition]] = None):
        self._definitions: Dict[str, StyleDefinition] = dict(definitions or {})

    @classmethod
    def from_xml(cls, styles_xml: Optional[str]) -> 'StyleSheet':
        """
        Build a StyleSheet from raw styles.xml markup.

        A missing or unparseable styles part yields an empty StyleSheet.
        """
        if not styles_xml:
            return cls()
        try:
            root = ET.fromstring(styles_xml)
        except (ET.ParseError, DefusedXmlException):
            return cls()

        definitions = {}
        for style in root.findall('w:style', NSMAP):
            style_id = attr(style, 'w:styleId')
            if not style_id:
                continue
            tags, css = parse_run_properties(style.find('w:rPr', NSMAP))
            definitions[style_id] = StyleDefinition(
                style_id=style_id,
                tags=tuple(tags),
                css_attributes=tuple(css),
            )
        return cls(definitions)

    def get(self, style_id: Optional[str]) -> Optional[StyleDefinition]:
        if style_id is None:
            return None
        return self._definitions.get(style_id)

    def resolve(self, style_id: Optional[str]) -> Tuple[list, list]:
        """Return fresh (tags, css_attributes) lists for a styleId; empty lists when unknown."""
        definition = self.get(style_id)
        if definition is None:
            return [], []
        return list(definition.tags), list(definition.css_attributes)

    def __contains__(self, style_id) -> bool:
        return style_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


def parse_run_properties(rPr) -> Tuple[list, list]:
    """
    Map the children of a style's w:rPr to HTML tags and CSS attributes.

    Children are processed in document order; unrecognized properties are ignored.
    """
    tags = []
    css = []
    if rPr is None:
        return tags, css

    for prop in rPr:
        name = local_name(prop)
        if name in STYLE_TAGS:
            if name == 'u' or is_toggle_on(prop):
                tags.append(STYLE_TAGS[name])
        elif name == 'color':
            value = attr(prop)
            if value:
                css.append(f'color:#{value}')
        elif name == 'sz':
            size = half_points_to_pt(attr(prop))
            if size is not None:
                css.append(f'font-size:{size}pt')
    return tags, css


def half_points_to_pt(value: Optional[str]) -> Optional[str]:
    """'24' -> '12', '23' -> '11.5'; None for missing or non-numeric values."""
    if value is None:
        return None
    try:
        return format_number(float(value) / 2)
    except (ValueError, OverflowError):
        return None
