#!/usr/bin/env python3
"""
ABOUTME: Resolves list kinds from DOCX numbering definitions
ABOUTME: Parses numbering.xml and maps (numId, ilvl) to bullet/decimal/unstyled lists
"""

from enum import Enum
from typing import Dict, Optional, Tuple

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET

NSMAP = {
    'w': 'http://schemas.openxmlformats.org/wordprocessingml/2006/main'
}


class ListKind(Enum):
    """Rendering of a list, with its HTML wrapping tags."""

    BULLET = 'bullet'
    DECIMAL = 'decimal'
    UNSTYLED = 'unstyled'

    @property
    def tags(self) -> Tuple[str, str]:
        return LIST_TAGS[self]


LIST_TAGS = {
    ListKind.BULLET: ('<ul>', '</ul>'),
    ListKind.DECIMAL: ('<ol>', '</ol>'),
    ListKind.UNSTYLED: ('<ul class="list-unstyled">', '</ul>'),
}


class NumberingResolver:
    """
    Resolves a paragraph's list reference to a list kind.

    DOCX stores numbering definitions in numbering.xml:
    - abstractNum: Defines per-level formats (numFmt like "bullet", "decimal")
    - num: Links numId to abstractNumId

    Each list paragraph references: numId (which definition) + ilvl (which level)

    Only numFmt "bullet" and "decimal" are distinguished; every other format and
    every broken link in the chain resolves to ListKind.UNSTYLED.
    """

    FORMAT_KINDS = {
        'bullet': ListKind.BULLET,
        'decimal': ListKind.DECIMAL,
    }

    def __init__(self, numbering_xml: Optional[str] = None):
        self.abstract_nums: Dict[str, Dict[str, str]] = {}  # abstractNumId -> {ilvl -> numFmt}
        self.num_to_abstract: Dict[str, str] = {}  # numId -> abstractNumId
        self._parse_numbering_xml(numbering_xml)

    def _parse_numbering_xml(self, numbering_xml: Optional[str]):
        """Parse numbering.xml markup; the first definition of a repeated id wins"""
        if not numbering_xml:
            return
        try:
            root = ET.fromstring(numbering_xml)
        except (ET.ParseError, DefusedXmlException):
            # Unreadable numbering part behaves like a missing one
            return

        # Parse abstractNum definitions
        for abstract in root.findall('w:abstractNum', NSMAP):
            abstract_id = abstract.get(f'{{{NSMAP["w"]}}}abstractNumId')
            if abstract_id is None or abstract_id in self.abstract_nums:
                continue
            levels = {}

            for lvl in abstract.findall('w:lvl', NSMAP):
                ilvl = lvl.get(f'{{{NSMAP["w"]}}}ilvl')
                if ilvl is None or ilvl in levels:
                    continue

                num_fmt_elem = lvl.find('w:numFmt', NSMAP)
                if num_fmt_elem is not None:
                    levels[ilvl] = num_fmt_elem.get(f'{{{NSMAP["w"]}}}val')

            self.abstract_nums[abstract_id] = levels

        # Parse num -> abstractNum mapping
        for num in root.findall('w:num', NSMAP):
            num_id = num.get(f'{{{NSMAP["w"]}}}numId')
            if num_id is None or num_id in self.num_to_abstract:
                continue
            abstract_ref = num.find('w:abstractNumId', NSMAP)
            if abstract_ref is not None:
                self.num_to_abstract[num_id] = abstract_ref.get(f'{{{NSMAP["w"]}}}val')

    def get_num_format(self, num_id, ilvl) -> Optional[str]:
        """
        Get the declared numFmt for a list reference.

        Args:
            num_id: numId value (str or int)
            ilvl: indentation level (str or int)

        Returns:
            numFmt string, or None when any link in numId -> abstractNum -> lvl is missing
        """
        if num_id is None:
            return None
        abstract_id = self.num_to_abstract.get(str(num_id))
        if abstract_id is None:
            return None
        levels = self.abstract_nums.get(abstract_id)
        if levels is None:
            return None
        return levels.get(str(ilvl if ilvl is not None else 0))

    def resolve_list_kind(self, num_id, ilvl) -> ListKind:
        """Map (numId, ilvl) to a ListKind; missing links fall back to UNSTYLED."""
        return self.FORMAT_KINDS.get(self.get_num_format(num_id, ilvl), ListKind.UNSTYLED)

    def get_list_tags(self, num_id, ilvl) -> Tuple[str, str]:
        """Return the (open, close) HTML tags of the list a paragraph belongs to."""
        return self.resolve_list_kind(num_id, ilvl).tags
