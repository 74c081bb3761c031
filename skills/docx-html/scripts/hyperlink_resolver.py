#!/usr/bin/env python3
"""
ABOUTME: Resolves hyperlink relationship ids to target URLs
ABOUTME: Streams the document relationships part once and caches Id -> Target
"""

import io
from typing import Dict, Optional

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET

from xml_utils import REL_NS

RELATIONSHIP_TAG = f'{{{REL_NS}}}Relationship'


class HyperlinkResolver:
    """
    Maps relationship ids (r:id on w:hyperlink) to their Target attribute.

    The relationships part is scanned once, on the first lookup. When the same
    Id appears more than once the first occurrence wins. A missing or unreadable
    relationships part resolves every id to None.
    """

    def __init__(self, rels_xml: Optional[str] = None):
        self._rels_xml = rels_xml
        self._targets: Optional[Dict[str, str]] = None

    def _load_relationships(self) -> Dict[str, str]:
        targets: Dict[str, str] = {}
        if not self._rels_xml:
            return targets

        source = io.BytesIO(self._rels_xml.encode('utf-8'))
        try:
            for _event, elem in ET.iterparse(source, events=('end',)):
                if elem.tag != RELATIONSHIP_TAG:
                    continue
                rel_id = elem.get('Id')
                target = elem.get('Target')
                if rel_id and target is not None and rel_id not in targets:
                    targets[rel_id] = target
                elem.clear()
        except (ET.ParseError, DefusedXmlException):
            # Keep whatever was read before the part became unreadable
            pass
        return targets

    def resolve_target(self, rel_id: Optional[str]) -> Optional[str]:
        """
        Return the Target URL of a relationship id.

        Args:
            rel_id: Relationship id such as "rId7"

        Returns:
            Target string, or None when the id (or the relationships part) is absent
        """
        if not rel_id:
            return None
        if self._targets is None:
            self._targets = self._load_relationships()
        return self._targets.get(rel_id)
