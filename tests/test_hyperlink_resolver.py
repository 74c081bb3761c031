#!/usr/bin/env python3
"""
ABOUTME: Tests for HyperlinkResolver relationship lookup
"""

from _docx_html_helpers import rels_xml

from hyperlink_resolver import HyperlinkResolver  # type: ignore


class TestResolveTarget:

    def test_known_id(self):
        resolver = HyperlinkResolver(rels_xml(('rId7', 'https://example.com')))
        assert resolver.resolve_target('rId7') == 'https://example.com'

    def test_unknown_id(self):
        resolver = HyperlinkResolver(rels_xml(('rId7', 'https://example.com')))
        assert resolver.resolve_target('rId8') is None

    def test_empty_id(self):
        resolver = HyperlinkResolver(rels_xml(('rId7', 'https://example.com')))
        assert resolver.resolve_target(None) is None
        assert resolver.resolve_target('') is None

    def test_unordered_part(self):
        resolver = HyperlinkResolver(rels_xml(
            ('rId9', 'https://nine.example'),
            ('rId1', 'https://one.example'),
            ('rId5', 'https://five.example'),
        ))
        assert resolver.resolve_target('rId1') == 'https://one.example'
        assert resolver.resolve_target('rId5') == 'https://five.example'

    def test_duplicate_id_first_occurrence_wins(self):
        resolver = HyperlinkResolver(rels_xml(
            ('rId3', 'https://first.example'),
            ('rId3', 'https://second.example'),
        ))
        assert resolver.resolve_target('rId3') == 'https://first.example'

    def test_escaped_target_is_decoded(self):
        resolver = HyperlinkResolver(rels_xml(('rId2', 'https://example.com/?a=1&amp;b=2')))
        assert resolver.resolve_target('rId2') == 'https://example.com/?a=1&b=2'


class TestMissingRelationships:
    """Absent or unreadable relationships resolve every id to None."""

    def test_missing_part(self):
        assert HyperlinkResolver(None).resolve_target('rId1') is None

    def test_malformed_part(self):
        assert HyperlinkResolver('<Relationships><Relationship Id="rId1"').resolve_target('rId1') is None

    def test_relationships_read_before_damage_are_kept(self):
        markup = rels_xml(('rId1', 'https://ok.example')).replace('</Relationships>', '<Broken')
        assert HyperlinkResolver(markup).resolve_target('rId1') == 'https://ok.example'
