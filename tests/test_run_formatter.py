#!/usr/bin/env python3
"""
ABOUTME: Tests for RunFormatter inline rendering
ABOUTME: Covers run properties, tag nesting order, empty-run suppression and hyperlinks
"""

from _docx_html_helpers import hyperlink_xml, parse_fragment, rels_xml, run_xml

from hyperlink_resolver import HyperlinkResolver  # type: ignore
from run_formatter import RunFormatter, extract_run_text, wrap_text  # type: ignore


def render(markup: str, tags=(), attrs=(), rels=None) -> str:
    formatter = RunFormatter(HyperlinkResolver(rels))
    return formatter.render_run(parse_fragment(markup), tags, attrs)


class TestRunProperties:
    """Run-level w:rPr children are added to the inherited context."""

    def test_plain_text(self):
        assert render(run_xml('Hello')) == '<span style="">Hello</span>'

    def test_bold_and_italic(self):
        assert render(run_xml('x', '<w:b/><w:i/>')) == '<span style=""><strong><em>x</em></strong></span>'

    def test_bold_switched_off(self):
        assert render(run_xml('x', '<w:b w:val="false"/>')) == '<span style="">x</span>'

    def test_underline_single(self):
        assert render(run_xml('x', '<w:u w:val="single"/>')) == '<span style=""><u>x</u></span>'

    def test_underline_other_style_ignored(self):
        """Only the allowed underline styles are rendered at run level."""
        assert render(run_xml('x', '<w:u w:val="double"/>')) == '<span style="">x</span>'
        assert render(run_xml('x', '<w:u/>')) == '<span style="">x</span>'

    def test_rstyle_strong(self):
        assert render(run_xml('x', '<w:rStyle w:val="Strong"/>')) == '<span style=""><strong>x</strong></span>'

    def test_rstyle_other_ignored(self):
        assert render(run_xml('x', '<w:rStyle w:val="Emphasis"/>')) == '<span style="">x</span>'

    def test_color(self):
        assert render(run_xml('x', '<w:color w:val="1F497D"/>')) == '<span style="color:#1F497D">x</span>'

    def test_font_size_halved(self):
        assert render(run_xml('x', '<w:sz w:val="24"/>')) == '<span style="font-size:12pt">x</span>'

    def test_multiple_attributes_joined(self):
        html = render(run_xml('x', '<w:color w:val="FF0000"/><w:sz w:val="30"/>'))
        assert html == '<span style="color:#FF0000;font-size:15pt">x</span>'

    def test_list_paragraph_properties_add_li(self):
        html = render(run_xml('x', extra='<w:pPr><w:numPr><w:numId w:val="1"/></w:numPr></w:pPr>'))
        assert html == '<span style=""><li>x</li></span>'


class TestInheritedContext:
    """Paragraph-style tags and attributes come first."""

    def test_paragraph_tags_before_run_tags(self):
        html = render(run_xml('x', '<w:b/>'), tags=['em'])
        assert html == '<span style=""><em><strong>x</strong></em></span>'

    def test_paragraph_attrs_before_run_attrs(self):
        html = render(run_xml('x', '<w:sz w:val="24"/>'), attrs=['color:#00FF00'])
        assert html == '<span style="color:#00FF00;font-size:12pt">x</span>'

    def test_inherited_lists_not_modified(self):
        tags = ['em']
        attrs = ['color:#00FF00']
        render(run_xml('x', '<w:b/><w:sz w:val="24"/>'), tags=tags, attrs=attrs)
        assert tags == ['em']
        assert attrs == ['color:#00FF00']

    def test_each_run_is_seeded_from_the_paragraph(self):
        formatter = RunFormatter()
        para = parse_fragment(
            '<w:p>' + run_xml('a', '<w:b/>') + run_xml('b') + '</w:p>'
        )
        html = formatter.render_paragraph_content(para, ['em'], [])
        assert html == '<span style=""><em><strong>a</strong></em></span><span style=""><em>b</em></span>'


class TestEmptyRuns:

    def test_run_without_text_emits_nothing(self):
        assert render(run_xml('', '<w:b/><w:color w:val="FF0000"/>')) == ''

    def test_empty_text_element_emits_nothing(self):
        assert render('<w:r><w:rPr><w:i/></w:rPr><w:t></w:t></w:r>') == ''

    def test_non_run_element_emits_nothing(self):
        assert render('<w:bookmarkStart w:id="0" w:name="x"/>') == ''

    def test_zero_text_is_rendered(self):
        assert render(run_xml('0')) == '<span style="">0</span>'


class TestRunText:

    def test_multiple_text_elements(self):
        run = parse_fragment('<w:r><w:t>Hel</w:t><w:t>lo</w:t></w:r>')
        assert extract_run_text(run) == 'Hello'

    def test_tab_and_line_break(self):
        run = parse_fragment('<w:r><w:t>a</w:t><w:tab/><w:t>b</w:t><w:br/><w:t>c</w:t></w:r>')
        assert extract_run_text(run) == 'a\tb<br />c'

    def test_page_break_skipped(self):
        run = parse_fragment('<w:r><w:t>a</w:t><w:br w:type="page"/><w:t>b</w:t></w:r>')
        assert extract_run_text(run) == 'ab'

    def test_text_is_escaped(self):
        run = parse_fragment('<w:r><w:t>a &amp; &lt;b&gt;</w:t></w:r>')
        assert extract_run_text(run) == 'a &amp; &lt;b&gt;'


class TestHyperlinks:

    def test_resolved_hyperlink(self):
        html = render(hyperlink_xml('rId7', 'click'), rels=rels_xml(('rId7', 'https://example.com')))
        assert html == '<span style=""><a href="https://example.com" target="_blank">click</a></span>'

    def test_unresolved_hyperlink_keeps_text(self):
        html = render(hyperlink_xml('rId8', 'click'), rels=rels_xml(('rId7', 'https://example.com')))
        assert html == '<span style="">click</span>'

    def test_hyperlink_without_relationships_part(self):
        assert render(hyperlink_xml('rId7', 'click')) == '<span style="">click</span>'

    def test_hyperlink_inherits_paragraph_context(self):
        html = render(
            hyperlink_xml('rId7', 'click'),
            tags=['strong'],
            attrs=['color:#0000FF'],
            rels=rels_xml(('rId7', 'https://example.com')),
        )
        assert html == (
            '<span style="color:#0000FF"><strong>'
            '<a href="https://example.com" target="_blank">click</a>'
            '</strong></span>'
        )

    def test_href_is_attribute_escaped(self):
        html = render(
            hyperlink_xml('rId1', 'q'),
            rels=rels_xml(('rId1', 'https://example.com/?a=1&amp;b=&quot;2&quot;')),
        )
        assert 'href="https://example.com/?a=1&amp;b=&quot;2&quot;"' in html

    def test_hyperlink_text_from_all_runs(self):
        markup = '<w:hyperlink r:id="rId1">' + run_xml('one ') + run_xml('two') + '</w:hyperlink>'
        html = render(markup, rels=rels_xml(('rId1', 'https://example.com')))
        assert '>one two</a>' in html

    def test_empty_hyperlink_emits_nothing(self):
        html = render('<w:hyperlink r:id="rId1"/>', rels=rels_xml(('rId1', 'https://example.com')))
        assert html == ''

    def test_unresolved_hyperlink_debug_message(self, capsys):
        formatter = RunFormatter(HyperlinkResolver(None), debug=True)
        formatter.render_run(parse_fragment(hyperlink_xml('rId9', 'x')))
        assert '[DEBUG] Unresolved hyperlink relationship: rId9' in capsys.readouterr().err


class TestWrapText:

    def test_tags_close_in_reverse_order(self):
        assert wrap_text('x', ['strong', 'em', 'u'], []) == '<span style=""><strong><em><u>x</u></em></strong></span>'

    def test_style_attribute(self):
        assert wrap_text('x', [], ['color:#000000']) == '<span style="color:#000000">x</span>'

    def test_no_attributes_keeps_empty_style(self):
        assert wrap_text('x', [], []) == '<span style="">x</span>'
