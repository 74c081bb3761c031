"""
Tests for xml_utils module - attribute access, number formatting and HTML sanitization
"""

from _docx_html_helpers import parse_fragment

from xml_utils import attr, format_number, is_toggle_on, local_name, sanitize_html_string  # type: ignore


class TestSanitizeHtmlString:
    """Tests for sanitize_html_string function"""

    def test_empty_string(self):
        """Empty string returns empty string"""
        assert sanitize_html_string("") == ""

    def test_none_returns_none(self):
        """None input returns None"""
        assert sanitize_html_string(None) is None

    def test_normal_html_unchanged(self):
        html = '<p><span style="color:#FF0000">Hello, World!</span></p>'
        assert sanitize_html_string(html) == html

    def test_preserves_allowed_whitespace(self):
        """Tab, LF, and CR are preserved"""
        text = "Line1\tTabbed\nLine2\rLine3"
        assert sanitize_html_string(text) == text

    def test_removes_control_characters(self):
        assert sanitize_html_string("A\x00B\x01C\x07D\x0BE\x0CF\x1FG") == "ABCDEFG"

    def test_removes_lone_surrogates(self):
        """Characters that cannot be encoded as UTF-8 are dropped"""
        assert sanitize_html_string("ok\ud800ok") == "okok"

    def test_unicode_preserved(self):
        """Multi-byte characters are kept intact"""
        text = "Hello 世界 🌍 café"
        assert sanitize_html_string(text) == text


class TestFormatNumber:

    def test_integral_float(self):
        assert format_number(12.0) == "12"

    def test_fraction(self):
        assert format_number(11.5) == "11.5"

    def test_integer(self):
        assert format_number(3) == "3"


class TestElementHelpers:

    def test_local_name(self):
        assert local_name(parse_fragment('<w:p/>')) == 'p'

    def test_attr_default_val(self):
        assert attr(parse_fragment('<w:jc w:val="center"/>')) == 'center'

    def test_attr_named(self):
        assert attr(parse_fragment('<w:style w:styleId="Title"/>'), 'w:styleId') == 'Title'

    def test_attr_missing_element(self):
        assert attr(None) is None

    def test_toggle(self):
        assert is_toggle_on(parse_fragment('<w:b/>'))
        assert is_toggle_on(parse_fragment('<w:b w:val="1"/>'))
        assert not is_toggle_on(parse_fragment('<w:b w:val="0"/>'))
        assert not is_toggle_on(parse_fragment('<w:b w:val="False"/>'))
