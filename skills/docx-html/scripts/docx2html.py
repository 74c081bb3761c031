#!/usr/bin/env python3
"""
ABOUTME: Converts DOCX documents to HTML fragments (or plain text)
ABOUTME: Resolves styles.xml, numbering.xml and relationships before walking the body
"""

import argparse
import re
import sys
from pathlib import Path
from typing import List, Optional

from lxml import etree

from body_renderer import BodyRenderer
from docx_package import (
    DOCUMENT_PART,
    NUMBERING_PART,
    STYLES_PART,
    DocxPackage,
    PackageError,
    rels_part_name,
)
from hyperlink_resolver import HyperlinkResolver
from numbering_resolver import NumberingResolver
from style_sheet import StyleSheet
from xml_utils import sanitize_html_string

HTML_DOCUMENT_HEAD = (
    '<!doctype html><html><head>'
    '<meta http-equiv="Content-Type" content="text/html;charset=utf-8" />'
    '<title></title>'
    '<style>span.block { display: block; }</style>'
    '</head><body>'
)
HTML_DOCUMENT_TAIL = '</body></html>'

TAG_PATTERN = re.compile(r'<[^>]*>')


def print_error(title: str, details: str, solution: str):
    """
    Print a friendly, formatted error message.

    Args:
        title: Error title
        details: Detailed error information
        solution: Suggested solution steps
    """
    print("\n" + "=" * 80, file=sys.stderr)
    print(f"ERROR: {title}", file=sys.stderr)
    print("=" * 80, file=sys.stderr)
    print(f"\n{details}", file=sys.stderr)
    print("\nSOLUTION:", file=sys.stderr)
    print(solution, file=sys.stderr)
    print("\n" + "=" * 80 + "\n", file=sys.stderr)


def wrap_html_document(fragment: str) -> str:
    """Wrap an HTML fragment in a minimal standalone document."""
    return HTML_DOCUMENT_HEAD + fragment + HTML_DOCUMENT_TAIL


def strip_markup(markup: Optional[str]) -> Optional[str]:
    """
    Remove every tag from raw markup and return the residual text verbatim.

    Entities are not decoded and nothing is re-escaped.
    """
    if markup is None:
        return None
    return TAG_PATTERN.sub('', markup)


def convert_parts(
    body_xml: Optional[str],
    styles_xml: Optional[str] = None,
    numbering_xml: Optional[str] = None,
    rels_xml: Optional[str] = None,
    full_document: bool = False,
    debug: bool = False,
) -> Optional[str]:
    """
    Convert raw DOCX part markup to HTML.

    Every call builds its own StyleSheet, resolvers and list state, so calls for
    independent documents never share mutable state.

    Args:
        body_xml: word/document.xml markup; None when the package has no body
        styles_xml: word/styles.xml markup (optional)
        numbering_xml: word/numbering.xml markup (optional)
        rels_xml: word/_rels/document.xml.rels markup (optional)
        full_document: Wrap the fragment in a standalone HTML document
        debug: Print [DEBUG] diagnostics to stderr

    Returns:
        HTML string, or None when body_xml is None

    Raises:
        etree.XMLSyntaxError: If body_xml is not well-formed
    """
    if body_xml is None:
        return None

    style_sheet = StyleSheet.from_xml(styles_xml)
    if debug:
        print(f"[DEBUG] Loaded {len(style_sheet)} style definitions", file=sys.stderr)

    renderer = BodyRenderer(
        style_sheet=style_sheet,
        numbering_resolver=NumberingResolver(numbering_xml),
        hyperlink_resolver=HyperlinkResolver(rels_xml),
        debug=debug,
    )
    html = renderer.render(body_xml)

    if full_document:
        html = wrap_html_document(html)
    return sanitize_html_string(html)


class DocxHtmlConverter:
    """
    File-level converter.

    Usage:
        converter = DocxHtmlConverter()
        converter.set_file('report.docx')
        html = converter.to_html()      # None if the body could not be read
        errors = converter.get_errors()
    """

    def __init__(self, full_document: bool = False, debug: bool = False):
        self.full_document = full_document
        self.debug = debug
        self.errors: List[str] = []
        self.package: Optional[DocxPackage] = None
        self.body_xml: Optional[str] = None

    def set_file(self, path: str):
        """
        Open a DOCX package and read its document body.

        Failures are recorded in self.errors; the converter then returns None
        from to_html() and to_plain_text().
        """
        self.package = None
        self.body_xml = None
        try:
            self.package = DocxPackage(path)
        except PackageError as e:
            self.errors.append(str(e))
            return

        if not self.package.has_part(DOCUMENT_PART):
            self.errors.append('Document body not found.')
            return

        self.body_xml = self.package.read_part(DOCUMENT_PART)
        if self.body_xml is None:
            self.errors.append('Could not open file.')

    def to_plain_text(self) -> Optional[str]:
        """Return the body markup with all tags stripped, or None without a body."""
        return strip_markup(self.body_xml)

    def to_html(self) -> Optional[str]:
        """Return the converted HTML, or None without a (well-formed) body."""
        if self.body_xml is None:
            return None

        package = self.package
        try:
            return convert_parts(
                self.body_xml,
                styles_xml=package.read_part(STYLES_PART),
                numbering_xml=package.read_part(NUMBERING_PART),
                rels_xml=package.read_part(rels_part_name(DOCUMENT_PART)),
                full_document=self.full_document,
                debug=self.debug,
            )
        except etree.XMLSyntaxError as e:
            self.errors.append('Could not parse document body.')
            if self.debug:
                print(f"[DEBUG] {DOCUMENT_PART}: {e}", file=sys.stderr)
            return None

    def get_errors(self) -> List[str]:
        return list(self.errors)


def main():
    parser = argparse.ArgumentParser(
        description="Convert DOCX documents to HTML"
    )
    parser.add_argument(
        "document",
        type=str,
        help="Path to the DOCX file to convert"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output file path, '-' for stdout (default: {document}.html or {document}.txt)"
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["html", "text"],
        default="html",
        help="Output format (default: html)"
    )
    parser.add_argument(
        "--full-document",
        action="store_true",
        help="Wrap the HTML fragment in a standalone HTML document"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output for style, list and hyperlink resolution"
    )

    args = parser.parse_args()

    doc_path = Path(args.document)
    if not doc_path.exists():
        print(f"Error: File not found: {args.document}", file=sys.stderr)
        sys.exit(1)

    if doc_path.suffix.lower() != '.docx':
        print(f"Warning: File does not have .docx extension: {args.document}", file=sys.stderr)

    converter = DocxHtmlConverter(full_document=args.full_document, debug=args.debug)
    converter.set_file(args.document)

    if args.format == "text":
        result = converter.to_plain_text()
    else:
        result = converter.to_html()

    if result is None:
        print_error(
            "Cannot convert document",
            f"No output could be produced for: {args.document}\n\n"
            + "\n".join(f"  - {error}" for error in converter.get_errors()),
            "  1. Check that the file is a valid .docx package\n"
            "  2. Open the document in Microsoft Word and save it again (Ctrl+S)\n"
            "  3. Re-run the conversion"
        )
        sys.exit(1)

    if args.output == "-":
        sys.stdout.write(result)
        return

    extension = "txt" if args.format == "text" else "html"
    output_path = args.output or f"{doc_path.stem}.{extension}"
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(result)

    print(f"Converted: {args.document}")
    print(f"Saved to: {output_path}")


if __name__ == "__main__":
    main()
