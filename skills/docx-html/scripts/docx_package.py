#!/usr/bin/env python3
"""
ABOUTME: Read-only access to the named parts of a DOCX package
ABOUTME: Provides has_part/read_part and the relationships part naming convention
"""

import posixpath
import zipfile
import zlib
from pathlib import Path
from typing import Optional, Set

DOCUMENT_PART = 'word/document.xml'
STYLES_PART = 'word/styles.xml'
NUMBERING_PART = 'word/numbering.xml'


class PackageError(Exception):
    """Raised when a DOCX package cannot be found or opened."""


def rels_part_name(part_name: str) -> str:
    """
    Return the relationships part that belongs to a source part.

    'word/document.xml' -> 'word/_rels/document.xml.rels'
    """
    part_name = part_name.lstrip('/')
    folder = posixpath.dirname(part_name)
    return posixpath.join(folder, '_rels', posixpath.basename(part_name) + '.rels')


class DocxPackage:
    """
    Archive reader for a DOCX file.

    Only the member list is read when the package is opened. Each part is
    read on request, so a damaged member the converter never asks for
    (embedded media, for instance) does not affect the rest of the package.
    """

    def __init__(self, docx_path: str):
        path = Path(docx_path)
        if not path.is_file():
            raise PackageError('File does not exist.')

        self.path = path
        try:
            with zipfile.ZipFile(path, 'r') as zf:
                self._names: Set[str] = {
                    name for name in zf.namelist() if not name.endswith('/')
                }
        except (zipfile.BadZipFile, OSError) as e:
            raise PackageError('Could not open file.') from e

    def has_part(self, name: str) -> bool:
        return name.lstrip('/') in self._names

    def read_part(self, name: str) -> Optional[str]:
        """
        Return the markup of a part decoded as UTF-8.

        Returns None if the part is absent or its compressed data is damaged.
        Undecodable bytes are replaced rather than raising.
        """
        name = name.lstrip('/')
        if name not in self._names:
            return None
        try:
            with zipfile.ZipFile(self.path, 'r') as zf:
                blob = zf.read(name)
        except (zipfile.BadZipFile, zlib.error, OSError, EOFError):
            return None
        return blob.decode('utf-8', 'replace')
