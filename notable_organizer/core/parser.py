"""Frontmatter parsing for tagged notes."""

import logging
import posixpath
from typing import Any, Dict, List, Optional, Union

import yaml

from notable_organizer.core.models import MalformedHeader, ParsedDocument, ParseFailure

logger = logging.getLogger(__name__)

HEADER_DELIMITER = '---'
DEFAULT_TAG = 'untagged'


class FrontmatterParser:
    """Splits notes into YAML frontmatter and body and extracts tags,
    title and declared attachments."""

    def __init__(self, default_tag: str = DEFAULT_TAG):
        """Initialize FrontmatterParser.

        Args:
            default_tag: Tag given to notes that declare none
        """
        self.default_tag = default_tag

    def parse(self, filename: str, raw_text: str) -> Union[ParsedDocument, ParseFailure]:
        """Parse a note, reporting problems as a value instead of raising.

        Args:
            filename: Original file name, including extension
            raw_text: Full note text

        Returns:
            ParsedDocument, or ParseFailure if the header is malformed
        """
        try:
            return self.parse_strict(filename, raw_text)
        except MalformedHeader as e:
            logger.warning(f"Failed to parse {filename}: {e}")
            return ParseFailure(filename=filename, error=str(e))

    def parse_strict(self, filename: str, raw_text: str) -> ParsedDocument:
        """Parse a note.

        Raises:
            MalformedHeader: The header is never closed or is not a YAML mapping
        """
        default_title = posixpath.splitext(filename)[0]
        lines = raw_text.split('\n')

        if not self._is_delimiter(lines[0]):
            return ParsedDocument(
                filename=filename,
                title=default_title,
                tags=(self.default_tag,),
                body=raw_text,
            )

        header_end = self._find_header_end(lines)
        if header_end is None:
            raise MalformedHeader("Frontmatter is missing its closing '---'")

        header_text = '\n'.join(lines[1:header_end])
        header = self._decode_header(header_text)

        tags = self._coerce_list(header.get('tags')) or [self.default_tag]
        attachments = self._coerce_list(header.get('attachments'))
        title = header.get('title')

        return ParsedDocument(
            filename=filename,
            title=str(title) if title not in (None, '') else default_title,
            tags=tuple(tags),
            body='\n'.join(lines[header_end + 1:]),
            attachments=frozenset(attachments),
            header=header,
            header_text=header_text,
        )

    @staticmethod
    def _is_delimiter(line: str) -> bool:
        # Tolerate CRLF line endings
        return line.rstrip('\r') == HEADER_DELIMITER

    def _find_header_end(self, lines: List[str]) -> Optional[int]:
        for index in range(1, len(lines)):
            if self._is_delimiter(lines[index]):
                return index
        return None

    def _decode_header(self, header_text: str) -> Dict[str, Any]:
        try:
            header = yaml.safe_load(header_text)
        except yaml.YAMLError as e:
            raise MalformedHeader(f"Invalid YAML in frontmatter: {e}") from e

        if header is None:
            return {}
        if not isinstance(header, dict):
            raise MalformedHeader(
                f"Frontmatter must be a mapping, got {type(header).__name__}"
            )
        return header

    def _coerce_list(self, value: Any) -> List[str]:
        """Coerce a header value to a list of strings.

        Handles both list and scalar formats; missing or empty values
        give an empty list.
        """
        if value is None or value == '':
            return []
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value if item is not None]
        return [str(value)]
