"""Reading input ZIP archives and writing the organized output archive."""

import datetime
import io
import logging
import posixpath
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional, Union

import inflection

from notable_organizer.core.models import AttachmentBlob, DocumentSource, ExtractionFailure, OutputTree

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_EXTENSIONS = ('.md',)
DEFAULT_COMPRESS_LEVEL = 6
DEFAULT_ARCHIVE_PREFIX = 'notable-notes-organized'

ATTACHMENT_EXTENSIONS = frozenset({
    # Images
    '.png', '.jpg', '.jpeg', '.gif', '.webp', '.svg', '.bmp',
    # Documents
    '.pdf', '.doc', '.docx', '.xls', '.xlsx', '.ppt', '.pptx',
    '.txt', '.rtf',
    # Archives
    '.zip', '.rar', '.7z',
    # Audio / video
    '.mp3', '.wav', '.mp4', '.avi', '.mov',
    # Text and code
    '.css', '.js', '.json', '.xml', '.csv',
})


@dataclass
class ArchiveContents:
    """Documents and attachment candidates extracted from one archive."""
    documents: List[DocumentSource] = field(default_factory=list)
    attachments: List[AttachmentBlob] = field(default_factory=list)


def is_likely_attachment(filename: str) -> bool:
    """Decide by extension whether a non-note file is worth keeping as an attachment."""
    return posixpath.splitext(filename.lower())[1] in ATTACHMENT_EXTENSIONS


def is_document(filename: str, extensions: Iterable[str] = DEFAULT_DOCUMENT_EXTENSIONS) -> bool:
    lower = filename.lower()
    return any(lower.endswith(ext.lower()) for ext in extensions)


def read_archive(
    data: Union[bytes, BinaryIO],
    name: str,
    document_extensions: Iterable[str] = DEFAULT_DOCUMENT_EXTENSIONS,
) -> ArchiveContents:
    """Extract notes and attachment candidates from a ZIP archive.

    Entries are flattened to their base name. Notes are kept as text
    sources; other files are kept only if they look like attachments.

    Args:
        data: Archive bytes or a binary file object
        name: Archive name, used in error messages
        document_extensions: Extensions identifying notes

    Returns:
        ArchiveContents with notes in archive order

    Raises:
        ExtractionFailure: The archive is unreadable or holds nothing usable
    """
    extensions = tuple(document_extensions)
    source = io.BytesIO(data) if isinstance(data, bytes) else data
    contents = ArchiveContents()

    try:
        with zipfile.ZipFile(source) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                filename = posixpath.basename(info.filename)
                if not filename:
                    continue

                if is_document(filename, extensions):
                    contents.documents.append(DocumentSource(filename=filename, data=zf.read(info)))
                elif is_likely_attachment(filename):
                    contents.attachments.append(AttachmentBlob(name=filename, data=zf.read(info)))
                else:
                    logger.debug(f"Ignoring {info.filename} in {name}")
    except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, EOFError,
            RuntimeError, NotImplementedError) as e:
        # RuntimeError: encrypted entry; NotImplementedError: unsupported compression
        raise ExtractionFailure(name, f"Failed to extract ZIP file: {e}") from e

    if not contents.documents and not contents.attachments:
        raise ExtractionFailure(name, "No markdown files found in ZIP archive")

    logger.info(
        f"Extracted {len(contents.documents)} notes and "
        f"{len(contents.attachments)} attachments from {name}"
    )
    return contents


def write_archive(
    tree: OutputTree,
    destination: Union[Path, str, BinaryIO],
    compresslevel: int = DEFAULT_COMPRESS_LEVEL,
) -> None:
    """Write the output tree as a DEFLATE-compressed ZIP archive."""
    with zipfile.ZipFile(destination, 'w', zipfile.ZIP_DEFLATED,
                         compresslevel=compresslevel) as zf:
        for node in tree.nodes():
            zf.writestr(node.path, node.to_bytes())
            logger.debug(f"Added to ZIP: {node.path}")


def archive_bytes(tree: OutputTree, compresslevel: int = DEFAULT_COMPRESS_LEVEL) -> bytes:
    """Return the output archive in memory."""
    buffer = io.BytesIO()
    write_archive(tree, buffer, compresslevel=compresslevel)
    return buffer.getvalue()


def default_archive_name(
    prefix: str = DEFAULT_ARCHIVE_PREFIX,
    today: Optional[datetime.date] = None,
) -> str:
    """Name for the output archive, e.g. notable-notes-organized-2024-01-15.zip."""
    today = today or datetime.date.today()
    return f"{inflection.parameterize(prefix)}-{today.isoformat()}.zip"
