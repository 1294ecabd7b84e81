"""Data models for Notable Organizer."""

import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Set, Tuple, Union


class OrganizerError(Exception):
    """Base class for all organizer errors."""


class MalformedHeader(OrganizerError):
    """A frontmatter header was opened but never closed, or could not be decoded."""


class NoDocumentsFound(OrganizerError):
    """A run ended up with zero eligible documents."""

    def __init__(self, message: str, failures: Optional[List["NoteError"]] = None):
        super().__init__(message)
        self.failures = failures or []


class ExtractionFailure(OrganizerError):
    """An archive could not be opened or held nothing usable."""

    def __init__(self, archive_name: str, reason: str):
        super().__init__(f"{archive_name}: {reason}")
        self.archive_name = archive_name
        self.reason = reason


class DuplicatePath(OrganizerError):
    """Two distinct documents resolved to the same output path."""

    def __init__(self, path: str):
        super().__init__(f"Output path already written by another document: {path}")
        self.path = path


class ConfigError(OrganizerError):
    """Invalid organizer configuration."""


@dataclass
class DocumentSource:
    """A document waiting to be parsed - just a name and where its text lives.

    Text is read lazily so collecting a large batch does not load
    every note into memory up front.
    """
    filename: str
    path: Optional[Path] = None
    text: Optional[str] = None
    data: Optional[bytes] = None

    def read_raw(self) -> str:
        """Return the document text, decoding or reading it on demand.

        A leading UTF-8 byte order mark is dropped so it cannot hide the header.
        """
        if self.text is not None:
            return self.text
        if self.data is not None:
            return self.data.decode('utf-8-sig')
        if self.path is None:
            raise ValueError(f"No content available for {self.filename}")
        return self.path.read_text(encoding='utf-8-sig')


@dataclass(frozen=True)
class ParsedDocument:
    """A note split into header metadata and body.

    Created once per input document and never modified afterwards.
    `tags` is never empty; its first element is the primary tag.
    """
    filename: str
    title: str
    tags: Tuple[str, ...]
    body: str
    attachments: FrozenSet[str] = frozenset()
    header: Dict[str, Any] = field(default_factory=dict)
    header_text: Optional[str] = None

    @property
    def primary_tag(self) -> str:
        return self.tags[0]

    @property
    def secondary_tags(self) -> Tuple[str, ...]:
        return self.tags[1:]

    @property
    def stem(self) -> str:
        return posixpath.splitext(self.filename)[0]

    @property
    def extension(self) -> str:
        return posixpath.splitext(self.filename)[1]


@dataclass(frozen=True)
class ParseFailure:
    """Returned by the parser instead of raising when a document is unusable."""
    filename: str
    error: str


@dataclass(frozen=True)
class AttachmentBlob:
    """Binary asset found next to the documents, matched by name."""
    name: str
    data: bytes


# Output node kinds
DOCUMENT = 'document'
ATTACHMENT = 'attachment'
STUB = 'stub'
SHORTCUT = 'shortcut'


@dataclass(frozen=True)
class OutputNode:
    """One entry of the output archive."""
    path: str
    payload: Union[str, AttachmentBlob]
    kind: str = DOCUMENT

    def to_bytes(self) -> bytes:
        if isinstance(self.payload, AttachmentBlob):
            return self.payload.data
        return self.payload.encode('utf-8')


class OutputTree:
    """Insertion-ordered mapping of output path to node.

    Every write is a single mapping insertion; writing an existing
    path replaces the previous node.
    """

    def __init__(self) -> None:
        self._nodes: Dict[str, OutputNode] = {}
        self._owners: Dict[str, int] = {}

    def add(self, node: OutputNode, owner: Optional[int] = None) -> None:
        self._nodes[node.path] = node
        if owner is None:
            self._owners.pop(node.path, None)
        else:
            self._owners[node.path] = owner

    def owner_of(self, path: str) -> Optional[int]:
        """Batch index of the document that last wrote `path`, if tracked."""
        return self._owners.get(path)

    def get(self, path: str) -> Optional[OutputNode]:
        return self._nodes.get(path)

    def content(self, path: str) -> bytes:
        return self._nodes[path].to_bytes()

    def paths(self) -> List[str]:
        return list(self._nodes)

    def nodes(self) -> List[OutputNode]:
        return list(self._nodes.values())

    def folders(self) -> Set[str]:
        """All folder paths that hold at least one node ('' is the root)."""
        return {posixpath.dirname(path) for path in self._nodes}

    def __getitem__(self, path: str) -> OutputNode:
        return self._nodes[path]

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)


# Outcome statuses
ORGANIZED = 'organized'
FAILED = 'failed'
SKIPPED = 'skipped'


@dataclass(frozen=True)
class DocumentOutcome:
    """Per-document progress event handed to observers."""
    filename: str
    status: str
    paths: Tuple[str, ...] = ()
    error: Optional[str] = None


@dataclass
class NoteError:
    """An error that occurred while handling a note.

    Used for errors at any phase: reading, parsing or organizing.
    """
    filename: str
    error: str


@dataclass
class SessionResult:
    """Result of an organize run."""
    tree: OutputTree
    organized: List[ParsedDocument] = field(default_factory=list)
    failures: List[NoteError] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def folder_count(self) -> int:
        """Number of distinct tags across organized documents."""
        return len({tag for doc in self.organized for tag in doc.tags})
