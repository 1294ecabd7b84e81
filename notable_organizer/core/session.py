"""Organize session: collects inputs, parses them and runs the engine."""

import logging
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional, Tuple, Union

from notable_organizer.archive import is_document, is_likely_attachment, read_archive
from notable_organizer.config import OrganizerConfig
from notable_organizer.core.models import (
    FAILED,
    ORGANIZED,
    SKIPPED,
    DocumentOutcome,
    DocumentSource,
    NoDocumentsFound,
    NoteError,
    ParsedDocument,
    ParseFailure,
    SessionResult,
)
from notable_organizer.core.organizer import OrganizerEngine, OutcomeObserver
from notable_organizer.core.parser import FrontmatterParser
from notable_organizer.core.registry import AttachmentRegistry

logger = logging.getLogger(__name__)


class OrganizeSession:
    """One collect -> organize run over a batch of notes and attachments.

    Inputs are gathered with the add_* methods; nothing is parsed until
    run() is called. reset() empties the session for reuse.
    """

    def __init__(self, config: Optional[OrganizerConfig] = None):
        self.config = config or OrganizerConfig()
        self.parser = FrontmatterParser(default_tag=self.config.default_tag)
        self.engine = OrganizerEngine(
            preview_length=self.config.preview_length,
            emit_url_shortcuts=self.config.emit_url_shortcuts,
            preserve_header=self.config.preserve_header,
            duplicate_policy=self.config.duplicate_policy,
            default_tag=self.config.default_tag,
            untagged_to_root=self.config.untagged_to_root,
        )
        self.registry = AttachmentRegistry()
        self.sources: List[DocumentSource] = []
        self.required_tags = set(self.config.required_tags)
        self.excluded_tags = set(self.config.excluded_tags)

    def add_document(self, filename: str, text: str) -> None:
        self.sources.append(DocumentSource(filename=filename, text=text))

    def add_attachment(self, name: str, data: bytes) -> None:
        self.registry.add(name, data)

    def add_archive(self, data: Union[bytes, BinaryIO], name: str) -> int:
        """Extract notes and attachments from a ZIP archive.

        Returns:
            Number of notes found in the archive

        Raises:
            ExtractionFailure: The archive is unreadable or holds nothing usable
        """
        contents = read_archive(data, name, self.config.document_extensions)
        self.sources.extend(contents.documents)
        for blob in contents.attachments:
            self.registry.add(blob.name, blob.data)
        return len(contents.documents)

    def add_path(self, path: Union[Path, str]) -> None:
        """Add a file or directory from disk.

        ZIP archives are extracted, notes are queued, likely attachments
        are registered and anything else is ignored. Directories are
        walked recursively in sorted order.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Input not found: {path}")

        if path.is_dir():
            for child in sorted(path.rglob('*')):
                if child.is_file():
                    self._add_file(child)
        else:
            self._add_file(path)

    def _add_file(self, path: Path) -> None:
        name = path.name
        if name.lower().endswith('.zip'):
            self.add_archive(path.read_bytes(), name)
        elif is_document(name, self.config.document_extensions):
            self.sources.append(DocumentSource(filename=name, path=path))
        elif is_likely_attachment(name):
            self.registry.add(name, path.read_bytes())
        else:
            logger.debug(f"Ignoring {path}")

    def is_eligible(self, doc: ParsedDocument) -> Tuple[bool, str]:
        """Check a note against the required and excluded tag filters.

        Args:
            doc: ParsedDocument to check

        Returns:
            Tuple of (is_eligible, reason)
        """
        doc_tags = set(doc.tags)

        if self.required_tags and not self.required_tags.intersection(doc_tags):
            missing = ', '.join(sorted(self.required_tags))
            return False, f"Missing required tags: {missing}"

        excluded_found = self.excluded_tags.intersection(doc_tags)
        if excluded_found:
            found = ', '.join(sorted(excluded_found))
            return False, f"Contains excluded tags: {found}"

        return True, "OK"

    def run(self, observer: Optional[OutcomeObserver] = None, dry_run: bool = False) -> SessionResult:
        """Parse every queued note and organize the eligible ones.

        Args:
            observer: Called with one DocumentOutcome per note, including
                      notes that fail to parse or are filtered out
            dry_run: Recorded on the result; the tree is built either way

        Returns:
            SessionResult with the output tree and per-note results

        Raises:
            NoDocumentsFound: No note survived collection, parsing and filtering
        """
        if not self.sources:
            raise NoDocumentsFound(
                'No markdown files found. Provide .md files or ZIP archives containing .md files.'
            )

        notify: Callable[[DocumentOutcome], None] = observer or (lambda outcome: None)
        failures: List[NoteError] = []
        skipped: List[str] = []
        documents: List[ParsedDocument] = []

        for source in self.sources:
            logger.info(f"Processing: {source.filename}")
            try:
                parsed = self.parser.parse(source.filename, source.read_raw())
            except (OSError, UnicodeDecodeError, ValueError) as e:
                parsed = ParseFailure(source.filename, f"Unreadable file: {e}")
                logger.warning(f"Failed to read {source.filename}: {e}")

            if isinstance(parsed, ParseFailure):
                failures.append(NoteError(parsed.filename, parsed.error))
                notify(DocumentOutcome(parsed.filename, FAILED, error=parsed.error))
                continue

            eligible, reason = self.is_eligible(parsed)
            if not eligible:
                logger.info(f"Skipping {parsed.filename}: {reason}")
                skipped.append(parsed.filename)
                notify(DocumentOutcome(parsed.filename, SKIPPED, error=reason))
                continue

            documents.append(parsed)

        if not documents:
            raise NoDocumentsFound(
                f"No eligible markdown files found ({len(failures)} failed, {len(skipped)} skipped)",
                failures=failures,
            )

        # The engine reports exactly one outcome per document, in batch order
        outcomes: List[DocumentOutcome] = []

        def record(outcome: DocumentOutcome) -> None:
            outcomes.append(outcome)
            notify(outcome)

        tree = self.engine.organize(documents, self.registry, observer=record)

        organized: List[ParsedDocument] = []
        for doc, outcome in zip(documents, outcomes):
            if outcome.status == ORGANIZED:
                organized.append(doc)
            else:
                failures.append(NoteError(outcome.filename, outcome.error or 'Unknown error'))

        logger.info(f"Organized {len(organized)} of {len(self.sources)} files into {len(tree)} entries")
        return SessionResult(
            tree=tree,
            organized=organized,
            failures=failures,
            skipped=skipped,
            dry_run=dry_run,
        )

    def reset(self) -> None:
        """Forget all queued notes and attachments."""
        self.sources.clear()
        self.registry.clear()
