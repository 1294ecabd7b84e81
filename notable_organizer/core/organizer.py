"""Organizer engine: places parsed notes into a tag-based output tree."""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from notable_organizer.core.models import (
    ATTACHMENT,
    DOCUMENT,
    FAILED,
    ORGANIZED,
    SHORTCUT,
    STUB,
    DocumentOutcome,
    DuplicatePath,
    OutputNode,
    OutputTree,
    ParsedDocument,
)
from notable_organizer.core.parser import DEFAULT_TAG
from notable_organizer.core.registry import AttachmentRegistry
from notable_organizer.transforms import attachments
from notable_organizer.transforms.paths import join_folder, join_relative, relative_path, sanitize_path

logger = logging.getLogger(__name__)

OutcomeObserver = Callable[[DocumentOutcome], None]

DUPLICATE_POLICIES = ('overwrite', 'error')
DEFAULT_PREVIEW_LENGTH = 500
TRUNCATION_NOTICE = '\n\n... (content truncated - see original file for full content)'


class OrganizerEngine:
    """Builds the output tree from a batch of parsed notes.

    For each note:
    - The canonical copy goes under the primary tag's folder
    - Declared attachments are stored next to the canonical copy
    - Every secondary tag gets a stub pointing back to the canonical copy
    """

    def __init__(
        self,
        preview_length: int = DEFAULT_PREVIEW_LENGTH,
        emit_url_shortcuts: bool = False,
        preserve_header: bool = False,
        duplicate_policy: str = 'overwrite',
        default_tag: str = DEFAULT_TAG,
        untagged_to_root: bool = True,
    ):
        """Initialize OrganizerEngine.

        Args:
            preview_length: Number of body characters shown in a stub preview
            emit_url_shortcuts: Also write a .url shortcut beside every stub
            preserve_header: Keep the frontmatter block in the canonical copy
            duplicate_policy: 'overwrite' (last write wins) or 'error'
                              (the later note fails with DuplicatePath)
            default_tag: Tag the parser gives to notes that declare none
            untagged_to_root: Place notes whose primary tag is `default_tag`
                              at the archive root instead of a folder
        """
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(f"Unknown duplicate policy: {duplicate_policy}")
        self.preview_length = preview_length
        self.emit_url_shortcuts = emit_url_shortcuts
        self.preserve_header = preserve_header
        self.duplicate_policy = duplicate_policy
        self.default_tag = default_tag
        self.untagged_to_root = untagged_to_root

    def folder_for(self, tag: str, primary: bool = False) -> str:
        """Folder path for a tag; '' is the archive root."""
        if primary and self.untagged_to_root and tag == self.default_tag:
            return ''
        return sanitize_path(tag)

    def organize(
        self,
        documents: Iterable[ParsedDocument],
        registry: Optional[AttachmentRegistry] = None,
        observer: Optional[OutcomeObserver] = None,
    ) -> OutputTree:
        """Organize a batch of notes, in order.

        A note that fails is reported to the observer and leaves nothing
        behind in the tree; the rest of the batch carries on.

        Args:
            documents: Parsed notes in batch order
            registry: Attachment blobs available to this run
            observer: Called with one DocumentOutcome per note

        Returns:
            The complete output tree
        """
        registry = registry if registry is not None else AttachmentRegistry()
        tree = OutputTree()

        for index, doc in enumerate(documents):
            try:
                nodes = self.place(doc, registry)
                self._check_duplicates(tree, nodes, index)
            except Exception as e:
                logger.warning(f"Failed to organize {doc.filename}: {e}")
                outcome = DocumentOutcome(doc.filename, FAILED, error=str(e))
            else:
                for node in nodes:
                    tree.add(node, owner=None if node.kind == ATTACHMENT else index)
                paths = tuple(node.path for node in nodes)
                logger.debug(f"Organized {doc.filename} -> {', '.join(paths)}")
                outcome = DocumentOutcome(doc.filename, ORGANIZED, paths=paths)

            if observer is not None:
                observer(outcome)

        return tree

    def place(self, doc: ParsedDocument, registry: AttachmentRegistry) -> List[OutputNode]:
        """Compute every output node for a single note without writing them.

        Args:
            doc: Parsed note
            registry: Attachment blobs available to this run

        Returns:
            Nodes in write order: canonical copy, attachments, stubs
        """
        primary = self.folder_for(doc.primary_tag, primary=True)
        canonical_path = join_folder(primary, doc.filename)

        body = attachments.rewrite(doc.body, attachments.canonical())
        nodes = [OutputNode(canonical_path, self._canonical_content(doc, body), DOCUMENT)]

        for name in sorted(doc.attachments):
            blob = registry.get(name)
            if blob is None:
                logger.warning(f"Attachment {name} declared by {doc.filename} was not found")
                continue
            nodes.append(OutputNode(join_folder(primary, name), blob, ATTACHMENT))

        for tag in doc.secondary_tags:
            secondary = self.folder_for(tag)
            rel = relative_path(secondary, primary)
            nodes.append(OutputNode(
                join_folder(secondary, f"{doc.stem} - Link{doc.extension}"),
                self.build_stub(doc, canonical_path, rel),
                STUB,
            ))
            if self.emit_url_shortcuts:
                nodes.append(OutputNode(
                    join_folder(secondary, f"{doc.stem} - Link.url"),
                    self.build_shortcut(join_relative(rel, doc.filename)),
                    SHORTCUT,
                ))

        return nodes

    def build_stub(self, doc: ParsedDocument, canonical_path: str, rel: str) -> str:
        """Build the reference note written under a secondary tag.

        Args:
            doc: Parsed note
            canonical_path: Archive path of the canonical copy
            rel: Relative path from the stub's folder to the primary-tag folder

        Returns:
            Markdown stub content
        """
        link = join_relative(rel, doc.filename)
        preview = attachments.rewrite(doc.body, attachments.link_stub(rel))
        if len(preview) > self.preview_length:
            preview = preview[:self.preview_length] + TRUNCATION_NOTICE

        return (
            f"# Link to {doc.filename}\n\n"
            f"**Original Location:** `{canonical_path}`\n\n"
            f"[Open Original File]({_link_target(link)})\n\n"
            "---\n\n"
            "*This is a reference file. The actual content is located at the path shown above.*\n\n"
            "## File Preview\n\n"
            f"{preview}"
        )

    @staticmethod
    def build_shortcut(link: str) -> str:
        """Build an internet shortcut (.url) pointing at `link`."""
        return f"[InternetShortcut]\r\nURL={link}\r\n"

    def _canonical_content(self, doc: ParsedDocument, body: str) -> str:
        if not self.preserve_header or doc.header_text is None:
            return body
        if doc.header_text:
            return f"---\n{doc.header_text}\n---\n{body}"
        return f"---\n---\n{body}"

    def _check_duplicates(self, tree: OutputTree, nodes: List[OutputNode], index: int) -> None:
        own: Dict[str, OutputNode] = {}
        for node in nodes:
            earlier = own.get(node.path)
            if earlier is not None:
                collides = ATTACHMENT in (node.kind, earlier.kind)
            else:
                collides = self._collides(tree, node, index)
            own[node.path] = node
            if not collides:
                continue
            if self.duplicate_policy == 'error':
                raise DuplicatePath(node.path)
            logger.warning(f"Overwriting {node.path} written by an earlier node")

    @staticmethod
    def _collides(tree: OutputTree, node: OutputNode, index: int) -> bool:
        existing = tree.get(node.path)
        if existing is None:
            return False
        # Attachments shared by notes in one folder are the same file
        if node.kind == ATTACHMENT and existing.kind == ATTACHMENT:
            return False
        if ATTACHMENT in (node.kind, existing.kind):
            return True
        owner = tree.owner_of(node.path)
        return owner is not None and owner != index


def _link_target(link: str) -> str:
    # Markdown link destinations cannot contain spaces unless wrapped in <>
    if any(ch.isspace() for ch in link):
        return f"<{link}>"
    return link
