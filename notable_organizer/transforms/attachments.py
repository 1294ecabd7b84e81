"""Attachment reference transforms for Notable Organizer.

Notes refer to their attachments with `@attachment/<name>`, optionally
inside regular Markdown link syntax. These factories create transforms
that turn such a reference into a relative path, and `rewrite` applies
one to a whole text.
"""

import re
from typing import Callable, List

from notable_organizer.transforms.paths import join_relative

# @attachment/<name>, where name stops at whitespace or a closing paren
ATTACHMENT_PATTERN = re.compile(r'@attachment/([^)\s]+)')

AttachmentTransform = Callable[[str], str]


def canonical() -> AttachmentTransform:
    """Create a transform for the canonical copy of a note.

    Attachments sit in the same folder as the canonical copy, so
    references become `./<name>`.

    Returns:
        A transform function (name) -> replacement
    """
    def transform(name: str) -> str:
        return f"./{name}"
    return transform


def link_stub(target: str) -> AttachmentTransform:
    """Create a transform for stub copies placed under a secondary tag.

    Args:
        target: Relative path from the stub's folder to the primary-tag folder

    Returns:
        A transform function (name) -> replacement
    """
    def transform(name: str) -> str:
        return join_relative(target, name)
    return transform


def rewrite(text: str, transform: AttachmentTransform) -> str:
    """Replace every attachment reference in `text` using `transform`.

    Pure text substitution: names are not checked against the
    attachments a note declares.
    """
    return ATTACHMENT_PATTERN.sub(lambda match: transform(match.group(1)), text)


def find_references(text: str) -> List[str]:
    """List attachment names referenced in `text`, in order of appearance."""
    return ATTACHMENT_PATTERN.findall(text)
