"""Path helpers for placing notes in the output tree.

Tags become folder names, so they are sanitized before use, and
cross-references between tag folders are expressed as relative paths.
"""

import re
from typing import List

# Characters that are invalid in file names on common platforms
INVALID_CHARS_PATTERN = re.compile(r'[<>:"|?*]')
WHITESPACE_PATTERN = re.compile(r'\s+')


def sanitize_path(tag: str) -> str:
    """Convert a tag into a safe relative folder path.

    Invalid characters become '-' and whitespace runs collapse to one
    space. The path is then rebuilt from its trimmed, non-empty segments,
    dropping '.' and '..', so the result is always relative and stays
    inside the archive. An empty result stands for the archive root.
    sanitize_path(sanitize_path(x)) is always sanitize_path(x).

    Args:
        tag: Raw tag string, possibly hierarchical ("area/topic")

    Returns:
        Folder path using '/' as separator
    """
    path = INVALID_CHARS_PATTERN.sub('-', tag)
    path = WHITESPACE_PATTERN.sub(' ', path)
    segments = [part.strip() for part in path.split('/')]
    return '/'.join(part for part in segments if part not in ('', '.', '..'))


def _segments(path: str) -> List[str]:
    return [part for part in path.split('/') if part]


def relative_path(from_path: str, to_path: str) -> str:
    """Compute the relative path from one folder to another.

    Both paths are '/'-delimited and relative to the archive root. The
    result climbs out of `from_path` with '../' and descends into the
    remainder of `to_path`. Identical folders give an empty string.

    Examples:
        >>> relative_path("a/b", "a/c")
        '../c'
        >>> relative_path("a", "a/b/c")
        'b/c'
    """
    from_parts = _segments(from_path)
    to_parts = _segments(to_path)

    common = 0
    while (common < min(len(from_parts), len(to_parts))
           and from_parts[common] == to_parts[common]):
        common += 1

    up = '../' * (len(from_parts) - common)
    down = '/'.join(to_parts[common:])
    return up + down


def join_relative(rel: str, name: str) -> str:
    """Join a relative folder path (as returned by relative_path) and a file name."""
    rel = rel.rstrip('/')
    if not rel:
        return f"./{name}"
    return f"{rel}/{name}"


def join_folder(folder: str, name: str) -> str:
    """Place `name` inside `folder`; an empty folder means the archive root."""
    if not folder:
        return name
    return f"{folder}/{name}"
