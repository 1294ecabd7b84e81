"""Core components for Notable Organizer."""

from notable_organizer.core.models import (
    DocumentOutcome,
    DocumentSource,
    NoteError,
    OutputNode,
    OutputTree,
    ParsedDocument,
    ParseFailure,
    SessionResult,
)
from notable_organizer.core.parser import FrontmatterParser
from notable_organizer.core.registry import AttachmentRegistry
from notable_organizer.core.organizer import OrganizerEngine
from notable_organizer.core.session import OrganizeSession

__all__ = [
    "DocumentOutcome",
    "DocumentSource",
    "NoteError",
    "OutputNode",
    "OutputTree",
    "ParsedDocument",
    "ParseFailure",
    "SessionResult",
    "FrontmatterParser",
    "AttachmentRegistry",
    "OrganizerEngine",
    "OrganizeSession",
]
