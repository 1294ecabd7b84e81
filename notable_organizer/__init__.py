"""
Notable Organizer - Organize tagged Markdown notes into tag folders

Takes a batch of notes (loose files or ZIP exports) and builds a single
archive with:
- One canonical copy per note under its first tag's folder
- Attachments stored beside the canonical copy
- Link stubs under every further tag pointing back to the original
- Rewritten @attachment references that resolve from either place
"""

__version__ = "0.1.0"

from notable_organizer.core.models import (
    AttachmentBlob,
    DocumentOutcome,
    DuplicatePath,
    ExtractionFailure,
    MalformedHeader,
    NoDocumentsFound,
    OrganizerError,
    OutputTree,
    ParsedDocument,
    SessionResult,
)
from notable_organizer.core.parser import FrontmatterParser
from notable_organizer.core.registry import AttachmentRegistry
from notable_organizer.core.organizer import OrganizerEngine
from notable_organizer.core.session import OrganizeSession
from notable_organizer.config import OrganizerConfig, load_config

__all__ = [
    "AttachmentBlob",
    "DocumentOutcome",
    "DuplicatePath",
    "ExtractionFailure",
    "MalformedHeader",
    "NoDocumentsFound",
    "OrganizerError",
    "OutputTree",
    "ParsedDocument",
    "SessionResult",
    "FrontmatterParser",
    "AttachmentRegistry",
    "OrganizerEngine",
    "OrganizeSession",
    "OrganizerConfig",
    "load_config",
]
