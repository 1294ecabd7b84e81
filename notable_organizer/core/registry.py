"""Registry of attachment blobs available to an organize run."""

import logging
from typing import Dict, Iterator, Optional

from notable_organizer.core.models import AttachmentBlob

logger = logging.getLogger(__name__)


class AttachmentRegistry:
    """Holds attachment blobs by name for the duration of one run.

    An empty registry is valid: notes are still organized and their
    attachment references rewritten, but no attachment files are emitted.
    """

    def __init__(self) -> None:
        self._blobs: Dict[str, AttachmentBlob] = {}

    def add(self, name: str, data: bytes) -> AttachmentBlob:
        """Register `data` under `name`, replacing any earlier blob of that name."""
        if name in self._blobs:
            logger.debug(f"Replacing attachment {name}")
        blob = AttachmentBlob(name=name, data=data)
        self._blobs[name] = blob
        return blob

    def get(self, name: str) -> Optional[AttachmentBlob]:
        return self._blobs.get(name)

    def clear(self) -> None:
        self._blobs.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._blobs

    def __iter__(self) -> Iterator[str]:
        return iter(self._blobs)

    def __len__(self) -> int:
        return len(self._blobs)
