"""In-memory object references standing in for browser object URLs."""
import logging
import uuid
from typing import Optional

logger = logging.getLogger("converter.uploads")


class ObjectStore:
    """Keeps bytes reachable behind ``blob:`` references until revoked."""

    def __init__(self):
        self._objects: dict[str, tuple[str, bytes]] = {}

    def create(self, data: bytes, mime_type: str) -> str:
        ref = f"blob:{uuid.uuid4()}"
        self._objects[ref] = (mime_type, data)
        return ref

    def get(self, ref: str) -> Optional[tuple[str, bytes]]:
        return self._objects.get(ref)

    def revoke(self, ref: Optional[str]) -> None:
        if ref and self._objects.pop(ref, None) is None:
            logger.debug("Revoke of unknown reference %s", ref)

    def __contains__(self, ref: str) -> bool:
        return ref in self._objects

    def __len__(self) -> int:
        return len(self._objects)
