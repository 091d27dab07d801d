"""Client-side upload item state."""
import uuid
from enum import Enum
from typing import Optional

from app.conversion.models import ConversionMetadata, ConversionResult


class ItemStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


# Statuses from which a conversion may be (re)started
CONVERTIBLE_STATUSES = (ItemStatus.PENDING, ItemStatus.ERROR)


def new_item_id() -> str:
    return uuid.uuid4().hex[:9]


class UploadItem:
    """One accepted file and the outcome of its latest conversion attempt."""

    def __init__(self, name: str, data: bytes, content_type: str, preview: str):
        self.id = new_item_id()
        self.name = name
        self.data = data
        self.content_type = content_type
        self.preview = preview  # local object reference, released on clear
        self.status = ItemStatus.PENDING
        self.preview_url: Optional[str] = None
        self.download_data: Optional[str] = None
        self.filename: Optional[str] = None
        self.metadata: Optional[ConversionMetadata] = None
        self.error: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def can_convert(self) -> bool:
        return self.status in CONVERTIBLE_STATUSES

    def mark_processing(self) -> None:
        self.status = ItemStatus.PROCESSING
        self.error = None

    def mark_completed(self, result: ConversionResult) -> None:
        self.status = ItemStatus.COMPLETED
        self.preview_url = result.preview_url
        self.download_data = result.download_data
        self.filename = result.filename
        self.metadata = result.metadata
        self.error = None

    def mark_error(self, message: str) -> None:
        self.status = ItemStatus.ERROR
        self.error = message

    def __repr__(self) -> str:
        return f"UploadItem(id={self.id!r}, name={self.name!r}, status={self.status.value!r})"
