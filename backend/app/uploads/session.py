"""Upload list with per-item conversion status, driving the conversion endpoint."""
import logging
import mimetypes
from pathlib import Path
from typing import Iterable, Optional, Union

import httpx

from app.config import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    CLIENT_TIMEOUT,
    CONVERTER_URL,
    GENERIC_FAILURE_MESSAGE,
    OUTPUT_MIME_TYPE,
)
from app.conversion.datauri import decode_data_uri
from app.conversion.models import ConversionResult
from app.uploads.models import ItemStatus, UploadItem
from app.uploads.objects import ObjectStore

logger = logging.getLogger("converter.uploads")

CONVERT_PATH = "/api/convert"


class ConversionRequestError(Exception):
    """Non-2xx answer from the conversion endpoint."""


def detect_content_type(name: str) -> Optional[str]:
    content_type, _ = mimetypes.guess_type(name)
    return content_type


def is_accepted(name: str, content_type: Optional[str]) -> bool:
    return (
        (content_type or "").lower() in ALLOWED_MIME_TYPES
        and Path(name).suffix.lower() in ALLOWED_EXTENSIONS
    )


class UploadSession:
    """Holds the upload list and converts items one request at a time.

    ``convert_all`` never has more than one request outstanding. Items removed by
    ``clear_all`` are detached: a conversion still in flight for them finishes
    without touching the session.
    """

    def __init__(
        self,
        base_url: str = CONVERTER_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = CLIENT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self.items: list[UploadItem] = []
        self.is_processing = False
        self.objects = ObjectStore()

    async def __aenter__(self) -> "UploadSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    def _contains(self, item: UploadItem) -> bool:
        return any(i is item for i in self.items)

    def get(self, item_id: str) -> Optional[UploadItem]:
        return next((i for i in self.items if i.id == item_id), None)

    def add_file(self, name: str, data: bytes, content_type: Optional[str] = None) -> Optional[UploadItem]:
        """Accept one file if its type is allowed. Returns None when rejected."""
        content_type = content_type or detect_content_type(name)
        if not is_accepted(name, content_type):
            logger.info("Rejected %s (%s)", name, content_type)
            return None
        preview = self.objects.create(data, content_type)
        item = UploadItem(name, data, content_type, preview)
        self.items.append(item)
        logger.debug("Added %s as %s", name, item.id)
        return item

    def add_files(self, paths: Iterable[Union[str, Path]]) -> tuple[list[UploadItem], list[str]]:
        """Add files from disk. Returns (accepted items, rejected names)."""
        accepted: list[UploadItem] = []
        rejected: list[str] = []
        for p in paths:
            path = Path(p)
            if not path.is_file() or not is_accepted(path.name, detect_content_type(path.name)):
                rejected.append(path.name)
                continue
            item = self.add_file(path.name, path.read_bytes())
            if item is None:
                rejected.append(path.name)
            else:
                accepted.append(item)
        return accepted, rejected

    async def convert_one(self, item: UploadItem) -> bool:
        """Convert a pending or failed item. Returns False when rejected without a request."""
        if not self._contains(item):
            logger.warning("Item %s is not in this session", item.id)
            return False
        if not item.can_convert:
            logger.info("Not converting %s: status is %s", item.name, item.status.value)
            return False

        item.mark_processing()
        try:
            response = await self._get_client().post(
                CONVERT_PATH,
                files={"image": (item.name, item.data, item.content_type)},
                headers={"Accept": "application/json"},
            )
            if not response.is_success:
                raise ConversionRequestError(f"Conversion failed: {response.status_code} {response.text}")
            result = ConversionResult.model_validate(response.json())
        except (httpx.HTTPError, ConversionRequestError, ValueError) as e:
            logger.error("Conversion error for %s: %s", item.name, e)
            if self._contains(item):
                item.mark_error(str(e) or GENERIC_FAILURE_MESSAGE)
            return True

        if not self._contains(item):
            logger.info("Discarding result for cleared item %s", item.name)
            return True
        item.mark_completed(result)
        logger.info("Converted %s -> %s", item.name, item.filename)
        return True

    async def convert_all(self) -> list[UploadItem]:
        """Convert every pending item in list order, awaiting each before the next."""
        if self.is_processing:
            logger.info("Batch conversion already running")
            return []
        self.is_processing = True
        pending = [i for i in self.items if i.status == ItemStatus.PENDING]
        try:
            for item in pending:
                if not self._contains(item):
                    continue
                await self.convert_one(item)
        finally:
            self.is_processing = False
        return pending

    def download(self, item: UploadItem, directory: Union[str, Path] = ".") -> Path:
        """Write the TIFF of a completed item to ``directory``."""
        if item.status != ItemStatus.COMPLETED or not item.download_data or not item.filename:
            raise ValueError(f"{item.name} has no converted output to download")
        _, payload = decode_data_uri(item.download_data)
        ref = self.objects.create(payload, OUTPUT_MIME_TYPE)
        try:
            dest = Path(directory) / item.filename
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(self.objects.get(ref)[1])
        finally:
            self.objects.revoke(ref)
        logger.info("Saved %s (%s bytes)", dest, len(payload))
        return dest

    def clear_all(self) -> None:
        for item in self.items:
            self.objects.revoke(item.preview)
        self.items = []
