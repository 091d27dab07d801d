"""Conversion request/response models."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.config import OUTPUT_FORMAT_LABEL


class ConversionMetadata(BaseModel):
    width: int
    height: int
    format: str = OUTPUT_FORMAT_LABEL
    size: int  # bytes of the TIFF output


class ConversionResult(BaseModel):
    """Response payload for one conversion. Built per request, never stored."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    preview_url: str = Field(alias="previewUrl")
    download_data: str = Field(alias="downloadData")
    filename: str
    metadata: ConversionMetadata


class ErrorResponse(BaseModel):
    error: str


class ConvertedImage:
    """Raw pipeline output before it is encoded for transport."""

    def __init__(self, width: int, height: int, preview: bytes, output: bytes, source_mode: Optional[str] = None):
        self.width = width
        self.height = height
        self.preview = preview
        self.output = output
        self.source_mode = source_mode
