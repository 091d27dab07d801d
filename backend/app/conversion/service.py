"""RGB -> CMYK TIFF conversion on top of Pillow."""
import io
import logging
from typing import Optional

from PIL import Image

from app.config import (
    ALLOWED_MIME_TYPES,
    OUTPUT_EXTENSION,
    OUTPUT_FORMAT_LABEL,
    OUTPUT_MIME_TYPE,
    OUTPUT_MODE,
    OUTPUT_SUFFIX,
    PREVIEW_FORMAT,
    PREVIEW_MIME_TYPE,
    PREVIEW_QUALITY,
    TIFF_COMPRESSION,
    TIFF_PREDICTOR,
)
from app.conversion.datauri import encode_data_uri
from app.conversion.models import ConversionMetadata, ConversionResult, ConvertedImage
from app.errors import ConversionFailed, InvalidInput

logger = logging.getLogger("converter.service")

# TIFF tag 317
PREDICTOR_TAG = 317


class CmykConversionService:
    """Decodes an uploaded image and produces a JPEG preview plus a CMYK TIFF."""

    def __init__(self):
        logger.info(
            "CmykConversionService initialized (preview quality=%s, compression=%s)",
            PREVIEW_QUALITY, TIFF_COMPRESSION,
        )

    @staticmethod
    def is_allowed_type(content_type: Optional[str]) -> bool:
        return (content_type or "").lower() in ALLOWED_MIME_TYPES

    @staticmethod
    def output_filename(original: Optional[str]) -> str:
        """photo.jpg -> photo_cmyk.tiff; archive.tar.png -> archive_cmyk.tiff"""
        base = (original or "").split(".")[0]
        return f"{base}{OUTPUT_SUFFIX}{OUTPUT_EXTENSION}"

    @staticmethod
    def _render_preview(img: Image.Image) -> bytes:
        preview = img if img.mode in ("RGB", "L") else img.convert("RGB")
        buf = io.BytesIO()
        preview.save(buf, format=PREVIEW_FORMAT, quality=PREVIEW_QUALITY)
        return buf.getvalue()

    @staticmethod
    def _render_cmyk_tiff(img: Image.Image) -> bytes:
        rgb = img if img.mode == "RGB" else img.convert("RGB")
        cmyk = rgb.convert(OUTPUT_MODE)
        buf = io.BytesIO()
        cmyk.save(
            buf,
            format="TIFF",
            compression=TIFF_COMPRESSION,
            tiffinfo={PREDICTOR_TAG: TIFF_PREDICTOR},
        )
        return buf.getvalue()

    def process(self, data: bytes) -> ConvertedImage:
        """Run the Pillow pipeline. Any failure surfaces as ConversionFailed."""
        try:
            with Image.open(io.BytesIO(data)) as img:
                width, height = img.size
                mode = img.mode
                preview = self._render_preview(img)
                output = self._render_cmyk_tiff(img)
        except Exception as e:
            logger.exception("Image conversion failed (%s bytes): %s", len(data), e)
            raise ConversionFailed() from e
        return ConvertedImage(width, height, preview, output, source_mode=mode)

    def convert(self, data: bytes, filename: Optional[str], content_type: Optional[str]) -> ConversionResult:
        """Validate the declared type, convert, and encode the result for transport."""
        if not self.is_allowed_type(content_type):
            raise InvalidInput("Invalid file type. Only JPG, JPEG, and PNG are supported.")
        converted = self.process(data)
        out_name = self.output_filename(filename)
        logger.info(
            "Converted %s (%sx%s, %s) -> %s (%s bytes)",
            filename, converted.width, converted.height, converted.source_mode,
            out_name, len(converted.output),
        )
        return ConversionResult(
            success=True,
            preview_url=encode_data_uri(converted.preview, PREVIEW_MIME_TYPE),
            download_data=encode_data_uri(converted.output, OUTPUT_MIME_TYPE),
            filename=out_name,
            metadata=ConversionMetadata(
                width=converted.width,
                height=converted.height,
                format=OUTPUT_FORMAT_LABEL,
                size=len(converted.output),
            ),
        )


# Singleton
_conversion_service: Optional[CmykConversionService] = None


def get_conversion_service() -> CmykConversionService:
    global _conversion_service
    if _conversion_service is None:
        _conversion_service = CmykConversionService()
    return _conversion_service
