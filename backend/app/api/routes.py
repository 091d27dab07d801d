"""API routes for CMYK conversion."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile
from starlette.concurrency import run_in_threadpool

from app.config import (
    ALLOWED_MIME_TYPES,
    MAX_DURATION_SECONDS,
    OUTPUT_FORMAT_LABEL,
    OUTPUT_MIME_TYPE,
    PREVIEW_MIME_TYPE,
    PREVIEW_QUALITY,
    TIFF_COMPRESSION,
)
from app.conversion.models import ConversionResult, ErrorResponse
from app.conversion.service import CmykConversionService, get_conversion_service
from app.errors import InvalidInput

logger = logging.getLogger("converter.api")
router = APIRouter(prefix="/api", tags=["converter"])
CONVERT_PATH = f"{router.prefix}/convert"

CORS_PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/formats")
def get_formats():
    return {
        "input": sorted(ALLOWED_MIME_TYPES),
        "input_extensions": sorted({ext for exts in ALLOWED_MIME_TYPES.values() for ext in exts}),
        "output": {"mime_type": OUTPUT_MIME_TYPE, "label": OUTPUT_FORMAT_LABEL, "compression": TIFF_COMPRESSION},
        "preview": {"mime_type": PREVIEW_MIME_TYPE, "quality": PREVIEW_QUALITY},
    }


@router.get("/limits")
def get_limits():
    """Processing bound declared to the hosting server."""
    return {
        "max_duration_seconds": MAX_DURATION_SECONDS,
        "preview_quality": PREVIEW_QUALITY,
    }


@router.post(
    "/convert",
    response_model=ConversionResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def convert_image(
    image: Optional[UploadFile] = File(None),
    svc: CmykConversionService = Depends(get_conversion_service),
):
    """Convert one uploaded JPEG/PNG to a CMYK TIFF, returned inline as base64."""
    if image is None or not image.filename:
        logger.info("No file provided")
        raise InvalidInput("No file provided")
    logger.info("File received: %s (%s)", image.filename, image.content_type)
    if not svc.is_allowed_type(image.content_type):
        logger.info("Invalid file type: %s", image.content_type)
        raise InvalidInput("Invalid file type. Only JPG, JPEG, and PNG are supported.")

    data = await image.read()
    return await run_in_threadpool(svc.convert, data, image.filename, image.content_type)


@router.options("/convert")
def convert_preflight():
    return Response(status_code=200, headers=CORS_PREFLIGHT_HEADERS)
