"""Application configuration. Loads from environment and .env file."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
# Load .env from cwd, then backend/.env, then project root .env
load_dotenv()
load_dotenv(BASE_DIR / ".env")
load_dotenv(BASE_DIR.parent / ".env")

STATIC_DIR = Path(__file__).resolve().parent / "static"

# Accepted uploads (declared MIME type -> extensions)
ALLOWED_MIME_TYPES = {
    "image/jpeg": [".jpg", ".jpeg"],
    "image/jpg": [".jpg", ".jpeg"],
    "image/png": [".png"],
}
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png"}

# Preview (browser display only)
PREVIEW_FORMAT = "JPEG"
PREVIEW_MIME_TYPE = "image/jpeg"
PREVIEW_QUALITY = int(os.getenv("PREVIEW_QUALITY", "90"))

# Print output: CMYK TIFF, LZW with horizontal differencing predictor
OUTPUT_MIME_TYPE = "image/tiff"
OUTPUT_MODE = "CMYK"
TIFF_COMPRESSION = os.getenv("TIFF_COMPRESSION", "tiff_lzw")
TIFF_PREDICTOR = 2
OUTPUT_SUFFIX = os.getenv("OUTPUT_SUFFIX", "_cmyk")
OUTPUT_EXTENSION = ".tiff"
OUTPUT_FORMAT_LABEL = "TIFF (CMYK)"

# Declared to the hosting server, not enforced by the handler
MAX_DURATION_SECONDS = int(os.getenv("MAX_DURATION_SECONDS", "30"))

GENERIC_FAILURE_MESSAGE = "Failed to convert image. Please try again."

# Server (for uvicorn)
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
# CORS: comma-separated origins, "*" for any
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Client (upload session / CLI)
CONVERTER_URL = os.getenv("CONVERTER_URL", f"http://localhost:{PORT}").rstrip("/")
CLIENT_TIMEOUT = float(os.getenv("CLIENT_TIMEOUT", str(MAX_DURATION_SECONDS + 5)))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("converter")
